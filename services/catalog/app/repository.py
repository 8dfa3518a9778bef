"""
Catalog Service — 商品リポジトリ

起動時に固定の商品セットを読み込むインメモリストア。
起動後は読み取り専用なので、並行リクエストからの参照にロックは不要。
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """カタログの商品 (作成後は不変)"""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Decimal = Field(ge=0)

    def to_wire(self) -> dict:
        return {"id": self.id, "name": self.name, "price": self.price}


SEED_PRODUCTS = (
    Product(id=1, name="Laptop", price=Decimal("999.99")),
    Product(id=2, name="Mouse", price=Decimal("24.99")),
    Product(id=3, name="Keyboard", price=Decimal("74.99")),
    Product(id=4, name="Monitor", price=Decimal("349.99")),
    Product(id=5, name="Headphones", price=Decimal("149.99")),
)


class ProductRepository:
    def __init__(self, products=SEED_PRODUCTS) -> None:
        # dict は挿入順を保つ → 一覧はカタログ登録順
        self._products: dict[int, Product] = {p.id: p for p in products}

    def find_all(self) -> list[Product]:
        return list(self._products.values())

    def find_by_id(self, product_id: int) -> Product | None:
        return self._products.get(product_id)
