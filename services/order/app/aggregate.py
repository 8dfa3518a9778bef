"""
Order Service — 注文集約 (Order Aggregate)

注文は一度作成されたら変更しない (create-once, read-many)。
pydantic の frozen モデルで不変性を保証する。

金額の丸めは 2 段階:
  subtotal = round2(unit_price * quantity)   # 明細ごとに丸める
  total    = round2(Σ subtotal)              # 丸め済み小計の合計をもう一度丸める
"""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

CENTS = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """小数点以下 2 桁に四捨五入 (HALF_UP)"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class OrderItemRequest(BaseModel):
    """リクエスト処理中だけ存在する明細 (商品 ID と数量のみ)"""

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int = Field(gt=0)


class OrderItem(BaseModel):
    """カタログ参照に成功した後の明細 (商品名・単価・小計つき)"""

    model_config = ConfigDict(frozen=True)

    product_id: int
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)
    subtotal: Decimal


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    items: tuple[OrderItem, ...] = Field(min_length=1)
    total: Decimal
