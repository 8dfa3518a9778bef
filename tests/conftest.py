"""Pytest fixtures for the order and catalog services."""

from decimal import Decimal

import pytest

from services.order.app.catalog_client import Product
from services.order.app.errors import ProductNotFound, UpstreamFailure
from services.order.app.store import OrderStore


class FakeCatalog:
    """In-memory ProductLookup that records every lookup it receives."""

    def __init__(self, products):
        self.products = {p.id: p for p in products}
        self.calls: list[int] = []

    async def lookup(self, product_id: int) -> Product:
        self.calls.append(product_id)
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product


class BrokenCatalog:
    def __init__(self):
        self.calls: list[int] = []

    async def lookup(self, product_id: int) -> Product:
        self.calls.append(product_id)
        raise UpstreamFailure("connection refused")


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        [
            Product(id=1, name="Laptop", price=Decimal("999.99")),
            Product(id=2, name="Mouse", price=Decimal("24.99")),
            Product(id=3, name="Keyboard", price=Decimal("74.99")),
            Product(id=4, name="Monitor", price=Decimal("349.99")),
            Product(id=5, name="Headphones", price=Decimal("149.99")),
        ]
    )


@pytest.fixture
def broken_catalog() -> BrokenCatalog:
    return BrokenCatalog()


@pytest.fixture
def store() -> OrderStore:
    return OrderStore()


@pytest.fixture
def make_catalog():
    return FakeCatalog
