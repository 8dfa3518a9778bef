"""Order service wired to the real catalog app over an in-process ASGI transport."""

import httpx
import pytest
from fastapi.testclient import TestClient

from services.catalog.app.main import app as catalog_app
from services.order.app import main
from services.order.app.catalog_client import CatalogClient


@pytest.fixture
def client(store):
    catalog = CatalogClient("http://catalog", transport=httpx.ASGITransport(app=catalog_app))
    main.app.dependency_overrides[main.get_catalog] = lambda: catalog
    main.app.dependency_overrides[main.get_store] = lambda: store
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def test_create_and_fetch_order(client):
    created = client.post(
        "/orders",
        content='{"items":[{"productId":1,"quantity":2},{"productId":3,"quantity":1}]}',
    )

    assert created.status_code == 201
    body = created.json()
    assert body["items"][0]["subtotal"] == 1999.98
    assert body["total"] == 2074.97
    assert "Laptop" in created.text and "Keyboard" in created.text

    fetched = client.get(f"/orders/{body['orderId']}")
    assert fetched.status_code == 200
    assert fetched.text == created.text


def test_unknown_product_through_catalog(client, store):
    response = client.post("/orders", content='{"items":[{"productId":999,"quantity":1}]}')

    assert response.status_code == 400
    assert "Product not found" in response.json()["error"]
    assert len(store) == 0
