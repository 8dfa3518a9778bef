"""
Order Service — FastAPI エントリーポイント

POST /orders で注文を作成し、GET /orders/{order_id} で取得する。
注文作成中は明細ごとに Catalog Service を同期的に呼び出して
商品名と単価を補完する。

ボディの読み書きはすべて services.shared.jsoncodec を通す。
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request

from services.shared import jsoncodec
from services.shared.responses import error_response, install_routing_errors, json_response

from . import commands, queries, wire
from .catalog_client import CatalogClient, ProductLookup
from .errors import InvalidRequest, ProductNotFound, UpstreamFailure
from .store import OrderStore

CATALOG_SERVICE_URL = os.environ.get("CATALOG_SERVICE_URL", "http://localhost:8081")
CATALOG_CONNECT_TIMEOUT = float(os.environ.get("CATALOG_CONNECT_TIMEOUT", "5.0"))
CATALOG_READ_TIMEOUT = float(os.environ.get("CATALOG_READ_TIMEOUT", "5.0"))
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8082"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)

order_store = OrderStore()
catalog_client: CatalogClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global catalog_client
    catalog_client = CatalogClient(
        CATALOG_SERVICE_URL,
        connect_timeout=CATALOG_CONNECT_TIMEOUT,
        read_timeout=CATALOG_READ_TIMEOUT,
    )
    logger.info("Order service using catalog at %s", CATALOG_SERVICE_URL)
    yield
    await catalog_client.aclose()


app = FastAPI(title="Order Service", lifespan=lifespan, redirect_slashes=False)
install_routing_errors(app)


# ── Dependencies ─────────────────────────────────


def get_catalog() -> ProductLookup:
    if catalog_client is None:
        raise RuntimeError("Catalog client is not initialised")
    return catalog_client


def get_store() -> OrderStore:
    return order_store


# ── Error Translation ────────────────────────────


@app.exception_handler(InvalidRequest)
async def invalid_request(request: Request, exc: InvalidRequest):
    return error_response(400, str(exc))


@app.exception_handler(jsoncodec.CodecError)
async def malformed_body(request: Request, exc: jsoncodec.CodecError):
    logger.info("Rejected request body: %s", exc)
    return error_response(400, "Invalid request body")


@app.exception_handler(ProductNotFound)
async def product_not_found(request: Request, exc: ProductNotFound):
    return error_response(400, str(exc))


@app.exception_handler(UpstreamFailure)
async def upstream_failure(request: Request, exc: UpstreamFailure):
    logger.error("Catalog lookup failed: %s", exc)
    return error_response(500, "Internal server error")


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


# ── Command Endpoints (Write 側) ─────────────────


@app.post("/orders")
async def cmd_create_order(
    request: Request,
    catalog: ProductLookup = Depends(get_catalog),
    store: OrderStore = Depends(get_store),
):
    """注文作成コマンド"""
    items = wire.parse_order_request(await request.body())
    order = await commands.create_order(catalog, store, items)
    return json_response(201, wire.order_to_json(order))


# ── Query Endpoints (Read 側) ────────────────────


@app.get("/orders/")
async def query_get_order_without_id():
    """ID が空の参照は該当なし"""
    return error_response(404, "Order not found")


@app.get("/orders/{order_id}")
async def query_get_order(order_id: str, store: OrderStore = Depends(get_store)):
    """指定注文を取得"""
    order = queries.get_order(store, order_id)
    if order is None:
        return error_response(404, "Order not found")
    return json_response(200, wire.order_to_json(order))


@app.get("/health")
async def health():
    return json_response(200, jsoncodec.encode_object({"status": "ok", "service": "order-service"}))


def run() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Order service starting on port %d", PORT)
    uvicorn.run(app, host=HOST, port=PORT)
