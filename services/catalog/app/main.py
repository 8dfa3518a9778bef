"""
Catalog Service — FastAPI エントリーポイント

商品カタログを提供する読み取り専用サービス。
Order Service は注文作成時に GET /products/{id} を同期的に呼び出す。

  ┌───────────────┐  GET /products/{id}  ┌─────────────────┐
  │ Order Service │ ───────────────────▶ │ Catalog Service │
  └───────────────┘                      └─────────────────┘
"""

import logging
import os
import re

import uvicorn
from fastapi import FastAPI, Request

from services.shared import jsoncodec
from services.shared.responses import error_response, install_routing_errors, json_response

from .repository import ProductRepository

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8081"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?\d+")
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

repository = ProductRepository()

app = FastAPI(title="Catalog Service", redirect_slashes=False)
install_routing_errors(app)


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


# ── Query Endpoints ──────────────────────────────


@app.get("/products")
async def list_products():
    """全商品をカタログ登録順に返す"""
    products = [p.to_wire() for p in repository.find_all()]
    return json_response(200, jsoncodec.encode_array(products))


@app.get("/products/")
async def get_product_without_id():
    return error_response(400, "Invalid product ID")


@app.get("/products/{product_id}")
async def get_product(product_id: str):
    """指定商品を返す。ID が 32 ビット整数として読めなければ 400"""
    if not _INTEGER.fullmatch(product_id) or not INT_MIN <= int(product_id) <= INT_MAX:
        return error_response(400, "Invalid product ID")
    product = repository.find_by_id(int(product_id))
    if product is None:
        return error_response(404, "Product not found")
    return json_response(200, jsoncodec.encode_object(product.to_wire()))


@app.get("/health")
async def health():
    return json_response(200, jsoncodec.encode_object({"status": "ok", "service": "catalog-service"}))


def run() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Catalog service starting on port %d", PORT)
    uvicorn.run(app, host=HOST, port=PORT)
