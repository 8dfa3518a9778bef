"""
Order Service — ワイヤ表現との変換

リクエスト:
  {"items":[{"productId": int, "quantity": int}, ...]}
レスポンス:
  {"orderId": str, "items":[{"productId","name","price","quantity","subtotal"}], "total": number}
"""

import re

from services.shared import jsoncodec

from .aggregate import Order, OrderItemRequest
from .errors import InvalidRequest

_INTEGER = re.compile(r"[+-]?\d+")

# 32 ビット符号付き整数の範囲
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


def _int_field(fields: dict[str, str], key: str) -> int:
    raw = fields.get(key)
    if raw is None or not _INTEGER.fullmatch(raw.strip()):
        raise InvalidRequest(f"Invalid {key}: {raw}")
    value = int(raw)
    if not INT_MIN <= value <= INT_MAX:
        raise InvalidRequest(f"Invalid {key}: {raw}")
    return value


def parse_order_request(raw: bytes) -> list[OrderItemRequest]:
    """
    POST /orders のボディを明細のリストにする。
    ボディが読めなければ CodecError、明細の値が不正なら InvalidRequest。
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise jsoncodec.MalformedRequest() from e

    items = []
    for fields in jsoncodec.extract_items(text):
        product_id = _int_field(fields, "productId")
        quantity = _int_field(fields, "quantity")
        if quantity <= 0:
            raise InvalidRequest("Quantity must be greater than zero")
        items.append(OrderItemRequest(product_id=product_id, quantity=quantity))
    return items


def order_to_wire(order: Order) -> dict:
    return {
        "orderId": order.order_id,
        "items": [
            {
                "productId": item.product_id,
                "name": item.name,
                "price": item.unit_price,
                "quantity": item.quantity,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
        "total": order.total,
    }


def order_to_json(order: Order) -> str:
    return jsoncodec.encode_object(order_to_wire(order))
