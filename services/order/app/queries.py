"""
Order Service — クエリハンドラ (Read 側)
"""

from .aggregate import Order
from .store import OrderStore


def get_order(store: OrderStore, order_id: str) -> Order | None:
    """保存済みの注文を返す。なければ None (副作用なし)"""
    return store.get(order_id)
