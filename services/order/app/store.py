"""
Order Service — 注文ストア

完成した注文を保持するインメモリストア。Order Service で唯一の共有可変状態。

  - 注文 ID は "ORD-" + 連番 (1 から、プロセス内で単調増加)
  - put は追加のみ。同じ ID で上書きしない
  - ロックを持つのは ID 採番と辞書操作の間だけ (下流呼び出し中は持たない)

再起動すると注文は消える。
"""

import itertools
import threading

from .aggregate import Order

ID_PREFIX = "ORD-"


class OrderStore:
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            return f"{ID_PREFIX}{next(self._counter)}"

    def put(self, order: Order) -> None:
        with self._lock:
            if order.order_id in self._orders:
                raise ValueError(f"Order {order.order_id} is already stored")
            self._orders[order.order_id] = order

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
