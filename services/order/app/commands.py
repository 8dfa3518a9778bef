"""
Order Service — コマンドハンドラ (Write 側)

注文作成の流れ:
  1. 明細が 1 件以上あるか検証 (下流を呼ぶ前に)
  2. 明細ごとにリクエスト順で Catalog Service に商品を問い合わせる
     (並列化も並べ替えもしない)
  3. 小計と合計を計算 (aggregate.round2 による 2 段階の丸め)
  4. 注文 ID を採番してストアに保存

途中で 1 件でも失敗したら注文全体を失敗させる。
部分的な注文は保存せず、注文 ID も消費しない。
"""

import logging
from collections.abc import Sequence
from decimal import Decimal

from .aggregate import Order, OrderItem, OrderItemRequest, round2
from .catalog_client import ProductLookup
from .errors import InvalidRequest
from .store import OrderStore

logger = logging.getLogger(__name__)


async def create_order(
    catalog: ProductLookup,
    store: OrderStore,
    items: Sequence[OrderItemRequest] | None,
) -> Order:
    """
    注文作成コマンド

    ProductNotFound / UpstreamFailure は catalog からそのまま伝播する。
    """
    if not items:
        raise InvalidRequest("Order must contain at least one item")

    enriched: list[OrderItem] = []
    for item in items:
        product = await catalog.lookup(item.product_id)
        enriched.append(
            OrderItem(
                product_id=item.product_id,
                name=product.name,
                unit_price=product.price,
                quantity=item.quantity,
                subtotal=round2(product.price * item.quantity),
            )
        )

    total = round2(sum((i.subtotal for i in enriched), Decimal("0")))
    order = Order(order_id=store.next_id(), items=tuple(enriched), total=total)
    store.put(order)

    logger.info("Created order %s with %d item(s), total=%s", order.order_id, len(order.items), order.total)
    return order
