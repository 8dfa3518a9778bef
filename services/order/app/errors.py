"""
Order Service — ドメイン例外

main.py の exception_handler が HTTP ステータスに変換する。

  InvalidRequest   → 400 (クライアントの入力ミス)
  ProductNotFound  → 400 (存在しない商品を指定した)
  UpstreamFailure  → 500 (Catalog Service に到達できない/エラー応答)
"""


class OrderError(Exception):
    pass


class InvalidRequest(OrderError):
    pass


class ProductNotFound(OrderError):
    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class UpstreamFailure(OrderError):
    """下流サービスの失敗。メッセージはログ用で、呼び出し元には返さない"""
