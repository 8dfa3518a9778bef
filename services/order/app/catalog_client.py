"""
Order Service — Catalog Service クライアント

注文作成中に商品を 1 件ずつ問い合わせる。
コマンドハンドラは ProductLookup プロトコルにだけ依存するので、
テストではネットワークを使わない偽物に差し替えられる。

応答の解釈:
  200            → Product
  404            → ProductNotFound (要求した商品 ID を保持)
  それ以外 / 通信失敗 / タイムアウト → UpstreamFailure

リトライもキャッシュもしない。毎回新しく問い合わせる。
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from services.shared import jsoncodec

from .errors import ProductNotFound, UpstreamFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class Product(BaseModel):
    """Order Service から見た商品 (読み取り専用)"""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Decimal = Field(ge=0)


class ProductLookup(Protocol):
    async def lookup(self, product_id: int) -> Product: ...


class CatalogClient:
    """ProductLookup の本番実装 (httpx で Catalog Service を呼ぶ)"""

    def __init__(
        self,
        base_url: str,
        connect_timeout: float = DEFAULT_TIMEOUT,
        read_timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            transport=transport,
        )

    async def lookup(self, product_id: int) -> Product:
        try:
            resp = await self._client.get(f"/products/{product_id}")
        except httpx.HTTPError as e:
            logger.warning("Catalog request for product %s failed: %r", product_id, e)
            raise UpstreamFailure(f"Catalog request failed: {e!r}") from e

        if resp.status_code == 404:
            raise ProductNotFound(product_id)
        if resp.status_code != 200:
            logger.warning("Catalog returned status %s for product %s", resp.status_code, product_id)
            raise UpstreamFailure(f"Catalog service returned status {resp.status_code}")

        return self._parse_product(resp.text)

    @staticmethod
    def _parse_product(body: str) -> Product:
        try:
            fields = jsoncodec.decode_object(body)
            return Product(
                id=int(fields["id"]),
                name=fields["name"],
                price=Decimal(fields["price"]),
            )
        except (jsoncodec.CodecError, KeyError, ValueError, InvalidOperation, ValidationError) as e:
            logger.warning("Unreadable catalog response %r: %s", body, e)
            raise UpstreamFailure("Catalog service returned an unreadable product") from e

    async def aclose(self) -> None:
        await self._client.aclose()
