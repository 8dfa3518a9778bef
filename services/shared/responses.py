"""
Shared — HTTP レスポンスのヘルパー

FastAPI の JSON エンコーダは使わず、jsoncodec で組み立てた文字列を
そのまま application/json として返す。
"""

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import jsoncodec

MEDIA_TYPE = "application/json"

_ROUTING_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def json_response(status_code: int, body: str, headers: dict | None = None) -> Response:
    return Response(content=body, status_code=status_code, media_type=MEDIA_TYPE, headers=headers)


def error_response(status_code: int, message: str, headers: dict | None = None) -> Response:
    """{"error": message} 形式のエラーレスポンス"""
    return json_response(status_code, jsoncodec.error_body(message), headers)


def install_routing_errors(app: FastAPI) -> None:
    """
    ルーティング失敗 (未知のパス・メソッド不一致) を
    {"error": ...} 形式に揃える。
    """

    @app.exception_handler(StarletteHTTPException)
    async def routing_error(request: Request, exc: StarletteHTTPException) -> Response:
        message = _ROUTING_MESSAGES.get(exc.status_code, str(exc.detail))
        return error_response(exc.status_code, message, getattr(exc, "headers", None))
