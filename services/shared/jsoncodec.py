"""
Shared — 最小限の JSON コーデック

両サービスのワイヤ表現はすべてこのモジュールを通る。
対応するのは JSON のごく一部だけ:

  - フラットなオブジェクト (値は文字列・数値・真偽値・null)
  - フラットなオブジェクトの配列
  - オブジェクトの値としての配列 (デコード時は生テキストのまま返す)

デコード結果は「キー → 文字列」のマッピング。数値への変換は呼び出し側が行う。
ネストしたオブジェクトや \\uXXXX エスケープは CodecError として扱い、
黙って壊れた値を返すことはしない。
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}


class CodecError(ValueError):
    """サポート外、または壊れた JSON を受け取った"""


class MalformedRequest(CodecError):
    """注文リクエストから items 配列を取り出せない"""

    def __init__(self, message: str = "Invalid request body") -> None:
        super().__init__(message)


# ── エンコード ───────────────────────────────────


def format_price(value: Decimal | float | int) -> str:
    """小数点以下 2 桁・四捨五入 (HALF_UP) で金額を整形する。"""
    if isinstance(value, float):
        value = Decimal(repr(value))
    return str(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def escape(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def encode_value(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (Decimal, float)):
        return format_price(value)
    if isinstance(value, str):
        return f'"{escape(value)}"'
    if isinstance(value, Mapping):
        raise CodecError("Nested objects are not supported")
    if isinstance(value, Sequence):
        return encode_array(value)
    raise CodecError(f"Cannot encode value of type {type(value).__name__}")


def encode_object(fields: Mapping) -> str:
    """フラットなマッピングを JSON オブジェクト文字列にする (キーの順序を保つ)。"""
    body = ",".join(f'"{escape(str(key))}":{encode_value(value)}' for key, value in fields.items())
    return "{" + body + "}"


def encode_array(items: Sequence) -> str:
    parts = []
    for item in items:
        if isinstance(item, Mapping):
            parts.append(encode_object(item))
        else:
            parts.append(encode_value(item))
    return "[" + ",".join(parts) + "]"


def error_body(message: str) -> str:
    return encode_object({"error": message})


# ── デコード ───────────────────────────────────


def unescape(value: str) -> str:
    """
    エンコーダが出力する 5 種類のエスケープだけを戻す。
    それ以外のエスケープはそのまま通すが、\\u は未対応なのでエラー。
    """
    if "\\" not in value:
        return value
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            nxt = value[i + 1]
            if nxt == "u":
                raise CodecError("Unicode escapes are not supported")
            if nxt in _UNESCAPES:
                out.append(_UNESCAPES[nxt])
            else:
                out.append(ch + nxt)
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return unescape(value[1:-1])
    return value


def _scan(text: str):
    """
    (index, char, top_level) を順に返す。
    クォート内の文字と、括弧の内側の文字は top_level=False になる。
    """
    in_quotes = False
    escaped = False
    depth = 0
    for i, ch in enumerate(text):
        if in_quotes:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quotes = False
            yield i, ch, False
            continue
        if ch == '"':
            in_quotes = True
            yield i, ch, False
            continue
        if ch in "{[":
            depth += 1
            yield i, ch, False
            continue
        if ch in "}]":
            depth -= 1
            yield i, ch, False
            continue
        yield i, ch, depth == 0
    if in_quotes:
        raise CodecError("Unterminated string")


def split_top_level(text: str) -> list[str]:
    """クォートと括弧の中にあるカンマを無視してカンマ区切りで分割する。"""
    parts = []
    start = 0
    for i, ch, top_level in _scan(text):
        if ch == "," and top_level:
            parts.append(text[start:i])
            start = i + 1
    if start < len(text):
        parts.append(text[start:])
    return parts


def _find_colon(pair: str) -> int:
    for i, ch, top_level in _scan(pair):
        if ch == ":" and top_level:
            return i
    return -1


def _unwrap(text: str, opening: str, closing: str) -> str:
    body = text.strip()
    if body.startswith(opening):
        body = body[1:]
    if body.endswith(closing):
        body = body[:-1]
    return body.strip()


def decode_object(text: str) -> dict[str, str]:
    """
    フラットな JSON オブジェクトを「キー → 文字列」の dict にする。

    - 引用符付きの値は引用符を 1 段はずす
    - 数値・真偽値・null は生の文字列のまま
    - 配列の値は生テキストのまま (decode_array に渡せる)
    - key:value として読めないペアは警告ログを出して読み飛ばす
    """
    result: dict[str, str] = {}
    body = _unwrap(text, "{", "}")
    if not body:
        return result

    for pair in split_top_level(body):
        colon = _find_colon(pair)
        if colon == -1:
            logger.warning("Skipping malformed JSON pair: %r", pair.strip())
            continue
        key = _strip_quotes(pair[:colon].strip())
        value = pair[colon + 1:].strip()
        if not key:
            logger.warning("Skipping JSON pair with empty key: %r", pair.strip())
            continue
        if value.startswith("{"):
            raise CodecError(f"Nested object for key {key!r} is not supported")
        result[key] = _strip_quotes(value)
    return result


def split_objects(text: str) -> list[str]:
    """
    ブレースの深さを数えて、トップレベルのオブジェクトを部分文字列として切り出す。
    オブジェクト以外の要素が混じっていればエラー。
    """
    objects = []
    depth = 0
    start = -1
    in_quotes = False
    escaped = False
    for i, ch in enumerate(text):
        if in_quotes:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quotes = False
            continue
        if ch == '"':
            if depth == 0:
                raise CodecError("Array elements must be objects")
            in_quotes = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise CodecError("Unbalanced braces")
            if depth == 0:
                objects.append(text[start:i + 1])
                start = -1
        elif depth == 0 and not (ch.isspace() or ch == ","):
            raise CodecError("Array elements must be objects")
    if depth != 0 or in_quotes:
        raise CodecError("Unterminated object in array")
    return objects


def decode_array(text: str) -> list[dict[str, str]]:
    body = _unwrap(text, "[", "]")
    if not body:
        return []
    return [decode_object(obj) for obj in split_objects(body)]


def extract_items(text: str) -> list[dict[str, str]]:
    """
    POST /orders のボディから items 配列を取り出してデコードする。
    最初の "[" から最後の "]" までを配列とみなす。
    """
    body = text.strip()
    start = body.find("[")
    end = body.rfind("]")
    if start == -1 or end == -1 or end <= start:
        raise MalformedRequest()
    return decode_array(body[start:end + 1])
