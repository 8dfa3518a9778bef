"""Tests for the restricted JSON codec shared by both services."""

from decimal import Decimal

import pytest

from services.shared import jsoncodec


def test_format_price_uses_two_digits_half_up():
    assert jsoncodec.format_price(Decimal("1999.98")) == "1999.98"
    assert jsoncodec.format_price(Decimal("0.125")) == "0.13"
    assert jsoncodec.format_price(Decimal("5")) == "5.00"
    assert jsoncodec.format_price(999.99 * 2) == "1999.98"


def test_encode_object_is_compact_and_ordered():
    body = jsoncodec.encode_object({"id": 1, "name": "Laptop", "price": Decimal("999.99")})
    assert body == '{"id":1,"name":"Laptop","price":999.99}'


def test_encode_escapes_special_characters():
    body = jsoncodec.encode_object({"name": 'a "b"\\c\nd\te\r'})
    assert body == '{"name":"a \\"b\\"\\\\c\\nd\\te\\r"}'


def test_encode_array_of_objects():
    body = jsoncodec.encode_array([{"id": 1}, {"id": 2}])
    assert body == '[{"id":1},{"id":2}]'


def test_encode_rejects_nested_object():
    with pytest.raises(jsoncodec.CodecError):
        jsoncodec.encode_object({"product": {"id": 1}})


def test_error_body():
    assert jsoncodec.error_body("Order not found") == '{"error":"Order not found"}'


def test_decode_object_strips_quotes_and_keeps_numbers_raw():
    fields = jsoncodec.decode_object('{ "id": 1, "name": "Laptop", "price": 999.99 }')
    assert fields == {"id": "1", "name": "Laptop", "price": "999.99"}


def test_decode_object_ignores_commas_and_colons_inside_quotes():
    fields = jsoncodec.decode_object('{"name":"Desk, oak: large","id":7}')
    assert fields == {"name": "Desk, oak: large", "id": "7"}


def test_decode_object_unescapes_encoder_escapes():
    encoded = jsoncodec.encode_object({"name": 'say "hi"\n'})
    assert jsoncodec.decode_object(encoded) == {"name": 'say "hi"\n'}


def test_decode_empty_object():
    assert jsoncodec.decode_object("{}") == {}
    assert jsoncodec.decode_object("  { }  ") == {}


def test_decode_skips_malformed_pairs():
    assert jsoncodec.decode_object('{"a":1, garbage, "b":"x"}') == {"a": "1", "b": "x"}
    assert jsoncodec.decode_object("{nothing here}") == {}


def test_decode_rejects_nested_object():
    with pytest.raises(jsoncodec.CodecError):
        jsoncodec.decode_object('{"product":{"id":1}}')


def test_decode_rejects_unicode_escape():
    with pytest.raises(jsoncodec.CodecError):
        jsoncodec.decode_object('{"name":"caf\\u00e9"}')


def test_decode_rejects_unterminated_string():
    with pytest.raises(jsoncodec.CodecError):
        jsoncodec.decode_object('{"name":"Laptop}')


def test_decode_keeps_array_values_as_raw_text():
    fields = jsoncodec.decode_object('{"orderId":"ORD-1","items":[{"a":1},{"a":2}],"total":3.00}')
    assert fields["orderId"] == "ORD-1"
    assert fields["total"] == "3.00"
    assert jsoncodec.decode_array(fields["items"]) == [{"a": "1"}, {"a": "2"}]


def test_decode_array_splits_objects_by_brace_depth():
    result = jsoncodec.decode_array('[{"name":"a}b"}, {"name":"c"}]')
    assert result == [{"name": "a}b"}, {"name": "c"}]


def test_decode_array_rejects_scalar_elements():
    with pytest.raises(jsoncodec.CodecError):
        jsoncodec.decode_array("[1, 2]")


def test_extract_items_from_order_request():
    items = jsoncodec.extract_items('{"items":[{"productId":1,"quantity":2},{"productId":3,"quantity":1}]}')
    assert items == [
        {"productId": "1", "quantity": "2"},
        {"productId": "3", "quantity": "1"},
    ]


def test_extract_items_empty_array():
    assert jsoncodec.extract_items('{"items":[]}') == []


@pytest.mark.parametrize("body", ["", "{}", '{"items":"none"}', "]["])
def test_extract_items_without_array_is_malformed(body):
    with pytest.raises(jsoncodec.MalformedRequest):
        jsoncodec.extract_items(body)
