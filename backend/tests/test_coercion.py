"""
Dashboard API — Value Coercion Unit Tests
==========================================

What we test:
    ✅ Query-string literals: booleans, null, integers, decimals
    ✅ Identifier fields keep full 64-bit precision
    ✅ Id normalization (decimal, hex, malformed)
    ✅ Column adaptation (Decimal, date, datetime, text, integer)
    ✅ Text columns keep "True", "007"... as typed
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from dashboard_api.exceptions import ValidationError
from dashboard_api.models import Order, OrderItem, Pet, Store, User
from dashboard_api.services.coercion import (
    adapt_to_column,
    coerce_for_column,
    coerce_value,
    is_identifier_field,
    normalize_id,
)


class TestCoerceValue:

    @pytest.mark.parametrize("raw, expected", [
        ("true", True),
        ("TRUE", True),
        ("false", False),
        ("False", False),
        ("null", None),
        ("NULL", None),
        ("42", 42),
        ("-7", -7),
    ])
    def test_literals(self, raw, expected):
        result = coerce_value("status", raw)
        assert result == expected
        assert type(result) is type(expected)

    def test_decimal_string_is_kept_verbatim(self):
        """Currency text never goes through float."""
        assert coerce_value("totalAmount", "129.90") == "129.90"
        assert coerce_value("totalAmount", "-0.10") == "-0.10"

    def test_plain_text_is_unchanged(self):
        assert coerce_value("nickname", "Alice") == "Alice"
        assert coerce_value("phone", "+86 138") == "+86 138"

    def test_identifier_beyond_double_precision(self):
        """2^53 + 1 cannot be represented as a double; it must survive intact."""
        assert coerce_value("userId", "9007199254740993") == 9007199254740993
        assert coerce_value("order_id", "9007199254740993") == 9007199254740993

    def test_list_elements_are_coerced_independently(self):
        assert coerce_value("status", ["paid", "null", "3"]) == ["paid", None, 3]

    def test_non_strings_pass_through(self):
        assert coerce_value("quantity", 5) == 5
        assert coerce_value("neutered", True) is True
        assert coerce_value("remark", None) is None

    @pytest.mark.parametrize("raw", ["True", "false", "007", "12.50"])
    def test_text_column_keeps_raw_string(self, raw):
        assert coerce_for_column(Store.name, "name", raw) == raw

    def test_text_column_null_still_clears(self):
        assert coerce_for_column(Store.name, "name", "NULL") is None

    def test_non_text_column_is_coerced(self):
        assert coerce_for_column(Pet.neutered, "neutered", "true") is True
        assert coerce_for_column(OrderItem.quantity, "quantity", "3") == 3

    @pytest.mark.parametrize("key, expected", [
        ("id", True),
        ("userId", True),
        ("store_id", True),
        ("identity", False),
        ("paid", False),
    ])
    def test_is_identifier_field(self, key, expected):
        assert is_identifier_field(key) is expected


class TestNormalizeId:

    def test_decimal_string(self):
        assert normalize_id("42") == 42
        assert normalize_id(" 42 ") == 42

    def test_hex_string(self):
        assert normalize_id("0x1F") == 31
        assert normalize_id("0X1f") == 31

    def test_int_passes_through(self):
        assert normalize_id(9007199254740993) == 9007199254740993

    @pytest.mark.parametrize("raw", ["abc", "", "1.5", "0x", "12abc"])
    def test_malformed_string_raises(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            normalize_id(raw)
        assert exc_info.value.message == f"Invalid resource id: {raw}"

    def test_bool_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_id(True)

    def test_unsupported_type(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_id(3.5)
        assert "Unsupported id type" in exc_info.value.message


class TestAdaptToColumn:

    def test_numeric_becomes_decimal(self):
        assert adapt_to_column(Order.total_amount, "129.90") == Decimal("129.90")
        assert adapt_to_column(Order.total_amount, 12) == Decimal("12")

    def test_numeric_garbage_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            adapt_to_column(Store.latitude, "north")
        assert exc_info.value.field == "latitude"

    def test_date_from_iso_string(self):
        assert adapt_to_column(Pet.birthdate, "2020-05-01") == date(2020, 5, 1)
        assert adapt_to_column(Pet.birthdate, "2020-05-01T08:00:00Z") == date(2020, 5, 1)

    def test_datetime_with_z_suffix(self):
        value = adapt_to_column(User.membership_expire_at, "2024-01-01T00:00:00Z")
        assert value == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_invalid_datetime_raises(self):
        with pytest.raises(ValidationError):
            adapt_to_column(User.membership_expire_at, "next tuesday")

    def test_integer_for_text_column_becomes_text(self):
        assert adapt_to_column(User.phone, 13800000000) == "13800000000"

    def test_bool_for_text_column_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            adapt_to_column(Store.name, True)
        assert exc_info.value.field == "name"

    def test_text_for_integer_column_raises(self):
        with pytest.raises(ValidationError):
            adapt_to_column(OrderItem.quantity, "many")

    def test_none_passes_through(self):
        assert adapt_to_column(Order.total_amount, None) is None
