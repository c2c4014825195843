"""
Dashboard API — Value Coercion
===============================

What:  Turns the strings that arrive in query strings (and, less often, in
       JSON bodies) into typed values before they reach the store.
Why:   Query strings carry only text; forms often post "true", "null" or
       "42" as strings too. One set of rules keeps filters and writes
       consistent.

Rules (coerce_value):
    "true" / "false" (any case)  → bool
    "null" (any case)            → None
    ^-?\\d+$                      → int; for id / *Id / *_id fields the value
                                   goes through normalize_id()
    ^-?\\d+\\.\\d+$                 → unchanged string (exact decimal text kept)
    list                         → each element coerced independently
    anything else                → unchanged

Store boundary (adapt_to_column):
    After coercion, values are adapted to the column type: decimal strings
    become Decimal for NUMERIC columns, ISO strings become date/datetime.
    Values that cannot be adapted raise ValidationError (→ 400).

Text columns (coerce_for_column):
    Strings bound for String/Text columns keep their raw text, so a store
    named "True" or "007" stays a string. Only "null" still clears.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import InstrumentedAttribute

from dashboard_api.exceptions import ValidationError

INTEGER_PATTERN = re.compile(r"^-?\d+$")
DECIMAL_PATTERN = re.compile(r"^-?\d+\.\d+$")
HEX_PATTERN = re.compile(r"^0[xX][0-9a-fA-F]+$")


def is_identifier_field(key: str) -> bool:
    """id, userId, order_id... are opaque identifiers, not quantities."""
    return key == "id" or key.endswith("Id") or key.endswith("_id")


def normalize_id(value: Any) -> int:
    """
    Normalize a path or payload identifier to an integer store key.

    Accepts ints, decimal strings and 0x-prefixed hex strings. Anything
    else fails fast instead of reaching the store as garbage.

    Raises:
        ValidationError: empty, malformed, or unsupported identifier
    """
    if isinstance(value, bool):
        raise ValidationError(message=f"Invalid resource id: {value}", field="id")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.match(text):
            return int(text)
        if HEX_PATTERN.match(text):
            return int(text, 16)
        raise ValidationError(message=f"Invalid resource id: {value}", field="id")
    raise ValidationError(
        message=f"Unsupported id type: {type(value).__name__}",
        field="id",
    )


def coerce_value(key: str, value: Any) -> Any:
    if value is None:
        return None

    if isinstance(value, (list, tuple)):
        return [coerce_value(key, item) for item in value]

    if not isinstance(value, str):
        return value

    lower = value.lower()
    if lower == "true":
        return True
    if lower == "false":
        return False
    if lower == "null":
        return None

    if INTEGER_PATTERN.match(value):
        if is_identifier_field(key):
            return normalize_id(value)
        return int(value)

    # Decimal strings stay strings: no float ever touches currency values
    if DECIMAL_PATTERN.match(value):
        return value

    return value


def coerce_for_column(column: InstrumentedAttribute, key: str, value: Any) -> Any:
    """coerce_value, except that text columns keep raw strings other than "null"."""
    if isinstance(column.type, String) and isinstance(value, str) and value.lower() != "null":
        return value
    return coerce_value(key, value)


def adapt_to_column(column: InstrumentedAttribute, value: Any) -> Any:
    """
    Adapt an already-coerced value to the Python type the column expects.

    Only the conversions the drivers cannot do themselves are handled;
    everything else passes through for the database to judge.
    """
    if value is None:
        return None

    column_type = column.type
    field_name = column.key

    if isinstance(column_type, Numeric) and not isinstance(value, bool):
        if isinstance(value, (int, float, str)):
            try:
                return Decimal(str(value))
            except InvalidOperation:
                raise ValidationError(
                    message=f"Invalid decimal value for {field_name}: {value}",
                    field=field_name,
                )
        return value

    if isinstance(column_type, DateTime) and isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(
                message=f"Invalid datetime value for {field_name}: {value}",
                field=field_name,
            )

    if isinstance(column_type, Date) and isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise ValidationError(
                message=f"Invalid date value for {field_name}: {value}",
                field=field_name,
            )

    if isinstance(column_type, String) and isinstance(value, bool):
        raise ValidationError(
            message=f"Invalid text value for {field_name}: {value}",
            field=field_name,
        )

    # JSON number 13800000000 sent for phone, a text column
    if isinstance(column_type, String) and isinstance(value, int):
        return str(value)

    if isinstance(column_type, Integer) and isinstance(value, str):
        raise ValidationError(
            message=f"Invalid integer value for {field_name}: {value}",
            field=field_name,
        )

    return value
