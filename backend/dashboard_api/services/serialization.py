"""
Dashboard API — Response Serialization
=======================================

What:  Converts ORM rows and plain Python structures into JSON-safe data.
Why:   JSON clients (browsers) parse numbers as IEEE-754 doubles. A BIGINT
       id above 2^53 or a NUMERIC price would silently lose precision, so
       both always leave the server as strings.

Rules:
    None                         → None
    bool / str / float           → unchanged
    int                          → unchanged, unless outside ±(2^53 - 1) → str
    Decimal                      → str ("129.90")
    datetime / date              → ISO-8601 string; naive datetimes are UTC
    UUID                         → str
    dict / list / tuple          → recursed
    BIGINT column (serialize_record) → str, whatever its magnitude
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import BigInteger

from dashboard_api.resources.registry import ResourceDescriptor

MAX_SAFE_INTEGER = 2**53 - 1


def serialize_data(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value if abs(value) <= MAX_SAFE_INTEGER else str(value)
    if isinstance(value, (str, float)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime) and value.tzinfo is None:
        # SQLite hands back naive values for timezone-aware columns
        return value.replace(tzinfo=timezone.utc).isoformat()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, dict):
        return {str(key): serialize_data(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [serialize_data(item) for item in value]
    # Unknown objects have no JSON form
    return None


def serialize_record(descriptor: ResourceDescriptor, instance: Any) -> Dict[str, Any]:
    """
    Serialize one ORM row using the descriptor's camelCase field names.

    BIGINT columns (ids and foreign keys) are emitted as strings even when
    small, so a client never has to guess which representation it gets.
    """
    record: Dict[str, Any] = {}
    for name, column in descriptor.scalar_fields.items():
        value = getattr(instance, column.key)
        if value is not None and isinstance(column.type, BigInteger):
            record[name] = str(value)
        else:
            record[name] = serialize_data(value)
    return record
