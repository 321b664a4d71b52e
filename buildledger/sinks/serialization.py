"""JSON-safe conversion of ledger records for sinks.

Amounts are whole VND ints and pass through unchanged. Enums become their
value, dates ISO strings, and sets (``Actor.permissions``, the selection
sets of ``OutputTaxPlan``) sorted lists so that output is stable.
"""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert a record to a dictionary of JSON-safe values.

    Dataclass fields starting with ``_`` (store indexes, counters) are
    skipped. Nested dataclasses such as ``Attachment`` or the transactions
    inside a ``ContractPaymentStatus`` are converted recursively.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: serialize_value(getattr(obj, f.name))
            for f in fields(obj)
            if not f.name.startswith("_")
        }
    if isinstance(obj, dict):
        return {_key(k): serialize_value(v) for k, v in obj.items()}
    return {"value": str(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a single value for JSON output."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(serialize_value(v) for v in value)
    if isinstance(value, dict):
        return {_key(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def _key(key: Any) -> Any:
    # MappingKey and other enum keys
    return key.value if isinstance(key, Enum) else key
