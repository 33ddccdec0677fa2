# fiscal_periods/firestore.py
"""
Firestore REST typed-value codec.

Documents come back as {"fields": {"name": {"stringValue": "..."}, ...}}; these
helpers convert between that envelope and plain Python values.
"""
from __future__ import annotations

import re as _re
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Dict, Mapping, Optional

Json = Dict[str, Any]

# Firestore emits up to nanosecond precision; datetime keeps microseconds.
_TS_RE = _re.compile(r"^(?P<base>[^.Z+]+?)(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})$")


def parse_timestamp(value: str) -> datetime:
    """'2024-04-05T23:00:00.123456789Z' -> aware datetime (UTC)."""
    m = _TS_RE.match(value.strip())
    if not m:
        raise ValueError(f"Invalid timestamp: {value}")
    frac = (m.group("frac") or "")[:6].ljust(6, "0")
    tz = "+00:00" if m.group("tz") == "Z" else m.group("tz")
    return datetime.fromisoformat(f"{m.group('base')}.{frac}{tz}").astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Aware or naive (treated as UTC) datetime -> RFC 3339 'YYYY-MM-DDTHH:MM:SS.ffffffZ'."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def decode_value(value: Json) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])  # int64 travels as a string
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return parse_timestamp(value["timestampValue"])
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields") or {})
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values") or []]
    raise ValueError(f"Unsupported Firestore value: {value}")


def decode_fields(fields: Mapping[str, Json]) -> Dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


def encode_value(value: Any, *, tz: Optional[tzinfo] = None) -> Json:
    """
    Python value -> Firestore typed value. Plain dates become midnight in `tz`
    (UTC when omitted) so they read back as the same calendar day there.
    """
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, date):
        midnight = datetime.combine(value, time.min, tzinfo=tz or timezone.utc)
        return {"timestampValue": format_timestamp(midnight)}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value, tz=tz)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v, tz=tz) for v in value]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def encode_fields(data: Mapping[str, Any], *, tz: Optional[tzinfo] = None) -> Dict[str, Json]:
    return {k: encode_value(v, tz=tz) for k, v in data.items()}
