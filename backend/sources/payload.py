"""
Explicit field access for loosely typed upstream JSON.

Every adapter parses its raw items through these helpers inside a
`from_payload()` classmethod, so a missing required field raises
MalformedPayload for that one item and optional fields get a documented
default instead of leaking None/"undefined" into the record.
"""

from typing import Any, Optional

from sources.errors import MalformedPayload


def require_mapping(data: Any, what: str = "item") -> dict:
    if not isinstance(data, dict):
        raise MalformedPayload(f"Expected object for {what}, got {type(data).__name__}")
    return data


def require_str(data: dict, key: str) -> str:
    """Non-empty string (ints are accepted and stringified, for numeric IDs)"""
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        raise MalformedPayload(f"Missing required field '{key}'")
    if isinstance(value, (int, float)):
        value = str(int(value)) if float(value).is_integer() else str(value)
    if not isinstance(value, str) or not value.strip():
        raise MalformedPayload(f"Missing required field '{key}'")
    return value.strip()


def optional_str(data: dict, key: str, default: Optional[str] = None) -> Optional[str]:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def optional_number(data: dict, key: str) -> Optional[float]:
    """Number or numeric string; non-positive values count as absent"""
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.replace(',', '').strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or value <= 0:
        return None
    return value


def optional_bool(data: dict, key: str, default: bool = False) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    return default


def str_list(data: dict, key: str) -> list[str]:
    """List of non-empty strings; anything else becomes []"""
    value = data.get(key)
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def nested(data: dict, *keys: str) -> Any:
    """data[k1][k2]... or None when any level is missing or not an object"""
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def optional_nested_str(data: dict, *keys: str, default: Optional[str] = None) -> Optional[str]:
    """nested() for string leaves; numbers are stringified, other types give default"""
    parent = nested(data, *keys[:-1]) if len(keys) > 1 else data
    if not isinstance(parent, dict):
        return default
    return optional_str(parent, keys[-1], default)
