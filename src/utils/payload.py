"""Defensive access helpers for schema-less upstream payloads."""

from typing import Any, Iterable, List


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def dig(obj: Any, *path, default: Any = None) -> Any:
    """
    Walk *path* through nested dicts/lists.

    Integer keys index into lists; any missing step returns *default*.
        dig(data, "asic_extracts", 0, "directors") → list or default
    """
    current = obj
    for key in path:
        if current is None:
            return default
        if isinstance(key, int):
            if isinstance(current, (list, tuple)) and -len(current) <= key < len(current):
                current = current[key]
            else:
                return default
        elif isinstance(current, dict):
            current = current.get(key)
        else:
            return default
    return default if current is None else current


def first_non_empty(*values: Any, default: Any = None) -> Any:
    """Return the first candidate that is not None, blank or an empty collection."""
    for value in values:
        if not is_empty(value):
            return value
    return default


def pick(obj: Any, *keys: str, default: Any = None) -> Any:
    """First non-empty value among *keys* of a dict (case-variant lookups)."""
    if not isinstance(obj, dict):
        return default
    return first_non_empty(*(obj.get(k) for k in keys), default=default)


def as_list(value: Any) -> List[Any]:
    """A list as-is, a single record wrapped in a list, None as []."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def values_of(value: Any) -> List[Any]:
    """A list as-is, or the values of an object used as a keyed collection."""
    if value is None:
        return []
    if isinstance(value, dict):
        return list(value.values())
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def records(value: Any) -> List[dict]:
    """Only the dict entries of a collection (arrays or keyed objects)."""
    return [item for item in values_of(value) if isinstance(item, dict)]


def join_non_empty(parts: Iterable[Any], sep: str = " ") -> str:
    return sep.join(str(p).strip() for p in parts if not is_empty(p))


def record_list(value: Any) -> List[dict]:
    """Dict entries of a list, or a lone record wrapped in a list."""
    return [item for item in as_list(value) if isinstance(item, dict)]


def first_dict(*values: Any) -> dict:
    """First candidate that is a non-empty dict, else ``{}``."""
    for value in values:
        if isinstance(value, dict) and value:
            return value
    return {}
