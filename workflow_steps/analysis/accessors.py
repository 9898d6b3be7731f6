"""Ordered parameter lookups.

n8n stores the same logical value under different keys depending on the
node sub-type and version. Each field is described as an ordered list of
accessors; the first one that yields a usable value wins. Accessors never
raise: a missing key, a wrong type or an out-of-range index yields None.
"""
from typing import Any, Callable, Iterable, Optional, Union

Accessor = Callable[[Any], Any]
PathKey = Union[str, int]

_MISSING = object()


def path(*keys: PathKey) -> Accessor:
    """Accessor following dict keys (str) and list indexes (int)."""

    def access(value: Any) -> Any:
        for key in keys:
            value = _step(value, key)
            if value is _MISSING:
                return None
        return value

    access.__name__ = "path(" + ".".join(str(key) for key in keys) + ")"
    return access


def find_in(list_keys: tuple[PathKey, ...], match: dict[str, Any], field: str) -> Accessor:
    """Accessor returning `field` of the first list item whose keys equal `match`."""
    get_list = path(*list_keys)

    def access(value: Any) -> Any:
        items = get_list(value)
        if not isinstance(items, list):
            return None
        for item in items:
            if isinstance(item, dict) and all(item.get(k) == v for k, v in match.items()):
                return item.get(field)
        return None

    return access


def _step(value: Any, key: PathKey) -> Any:
    if isinstance(key, int):
        if isinstance(value, list) and -len(value) <= key < len(value):
            return value[key]
        return _MISSING
    if isinstance(value, dict) and key in value:
        return value[key]
    return _MISSING


def first_value(
    source: Any,
    accessors: Iterable[Accessor],
    accept: Callable[[Any], bool],
) -> Any:
    """Return the first accessor result that satisfies `accept`."""
    for accessor in accessors:
        value = accessor(source)
        if value is not None and accept(value):
            return value
    return None


def first_text(source: Any, accessors: Iterable[Accessor]) -> Optional[str]:
    """First non-blank string among the accessors."""
    return first_value(source, accessors, lambda v: isinstance(v, str) and bool(v.strip()))


def first_list(source: Any, accessors: Iterable[Accessor]) -> Optional[list]:
    """First non-empty list among the accessors."""
    return first_value(source, accessors, lambda v: isinstance(v, list) and bool(v))


def first_present(source: Any, accessors: Iterable[Accessor]) -> Any:
    """First value that is not None, blank or empty."""
    return first_value(source, accessors, _is_present)


def _is_present(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return bool(value)
    return True
