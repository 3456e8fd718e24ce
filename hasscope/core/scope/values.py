"""Value shapes, coercion and blank handling for scope parameters."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sized
from numbers import Number
from typing import Any

from hasscope.models.scope import ScopeType
from hasscope.params import Params

TRUE_VALUES: tuple[Any, ...] = ("true", True, "1", 1)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_object(value: Any) -> bool:
    return True


def _is_scalar(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, Number))


def _to_boolean(value: Any) -> bool:
    return value in TRUE_VALUES


# type -> (shape check, coercion)
ALLOWED_TYPES: dict[ScopeType, tuple[Callable[[Any], bool], Callable[[Any], Any] | None]] = {
    ScopeType.ARRAY: (_is_sequence, None),
    ScopeType.HASH: (_is_mapping, None),
    ScopeType.BOOLEAN: (_is_object, _to_boolean),
    ScopeType.DEFAULT: (_is_scalar, None),
}


def is_mapping(value: Any) -> bool:
    return _is_mapping(value)


def parse_value(scope_type: ScopeType, value: Any) -> Any:
    """Coerce a value for its scope type, or return None when the shape is wrong."""
    check, parser = ALLOWED_TYPES[scope_type]
    if not check(value):
        return None
    return parser(value) if parser else value


def is_blank(value: Any) -> bool:
    """Return True for None, False, whitespace-only strings and empty containers."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (bool, Number)):
        return False
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    return not is_blank(value)


def normalize_blanks(value: Any) -> Any:
    """Drop blank entries from sequences and mappings.

    Sequence elements are kept when present. Mapping entries are kept when
    their normalized value is present; the kept value itself is unchanged.
    Mappings come back as plain dicts.
    """
    if isinstance(value, Params):
        return normalize_blanks(value.to_unsafe_dict())
    if _is_sequence(value):
        return [item for item in value if is_present(item)]
    if _is_mapping(value):
        return {k: v for k, v in value.items() if is_present(normalize_blanks(v))}
    return value


def dig(container: Any, keys: tuple[str, ...] | list[str]) -> Any:
    """Walk nested mappings along ``keys``; None when any level is missing."""
    node = container
    for key in keys:
        if not _is_mapping(node) or key not in node:
            return None
        node = node[key]
    return node
