"""Request parameter mapping with string/enum key equivalence."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any


def _key(key: Any) -> str:
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


def _wrap(value: Any) -> Any:
    if isinstance(value, Params):
        return value
    if isinstance(value, Mapping):
        return Params(value)
    if isinstance(value, list):
        return [_wrap(item) for item in value]
    return value


def _unwrap(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {_key(k): _unwrap(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_unwrap(item) for item in value]
    return value


class Params(Mapping[str, Any]):
    """Read-only nested parameter map.

    Keys are compared as strings, so ``params["page"]``, ``params[Key.PAGE]``
    and a raw ``{"page": ...}`` payload all address the same entry. Nested
    mappings are returned as ``Params`` as well.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[Any, Any] | None = None, **kwargs: Any) -> None:
        merged: dict[str, Any] = {}
        for source in (data or {}, kwargs):
            for key, value in source.items():
                merged[_key(key)] = value
        self._data = merged

    def __getitem__(self, key: Any) -> Any:
        return _wrap(self._data[_key(key)])

    def __contains__(self, key: object) -> bool:
        return _key(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Params({self._data!r})"

    def dig(self, *keys: Any) -> Any:
        """Return the value at a nested key path, or None if any level is missing."""
        node: Any = self
        for key in keys:
            if not isinstance(node, Mapping) or key not in node:
                return None
            node = node[key]
        return node

    def to_unsafe_dict(self) -> dict[str, Any]:
        """Convert to plain nested dicts and lists, without any filtering."""
        return _unwrap(self._data)
