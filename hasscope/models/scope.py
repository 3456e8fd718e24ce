"""Scope-related data models."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Method name on the context, optionally a dotted attribute path.
_PREDICATE_NAME = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")


class ScopeType(StrEnum):
    """Accepted value shapes for a scope parameter."""

    ARRAY = "array"
    HASH = "hash"
    BOOLEAN = "boolean"
    DEFAULT = "default"


Predicate = Callable[[Any], Any] | str


def _as_key_list(value: str | Sequence[str] | None) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


class ScopeOptions(BaseModel):
    """Options accepted when registering one or more scopes.

    Reserved words are spelled with a trailing underscore in Python and
    without it in dicts and YAML (``as_`` / ``as``, ``in_`` / ``in``,
    ``if_`` / ``if``, ``except_`` / ``except``). Unknown keys are rejected.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    type: ScopeType | None = None
    only: str | list[str] | None = None
    except_: str | list[str] | None = Field(default=None, alias="except")
    as_: str | list[str] | None = Field(default=None, alias="as")
    using: str | list[str] | None = None
    in_: str | list[str] | None = Field(default=None, alias="in")
    if_: Callable[..., Any] | str | None = Field(default=None, alias="if")
    unless: Callable[..., Any] | str | None = None
    default: Any = None
    allow_blank: bool = False
    handler: Callable[..., Any] | None = None

    @field_validator("if_", "unless")
    @classmethod
    def _check_predicate(cls, value: Any) -> Any:
        if isinstance(value, str) and not _PREDICATE_NAME.match(value):
            raise ValueError(
                f"Condition {value!r} must be a callable or the name of a method on the context"
            )
        return value

    @field_validator("as_", "in_")
    @classmethod
    def _check_key_path(cls, value: str | list[str] | None) -> str | list[str] | None:
        if isinstance(value, list) and not value:
            raise ValueError("Key path must have at least one segment")
        return value

    @model_validator(mode="after")
    def _check_using_type(self) -> ScopeOptions:
        unpacks = self.using is not None or self.in_ is not None
        if unpacks and self.type is not None and self.type != ScopeType.HASH:
            raise ValueError("You cannot use 'using' with a type other than 'hash'")
        return self

    def is_set(self, name: str) -> bool:
        """Return True when the option was explicitly supplied."""
        return name in self.model_fields_set

    def key_path(self) -> list[str] | None:
        return _as_key_list(self.as_)

    def nesting(self) -> list[str] | None:
        return _as_key_list(self.in_)

    def unpack_keys(self) -> list[str] | None:
        return _as_key_list(self.using)


class ScopeConfig(BaseModel):
    """Resolved, immutable configuration for one registered scope."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    key_path: tuple[str, ...]
    type: ScopeType = ScopeType.DEFAULT

    # Action gating (empty = no restriction)
    only: frozenset[str] = frozenset()
    except_: frozenset[str] = frozenset()

    # Conditions evaluated against the request context
    if_: Callable[..., Any] | str | None = None
    unless: Callable[..., Any] | str | None = None

    default: Any = None
    has_default: bool = False
    allow_blank: bool = False

    # Sub-keys unpacked into positional arguments
    using: tuple[str, ...] | None = None

    handler: Callable[..., Any] | None = None

    @field_validator("key_path")
    @classmethod
    def _check_key_path(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("Key path must have at least one segment")
        return value

    @property
    def parent_keys(self) -> tuple[str, ...]:
        return self.key_path[:-1]

    @property
    def key(self) -> str:
        return self.key_path[-1]

    def field_values(self) -> dict[str, Any]:
        """Return the current field values, keyed by field name, without copying."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def applies_to_action(self, action: str | None) -> bool:
        """Check the only/except sets against an action name."""
        name = None if action is None else str(action)
        if self.only:
            return name in self.only
        return not self.except_ or name not in self.except_


@dataclass(frozen=True)
class AppliedScope:
    """A scope that fired during one application pass."""

    name: str
    key_path: tuple[str, ...]
    value: Any
    args: tuple[Any, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "key_path": list(self.key_path),
            "value": self.value,
            "args": list(self.args),
        }


@dataclass
class ApplicationResult:
    """Record of one application pass over a target."""

    targets: list[Any] = field(default_factory=list)
    applied: list[AppliedScope] = field(default_factory=list)
    scopes: dict[str, Any] = field(default_factory=dict)

    @property
    def target(self) -> Any:
        """The final target after every fired scope."""
        return self.targets[-1] if self.targets else None

    @property
    def fired(self) -> list[str]:
        return [applied.name for applied in self.applied]

    def current_scopes(self, keys: Iterable[str] = ()) -> dict[str, Any]:
        """Return the nested record under ``keys``, creating levels as needed."""
        node = self.scopes
        for key in keys:
            node = node.setdefault(key, {})
        return node


class ScopeDefinition(BaseModel):
    """One registration call read from a definitions file."""

    names: list[str] = Field(min_length=1)
    options: ScopeOptions = Field(default_factory=ScopeOptions)
