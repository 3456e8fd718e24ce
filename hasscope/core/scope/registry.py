"""Owner-keyed registry of scope configurations."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from hasscope.models.scope import ScopeConfig, ScopeOptions, ScopeType

logger = logging.getLogger(__name__)


class ScopeConfigurationError(ValueError):
    """Raised when scope options are invalid."""


def build_options(
    options: ScopeOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> ScopeOptions:
    """Validate registration options from a model, a mapping or keywords.

    Raises:
        ScopeConfigurationError: If an option is unknown or inconsistent
    """
    if isinstance(options, ScopeOptions):
        if not kwargs:
            return options
        payload = {**options.model_dump(exclude_unset=True), **kwargs}
    else:
        payload = {**dict(options or {}), **kwargs}

    try:
        return ScopeOptions.model_validate(payload)
    except ValidationError as err:
        raise ScopeConfigurationError(_format_errors(err)) from err


def _format_errors(err: ValidationError) -> str:
    messages = []
    for error in err.errors():
        location = ".".join(str(part) for part in error["loc"])
        if error["type"] == "extra_forbidden":
            messages.append(f"Unknown scope option: {location}")
        elif location:
            messages.append(f"{location}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return "; ".join(messages)


def _option_updates(names: list[str], options: ScopeOptions) -> dict[str, Any]:
    """Translate supplied options into ScopeConfig field updates."""
    updates: dict[str, Any] = {}
    key_path = options.key_path()
    unpack_keys = options.unpack_keys()
    default = options.default
    has_default = options.is_set("default")

    nesting = options.nesting()
    if nesting is not None:
        unpack_keys = key_path or list(names)
        key_path = nesting
        if has_default and not isinstance(default, Mapping):
            default = {name: default for name in names}

    if unpack_keys is not None:
        updates["type"] = ScopeType.HASH
        updates["using"] = tuple(unpack_keys)
    elif options.is_set("type"):
        updates["type"] = options.type or ScopeType.DEFAULT

    if key_path is not None:
        updates["key_path"] = tuple(key_path)
    if options.is_set("only"):
        updates["only"] = frozenset(_action_names(options.only))
    if options.is_set("except_"):
        updates["except_"] = frozenset(_action_names(options.except_))
    if options.is_set("if_"):
        updates["if_"] = options.if_
    if options.is_set("unless"):
        updates["unless"] = options.unless
    if has_default:
        updates["default"] = default
        updates["has_default"] = True
    if options.is_set("allow_blank"):
        updates["allow_blank"] = options.allow_blank
    if options.is_set("handler"):
        updates["handler"] = options.handler
    return updates


def _action_names(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def merge_config(
    existing: ScopeConfig | None,
    name: str,
    options: ScopeOptions,
    names: list[str] | None = None,
) -> ScopeConfig:
    """Merge supplied options onto an existing configuration (or a fresh seed)."""
    updates = _option_updates(names or [name], options)

    if existing is None:
        data: dict[str, Any] = {
            "name": name,
            "key_path": (name,),
            "type": ScopeType.DEFAULT,
            "handler": options.handler,
        }
    else:
        data = existing.field_values()

    data.update(updates)
    if data.get("using") is not None and data["type"] != ScopeType.HASH:
        raise ScopeConfigurationError("You cannot use 'using' with a type other than 'hash'")

    try:
        return ScopeConfig(**data)
    except ValidationError as err:
        raise ScopeConfigurationError(_format_errors(err)) from err


def _scope_names(names: str | Iterable[str]) -> list[str]:
    scope_names = [names] if isinstance(names, str) else [str(n) for n in names]
    if not scope_names:
        raise ScopeConfigurationError("At least one scope name is required")
    return scope_names


def _merge_into(
    table: dict[str, ScopeConfig], scope_names: list[str], options: ScopeOptions
) -> list[ScopeConfig]:
    configs = []
    for name in scope_names:
        config = merge_config(table.get(name), name, options, scope_names)
        table[name] = config
        configs.append(config)
    return configs


class ScopeRegistry:
    """Ordered scope configurations, kept per owner.

    Owners are usually classes. Each owner's table is replaced, never
    mutated, on registration, so a snapshot handed to an applier stays
    consistent even if registration continues afterwards.
    """

    def __init__(self) -> None:
        self._tables: dict[Any, MappingProxyType[str, ScopeConfig]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        owner: Any,
        names: str | Iterable[str],
        options: ScopeOptions | Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> list[ScopeConfig]:
        """Register or update scopes for an owner.

        Args:
            owner: Type (or any hashable key) owning the scopes
            names: Scope name or names
            options: Options as a ScopeOptions or a mapping
            **kwargs: Options as keywords, merged over ``options``

        Returns:
            The resulting configurations, in ``names`` order

        Raises:
            ScopeConfigurationError: If the options are invalid; the registry
                is left unchanged
        """
        scope_names = _scope_names(names)
        parsed = build_options(options, **kwargs)

        with self._lock:
            table = dict(self._resolve(owner))
            configs = _merge_into(table, scope_names, parsed)
            self._tables[owner] = MappingProxyType(table)

        logger.debug("Registered scopes %s on %r", ", ".join(scope_names), owner)
        return configs

    def register_all(
        self,
        owner: Any,
        definitions: Iterable[tuple[str | Iterable[str], ScopeOptions | Mapping[str, Any] | None]],
    ) -> list[ScopeConfig]:
        """Register several ``(names, options)`` pairs as one update.

        Every pair is merged in order into a copy of the owner's table and
        the copy is installed only when all of them succeed.

        Raises:
            ScopeConfigurationError: If any pair is invalid or conflicts with
                an earlier one; the registry is left unchanged
        """
        batch = [(_scope_names(names), build_options(options)) for names, options in definitions]

        with self._lock:
            table = dict(self._resolve(owner))
            configs: list[ScopeConfig] = []
            for scope_names, parsed in batch:
                configs.extend(_merge_into(table, scope_names, parsed))
            self._tables[owner] = MappingProxyType(table)

        logger.debug("Registered %d scope entries on %r", len(batch), owner)
        return configs

    def inherit(self, child: Any, parent: Any = None) -> None:
        """Give ``child`` a snapshot of ``parent``'s table.

        Without ``parent``, the nearest registered class in ``child``'s MRO
        is used.
        """
        with self._lock:
            self._tables[child] = self._resolve(child if parent is None else parent)

    def configs(self, owner: Any) -> Mapping[str, ScopeConfig]:
        """Return a read-only, ordered snapshot of the owner's scopes."""
        return self._resolve(owner)

    def names(self, owner: Any) -> list[str]:
        return list(self._resolve(owner))

    def get(self, owner: Any, name: str) -> ScopeConfig | None:
        return self._resolve(owner).get(name)

    def clear(self, owner: Any) -> None:
        with self._lock:
            self._tables.pop(owner, None)

    def __contains__(self, owner: object) -> bool:
        return owner in self._tables

    def _resolve(self, owner: Any) -> MappingProxyType[str, ScopeConfig]:
        table = self._tables.get(owner)
        if table is not None:
            return table
        if isinstance(owner, type):
            for base in owner.__mro__[1:]:
                table = self._tables.get(base)
                if table is not None:
                    return table
        return MappingProxyType({})

