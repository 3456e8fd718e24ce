"""Apply configured scopes to a target from request parameters."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from hasscope.core.scope.conditions import call_with_context, is_applicable
from hasscope.core.scope.values import (
    dig,
    is_blank,
    is_mapping,
    is_present,
    normalize_blanks,
    parse_value,
)
from hasscope.models.scope import ApplicationResult, AppliedScope, ScopeConfig, ScopeType

logger = logging.getLogger(__name__)

# Marks a scope with no resolvable value.
_MISSING = object()


class ScopeApplier:
    """Walks configured scopes in order and applies those that resolve.

    Each fired scope is called on the current target and its return value
    becomes the target for the next scope. The record of the last pass is
    kept on ``result``.
    """

    def __init__(self, configs: Mapping[str, ScopeConfig]) -> None:
        """Initialize the applier.

        Args:
            configs: Ordered scope configurations (usually a registry snapshot)
        """
        self.configs = configs
        self.result = ApplicationResult()

    def apply(
        self,
        target: Any,
        params: Mapping[str, Any],
        action: str | None = None,
        context: Any = None,
    ) -> Any:
        """Apply every applicable scope to ``target``.

        Args:
            target: Object the first scope is called on
            params: Nested parameter map
            action: Current action name, used by only/except gating
            context: Object conditions, computed defaults and handlers receive

        Returns:
            The target returned by the last fired scope (or ``target`` itself)
        """
        result = ApplicationResult(targets=[target])
        self.result = result

        for config in self.configs.values():
            if not self._should_apply(config, action, context):
                logger.debug("Scope %s skipped for action %r", config.name, action)
                continue

            value = self._resolve_value(config, params, context)
            if value is _MISSING:
                continue

            value = normalize_blanks(parse_value(config.type, value))
            target = self._apply_value(config, target, value, context, result)

        return target

    def current_scopes(self, keys: Iterable[str] = ()) -> dict[str, Any]:
        """Return the values applied during the last pass, nested like the params."""
        return self.result.current_scopes(keys)

    def _should_apply(self, config: ScopeConfig, action: str | None, context: Any) -> bool:
        if not is_applicable(config.if_, context, True):
            return False
        if not is_applicable(config.unless, context, False):
            return False
        return config.applies_to_action(action)

    def _resolve_value(self, config: ScopeConfig, params: Mapping[str, Any], context: Any) -> Any:
        parent_keys, key = config.parent_keys, config.key

        # Precedence: exact top-level key, nested hash for unpacking, nested key, default.
        if not parent_keys and key in params:
            return params[key]

        if config.using is not None and is_mapping(dig(params, (*parent_keys, key))):
            return dig(params, parent_keys)[key]

        container = dig(params, parent_keys) if parent_keys else params
        if is_mapping(container) and key in container:
            return container[key]

        if config.has_default:
            default = config.default
            return call_with_context(default, context) if callable(default) else default

        return _MISSING

    def _apply_value(
        self,
        config: ScopeConfig,
        target: Any,
        value: Any,
        context: Any,
        result: ApplicationResult,
    ) -> Any:
        if config.using is not None and is_mapping(value):
            selected = {key: value[key] for key in config.using if key in value}
            args = tuple(selected.get(key) for key in config.using)
            if not (all(is_present(arg) for arg in args) or config.allow_blank):
                logger.debug("Scope %s skipped: blank value for %s", config.name, config.using)
                return target

            result.current_scopes(config.parent_keys).setdefault(config.key, {}).update(selected)
            return self._call(config, target, context, result, selected, args, (list(args),))

        if is_blank(value) and not config.allow_blank:
            logger.debug("Scope %s skipped: blank value", config.name)
            return target

        result.current_scopes(config.parent_keys)[config.key] = value
        if config.type == ScopeType.BOOLEAN and not config.allow_blank:
            return self._call(config, target, context, result, value, (), ())
        if config.using is not None:
            # Rejected hash let through by allow_blank: nothing to unpack.
            return self._call(config, target, context, result, value, (), (value,))
        return self._call(config, target, context, result, value, (value,), (value,))

    def _call(
        self,
        config: ScopeConfig,
        target: Any,
        context: Any,
        result: ApplicationResult,
        value: Any,
        args: tuple[Any, ...],
        handler_args: tuple[Any, ...],
    ) -> Any:
        if config.handler is not None:
            logger.debug("Applying scope %s through handler", config.name)
            target = config.handler(context, target, *handler_args)
        else:
            logger.debug("Applying scope %s with %r", config.name, args)
            target = getattr(target, config.name)(*args)

        result.applied.append(
            AppliedScope(name=config.name, key_path=config.key_path, value=value, args=args)
        )
        result.targets.append(target)
        return target
