"""Evaluation of ``if``/``unless`` conditions and computed defaults."""

from __future__ import annotations

import inspect
import logging
import warnings
from collections.abc import Callable
from typing import Any

from hasscope.models.scope import Predicate

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _accepts_argument(func: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    for param in signature.parameters.values():
        if param.kind in _POSITIONAL or param.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
    return False


def call_with_context(func: Callable[..., Any], context: Any) -> Any:
    """Call ``func`` with the context, or with no arguments if it takes none."""
    if _accepts_argument(func):
        return func(context)
    return func()


def _resolve_name(context: Any, name: str) -> Any:
    value = getattr(context, name)
    return value() if callable(value) else value


def _resolve_path(context: Any, path: str) -> Any:
    warnings.warn(
        f"Dotted condition {path!r} is deprecated; pass a callable or a method name instead",
        DeprecationWarning,
        stacklevel=4,
    )
    node = context
    for part in path.split("."):
        node = getattr(node, part)
    return node() if callable(node) else node


def is_applicable(condition: Predicate | None, context: Any, expected: bool) -> bool:
    """Return True when the condition is absent or evaluates to ``expected``.

    Args:
        condition: Callable taking the context, a method name on the context,
            or a dotted attribute path (deprecated)
        context: Request context the condition is evaluated against
        expected: Truthiness the condition must have

    Returns:
        True if the scope may apply
    """
    if condition is None:
        return True

    if isinstance(condition, str):
        if "." in condition:
            result = _resolve_path(context, condition)
        else:
            result = _resolve_name(context, condition)
    else:
        result = call_with_context(condition, context)

    applicable = bool(result) is expected
    if not applicable:
        logger.debug("Condition %r evaluated to %r", condition, result)
    return applicable
