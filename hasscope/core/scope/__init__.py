"""Scope registration and application."""

from hasscope.core.scope.applier import ScopeApplier
from hasscope.core.scope.parser import (
    load_scope_file,
    parse_scope_dict,
    parse_scope_file,
    serialize_scope_config,
)
from hasscope.core.scope.registry import ScopeConfigurationError, ScopeRegistry

__all__ = [
    "ScopeApplier",
    "ScopeConfigurationError",
    "ScopeRegistry",
    "load_scope_file",
    "parse_scope_dict",
    "parse_scope_file",
    "serialize_scope_config",
]
