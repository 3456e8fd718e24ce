"""Declarative mapping of request parameters to scope calls."""

from hasscope.controller import HasScope
from hasscope.core.scope import (
    ScopeApplier,
    ScopeConfigurationError,
    ScopeRegistry,
    load_scope_file,
)
from hasscope.models.scope import ApplicationResult, ScopeConfig, ScopeOptions, ScopeType
from hasscope.params import Params

__version__ = "0.1.0"

__all__ = [
    "ApplicationResult",
    "HasScope",
    "Params",
    "ScopeApplier",
    "ScopeConfig",
    "ScopeConfigurationError",
    "ScopeOptions",
    "ScopeRegistry",
    "ScopeType",
    "load_scope_file",
    "__version__",
]
