"""Data models for hasscope."""

from hasscope.models.scope import (
    AppliedScope,
    ApplicationResult,
    ScopeConfig,
    ScopeDefinition,
    ScopeOptions,
    ScopeType,
)

__all__ = [
    "AppliedScope",
    "ApplicationResult",
    "ScopeConfig",
    "ScopeDefinition",
    "ScopeOptions",
    "ScopeType",
]
