"""Rich table formatters for scope configurations and application results."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rich.table import Table

from hasscope.models.scope import AppliedScope, ScopeConfig

_TYPE_STYLES = {
    "array": "type.array",
    "hash": "type.hash",
    "boolean": "type.boolean",
    "default": "type.default",
}


def _join(values: Iterable[Any]) -> str:
    return ", ".join(str(v) for v in values)


def scope_config_table(configs: Iterable[ScopeConfig], *, title: str = "Scopes") -> Table:
    """Build a table of scope configurations in registration order."""
    table = Table(title=title, show_lines=False, pad_edge=False)
    table.add_column("Scope", style="bold")
    table.add_column("Type")
    table.add_column("Key path")
    table.add_column("Using", style="muted")
    table.add_column("Actions")
    table.add_column("Default", style="muted")

    for config in configs:
        style = _TYPE_STYLES[config.type.value]
        if config.only:
            actions = f"only {_join(sorted(config.only))}"
        elif config.except_:
            actions = f"except {_join(sorted(config.except_))}"
        else:
            actions = "all"
        table.add_row(
            config.name,
            f"[{style}]{config.type.value}[/{style}]",
            ".".join(config.key_path),
            _join(config.using) if config.using is not None else "",
            actions,
            repr(config.default) if config.has_default else "",
        )

    return table


def applied_scopes_table(applied: Iterable[AppliedScope], *, title: str = "Applied scopes") -> Table:
    """Build a table of the scopes that fired, in call order."""
    table = Table(title=title, show_lines=False, pad_edge=False)
    table.add_column("#", style="muted", width=3)
    table.add_column("Scope", style="bold")
    table.add_column("Key path")
    table.add_column("Arguments")

    for index, item in enumerate(applied, start=1):
        table.add_row(
            str(index),
            item.name,
            ".".join(item.key_path),
            _join(repr(arg) for arg in item.args),
        )

    return table
