"""Scope file command implementations."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import yaml

from hasscope.core.scope.applier import ScopeApplier
from hasscope.core.scope.parser import load_scope_file, serialize_scope_config
from hasscope.core.scope.registry import ScopeRegistry
from hasscope.models.scope import ScopeConfig
from hasscope.params import Params
from hasscope.ui.console import console, err_console
from hasscope.ui.tables import applied_scopes_table, scope_config_table


class ScopeCallRecorder:
    """Target that records every scope call and returns itself."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args: Any) -> ScopeCallRecorder:
            self.calls.append((name, args))
            return self

        return record


class _FlagLookup:
    """Truthy when its dotted path was passed as a flag; attributes extend the path."""

    def __init__(self, path: str, flags: set[str]) -> None:
        self._path = path
        self._flags = flags

    def __getattr__(self, name: str) -> _FlagLookup:
        if name.startswith("_"):
            raise AttributeError(name)
        return _FlagLookup(f"{self._path}.{name}", self._flags)

    def __bool__(self) -> bool:
        return self._path in self._flags


class ExplainContext:
    """Request context for ``explain``: named conditions read from flags.

    A dotted condition such as ``current_user.is_admin`` holds when that
    whole path was passed as a flag.
    """

    def __init__(self, action: str | None, params: Params, flags: set[str]) -> None:
        self.action_name = action
        self.params = params
        self._flags = flags

    def __getattr__(self, name: str) -> _FlagLookup:
        if name.startswith("_"):
            raise AttributeError(name)
        return _FlagLookup(name, self._flags)


def run_check(*, scope_file: str, fmt: str, verbose: bool) -> None:
    """Validate a scope file and print the resulting configuration."""
    configs = _load_configs(scope_file)

    if fmt == "table":
        console.print(scope_config_table(configs.values(), title=f"Scopes in {scope_file}"))
        if verbose:
            err_console.print(f"[muted]{len(configs)} scope(s) registered[/muted]")
        return

    payload = {"scopes": [serialize_scope_config(config) for config in configs.values()]}
    click.echo(_render(payload, fmt))


def run_explain(
    *,
    scope_file: str,
    params_source: str,
    action: str | None,
    flags: tuple[str, ...],
    fmt: str,
) -> None:
    """Apply a scope file to sample params and report which scopes fire."""
    configs = _load_configs(scope_file)
    params = Params(_load_params(params_source))
    context = ExplainContext(action, params, set(flags))

    applier = ScopeApplier(configs)
    recorder = ScopeCallRecorder()
    applier.apply(recorder, params, action=action, context=context)
    result = applier.result

    if fmt == "table":
        console.print(applied_scopes_table(result.applied))
        console.print_json(json.dumps(result.scopes, default=str))
        return

    payload = {
        "action": action,
        "applied": [item.as_dict() for item in result.applied],
        "current_scopes": result.scopes,
    }
    click.echo(_render(payload, fmt))


def _load_configs(scope_file: str) -> dict[str, ScopeConfig]:
    registry = ScopeRegistry()
    try:
        load_scope_file(registry, scope_file, scope_file)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    return dict(registry.configs(scope_file))


def _load_params(source: str) -> dict[str, Any]:
    """Read params from a YAML/JSON file, or parse ``source`` as inline YAML/JSON."""
    path = Path(source)
    text = path.read_text(encoding="utf-8") if path.is_file() else source
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Could not parse params: {exc}") from exc
    if not isinstance(payload, dict):
        raise click.ClickException("Params must be a mapping")
    return payload


def _render(payload: dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(json.loads(json.dumps(payload, default=str)), sort_keys=False)
    return json.dumps(payload, indent=2, default=str)
