"""YAML parser for scope definition files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from hasscope.core.scope.registry import build_options
from hasscope.models.scope import ScopeConfig, ScopeDefinition

if TYPE_CHECKING:
    from hasscope.core.scope.registry import ScopeRegistry

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = {1}


def parse_scope_file(path: str | Path) -> list[ScopeDefinition]:
    """Parse a scope definitions YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Definitions in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scope file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as err:
            raise ValueError(f"Invalid YAML in scope file {path}: {err}") from err

    return parse_scope_dict(data)


def parse_scope_dict(data: dict[str, Any]) -> list[ScopeDefinition]:
    """Parse scope definitions from a dictionary.

    Args:
        data: Document with a ``scopes`` list

    Returns:
        Definitions in document order

    Raises:
        ValueError: If the document is malformed
        ScopeConfigurationError: If an entry carries invalid options
    """
    if not isinstance(data, dict):
        raise ValueError("Scope definitions must be a dictionary")

    version = data.get("version", 1)
    if version not in SUPPORTED_VERSIONS:
        raise ValueError(f"Unsupported scope file version: {version}")

    entries = data.get("scopes")
    if not isinstance(entries, list):
        raise ValueError("Scope definitions must have a 'scopes' list")

    return [_parse_definition(entry, index) for index, entry in enumerate(entries)]


def _parse_definition(data: Any, index: int) -> ScopeDefinition:
    """Parse one registration entry."""
    if not isinstance(data, dict):
        raise ValueError(f"Scope entry {index} must be a dictionary")

    entry = dict(data)
    names = entry.pop("names", None)
    name = entry.pop("name", None)
    if names is None and name is None:
        raise ValueError(f"Scope entry {index} must have a 'name' or 'names' field")
    if names is None:
        names = [name]
    elif isinstance(names, str):
        names = [names]
    if not isinstance(names, list) or not names:
        raise ValueError(f"Scope entry {index}: 'names' must be a non-empty list")

    if "handler" in entry:
        raise ValueError(f"Scope entry {index}: handlers cannot be declared in a scope file")

    return ScopeDefinition(names=[str(n) for n in names], options=build_options(entry))


def load_scope_file(registry: ScopeRegistry, owner: Any, path: str | Path) -> list[ScopeConfig]:
    """Register every definition from a file on ``owner``.

    The file is registered as a single update: if any entry is invalid or
    conflicts with an earlier one, nothing is registered.
    """
    definitions = parse_scope_file(path)
    configs = registry.register_all(owner, [(d.names, d.options) for d in definitions])

    logger.info("Loaded %d scope definitions from %s", len(definitions), path)
    return configs


def serialize_scope_config(config: ScopeConfig) -> dict[str, Any]:
    """Serialize a configuration to a dictionary for YAML or JSON output.

    Args:
        config: Configuration to serialize

    Returns:
        Dictionary with plain values; callables are shown by name
    """
    data: dict[str, Any] = {
        "name": config.name,
        "as": list(config.key_path),
        "type": config.type.value,
    }

    if config.only:
        data["only"] = sorted(config.only)
    if config.except_:
        data["except"] = sorted(config.except_)
    if config.using is not None:
        data["using"] = list(config.using)
    if config.if_ is not None:
        data["if"] = _describe(config.if_)
    if config.unless is not None:
        data["unless"] = _describe(config.unless)
    if config.has_default:
        data["default"] = _describe(config.default) if callable(config.default) else config.default
    if config.allow_blank:
        data["allow_blank"] = True
    if config.handler is not None:
        data["handler"] = _describe(config.handler)

    return data


def _describe(value: Any) -> Any:
    if isinstance(value, str) or not callable(value):
        return value
    return getattr(value, "__qualname__", repr(value))
