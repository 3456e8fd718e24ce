"""Shared Rich consoles and style definitions.

Command output goes to stdout via ``console``; diagnostics go to stderr via
``err_console``.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

HASSCOPE_THEME = Theme(
    {
        "info": "cyan",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "heading": "bold cyan",
        "muted": "dim",
        "type.array": "magenta",
        "type.hash": "blue",
        "type.boolean": "green",
        "type.default": "white",
    }
)

console = Console(theme=HASSCOPE_THEME)
err_console = Console(stderr=True, theme=HASSCOPE_THEME)
