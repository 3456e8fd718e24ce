"""Main CLI entry point for hasscope."""

from __future__ import annotations

import logging

import click

from hasscope import __version__

CLI_PRIMARY_COMMAND = "hasscope"
OUTPUT_FORMATS = ["table", "json", "yaml"]


@click.group()
@click.version_option(version=__version__, prog_name=CLI_PRIMARY_COMMAND)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output and debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Check and explain declarative scope definitions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command("check")
@click.argument("scope_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
    show_default=True,
    help="Output format",
)
@click.pass_context
def check(ctx: click.Context, scope_file: str, fmt: str) -> None:
    """Validate a scope file and show the registered configuration."""
    from hasscope.cli.scopes import run_check

    run_check(scope_file=scope_file, fmt=fmt, verbose=ctx.obj.get("verbose", False))


@cli.command("explain")
@click.argument("scope_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--params",
    "params_source",
    required=True,
    help="Params as a YAML/JSON file path or an inline JSON/YAML mapping",
)
@click.option("--action", "-a", help="Action name used for only/except gating")
@click.option(
    "--flag",
    "flags",
    multiple=True,
    help="Condition name or dotted path that evaluates truthy in if/unless (repeatable)",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
    show_default=True,
    help="Output format",
)
def explain(
    scope_file: str,
    params_source: str,
    action: str | None,
    flags: tuple[str, ...],
    fmt: str,
) -> None:
    """Show which scopes fire for the given params and action."""
    from hasscope.cli.scopes import run_explain

    run_explain(
        scope_file=scope_file,
        params_source=params_source,
        action=action,
        flags=flags,
        fmt=fmt,
    )


def main() -> None:
    cli(obj={})
