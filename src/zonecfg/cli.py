"""zonecfg command-line entry point."""

from __future__ import annotations

import click

from zonecfg import __version__
from zonecfg.commands import register_commands
from zonecfg.commands._context import AppContext
from zonecfg.config.settings import ZoneCfgSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="zonecfg")
@click.option("-c", "--config", "config_path", default=None, help="Read this zonecfg.toml.")
@click.option("--strict", is_flag=True, help="Reject unknown document fields.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON envelopes.")
@click.option("-q", "--quiet", is_flag=True, help="Only print the status line.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and per-step timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, strict: bool, **flags: bool) -> None:
    """Read, merge and normalize zone configuration documents.

    Documents are YAML (.yaml, .yml) or JSON (.json).  Older documents
    using experimental_lease_preferences or flat constraint lists are
    accepted and rewritten in the current shape.
    """
    settings = ZoneCfgSettings.from_cli(config_path=config_path, strict=strict, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
