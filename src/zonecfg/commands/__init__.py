"""Subcommand modules for zonecfg.

register_commands() imports lazily so ``zonecfg --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every subcommand on the root group."""
    from zonecfg.commands.apply import apply
    from zonecfg.commands.inspect_cmd import inspect_cmd
    from zonecfg.commands.normalize import normalize

    cli.add_command(normalize)
    cli.add_command(apply)
    cli.add_command(inspect_cmd)
