"""Shared Click command class."""

from __future__ import annotations

from typing import Any

import click


class ZoneCfgCommand(click.Command):
    """Command that can print sample invocations.

    Pass ``examples=`` to ``@click.command(cls=ZoneCfgCommand, ...)`` and
    the command grows an eager ``--examples`` flag that prints them and
    exits, keeping ``--help`` short.
    """

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)
