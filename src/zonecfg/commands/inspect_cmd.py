"""Command: summarize a zone config document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from zonecfg.commands._base import ZoneCfgCommand

if TYPE_CHECKING:
    from zonecfg.commands._context import AppContext


@click.command(
    "inspect",
    cls=ZoneCfgCommand,
    examples="""\
  zonecfg inspect zone.yaml
  zonecfg --json inspect zone.json""",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def inspect_cmd(app: AppContext, path: Path) -> None:
    """Report replica count, constraint shape and lease-preference count."""
    app.emit(app.service.inspect(path))
