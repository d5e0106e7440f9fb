"""Command: apply a partial zone config document to an existing one."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from zonecfg.commands._base import ZoneCfgCommand

if TYPE_CHECKING:
    from zonecfg.codec.documents import DocumentFormat
    from zonecfg.commands._context import AppContext


@click.command(
    cls=ZoneCfgCommand,
    examples="""\
  zonecfg apply zone.yaml patch.yaml
  zonecfg apply zone.yaml patch.yaml --write
  zonecfg apply zone.json patch.yaml --format json""",
)
@click.argument("base", type=click.Path(path_type=Path))
@click.argument("patch", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default=None,
    help="Output format (ignored with --write, which keeps BASE's format).",
)
@click.option("--write", is_flag=True, help="Overwrite BASE with the merged document.")
@click.pass_obj
def apply(
    app: AppContext,
    base: Path,
    patch: Path,
    output_format: DocumentFormat | None,
    write: bool,
) -> None:
    """Apply PATCH on top of BASE; fields PATCH omits are kept from BASE."""
    app.emit(app.service.apply(base, patch, output_format=output_format, write=write))
