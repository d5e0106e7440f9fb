"""Command: re-emit a zone config document in canonical form."""

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
  zonecfg normalize zone.yaml
  zonecfg normalize legacy.yaml --format json
  zonecfg --json normalize zone.json""",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default=None,
    help="Output format (default: [output] format from zonecfg.toml).",
)
@click.pass_obj
def normalize(app: AppContext, path: Path, output_format: DocumentFormat | None) -> None:
    """Decode PATH and print it in canonical form.

    Legacy constraint lists and experimental_lease_preferences are read
    and written back in the current shape.
    """
    app.emit(app.service.normalize(path, output_format=output_format))
