"""Rich rendering into strings.

Consoles write to a StringIO so formatters return plain text and the
caller decides between stdout and stderr.  Rich emits no ANSI codes when
the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ZONECFG_THEME = Theme(
    {
        "zonecfg.ok": "bold green",
        "zonecfg.error": "bold red",
        "zonecfg.warning": "bold yellow",
        "zonecfg.op": "bold cyan",
        "zonecfg.key": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int = 120) -> Console:
    return Console(
        file=StringIO(),
        theme=ZONECFG_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


def get_output(console: Console) -> str:
    """Text written so far to a console from :func:`create_console`."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render(lines: list[str]) -> str:
    """Render rich markup *lines* to text without the trailing newline."""
    console = create_console()
    for line in lines:
        console.print(line, soft_wrap=True)
    return get_output(console).rstrip("\n")
