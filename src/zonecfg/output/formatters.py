"""Turn a ServiceResult into text.

normalize and apply print the document itself so their output can be
piped or redirected.  inspect and all failures print an ``OK:`` or
``ERROR:`` line, followed by ``key: value`` lines for the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape

from zonecfg.output.console import render

if TYPE_CHECKING:
    from zonecfg.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _summary_lines(result: ServiceResult, settings: OutputSettings) -> list[str]:
    if not result.ok:
        message = result.error.message if result.error else "unknown error"
        return [f"[zonecfg.error]ERROR[/]: [zonecfg.op]{result.op}[/] - {escape(message)}"]

    lines = [f"[zonecfg.ok]OK[/]: [zonecfg.op]{result.op}[/]"]
    if not settings.quiet:
        lines += [f"  [zonecfg.key]{k}[/]: {escape(str(v))}" for k, v in result.data.items()]
    telemetry = (result.meta or {}).get("telemetry")
    if settings.verbose and telemetry:
        lines.append(f"  [zonecfg.key]duration_ms[/]: {telemetry['duration_ms']}")
    return lines


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format *result* for stdout (success) or stderr (failure).

    Args:
        result: The service result to format.
        settings: Output mode; defaults to human-readable, non-quiet.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if result.ok and "document" in result.data:
        return str(result.data["document"]).rstrip("\n")
    return render(_summary_lines(result, settings))


def format_warnings(warnings: list[str]) -> str:
    """One ``WARNING:`` line per entry."""
    return render([f"[zonecfg.warning]WARNING[/]: {escape(w)}" for w in warnings])
