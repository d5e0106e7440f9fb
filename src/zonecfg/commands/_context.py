"""AppContext, the object every subcommand receives via ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zonecfg.config.logging import configure_logging
from zonecfg.output.formatters import OutputSettings, format_result, format_warnings
from zonecfg.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from zonecfg.config.settings import ZoneCfgSettings
    from zonecfg.services.result import ServiceResult
    from zonecfg.services.zone import ZoneConfigService


class AppContext:
    """Per-invocation state built by the root group.

    Configures logging (and telemetry under ``--verbose``) up front; the
    service is built on first use so ``--help`` never touches it.
    """

    def __init__(self, settings: ZoneCfgSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._service: ZoneConfigService | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def service(self) -> ZoneConfigService:
        if self._service is None:
            from zonecfg.services.zone import ZoneConfigService

            self._service = ZoneConfigService(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 if it failed.

        Success goes to stdout and failure to stderr.  Warnings go to
        stderr, except in JSON mode where the envelope already holds them.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if result.warnings and not self.output.json_output:
            click.echo(format_warnings(result.warnings), err=True)
