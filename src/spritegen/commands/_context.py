"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Configures logging, owns the lazily-built
SpriteService, and routes results to stdout or stderr.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from spritegen.config.logging import configure_logging
from spritegen.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from spritegen.config.settings import SpriteSettings
    from spritegen.services.result import ServiceResult
    from spritegen.services.sprite import SpriteService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The service (and with it plugin discovery) is created on first use so
    ``--help`` and ``--version`` stay cheap.
    """

    def __init__(self, settings: SpriteSettings) -> None:
        self.settings = settings
        self._service: SpriteService | None = None

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from spritegen.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def service(self) -> SpriteService:
        if self._service is None:
            from spritegen.services.sprite import SpriteService

            self._service = SpriteService(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr outside JSON mode.
        * Failure: stderr, then exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
