"""Run the carnet API with uvicorn."""

from __future__ import annotations

import uvicorn

import carnet.lib.cli as click
from carnet.core import BootConfiguration, di
from carnet.core.config import CarnetWebSettings, LoggingSettings

_factory = "carnet.web.carnet:create_app"


@di.inject
def _run(
    reload: bool = False,
    workers: int | None = None,
    boot_cf: BootConfiguration = di.Provide["_boot_config"],
    logging_cf: LoggingSettings = di.Provide["config.logging", di.as_(LoggingSettings)],
    web_cf: CarnetWebSettings = di.Provide["config.web.carnet", di.as_(CarnetWebSettings)],
) -> None:
    # uvicorn builds the app in a fresh process, which boots from this
    boot_cf.export()
    uvicorn.run(
        _factory,
        factory=True,
        host=str(web_cf.backend.host),
        port=web_cf.backend.port,
        reload=reload,
        workers=workers,
        log_config=logging_cf.model_dump(),
    )


@click.group("web")
def web():
    """Serve the REST API."""
    ...


@web.command("serve")
@click.option("-w", "--workers", type=click.IntRange(min=1), default=1)
def serve(workers: int):
    """Start the API server."""
    _run(workers=workers)


@web.command("develop")
def develop():
    """Start the API server, reloading on source changes."""
    _run(reload=True)
