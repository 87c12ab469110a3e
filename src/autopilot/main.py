# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Command line entry point: loads the mission, then serves the command API.
"""

import logging

import typer
import uvicorn

from autopilot import set_log_level
from autopilot.client import UpstreamClient
from autopilot.config import get_settings
from autopilot.errors import InitializationError
from autopilot.manager import ReplanManager
from autopilot.server import create_application

log = logging.getLogger('autopilot.main')

cli = typer.Typer(help="Replan the vehicle path on demand.", add_completion=False)


def build_manager(settings):
    """
    Creates a `ReplanManager` from `settings` and initializes it.

    Raises
    ------
    autopilot.errors.InitializationError
    """
    client = UpstreamClient(
        settings.telemetry_url,
        settings.interop_proxy_url,
        timeout=settings.request_timeout,
    )
    manager = ReplanManager(
        settings.telemetry_url,
        settings.interop_proxy_url,
        tolerance=settings.tolerance,
        client=client,
        lock_timeout=settings.lock_timeout,
    )
    try:
        manager.initialize()
    except InitializationError:
        client.close()
        raise
    return manager


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
) -> None:
    """Initialize the planner and serve /api/alive and /api/update_path."""

    settings = get_settings()
    set_log_level(settings.log_level)

    log.info("Initializing...")
    log.info("Telemetry at {}, interop proxy at {}".format(settings.telemetry_url, settings.interop_proxy_url))
    try:
        manager = build_manager(settings)
    except InitializationError as e:
        log.critical("Could not start: {}".format(e))
        raise typer.Exit(code=1)

    try:
        uvicorn.run(
            create_application(manager),
            host=host or settings.host,
            port=port or settings.port,
            log_level=settings.log_level.lower(),
        )
    finally:
        manager.client.close()


def main():
    cli()


if __name__ == "__main__":
    main()
