"""Logging setup for the command line."""

from __future__ import annotations

import logging

# chatty at INFO: alembic announces every migration context, the engine echoes SQL
NOISY_LOGGERS = ("alembic.runtime.migration", "sqlalchemy.engine")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger; dependency loggers only speak up in debug mode."""

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    dependency_level = logging.NOTSET if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(dependency_level)
