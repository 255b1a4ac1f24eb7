"""Loguru setup for applications embedding the SDK (and for the CLI)."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from vtxplugin.config.schema import SdkSettings

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(settings: SdkSettings, *, debug: bool = False) -> Path | None:
    """Install a stderr sink (plus a rotating file sink when configured) and enable the package.

    Returns the log file path when a file sink was added.
    """
    level = "DEBUG" if debug else settings.log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    log_path: Path | None = None
    if settings.log_file:
        log_path = Path(settings.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=level,
            rotation="10 MB",
            retention="14 days",
            encoding="utf-8",
            backtrace=False,
            diagnose=False,
        )
    logger.enable("vtxplugin")
    return log_path
