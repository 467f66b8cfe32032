"""
Logging setup.

Configures loguru sinks for console and optional rotating log files.
"""

import sys
from pathlib import Path

from loguru import logger

from dapp_client.config.settings import Settings, get_settings


def setup_logging(level: str = "INFO", log_dir: Path | str | None = None) -> None:
    """
    Configure logger with console output and optional file rotation.

    Args:
        level: Minimum level for every sink
        log_dir: Directory for rotating log files (console only if None)
    """
    logger.remove()
    logger.add(sys.stderr, level=level, colorize=True)

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        logger.add(
            directory / "dapp_client.log",
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )

    logger.debug(f"Logging configured (level={level}, log_dir={log_dir})")


def setup_logging_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``log_level`` and ``log_dir`` settings."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_dir)
