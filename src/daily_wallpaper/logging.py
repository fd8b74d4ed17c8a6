"""Logging configuration using loguru.

Library modules log through ``from loguru import logger``; the command-line
entry point calls setup_logging() once to decide where records go.

Example:
    from daily_wallpaper.logging import setup_logging

    setup_logging(level="DEBUG", log_file="~/.cache/daily-wallpaper/wallpaper.log")

"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Scheduled runs append to one file, so it is rotated and old files compressed
LOG_FILE_ROTATION = "10 MB"
LOG_FILE_RETENTION = "7 days"


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """Configure loguru handlers.

    Console records always go to stderr so that command output on stdout
    (such as the path printed by ``latest``) stays machine-readable. The log
    file, when given, uses the same format as the console sink so that
    ``json_output`` applies to both.

    Args:
        level: Minimum log level. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.
        json_output: Serialize records as JSON lines instead of the console format.
        log_file: Optional file that also receives every record; ``~`` is
            expanded and missing parent directories are created.

    """
    logger.remove()

    if json_output:
        sink_options = {"format": "{message}", "serialize": True}
    else:
        sink_options = {"format": CONSOLE_FORMAT}

    logger.add(sys.stderr, level=level, colorize=not json_output, **sink_options)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level=level,
            rotation=LOG_FILE_ROTATION,
            retention=LOG_FILE_RETENTION,
            compression="gz",
            **sink_options,
        )
        logger.debug("Also logging to {}", path)
