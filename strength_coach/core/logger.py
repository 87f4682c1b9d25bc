"""Logger configuration for the strength coach engine.

Engine modules log through `from loguru import logger` with structured
keyword fields; this module only decides where those records go.
"""

import sys
from pathlib import Path

from loguru import logger

from strength_coach.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    json_logs: bool = False,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with the engine's sinks.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional rotating file sink; console only when None
        json_logs: Emit one JSON object per record on the console instead of text
        rotation: File rotation trigger (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept
    """
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.debug("Logger configured", level=level, log_file=log_file, json_logs=json_logs)


setup_logger(level=settings.log_level, log_file=settings.log_file, json_logs=settings.log_json)
