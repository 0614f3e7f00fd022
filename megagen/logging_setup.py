from __future__ import annotations

import os
import sys
from pathlib import Path

from loguru import logger


FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level:<8}</level> | <cyan>{message}</cyan>"


def setup_logging(
    logs_dir: str | os.PathLike[str] = "logs",
    verbose: bool = False,
    filename: str = "megagen.log",
) -> Path:
    """Send generator logs to a rotating file (always DEBUG) and to stderr.

    Console output stays on stderr so that stdout only carries the account records
    printed by the tools. With `verbose`, poll rounds and API calls show up on the
    console as well. Returns the log file path.
    """
    log_file = Path(logs_dir) / filename
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        log_file,
        rotation="5 MB",
        retention=10,
        compression="zip",
        enqueue=True,
        level="DEBUG",
        format=FILE_FORMAT,
    )
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
        format=CONSOLE_FORMAT,
    )
    return log_file
