"""Logging setup.

Call setup_logging once at startup, then use ``logger.info(...)`` anywhere.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


def setup_logging(log_level: str, log_file: Optional[Union[str, Path]], console_level: str = "INFO") -> None:
    """stderr sink, plus ``log_file`` and a ``*_error`` sibling when a file is given."""
    handlers = [
        {"sink": sys.stderr, "level": console_level.upper(), "format": CONSOLE_FORMAT, "colorize": True},
    ]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        for sink, level, retention in (
            (path, log_level.upper(), "30 days"),
            (path.with_name(f"{path.stem}_error{path.suffix}"), "ERROR", "90 days"),
        ):
            handlers.append({
                "sink": sink,
                "level": level,
                "format": FILE_FORMAT,
                "rotation": "10 MB",
                "retention": retention,
                "compression": "zip",
                "encoding": "utf-8",
            })

    logger.configure(handlers=handlers)


__all__ = ["setup_logging", "logger"]
