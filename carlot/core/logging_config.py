"""
Logging configuration for the API process.
"""

import logging
import sys
from typing import Optional


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Set up root logging.

    Args:
        level: level name, e.g. "INFO" or "DEBUG" (unknown names fall back to INFO)
        log_file: optional file path to also write logs to
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )

    # SQL echo is noisy; keep it at WARNING unless explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
