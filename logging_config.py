"""
Logging Configuration
Sets up the 'echoes' logger namespace with rich console output.
"""
import logging
from typing import Optional, Union

from rich.logging import RichHandler


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'echoes' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG or "DEBUG")
        log_file: Optional path to also write plain-text logs to.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("echoes")
    logger.setLevel(level)

    # avoid duplicate handlers on re-init
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = RichHandler(show_path=False, markup=False, rich_tracebacks=True)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="%H:%M:%S"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
        ))
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
