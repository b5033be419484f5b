"""
Logger Setup Module

Two loggers are used by the photo compressor:

    PhotoCompressor.core   - single-image compression; console only, so that
                             compressing an upload never touches the disk
    PhotoCompressor.batch  - folder runs; console plus ``compressor.log``
"""

import logging
from typing import Optional

CORE_LOGGER = "PhotoCompressor.core"
BATCH_LOGGER = "PhotoCompressor.batch"
BATCH_LOG_FILE = "compressor.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LevelColorFormatter(logging.Formatter):
    """
    Console formatter that colors the level name only.

    Example:
        12:00:01 | INFO    | Compressed avatar.png: 8192KB → 412KB at quality 0.77
    """

    COLORS = {
        logging.DEBUG: '\033[90m',     # gray
        logging.INFO: '\033[92m',      # green
        logging.WARNING: '\033[93m',   # yellow
        logging.ERROR: '\033[91m',     # red
        logging.CRITICAL: '\033[95m',  # magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def setup_logger(
        name: str = BATCH_LOGGER,
        log_file: Optional[str] = BATCH_LOG_FILE,
        level: int = logging.INFO
) -> logging.Logger:
    """
    Return the named logger, attaching its handlers on first use.

    Args:
        name (str): Logger name; ``CORE_LOGGER`` or ``BATCH_LOGGER``.
        log_file (str, optional): Plain-text log file. ``None`` logs to the console only.
            The file is opened lazily, on the first record actually written.
        level (int): Logging level applied to the logger.

    Notes:
        - Handlers are attached once per name, so repeated calls never duplicate output.
        - The logger does not propagate; a record is written by its own handlers only,
          and a console-only logger never reaches a file through a parent.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(LevelColorFormatter(LOG_FORMAT, datefmt=CONSOLE_DATEFMT))
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=FILE_DATEFMT))
            logger.addHandler(file_handler)

    return logger
