import logging
import os
import sys
from typing import Any

NOTICE_LEVEL = 25
logging.addLevelName(NOTICE_LEVEL, "NOTICE")


RESET = "\033[0m"
COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "NOTICE": "\033[38;5;33m",  # Blue-ish
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[1;41m",  # White on red
}


class ColorFormatter(logging.Formatter):
    """Color the level name on the console; other handlers see the record untouched."""

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        color = COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname:<7}{RESET}"
        return super().format(record)


# Route info() -> NOTICE so CLI progress shows on the console by default.
class CustomLogger(logging.Logger):
    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        super().log(NOTICE_LEVEL, msg, *args, **kwargs)


logging.setLoggerClass(CustomLogger)


LOGGER_NAME = "blockpress"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "../../../logs")


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    handler = logging.FileHandler(os.path.join(log_dir, "app.log"), encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(lambda record: record.name.startswith(LOGGER_NAME))
    return handler


def setup_logging(console_level: int = NOTICE_LEVEL, log_dir: str | None = None) -> logging.Logger:
    """(Re)attach the console and file handlers to the package logger.

    The log directory defaults to `BLOCKPRESS_LOG_DIR`, else `logs/` at the project root.
    """
    log_dir = log_dir or os.environ.get("BLOCKPRESS_LOG_DIR") or DEFAULT_LOG_DIR

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(_console_handler(console_level))
    package_logger.addHandler(_file_handler(log_dir))
    package_logger.propagate = False
    return package_logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or LOGGER_NAME)


logger = setup_logging()
logger.debug("Logger initialized successfully.")
