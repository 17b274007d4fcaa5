"""Logging configuration for DinDin.

Everything goes to a dated file under the configured log directory. The
console doubles as the CLI's output channel, so INFO records are printed
as plain text and only warnings and errors carry their level.
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "dindin"

# Chatty HTTP client loggers pulled in by the openai SDK
_NOISY_LOGGERS = ("openai", "httpx", "httpcore")


class ConsoleFormatter(logging.Formatter):
    """Plain messages for INFO and below, "LEVEL - message" above."""

    def __init__(self):
        super().__init__("%(message)s")
        self._leveled = logging.Formatter("%(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno > logging.INFO:
            return self._leveled.format(record)
        return super().format(record)


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    log_filename = f"{LOGGER_NAME}-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(config.log_dir / log_filename, encoding="utf-8")
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(ConsoleFormatter())

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The dindin logger instance.
    """
    return logging.getLogger(LOGGER_NAME)
