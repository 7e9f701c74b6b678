"""Logging configuration for the specforge CLI."""

import logging
from pathlib import Path

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "urllib3")


def setup_logging(
    verbose: bool = False, log_file: str | None = None, logger_name: str = "specforge"
) -> logging.Logger:
    """
    Configure console logging and optional file logging.

    Args:
        verbose: Enable DEBUG level on console (default WARNING)
        log_file: Path to log file (None for no file logging)
        logger_name: Root of the logger hierarchy to configure

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter("%(levelname)-8s | %(name)s | %(message)s")
    )
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    # Suppress noisy 3rd party loggers
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
