# logger.py
import logging
from pathlib import Path
from typing import Literal, Optional

from config import CONFIG_MODEL

# Logger level types
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOGGER_NAME = "city_sim"


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    file_mode: Literal["w", "a"] = "w",
) -> logging.Logger:
    """
    Configure and return the simulation logger.

    Args:
        level: Logging level (defaults to CONFIG_MODEL.logging_level)
        log_file: Log file path (defaults to CONFIG_MODEL.log_file)
        log_format: Log message format (defaults to CONFIG_MODEL.log_format)
        file_mode: File writing mode - 'w' for overwrite, 'a' for append

    Returns:
        Configured logging.Logger instance
    """
    config_level = level or CONFIG_MODEL.logging_level
    config_file = log_file or CONFIG_MODEL.log_file
    config_format = log_format or CONFIG_MODEL.log_format

    level_map: dict[str, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    numeric_level = level_map.get(config_level.upper(), logging.DEBUG)

    Path(config_file).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(config_file, mode=file_mode, encoding="utf-8")
    handler.setFormatter(logging.Formatter(config_format))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)

    return logger


def log(message: str, level: LogLevel = "DEBUG") -> None:
    """
    Log a message at the specified level.

    Args:
        message: The message to log
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logger = logging.getLogger(LOGGER_NAME)
    match level.upper():
        case "INFO":
            logger.info(message)
        case "WARNING":
            logger.warning(message)
        case "ERROR":
            logger.error(message)
        case "CRITICAL":
            logger.critical(message)
        case _:
            logger.debug(message)
