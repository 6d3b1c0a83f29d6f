"""
Logging setup for applications using the J-Quants client
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
PACKAGE_LOGGER = "jquants_client"


def configure_logging(level: Union[str, int] = "INFO",
                      log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Attach stream and optional file handlers to the package logger

    Calling this again replaces the handlers it installed previously.

    Args:
        level: Log level name or number
        log_file: Optional path of a log file to append to

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, '_jquants_handler', False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._jquants_handler = True
        logger.addHandler(handler)

    return logger
