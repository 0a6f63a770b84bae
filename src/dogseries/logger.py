"""Logging configuration for dogseries."""

import logging
import sys

# Create logger for dogseries
logger = logging.getLogger("dogseries")


def setup_logger(level: int = logging.INFO) -> None:
    """Setup the dogseries logger with default configuration.

    Calling it again only adjusts the level of an already configured logger.

    Args:
        level: Logging level (default: INFO)
    """
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    formatter = logging.Formatter("dogseries: %(message)s")
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


# Initialize logger on import
setup_logger()
