import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Configure console-only logging for the ``leaguedraw`` logger tree.

    Calling this more than once replaces the handler instead of stacking
    duplicates.
    """
    logger = logging.getLogger("leaguedraw")
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Remove any pre-existing handlers to avoid duplicates
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
