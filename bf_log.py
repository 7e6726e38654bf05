import logging

from bf_settings import LOG_LEVEL

LOG_FORMAT = "[%(name)s] %(levelname)s - %(message)s"


def init_logger(name):
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(ch)

    return logger


def set_level(level):
    """Change the level of every logger created through init_logger."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith("BF_") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
