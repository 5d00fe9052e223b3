import logging
import sys

from music_analytics import config as cfg

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s] %(message)s'


def get_logger(name):
    """
    Build the standard application logger.
    Output goes to stdout so container logs pick it up.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, cfg.LOG_LEVEL.upper(), logging.INFO))

    # Only attach one handler per logger name
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
