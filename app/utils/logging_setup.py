import logging
from config.settings import LOG_LEVEL

LOGGER_NAME = "taskcheck"
# thread name tells request handling apart from the taskcheck-worker thread
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: str = LOG_LEVEL) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    # records stop at this handler, never the root logger
    logger.propagate = False
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


logger = setup_logger()
