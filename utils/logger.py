import logging
import os
from logging.handlers import RotatingFileHandler

from config import API_LOG_PATH, ENVIRONMENT, LOG_LEVEL

LOGGER_NAME = 'travelbuddy.api'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def _default_log_path() -> str:
    if API_LOG_PATH:
        return API_LOG_PATH
    base = os.path.abspath(os.path.dirname(__file__))
    return os.path.join(base, '..', 'logs', 'api.log')


def setup_api_logger(log_path: str | None = None) -> logging.Logger:
    """Return the shared API logger, attaching its handlers on first use.

    Records go to a rotating file (5 MB x 5). Outside production they are
    echoed to stderr as well.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    log_path = os.path.abspath(log_path or _default_log_path())
    os.makedirs(os.path.dirname(log_path), exist_ok=True)
    file_handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if ENVIRONMENT != "production":
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger
