import logging
import os
from logging import StreamHandler
from logging.handlers import RotatingFileHandler
from typing import Optional

from appdirs import user_log_dir

APP_NAME = "Vizor"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(level: int = logging.INFO, log_dir: Optional[str] = None) -> str:
    """Log to a rotating file in the per-user log directory and to the console.

    Returns the path of the log file.
    """
    log_dir = log_dir or user_log_dir(APP_NAME)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "vizor.log")

    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # File handler
    file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Console handler
    stream_handler = StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return log_file
