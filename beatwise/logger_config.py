import logging
import os
from datetime import datetime
from typing import Optional


def setup_logger(name: str, level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Console logging, plus a dated log file when log_dir is given.

    Parameters
    name (str) : Name of the logger
    level (str) : Level name applied to the logger and its handlers
    log_dir (str) : Directory for the log file, or None for console only

    Returns:
    logging.Logger : Configured Logger Instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    console_format = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_format = logging.Formatter(
            '%(levelname)s : %(name)s : %(funcName)s : %(lineno)d : %(message)s'
        )
        log_file = os.path.join(log_dir, f'beatwise_{datetime.now().strftime("%m%d%Y")}.log')
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger
