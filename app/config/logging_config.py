import logging
import logging.handlers
import os
from datetime import datetime

from app.core.config import settings

_configured = False


def setup_logging():
    """
    Set up logging configuration to write logs to files with date-time names
    """
    global _configured

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Already configured (e.g. app module imported twice under reload)
    if _configured:
        return

    # Create console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.log_to_file:
        # Create logs directory if it doesn't exist
        if not os.path.exists(settings.log_dir):
            os.makedirs(settings.log_dir)

        # Create log file name with current date and time
        current_time = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_filename = os.path.join(settings.log_dir, f"app_{current_time}.log")

        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # Also configure uvicorn access logs to use the same file
        access_logger = logging.getLogger("uvicorn.access")
        access_logger.addHandler(file_handler)
        access_logger.setLevel(level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name
    """
    return logging.getLogger(name)
