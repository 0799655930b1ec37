"""Logging configuration for XML Combine"""

import logging
import os
from datetime import datetime
from pathlib import Path

from xml_combine import config

# Global log file path (set by setup_logging when a log directory is used)
LOG_FILE_PATH = None

LOG_FORMAT = '%(asctime)s - [%(name)s] - %(levelname)s - %(message)s'


def setup_logging(log_dir: Path = None, level: int = logging.INFO) -> str:
    """
    Setup logging configuration

    Args:
        log_dir: Directory for the log file (console only when None)
        level: Root log level

    Returns:
        Path to log file, or None when logging to console only
    """
    global LOG_FILE_PATH

    if log_dir is None:
        log_dir = config.LOG_DIR

    # Console handler writes to stderr, same stream as error messages
    handlers = [logging.StreamHandler()]

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        LOG_FILE_PATH = log_dir / f"{config.LOG_NAME}_{timestamp}.log"
        handlers.append(logging.FileHandler(LOG_FILE_PATH, encoding="utf-8-sig"))
    else:
        LOG_FILE_PATH = None

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return str(LOG_FILE_PATH) if LOG_FILE_PATH else None


def get_logger(name: str = None) -> logging.Logger:
    """Get logger instance under the xml_combine namespace"""
    if name:
        return logging.getLogger(f"{config.LOG_NAME}.{name}")
    return logging.getLogger(config.LOG_NAME)


def rename_log_file_by_status(status: str):
    """
    Rename log file based on run status

    Args:
        status: Run status ('done' or 'error')
    """
    global LOG_FILE_PATH

    if not LOG_FILE_PATH or not os.path.exists(LOG_FILE_PATH):
        return

    suffix = "_success" if status == "done" else "_failed"
    new_log_path = LOG_FILE_PATH.with_name(f"{LOG_FILE_PATH.stem}{suffix}{LOG_FILE_PATH.suffix}")

    # The file must be closed before it can be renamed
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()

    try:
        os.rename(LOG_FILE_PATH, new_log_path)
        LOG_FILE_PATH = new_log_path
    except OSError as e:
        get_logger("logger").warning(f"Failed to rename log file: {e}")
