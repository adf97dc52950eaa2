# habitlens/utils/log_utils.py

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s - %(message)s'


def _numeric_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def get_log_dir() -> Path:
    return Path.home() / ".habitlens" / "logs"


def setup_logging(level: Union[int, str] = logging.INFO):
    """
    Configure root logger with:
     - RotatingFileHandler writing to ~/.habitlens/logs/habitlens.log
     - StreamHandler to console (stderr)
    Idempotent: calling multiple times won't add duplicate handlers.
    `level` can be numeric or a name such as "DEBUG".
    """
    log_dir = get_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # If directory creation fails, log to console only
        print(f"WARNING: Could not create log directory {log_dir}: {e}")
        _configure_console_logging(level)
        return

    level = _numeric_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    existing_handlers = list(root_logger.handlers)

    # 1) RotatingFileHandler: only add if not already present for our log file
    file_log_path = log_dir / "habitlens.log"
    add_file = True
    for h in existing_handlers:
        if isinstance(h, RotatingFileHandler):
            base = getattr(h, 'baseFilename', None)
            if base and os.path.abspath(base) == str(file_log_path):
                add_file = False
                break
    if add_file:
        try:
            file_handler = RotatingFileHandler(
                file_log_path,
                maxBytes=5 * 1024 * 1024,
                backupCount=3
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}")

    _configure_console_logging(level)


def _configure_console_logging(level: Union[int, str] = logging.INFO):
    """
    Add a console handler unless one is already installed.
    Also used alone when the file handler cannot be created.
    """
    level = _numeric_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for h in root_logger.handlers:
        # RotatingFileHandler is a StreamHandler subclass too
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)
