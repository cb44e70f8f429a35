"""
utils.py
--------
Helper functions shared across the portal modules: logging setup and
directory handling.
"""

import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(log_file=None, level=logging.INFO):
    """Setup logging configuration"""
    if isinstance(level, str):
        level = logging.getLevelName(level)
        if not isinstance(level, int):
            level = logging.INFO

    if log_file:
        ensure_directory(Path(log_file).parent)
        logging.basicConfig(
            filename=log_file,
            level=level,
            format=LOG_FORMAT,
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        logging.getLogger('').setLevel(level)

    # Also log to console
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger('').addHandler(console)


def ensure_directory(dir_path):
    """Ensure a directory exists, create if it doesn't"""
    Path(dir_path).mkdir(parents=True, exist_ok=True)
