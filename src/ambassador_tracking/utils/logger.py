# utils/logger.py
import logging
import os
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Get config from .env (with safe defaults)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
# LOG_FILE="" turns file logging off (read-only deployments, CI)
LOG_FILE = os.getenv("LOG_FILE", str(LOG_DIR / "ambassador_tracking.log"))

formatter = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)


def _build_handlers() -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if LOG_FILE:
        Path(LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
        file_handler.setLevel(LOG_LEVEL)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # stderr only, stdout carries the CLI report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    return handlers


_HANDLERS = _build_handlers()


def get_logger(name: str = "ambassador_tracking") -> logging.Logger:
    """Return a configured logger instance."""
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    # Avoid duplicate handlers if called multiple times
    if not logger.handlers:
        for handler in _HANDLERS:
            logger.addHandler(handler)

    return logger
