"""
Logging configuration for the Job Board API.

Console plus a size-rotated file under logs/. Secrets never go into a log
line unredacted: anything that might carry them passes sanitize_log_data first.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SENSITIVE_KEYS = (
    "password", "token", "secret", "otp", "authorization",
    "smtp_pass", "database_url",
)

# Libraries that are chatty at INFO
QUIET_LOGGERS = {
    "uvicorn": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
    "multipart": logging.WARNING,
}


def setup_logging(log_level: str = "INFO", log_dir: str = "logs", log_file: str = "jobboard.log"):
    """
    Configure application logging.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: Directory for the rotating log file
        log_file: File name inside log_dir
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    Path(log_dir).mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    file_handler = RotatingFileHandler(
        Path(log_dir) / log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in (console_handler, file_handler):
        handler.setLevel(level)
        root.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def sanitize_log_data(data: dict) -> dict:
    """Return a copy of `data` with every secret-looking key redacted."""
    return {
        key: "***REDACTED***" if any(s in str(key).lower() for s in SENSITIVE_KEYS) else value
        for key, value in data.items()
    }
