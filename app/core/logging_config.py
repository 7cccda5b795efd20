"""Centralized logging configuration for the application."""
import logging
import os
from logging.handlers import RotatingFileHandler
from datetime import datetime
import pytz
from app.core.config import get_settings


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders record timestamps in a fixed timezone."""

    def __init__(self, fmt=None, datefmt=None, tz=pytz.utc):
        super().__init__(fmt, datefmt)
        self.tz = tz

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.strftime('%Y-%m-%d %H:%M:%S %Z')


def _rotating_handler(path: str, level: int, max_bytes: int, backup_count: int,
                      formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging():
    """Configure application-wide logging with file and console handlers."""
    settings = get_settings()

    # Ensure logs directory exists
    logs_dir = settings.log_dir
    os.makedirs(logs_dir, exist_ok=True)

    formatter = TimezoneFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        tz=pytz.timezone(settings.log_timezone)
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # Remove existing handlers
    root_logger.handlers.clear()

    # Console handler (INFO level)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Main application log file
    root_logger.addHandler(_rotating_handler(
        os.path.join(logs_dir, "app.log"), logging.INFO,
        10 * 1024 * 1024, 10, formatter
    ))

    # Error log file (ERROR level only)
    root_logger.addHandler(_rotating_handler(
        os.path.join(logs_dir, "error.log"), logging.ERROR,
        10 * 1024 * 1024, 5, formatter
    ))

    # Holding mutations (add, update, remove)
    portfolio_logger = logging.getLogger('portfolio')
    portfolio_logger.handlers.clear()
    portfolio_logger.addHandler(_rotating_handler(
        os.path.join(logs_dir, "portfolio.log"), logging.INFO,
        10 * 1024 * 1024, 20, formatter
    ))

    # Market-data provider calls
    api_logger = logging.getLogger('api')
    api_logger.handlers.clear()
    api_logger.setLevel(logging.DEBUG)
    api_logger.addHandler(_rotating_handler(
        os.path.join(logs_dir, "api.log"), logging.DEBUG,
        5 * 1024 * 1024, 10, formatter
    ))

    logging.info(f"Logging system initialized - logs saved to '{logs_dir}/' directory")
