"""
Logging Configuration Module.

Builds the application logger used across the scanner. Records are written as
JSON lines to a rotating log file so that dict payloads passed to the logger
(e.g. ``logger.info({"message": ..., "repository": ...})``) end up as
searchable fields. The console handler prints plain text in development mode
and JSON otherwise.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class ScanJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and call site to every record."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno


class LogManager:
    """
    Creates and configures the application logger.

    Attributes:
        logger (logging.Logger): Configured logger instance
    """

    def __init__(
        self,
        app_name: str,
        log_dir: str = "logs",
        development: bool = False,
        level: int = logging.INFO,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ):
        """
        Initialize handlers for the named logger.

        Args:
            app_name (str): Logger name, also used as the log file name
            log_dir (str): Directory for log files
            development (bool): Use a human readable console format
            level (int): Logging level
            max_bytes (int): Size at which the log file is rotated
            backup_count (int): Number of rotated files to keep
        """
        os.makedirs(log_dir, exist_ok=True)

        self.logger = logging.getLogger(app_name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Re-instantiating must not duplicate handlers
        if self.logger.handlers:
            return

        json_formatter = ScanJsonFormatter("%(message)s")

        file_handler = RotatingFileHandler(
            os.path.join(log_dir, f"{app_name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        if development:
            console_handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
        else:
            console_handler.setFormatter(json_formatter)
        self.logger.addHandler(console_handler)
