"""
Logging utilities with viewer identity masking.

This module provides logging setup with:
- Configurable log levels and output destinations
- Log rotation for file handlers
- Masking of WeChat open_ids in log messages
- Structured log format
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def mask_openid(open_id: Optional[str]) -> str:
    """
    Mask a viewer open_id for safe logging.

    Keeps the first four characters so log lines stay correlatable.

    Examples:
        >>> mask_openid("oXy1AbCdEfGh")
        'oXy1***'
        >>> mask_openid("")
        '<anonymous>'
    """
    if not open_id:
        return "<anonymous>"
    if len(open_id) <= 4:
        return "***"
    return open_id[:4] + "***"


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that masks open_id values in query strings and messages.
    """

    _OPENID_PATTERN = re.compile(
        r'(open_?id["\']?\s*[:=]\s*["\']?)([^"\'\s&,}]+)',
        flags=re.IGNORECASE
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Mask open_ids in the record message.

        Returns:
            Always True (allows all records through after masking)
        """
        message = record.getMessage()
        masked = self._OPENID_PATTERN.sub(
            lambda m: m.group(1) + mask_openid(m.group(2)),
            message
        )
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logger(
    name: str = "yoga_booking",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger instance.

    Args:
        name: Logger name (default: "yoga_booking")
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file for file output

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logger(level=logging.DEBUG, log_file="output/logs/booking.log")
        >>> logger.info("Loading lessons")
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(file_handler)

    return logger
