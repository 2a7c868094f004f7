"""
Configuration management with environment variables.

This module provides centralized configuration for the booking client
with validation and type safety. Values come from the environment,
with a ``.env`` file loaded first when present.
"""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


class Config:
    """
    Booking client configuration.

    Attributes:
        api_base_url: Base URL of the yoga backend
        open_id: Viewer open_id used by the command-line tool
        class_type: class_type sent when listing lessons
        request_timeout: HTTP timeout in seconds
        timezone: Zone for date labels and day boundaries (None = local)
        circuit_failure_threshold: Failures before the breaker opens
        circuit_reset_timeout: Seconds the breaker stays open
        output_dir: Directory for exported schedules and logs
        log_level: Logging level name

    Examples:
        >>> config = Config()
        >>> if config.validate():
        ...     print(f"Backend: {config.api_base_url}")
    """

    VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    @staticmethod
    def _validate_url(url: str, name: str) -> str:
        """
        Validate URL format and scheme.

        Raises:
            ValueError: If URL is invalid
        """
        parsed = urlparse(url)

        if not parsed.scheme:
            raise ValueError(f"{name} must include URL scheme (http/https)")

        if parsed.scheme not in ['http', 'https']:
            raise ValueError(f"{name} must use http or https scheme, got: {parsed.scheme}")

        if not parsed.netloc:
            raise ValueError(f"{name} must have a valid domain")

        return url.rstrip('/')

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

        url = os.getenv("YOGA_API_BASE_URL", "http://localhost:8000")
        self._api_base_url = self._validate_url(url, "YOGA_API_BASE_URL")

        self._open_id = os.getenv("YOGA_OPENID") or None
        self._class_type = _int_env("YOGA_CLASS_TYPE", "4")
        self._request_timeout = _int_env("YOGA_REQUEST_TIMEOUT", "10")
        self._timezone_name = os.getenv("YOGA_TIMEZONE") or None

        self._circuit_failure_threshold = _int_env("YOGA_CIRCUIT_FAILURE_THRESHOLD", "3")
        self._circuit_reset_timeout = _int_env("YOGA_CIRCUIT_RESET_TIMEOUT", "60")

        self._output_dir = Path(os.getenv("OUTPUT_DIR", "output"))
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def api_base_url(self) -> str:
        """Get backend base URL (without trailing slash)."""
        return self._api_base_url

    @property
    def open_id(self) -> Optional[str]:
        """Get configured viewer open_id, if any."""
        return self._open_id

    @property
    def class_type(self) -> int:
        return self._class_type

    @property
    def request_timeout(self) -> int:
        """Get HTTP timeout in seconds."""
        return self._request_timeout

    @property
    def timezone(self) -> Optional[ZoneInfo]:
        """
        Get configured timezone.

        Returns:
            ZoneInfo, or None to use the process local time

        Raises:
            ValueError: If YOGA_TIMEZONE names an unknown zone
        """
        if not self._timezone_name:
            return None
        try:
            return ZoneInfo(self._timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown YOGA_TIMEZONE: {self._timezone_name}")

    @property
    def circuit_failure_threshold(self) -> int:
        return self._circuit_failure_threshold

    @property
    def circuit_reset_timeout(self) -> int:
        return self._circuit_reset_timeout

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def log_level(self) -> str:
        return self._log_level

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all configuration is valid

        Raises:
            ValueError: Listing every problem found
        """
        errors = []

        if self._request_timeout <= 0:
            errors.append("YOGA_REQUEST_TIMEOUT must be positive")

        if self._class_type < 0:
            errors.append("YOGA_CLASS_TYPE must not be negative")

        if self._circuit_failure_threshold <= 0:
            errors.append("YOGA_CIRCUIT_FAILURE_THRESHOLD must be positive")

        if self._circuit_reset_timeout < 0:
            errors.append("YOGA_CIRCUIT_RESET_TIMEOUT must not be negative")

        if self._timezone_name:
            try:
                self.timezone
            except ValueError as e:
                errors.append(str(e))

        if self._log_level not in self.VALID_LOG_LEVELS:
            errors.append(
                f"LOG_LEVEL must be one of: {', '.join(self.VALID_LOG_LEVELS)}"
            )

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ValueError(error_msg)

        return True

    def create_output_directories(self):
        """Create output directories if they don't exist."""
        for directory in (self.output_dir / "schedules", self.output_dir / "logs"):
            directory.mkdir(parents=True, exist_ok=True)


# Singleton instance
config = Config()
