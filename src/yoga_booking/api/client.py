"""
Yoga backend API client.

This module provides the YogaApiClient class wrapping the backend's
``/yoga`` endpoints used by the booking page:

- ``GET /yoga/lessons``     list lessons of a day for a viewer
- ``GET /yoga/book``        reserve a seat in a lesson
- ``GET /yoga/unbook``      cancel a reservation
- ``GET /yoga/user/query``  look up the viewer's profile
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import requests

from ..models.lesson import LessonRecord
from ..models.result import Result
from ..resilience.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError
from ..utils.logger import mask_openid
from ..validation.lesson_validator import LessonRecordValidator


logger = logging.getLogger(__name__)

# Message of a refused booking when the backend gives no text of its own
MEMBERSHIP_REQUIRED = "Membership required"


def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except (TypeError, ValueError):
        return None


class YogaApiClient:
    """
    HTTP client for the yoga backend.

    Every method returns a Result; transport errors, HTTP error statuses
    and unreadable bodies become failures instead of exceptions.

    Examples:
        >>> with YogaApiClient("https://yoga.example.com") as client:
        ...     result = client.get_lessons(start=1760803200, open_id="oXy1")
        ...     if result.is_success:
        ...         print(f"{len(result.value)} lessons")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        class_type: int = 4,
        session: Optional[requests.Session] = None,
        circuit_breaker: Optional[CircuitBreaker] = None
    ):
        """
        Initialize YogaApiClient.

        Args:
            base_url: Backend base URL
            timeout: Per-request timeout in seconds
            class_type: Default class_type for lesson listings
            session: requests session (created when omitted)
            circuit_breaker: Breaker guarding requests (created when omitted)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.class_type = class_type
        self.session = session or requests.Session()
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=3,
            reset_timeout=60,
            expected_exception=requests.RequestException
        )
        self.lesson_validator = LessonRecordValidator()

        logger.info(f"YogaApiClient initialized with base_url: {self.base_url}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying HTTP session."""
        self.session.close()

    def _request(self, path: str, params: Dict[str, Any]) -> requests.Response:
        response = self.session.get(
            f"{self.base_url}{path}",
            params=params,
            timeout=self.timeout
        )
        response.raise_for_status()
        return response

    def _get(self, path: str, params: Dict[str, Any]) -> Result[requests.Response]:
        """
        Send a GET request through the circuit breaker.

        Returns:
            Result with the response on HTTP 2xx
        """
        try:
            response = self.circuit_breaker.call(self._request, path, params)
            return Result.success(response)

        except CircuitBreakerOpenError as e:
            logger.warning(f"Skipping {path}: {e}")
            return Result.failure("Backend temporarily unavailable", e)

        except requests.RequestException as e:
            logger.error(f"Request to {path} failed: {e}")
            return Result.failure(f"Request to {path} failed: {e}", e)

    @staticmethod
    def _json(response: requests.Response) -> Result[Any]:
        try:
            return Result.success(response.json())
        except ValueError as e:
            return Result.failure(f"Invalid JSON from {response.url}", e)

    def get_lessons(
        self,
        start: int,
        open_id: str = "",
        class_type: Optional[int] = None
    ) -> Result[List[LessonRecord]]:
        """
        List lessons of a day.

        A payload that is not a list is logged and returned as an empty
        list. Records failing validation are logged but kept.

        Args:
            start: Day start in epoch seconds
            open_id: Viewer open_id ("" when anonymous)
            class_type: Class type filter (default: client's class_type)

        Returns:
            Result containing the raw lesson records
        """
        params = {
            "start": start,
            "openid": open_id,
            "class_type": self.class_type if class_type is None else class_type,
        }
        logger.debug(f"Fetching lessons start={start} viewer={mask_openid(open_id)}")

        result = self._get("/yoga/lessons", params).and_then(self._json)
        if result.is_failure:
            return result

        payload = result.value
        if payload is None:
            return Result.success([], "No lessons")

        if not isinstance(payload, list):
            logger.warning(
                f"Lesson payload is not a list ({type(payload).__name__}), "
                f"treating as empty"
            )
            return Result.success([], "Malformed lesson payload")

        for record in payload:
            validation = self.lesson_validator.validate(record)
            if not validation.is_valid:
                logger.warning(f"Invalid lesson record: {validation.get_summary()}")
            elif validation.has_warnings:
                logger.debug(f"Lesson record warnings: {validation.get_summary()}")

        return Result.success(payload, f"Loaded {len(payload)} lessons")

    def book(self, lesson_id: int, open_id: str) -> Result[float]:
        """
        Reserve a seat in a lesson.

        The backend answers with the new reservation id (> 0) on
        success, and with 0 or ``{"success": false, "message": ...}``
        when the viewer has no usable membership.

        Returns:
            Result with the numeric answer; a non-positive value means
            membership is required and message carries the backend's text
        """
        logger.info(f"Booking lesson {lesson_id} for {mask_openid(open_id)}")

        result = self._get("/yoga/book", {"id": lesson_id, "openid": open_id})
        if result.is_failure:
            return result

        text = result.value.text
        value = _parse_number(text)
        if value is not None:
            if value > 0:
                return Result.success(value, "Booked")
            return Result.success(value, MEMBERSHIP_REQUIRED)

        body = self._json(result.value)
        if body.is_success and isinstance(body.value, Mapping):
            if body.value.get("success") is False:
                message = body.value.get("message")
                if not isinstance(message, str) or not message.strip():
                    message = MEMBERSHIP_REQUIRED
                return Result.success(0.0, message)

        logger.error(f"Unexpected booking response: {text[:200]!r}")
        return Result.failure("Unexpected booking response")

    def unbook(self, reservation_id: int, open_id: str) -> Result[int]:
        """
        Cancel one of the viewer's reservations.

        Returns:
            Result with the cancelled reservation id; failure when the
            backend reports 0 (not found or already cancelled)
        """
        logger.info(f"Cancelling reservation {reservation_id} for {mask_openid(open_id)}")

        result = self._get("/yoga/unbook", {"id": reservation_id, "openid": open_id})
        if result.is_failure:
            return result

        value = _parse_number(result.value.text)
        if value is None:
            return Result.failure("Unexpected cancellation response")

        if value <= 0:
            return Result.failure("Reservation not found or already cancelled")

        return Result.success(int(value), "Reservation cancelled")

    def query_user(self, open_id: str) -> Result[Optional[Dict[str, Any]]]:
        """
        Look up the viewer's profile.

        Returns:
            Result with the profile dict, or None when the backend has
            no profile for open_id
        """
        result = self._get("/yoga/user/query", {"openid": open_id}).and_then(self._json)
        if result.is_failure:
            return result

        profile = result.value
        if profile is not None and not isinstance(profile, Mapping):
            return Result.failure("Unexpected user profile response")

        return Result.success(profile)
