"""
Result<T> wrapper for operations that talk to the yoga backend.

Network-facing calls return a Result instead of raising, so pages and
the CLI can branch on success without try/except around every request.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar('T')
U = TypeVar('U')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of an operation that may fail.

    Attributes:
        status: SUCCESS or FAILURE
        value: Payload on success (None on failure)
        error: Exception that caused the failure, if any
        message: Human-readable description

    Examples:
        >>> result = client.get_lessons(start=1760803200, open_id="oXy1")
        >>> if result.is_success:
        ...     lessons = result.value
        ... else:
        ...     print(f"Could not load lessons: {result.message}")
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """Create a successful result carrying value."""
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        """Create a failed result with a message and optional cause."""
        return cls(status=ResultStatus.FAILURE, message=message, error=error)

    def and_then(self, func: Callable[[T], 'Result[U]']) -> 'Result[U]':
        """
        Chain an operation that itself returns a Result.

        Examples:
            >>> fetch_body().and_then(parse_booking_response)
        """
        if self.is_failure:
            return Result.failure(self.message, self.error)
        return func(self.value)
