"""
Validation framework for backend payloads.

This module provides:
- Abstract Validator interface
- ValidationResult for consistent validation reporting
- Field-level checks shared by concrete validators
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


@dataclass
class ValidationResult:
    """
    Result of payload validation.

    Attributes:
        is_valid: Whether validation passed
        errors: List of error messages
        warnings: List of warning messages (non-fatal)
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> 'ValidationResult':
        """
        Add an error message and mark the result invalid.

        Returns:
            Self for method chaining
        """
        self.errors.append(message)
        self.is_valid = False
        return self

    def add_warning(self, message: str) -> 'ValidationResult':
        """
        Add a warning message. Warnings keep the result valid.

        Returns:
            Self for method chaining
        """
        self.warnings.append(message)
        return self

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def get_summary(self) -> str:
        """
        Get validation summary.

        Returns:
            Human-readable summary of validation results
        """
        if self.is_valid and not self.has_warnings:
            return "Validation passed"

        parts = []

        if self.has_errors:
            parts.append(f"Errors ({len(self.errors)}):")
            parts.extend(f"  - {error}" for error in self.errors)

        if self.has_warnings:
            parts.append(f"Warnings ({len(self.warnings)}):")
            parts.extend(f"  - {warning}" for warning in self.warnings)

        return "\n".join(parts)


class Validator(ABC):
    """
    Abstract base class for payload validators.

    Subclasses implement validate(); the helpers below return an error
    message, or None when the value passes.
    """

    @abstractmethod
    def validate(self, data: Any) -> ValidationResult:
        """
        Validate data.

        Args:
            data: Data to validate

        Returns:
            ValidationResult with errors and warnings
        """
        pass

    def validate_required_fields(
        self,
        data: Mapping,
        required_fields: List[str]
    ) -> List[str]:
        """
        Validate that required fields exist and are not null.

        Returns:
            List of error messages for missing fields
        """
        return [
            f"Missing required field: {name}"
            for name in required_fields
            if data.get(name) is None
        ]

    def validate_integer(self, value: Any, field_name: str) -> Optional[str]:
        """Validate that value is an integer (bool is rejected)."""
        if isinstance(value, bool) or not isinstance(value, int):
            return f"{field_name} must be an integer, got {type(value).__name__}"
        return None

    def validate_non_negative(self, value: Any, field_name: str) -> Optional[str]:
        """Validate that value is an integer >= 0."""
        error = self.validate_integer(value, field_name)
        if error:
            return error

        if value < 0:
            return f"{field_name} must not be negative, got {value}"

        return None

    def validate_string(
        self,
        value: Any,
        field_name: str,
        allow_empty: bool = True
    ) -> Optional[str]:
        """Validate that value is a string, optionally non-empty."""
        if not isinstance(value, str):
            return f"{field_name} must be a string, got {type(value).__name__}"

        if not allow_empty and not value:
            return f"{field_name} must not be empty"

        return None
