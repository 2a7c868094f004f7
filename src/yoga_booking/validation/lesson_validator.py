"""
Lesson record validator.

Checks lesson payloads from ``GET /yoga/lessons`` before they reach the
classifier. The classifier tolerates bad records, so findings here are
reported and logged rather than used to drop data.
"""

from collections.abc import Mapping
from typing import Any

from .validators import Validator, ValidationResult


class LessonRecordValidator(Validator):
    """
    Validator for lesson records.

    Validates:
    - Required integer fields (id, date_time, start_time, end_time)
    - Time offsets (order, within one day)
    - Capacity and hidden flag
    - Reservation roster entries

    Examples:
        >>> validator = LessonRecordValidator()
        >>> lesson = {
        ...     "id": 7,
        ...     "date_time": 1760803200,
        ...     "start_time": 36000,
        ...     "end_time": 39600,
        ...     "peoples": 12,
        ...     "users": []
        ... }
        >>> validator.validate(lesson).is_valid
        True
    """

    REQUIRED_FIELDS = ["id", "date_time", "start_time", "end_time"]

    SECONDS_PER_DAY = 86400

    # hidden == -1 marks a lesson cancelled by the studio
    KNOWN_HIDDEN_VALUES = (0, -1)

    def validate(self, data: Any) -> ValidationResult:
        """
        Validate a lesson record.

        Args:
            data: Lesson record (dict)

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult(is_valid=True)

        if not isinstance(data, Mapping):
            return result.add_error(
                f"Lesson must be an object, got {type(data).__name__}"
            )

        for error in self.validate_required_fields(data, self.REQUIRED_FIELDS):
            result.add_error(error)

        if not result.is_valid:
            return result

        for name in self.REQUIRED_FIELDS:
            error = self.validate_integer(data[name], name)
            if error:
                result.add_error(error)

        if not result.is_valid:
            return result

        start_time = data["start_time"]
        end_time = data["end_time"]

        if end_time < start_time:
            result.add_warning(
                f"end_time {end_time} is before start_time {start_time}"
            )

        for name, offset in (("start_time", start_time), ("end_time", end_time)):
            if not 0 <= offset <= self.SECONDS_PER_DAY:
                result.add_warning(
                    f"{name} {offset} is outside one day "
                    f"(0..{self.SECONDS_PER_DAY})"
                )

        if data.get("peoples") is not None:
            error = self.validate_non_negative(data["peoples"], "peoples")
            if error:
                result.add_error(error)

        if data.get("hidden") is not None:
            error = self.validate_integer(data["hidden"], "hidden")
            if error:
                result.add_error(error)
            elif data["hidden"] not in self.KNOWN_HIDDEN_VALUES:
                result.add_warning(f"Unknown hidden flag: {data['hidden']}")

        users = data.get("users")
        if users is not None:
            self._validate_users(users, result)

        return result

    def _validate_users(self, users: Any, result: ValidationResult):
        if not isinstance(users, list):
            result.add_error(f"users must be a list, got {type(users).__name__}")
            return

        for index, entry in enumerate(users):
            if not isinstance(entry, Mapping):
                result.add_error(f"users[{index}] must be an object")
                continue

            error = self.validate_string(
                entry.get("open_id"),
                f"users[{index}].open_id",
                allow_empty=False
            )
            if error:
                result.add_error(error)

            error = self.validate_integer(
                entry.get("reservation_id"),
                f"users[{index}].reservation_id"
            )
            if error:
                result.add_error(error)
