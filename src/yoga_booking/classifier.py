"""
Lesson status classification.

Annotates lesson records fetched from the backend with a display mode,
label, time range and date label for one viewer, and orders them by
start instant. The functions here are pure: no I/O, no clock access,
no mutation of the input records.

Status rules, first match wins:
    1. more than an hour since the lesson ended   -> COMPLETED
    2. lesson has started                         -> IN_PROGRESS
    3. lesson starts within the hour              -> STARTING_SOON
    4. hidden == -1                               -> CANCELLED
    5. viewer holds a reservation                 -> CANCEL_ELIGIBLE
    6. roster size >= capacity                    -> FULL
    7. otherwise                                  -> BOOKABLE
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, tzinfo
from typing import Any, List, Optional

from .models.lesson import EnrichedLesson, LessonMode, LessonRecord


logger = logging.getLogger(__name__)

# Seconds after the end of a lesson before it counts as completed,
# and before its start at which booking closes.
GRACE_PERIOD = 3600

WEEKDAYS = "日一二三四五六"


def _as_int(value: Any) -> int:
    """Coerce a numeric payload field, treating missing values as 0."""
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def lesson_start(lesson: Mapping) -> int:
    """Absolute start instant of a lesson in epoch seconds."""
    return _as_int(lesson.get("date_time")) + _as_int(lesson.get("start_time"))


def lesson_end(lesson: Mapping) -> int:
    """Absolute end instant of a lesson in epoch seconds."""
    return _as_int(lesson.get("date_time")) + _as_int(lesson.get("end_time"))


def format_clock(seconds: int) -> str:
    """
    Format a seconds-of-day offset as H:MM.

    Examples:
        >>> format_clock(36000)
        '10:00'
        >>> format_clock(34259)
        '9:30'
    """
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}:{minutes:02d}"


def format_time_range(start_time: int, end_time: int) -> str:
    """
    Format a lesson's start/end offsets as H:MM-H:MM.

    Examples:
        >>> format_time_range(36000, 39600)
        '10:00-11:00'
    """
    return f"{format_clock(start_time)}-{format_clock(end_time)}"


def format_lesson_date(date_time: int, tz: Optional[tzinfo] = None) -> str:
    """
    Format an epoch timestamp as a calendar label like 10月19日周日.

    Args:
        date_time: Epoch seconds
        tz: Timezone of the calendar (default: process local time)

    Returns:
        Label with month, day and Chinese weekday, or "" when the
        timestamp is outside the platform's datetime range
    """
    try:
        date = datetime.fromtimestamp(date_time, tz)
    except (OverflowError, OSError, ValueError):
        logger.debug(f"Lesson date out of range: {date_time!r}")
        return ""

    # isoweekday(): Monday=1 .. Sunday=7, WEEKDAYS starts on Sunday
    weekday = WEEKDAYS[date.isoweekday() % 7]
    return f"{date.month}月{date.day}日周{weekday}"


def _find_reservation(users: List[Mapping], viewer_id: str) -> Optional[Mapping]:
    for entry in users:
        if isinstance(entry, Mapping) and entry.get("open_id") == viewer_id:
            return entry
    return None


def classify_lesson(
    lesson: LessonRecord,
    now: float,
    viewer_id: str = "",
    tz: Optional[tzinfo] = None
) -> EnrichedLesson:
    """
    Enrich a single lesson record for one viewer.

    Args:
        lesson: Lesson record from the backend
        now: Current instant in epoch seconds
        viewer_id: open_id of the viewer ("" when anonymous)
        tz: Timezone used for the date label

    Returns:
        New dict with the record's fields plus time, date, mode, label
        and, when the viewer holds a reservation, reservation_id

    Examples:
        >>> lesson = {"id": 1, "date_time": 0, "start_time": 36000,
        ...           "end_time": 39600, "peoples": 2, "users": []}
        >>> classify_lesson(lesson, now=37000)["mode"]
        <LessonMode.IN_PROGRESS: 16>
    """
    enriched: EnrichedLesson = dict(lesson)  # type: ignore[assignment]
    start = lesson_start(lesson)
    end = lesson_end(lesson)

    enriched["time"] = format_time_range(
        _as_int(lesson.get("start_time")),
        _as_int(lesson.get("end_time"))
    )
    enriched["date"] = format_lesson_date(_as_int(lesson.get("date_time")), tz)

    if now - end > GRACE_PERIOD:
        mode = LessonMode.COMPLETED
    elif now > start:
        mode = LessonMode.IN_PROGRESS
    elif start - now < GRACE_PERIOD:
        mode = LessonMode.STARTING_SOON
    elif _as_int(lesson.get("hidden")) == -1:
        mode = LessonMode.CANCELLED
    else:
        users = lesson.get("users") or []
        if not isinstance(users, Sequence) or isinstance(users, (str, bytes)):
            users = []
        reservation = _find_reservation(users, viewer_id)

        if reservation is not None:
            mode = LessonMode.CANCEL_ELIGIBLE
            enriched["reservation_id"] = reservation.get("reservation_id")
        elif len(users) >= _as_int(lesson.get("peoples")):
            mode = LessonMode.FULL
        else:
            mode = LessonMode.BOOKABLE

    enriched["mode"] = mode
    enriched["label"] = mode.label
    return enriched


def classify_lessons(
    lessons: Any,
    now: float,
    viewer_id: str = "",
    tz: Optional[tzinfo] = None
) -> List[EnrichedLesson]:
    """
    Enrich and order a batch of lesson records for one viewer.

    Anything other than a list-like payload is treated as no lessons,
    and entries that are not mappings are skipped.

    Args:
        lessons: Payload from ``GET /yoga/lessons``
        now: Current instant in epoch seconds
        viewer_id: open_id of the viewer ("" when anonymous)
        tz: Timezone used for date labels

    Returns:
        Enriched lessons sorted by start instant (stable for ties)
    """
    if not isinstance(lessons, Sequence) or isinstance(lessons, (str, bytes)):
        if lessons is not None:
            logger.warning(
                f"Lesson payload is not a list ({type(lessons).__name__}), "
                f"treating as empty"
            )
        return []

    enriched = []
    for lesson in lessons:
        if not isinstance(lesson, Mapping):
            logger.debug(f"Skipping malformed lesson entry: {lesson!r}")
            continue
        enriched.append(classify_lesson(lesson, now, viewer_id, tz))

    enriched.sort(key=lesson_start)
    return enriched
