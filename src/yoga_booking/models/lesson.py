"""
Lesson data models with type safety.

This module provides TypedDict definitions for the lesson payloads
returned by the yoga backend and the closed set of display modes
assigned to each lesson for the current viewer.
"""

from enum import IntEnum
from typing import List, TypedDict


class LessonMode(IntEnum):
    """
    Display mode of a lesson for one viewer.

    Values are the integers existing clients expect on the wire.
    They are distinct codes and are never combined.

    Examples:
        >>> LessonMode.BOOKABLE.label
        '预约'
        >>> int(LessonMode.CANCEL_ELIGIBLE)
        64
    """

    COMPLETED = 1
    FULL = 2
    CANCELLED = 4
    STARTING_SOON = 8
    IN_PROGRESS = 16
    BOOKABLE = 32
    CANCEL_ELIGIBLE = 64

    @property
    def label(self) -> str:
        """Get the Chinese label shown next to the lesson."""
        return _LABELS[self]

    @property
    def is_actionable(self) -> bool:
        """Check if the viewer can book or cancel in this mode."""
        return self in (LessonMode.BOOKABLE, LessonMode.CANCEL_ELIGIBLE)


_LABELS = {
    LessonMode.COMPLETED: "已完成",
    LessonMode.FULL: "已满额",
    LessonMode.CANCELLED: "已取消",
    LessonMode.STARTING_SOON: "准备上课",
    LessonMode.IN_PROGRESS: "正在上课",
    LessonMode.BOOKABLE: "预约",
    LessonMode.CANCEL_ELIGIBLE: "取消预约",
}


class BookingEntry(TypedDict):
    """
    One reservation inside a lesson's roster.

    Attributes:
        open_id: Identity of the user holding the reservation
        reservation_id: Reservation identifier used to cancel it
    """

    open_id: str
    reservation_id: int


class LessonRecord(TypedDict, total=False):
    """
    Lesson record as returned by ``GET /yoga/lessons``.

    Attributes:
        id: Lesson identifier
        date_time: Anchor of the lesson day in epoch seconds
        start_time: Start offset in seconds from date_time
        end_time: End offset in seconds from date_time
        peoples: Capacity (maximum bookable seats)
        hidden: -1 when the lesson was cancelled by the studio
        users: Current reservations

    Examples:
        >>> lesson: LessonRecord = {
        ...     "id": 7,
        ...     "date_time": 1760803200,
        ...     "start_time": 36000,
        ...     "end_time": 39600,
        ...     "peoples": 12,
        ...     "hidden": 0,
        ...     "users": [{"open_id": "oXy1", "reservation_id": 55}]
        ... }
    """

    id: int
    date_time: int
    start_time: int
    end_time: int
    peoples: int
    hidden: int
    users: List[BookingEntry]


class EnrichedLesson(LessonRecord, total=False):
    """
    Lesson record annotated for display.

    Attributes:
        time: "H:MM-H:MM" time range
        date: "M月D日周X" date label
        mode: Display mode for the viewer
        label: Chinese label matching mode
        reservation_id: Viewer's reservation (only for CANCEL_ELIGIBLE)
    """

    time: str
    date: str
    mode: LessonMode
    label: str
    reservation_id: int
