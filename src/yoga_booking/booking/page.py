"""
Booking page controller.

Hosts the lesson classifier: keeps the selected day, loads and
classifies that day's lessons for the viewer, and runs book/unbook
actions followed by a full reload. State lives on the page instance
and is replaced wholesale on every load.
"""

import logging
import time
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Callable, List, Optional

from ..api.client import MEMBERSHIP_REQUIRED, YogaApiClient
from ..classifier import classify_lessons
from ..models.lesson import EnrichedLesson, LessonMode
from ..models.result import Result
from .session import ViewerSession


logger = logging.getLogger(__name__)


class BookingOutcome(Enum):
    """Outcome of a booking page action."""

    BOOKED = "booked"
    CANCELLED = "cancelled"
    MEMBERSHIP_REQUIRED = "membership_required"
    LOGIN_REQUIRED = "login_required"
    FAILED = "failed"
    NO_ACTION = "no_action"
    BUSY = "busy"


NOTICES = {
    BookingOutcome.BOOKED: "预约成功",
    BookingOutcome.CANCELLED: "取消成功",
    BookingOutcome.MEMBERSHIP_REQUIRED: "请您购买会员卡",
    BookingOutcome.LOGIN_REQUIRED: "请先登录",
}


class BookingPage:
    """
    Day schedule with booking actions for one viewer.

    Attributes:
        selected_time: Start of the selected day in epoch seconds
        offset: Days from today to the first day of the shown week (0 or 7)
        lessons: Classified lessons of the selected day
        holiday: True when the last load failed
        loading: True while a load is running
        notice: Short message for the viewer after the last action

    Examples:
        >>> page = BookingPage(client, ViewerSession(client, "oXy1AbCd"))
        >>> page.load()
        >>> for lesson in page.lessons:
        ...     print(lesson["time"], lesson["label"])
        >>> page.submit(page.lessons[0])
        <BookingOutcome.BOOKED: 'booked'>
    """

    DAYS_PER_WEEK = 7

    def __init__(
        self,
        client: YogaApiClient,
        session: ViewerSession,
        class_type: Optional[int] = None,
        clock: Callable[[], float] = time.time,
        tz: Optional[tzinfo] = None
    ):
        """
        Initialize BookingPage.

        Args:
            client: API client
            session: Viewer session
            class_type: Class type to list (default: client's class_type)
            clock: Source of the current instant in epoch seconds
            tz: Timezone for day boundaries and date labels (None = local)
        """
        self.client = client
        self.session = session
        self.class_type = class_type
        self._clock = clock
        self.tz = tz

        self.offset = 0
        self.selected_time = self.today_start()
        self.lessons: List[EnrichedLesson] = []
        self.holiday = False
        self.loading = False
        self.notice: Optional[str] = None
        self._busy = False

    def _midnight(self) -> datetime:
        now = datetime.fromtimestamp(self._clock(), self.tz)
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    def today_start(self) -> int:
        """Start of today in epoch seconds."""
        return int(self._midnight().timestamp())

    def week_days(self) -> List[int]:
        """Day starts (epoch seconds) of the shown week."""
        midnight = self._midnight()
        return [
            int((midnight + timedelta(days=self.offset + i)).timestamp())
            for i in range(self.DAYS_PER_WEEK)
        ]

    def select_week(self, next_week: bool = False):
        """Show this week or next week in the day picker."""
        self.offset = self.DAYS_PER_WEEK if next_week else 0

    def select_day(self, day_start: int) -> Result[List[EnrichedLesson]]:
        """Select a day and load its lessons."""
        self.selected_time = int(day_start)
        return self.load()

    def load(self) -> Result[List[EnrichedLesson]]:
        """
        Fetch and classify the selected day's lessons.

        On failure the page shows the holiday state with no lessons.

        Returns:
            Result with the classified lessons
        """
        self.holiday = False
        self.loading = True
        open_id = self.session.open_id

        try:
            result = self.client.get_lessons(
                start=self.selected_time,
                open_id=open_id,
                class_type=self.class_type
            )

            if result.is_failure:
                logger.error(f"Failed to load lessons: {result.message}")
                self.holiday = True
                self.lessons = []
                return Result.failure(result.message, result.error)

            self.lessons = classify_lessons(result.value, self._clock(), open_id, self.tz)
            logger.info(f"Loaded {len(self.lessons)} lessons for day {self.selected_time}")
            return Result.success(self.lessons)

        finally:
            self.loading = False

    def _finish(self, outcome: BookingOutcome, notice: Optional[str] = None) -> BookingOutcome:
        self.notice = notice or NOTICES.get(outcome)
        return outcome

    def book(self, lesson_id: int) -> BookingOutcome:
        """
        Reserve a seat in a lesson, then reload.

        Returns:
            BOOKED, MEMBERSHIP_REQUIRED, LOGIN_REQUIRED, FAILED or BUSY
        """
        if self._busy:
            return BookingOutcome.BUSY

        self._busy = True
        try:
            availability = self.session.check_availability()
            if availability.is_failure or not availability.value:
                return self._finish(BookingOutcome.LOGIN_REQUIRED)

            result = self.client.book(lesson_id, self.session.open_id)
            if result.is_failure:
                logger.error(f"Booking lesson {lesson_id} failed: {result.message}")
                return self._finish(BookingOutcome.FAILED, "预约失败")

            if result.value > 0:
                self.load()
                return self._finish(BookingOutcome.BOOKED)

            logger.info(f"Booking lesson {lesson_id} refused: {result.message}")
            # Show the backend's own refusal text when it sent one
            notice = result.message if result.message != MEMBERSHIP_REQUIRED else None
            return self._finish(BookingOutcome.MEMBERSHIP_REQUIRED, notice)

        finally:
            self._busy = False

    def unbook(self, reservation_id: int) -> BookingOutcome:
        """
        Cancel one of the viewer's reservations, then reload.

        Returns:
            CANCELLED, FAILED or BUSY
        """
        if self._busy:
            return BookingOutcome.BUSY

        self._busy = True
        try:
            result = self.client.unbook(reservation_id, self.session.open_id)
            if result.is_failure:
                logger.error(f"Cancelling reservation {reservation_id} failed: {result.message}")
                return self._finish(BookingOutcome.FAILED, "取消失败")

            self.load()
            return self._finish(BookingOutcome.CANCELLED)

        finally:
            self._busy = False

    def submit(self, lesson: EnrichedLesson) -> BookingOutcome:
        """
        Run the action offered by a classified lesson.

        BOOKABLE lessons are booked and CANCEL_ELIGIBLE ones cancelled;
        every other mode offers no action.
        """
        try:
            mode = LessonMode(lesson.get("mode"))
        except ValueError:
            return BookingOutcome.NO_ACTION

        if not mode.is_actionable:
            return BookingOutcome.NO_ACTION

        if mode == LessonMode.BOOKABLE:
            return self.book(lesson["id"])

        return self.unbook(lesson["reservation_id"])
