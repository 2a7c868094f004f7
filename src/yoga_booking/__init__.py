"""
Yoga studio booking client.

Classifies lessons from the studio backend for one viewer and drives
the booking page (load, book, unbook).

Usage:
    >>> from yoga_booking import YogaApiClient, ViewerSession, BookingPage
    >>>
    >>> client = YogaApiClient("https://yoga.example.com")
    >>> page = BookingPage(client, ViewerSession(client, "oXy1AbCd"))
    >>> page.load()
"""

from .classifier import classify_lesson, classify_lessons
from .models.lesson import LessonMode
from .api.client import YogaApiClient
from .booking import BookingOutcome, BookingPage, ViewerSession

__all__ = [
    "classify_lesson",
    "classify_lessons",
    "LessonMode",
    "YogaApiClient",
    "BookingOutcome",
    "BookingPage",
    "ViewerSession",
]

__version__ = "0.1.0"
