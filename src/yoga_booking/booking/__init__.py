"""
Booking page and viewer session.
"""

from .page import BookingOutcome, BookingPage
from .session import SessionState, ViewerSession

__all__ = [
    "BookingOutcome",
    "BookingPage",
    "SessionState",
    "ViewerSession",
]
