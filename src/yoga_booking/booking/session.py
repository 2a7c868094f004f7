"""
Viewer session management.

This module tracks who is looking at the booking page: the viewer's
open_id (empty for anonymous viewers) and, once fetched, the backend
profile that proves the viewer completed registration.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..api.client import YogaApiClient
from ..models.result import Result
from ..utils.logger import mask_openid


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Viewer session states."""

    ANONYMOUS = "anonymous"
    IDENTIFIED = "identified"
    REGISTERED = "registered"


class ViewerSession:
    """
    Identity of the viewer using the booking page.

    Booking needs a registered viewer: one with an open_id whose
    backend profile has a nick_name. The profile is cached after the
    first successful lookup.

    Examples:
        >>> session = ViewerSession(client, open_id="oXy1AbCd")
        >>> result = session.check_availability()
        >>> if result.is_success and result.value:
        ...     page.book(lesson_id)
    """

    def __init__(self, client: YogaApiClient, open_id: Optional[str] = None):
        """
        Initialize ViewerSession.

        Args:
            client: API client used for profile lookups
            open_id: Viewer open_id (None or "" for anonymous)
        """
        self.client = client
        self._open_id = open_id or ""
        self._profile: Optional[Dict[str, Any]] = None
        self._registered_at: Optional[datetime] = None

    @property
    def open_id(self) -> str:
        """Get the viewer open_id ("" when anonymous)."""
        return self._open_id

    @property
    def state(self) -> SessionState:
        if self._profile is not None:
            return SessionState.REGISTERED
        if self._open_id:
            return SessionState.IDENTIFIED
        return SessionState.ANONYMOUS

    @property
    def is_identified(self) -> bool:
        return bool(self._open_id)

    @property
    def is_registered(self) -> bool:
        return self._profile is not None

    @property
    def profile(self) -> Optional[Dict[str, Any]]:
        return self._profile

    def identify(self, open_id: str):
        """
        Switch to another viewer, dropping any cached profile.

        Args:
            open_id: New viewer open_id
        """
        if open_id != self._open_id:
            self.forget()
        self._open_id = open_id or ""
        logger.info(f"Viewer identified as {mask_openid(self._open_id)}")

    def forget(self):
        """Drop the cached profile so the next check queries the backend."""
        self._profile = None
        self._registered_at = None

    def check_availability(self) -> Result[bool]:
        """
        Check whether the viewer may book lessons.

        Returns:
            Result[bool] - True for a registered viewer, False for an
            anonymous or unregistered one; failure if the lookup failed
        """
        if not self._open_id:
            return Result.success(False, "Viewer is anonymous")

        if self._profile is not None:
            return Result.success(True, "Viewer registered (cached)")

        lookup = self.client.query_user(self._open_id)
        if lookup.is_failure:
            logger.error(f"Profile lookup failed: {lookup.message}")
            return Result.failure("Failed to check viewer registration", lookup.error)

        profile = lookup.value
        if not profile or not profile.get("nick_name"):
            logger.info(f"Viewer {mask_openid(self._open_id)} is not registered")
            return Result.success(False, "Viewer not registered")

        self._profile = dict(profile)
        self._registered_at = datetime.now()
        return Result.success(True, "Viewer registered")

    def get_session_info(self) -> dict:
        """
        Get session information for debugging.

        Returns:
            Dictionary with masked identity and registration state
        """
        return {
            "state": self.state.value,
            "viewer": mask_openid(self._open_id),
            "registered": self.is_registered,
            "registered_at": self._registered_at.isoformat() if self._registered_at else None,
        }
