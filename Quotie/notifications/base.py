"""
Base notification center interface and data classes.

A notification center is the platform service that holds permission state
and pending local notifications. The hungry-nudge scheduler only talks to
it through NotificationCenter, so any backend (file-backed, in-memory, a
real OS service) can be plugged in.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models import parse_iso, to_iso


class AuthorizationStatus(Enum):
    """Notification permission state."""
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


@dataclass
class NotificationRequest:
    """
    A local notification scheduled for a specific time.

    Attributes:
        identifier: Stable identity; scheduling again under the same
            identifier replaces the previous request
        fire_at: When the notification should be delivered
        title: Notification title
        body: Notification body
    """
    identifier: str
    fire_at: datetime
    title: str
    body: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "fireAt": to_iso(self.fire_at),
            "title": self.title,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["NotificationRequest"]:
        if not isinstance(data, dict):
            return None
        fire_at = parse_iso(data.get("fireAt"))
        if fire_at is None:
            return None
        if not all(isinstance(data.get(k), str) for k in ("identifier", "title", "body")):
            return None
        return cls(
            identifier=data["identifier"],
            fire_at=fire_at,
            title=data["title"],
            body=data["body"],
        )


class NotificationCenter(ABC):
    """
    Base interface for notification centers.

    Implementations MUST NOT raise from cancel(); cancelling an identifier
    with nothing pending is a no-op.
    """

    @abstractmethod
    def authorization_status(self) -> AuthorizationStatus:
        """Current permission state."""
        pass

    @abstractmethod
    def request_authorization(self) -> bool:
        """
        Ask the user for permission.

        Returns:
            True if granted, False if denied
        """
        pass

    @abstractmethod
    def schedule(self, request: NotificationRequest) -> bool:
        """
        Schedule a request, replacing any pending one with the same identifier.

        Returns:
            True if the request is now pending, False otherwise
        """
        pass

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Remove the pending request with this identifier, if any."""
        pass

    @abstractmethod
    def pending(self) -> List[NotificationRequest]:
        """All pending (scheduled, not yet delivered) requests."""
        pass

    def is_pending(self, identifier: str) -> bool:
        return any(r.identifier == identifier for r in self.pending())
