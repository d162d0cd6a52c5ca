"""
Notification center backends.

- InMemoryNotificationCenter: process-local, configurable permission answer
- FileNotificationCenter: pending requests persisted as JSON in the app's
  state directory; permission answered from configuration or an
  interactive prompt and remembered in the private defaults
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..atomic_io import PersistenceError, load_json_object, write_json_atomic
from .base import AuthorizationStatus, NotificationCenter, NotificationRequest


logger = logging.getLogger(__name__)

AUTHORIZATION_KEY = "notifications.authorization"


class InMemoryNotificationCenter(NotificationCenter):
    """Notification center held in memory."""

    def __init__(
        self,
        status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
        grant_on_request: bool = True,
    ):
        self.status = status
        self.grant_on_request = grant_on_request
        self.authorization_requests = 0
        self._pending: Dict[str, NotificationRequest] = {}

    def authorization_status(self) -> AuthorizationStatus:
        return self.status

    def request_authorization(self) -> bool:
        self.authorization_requests += 1
        if self.status is AuthorizationStatus.NOT_DETERMINED:
            self.status = (
                AuthorizationStatus.AUTHORIZED if self.grant_on_request
                else AuthorizationStatus.DENIED
            )
        return self.status is AuthorizationStatus.AUTHORIZED

    def schedule(self, request: NotificationRequest) -> bool:
        self._pending[request.identifier] = request
        return True

    def cancel(self, identifier: str) -> None:
        self._pending.pop(identifier, None)

    def pending(self) -> List[NotificationRequest]:
        return sorted(self._pending.values(), key=lambda r: r.fire_at)


class FileNotificationCenter(NotificationCenter):
    """
    Notification center persisted to disk.

    Permission modes:
        granted: always authorized
        denied: always denied
        ask: NOT_DETERMINED until request_authorization() runs; the answer
             (from prompt, or granted when no prompt is given) is stored in
             the private defaults so it is asked only once
    """

    def __init__(
        self,
        pending_path: Path,
        defaults,
        mode: str = "ask",
        prompt: Optional[Callable[[], bool]] = None,
    ):
        self.pending_path = Path(pending_path)
        self.defaults = defaults
        self.mode = mode
        self.prompt = prompt

    # -------------------------------------------------------------------------
    # Permission
    # -------------------------------------------------------------------------

    def authorization_status(self) -> AuthorizationStatus:
        if self.mode == "granted":
            return AuthorizationStatus.AUTHORIZED
        if self.mode == "denied":
            return AuthorizationStatus.DENIED
        stored = self.defaults.get(AUTHORIZATION_KEY)
        try:
            return AuthorizationStatus(stored)
        except ValueError:
            return AuthorizationStatus.NOT_DETERMINED

    def request_authorization(self) -> bool:
        status = self.authorization_status()
        if status is not AuthorizationStatus.NOT_DETERMINED:
            return status is AuthorizationStatus.AUTHORIZED

        granted = self.prompt() if self.prompt is not None else True
        answer = AuthorizationStatus.AUTHORIZED if granted else AuthorizationStatus.DENIED
        try:
            self.defaults.set(AUTHORIZATION_KEY, answer.value)
        except PersistenceError as e:
            logger.warning(f"Notification permission not remembered: {e}")
        return granted

    # -------------------------------------------------------------------------
    # Pending requests
    # -------------------------------------------------------------------------

    def _load(self) -> Dict[str, NotificationRequest]:
        data = load_json_object(self.pending_path) or {}
        requests = {}
        for item in data.get("pending", []):
            request = NotificationRequest.from_dict(item)
            if request is not None:
                requests[request.identifier] = request
        return requests

    def _save(self, requests: Dict[str, NotificationRequest]) -> bool:
        payload = {"pending": [r.to_dict() for r in requests.values()]}
        try:
            write_json_atomic(self.pending_path, payload)
            return True
        except PersistenceError as e:
            logger.error(f"Failed to save pending notifications: {e}")
            return False

    def schedule(self, request: NotificationRequest) -> bool:
        requests = self._load()
        requests[request.identifier] = request
        return self._save(requests)

    def cancel(self, identifier: str) -> None:
        requests = self._load()
        if requests.pop(identifier, None) is not None:
            self._save(requests)

    def pending(self) -> List[NotificationRequest]:
        return sorted(self._load().values(), key=lambda r: r.fire_at)

    def deliver_due(self, now: datetime) -> List[NotificationRequest]:
        """
        Remove and return every request whose fire time has arrived.

        Args:
            now: Current time

        Returns:
            Due requests, earliest first
        """
        requests = self._load()
        due = [r for r in requests.values() if r.fire_at <= now]
        if not due:
            return []
        for request in due:
            del requests[request.identifier]
        self._save(requests)
        return sorted(due, key=lambda r: r.fire_at)
