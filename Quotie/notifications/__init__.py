"""
Notification layer for Quotie.

Exports the notification center interface, its backends, and the hungry
nudge scheduler built on top of them.
"""

from .base import AuthorizationStatus, NotificationCenter, NotificationRequest
from .centers import FileNotificationCenter, InMemoryNotificationCenter
from .scheduler import (
    HUNGER_DANGER_THRESHOLD,
    NUDGE_IDENTIFIER,
    NUDGE_MESSAGES,
    HungryNudgeScheduler,
    NudgeDecision,
    NudgeOutcome,
    TEST_NUDGE_IDENTIFIER,
    NudgeStatus,
    next_evening,
    next_message_index,
)

__all__ = [
    "AuthorizationStatus",
    "NotificationCenter",
    "NotificationRequest",
    "FileNotificationCenter",
    "InMemoryNotificationCenter",
    "HUNGER_DANGER_THRESHOLD",
    "NUDGE_IDENTIFIER",
    "NUDGE_MESSAGES",
    "HungryNudgeScheduler",
    "NudgeDecision",
    "NudgeOutcome",
    "TEST_NUDGE_IDENTIFIER",
    "NudgeStatus",
    "next_evening",
    "next_message_index",
]
