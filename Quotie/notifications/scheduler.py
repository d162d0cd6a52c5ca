#!/usr/bin/env python3
"""
Hungry Nudge Scheduler - decides when Memmi asks for a new quote.

At most one nudge is ever pending, under the stable identifier
"memmi.hungry.nudge". The scheduler is re-evaluated whenever hunger changes
and on app launch.

States:
    IDLE: nothing pending and no nudge recorded for today
    PENDING: a nudge is scheduled and not yet delivered
    SENT_TODAY: a nudge was recorded for today and nothing is pending

Transitions (refresh(hunger_level)):
    - hunger > 3: cancel any pending nudge -> IDLE (today's lockout stays)
    - hunger <= 3, permission granted, nothing recorded for today:
      schedule for 18:00 today (or tomorrow if 18:00 has passed), rotate
      the message, record today immediately -> PENDING
    - permission denied: no-op for this evaluation

"Sent today" is recorded when the nudge is scheduled, not when it is
delivered. A nudge the OS drops still blocks a same-day reschedule.

Usage:
    from Quotie.notifications import HungryNudgeScheduler

    scheduler = HungryNudgeScheduler(center, defaults)
    decision = scheduler.refresh(hunger_level=2)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Callable, Optional

from ..atomic_io import PersistenceError
from ..daily_state import local_date
from ..models import NudgeState, now_local, parse_iso, to_iso
from .base import AuthorizationStatus, NotificationCenter, NotificationRequest


logger = logging.getLogger(__name__)

NUDGE_IDENTIFIER = "memmi.hungry.nudge"
TEST_NUDGE_IDENTIFIER = "memmi.debug.test"
NUDGE_TITLE = "Memmi"
HUNGER_DANGER_THRESHOLD = 3
EVENING_HOUR = 18

LAST_NUDGE_DATE_KEY = "memmi.lastNudgeDate"
LAST_MESSAGE_INDEX_KEY = "memmi.lastNudgeMessageIndex"

NUDGE_MESSAGES = (
    "Getting hungry... read anything good lately?",
    "Feeling snackish... hear anything good lately?",
    "I could eat... see anything good lately?",
    "My quote tank’s looking low... got any good lines for me?",
    "Little hungry over here… find anything worth saving today?",
)


class NudgeStatus(Enum):
    """Scheduler state."""
    IDLE = "idle"
    PENDING = "pending"
    SENT_TODAY = "sent_today"


class NudgeOutcome(Enum):
    """What a refresh() call did."""
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    ALREADY_SENT_TODAY = "already_sent_today"
    PERMISSION_DENIED = "permission_denied"
    SCHEDULE_FAILED = "schedule_failed"


@dataclass
class NudgeDecision:
    """Result of one scheduler evaluation."""
    outcome: NudgeOutcome
    fire_at: Optional[datetime] = None
    message_index: Optional[int] = None
    message: Optional[str] = None


def next_evening(now: datetime, hour: int = EVENING_HOUR) -> datetime:
    """
    Today at hour:00 local time if still ahead of now, otherwise tomorrow.

    The target is built as a local wall-clock time and then resolved, so it
    stays at hour:00 when the UTC offset changes overnight.
    """
    today = local_date(now)
    today_evening = datetime.combine(today, time(hour=hour)).astimezone()
    if now < today_evening:
        return today_evening
    return datetime.combine(today + timedelta(days=1), time(hour=hour)).astimezone()


def next_message_index(last_index: int, pool_size: int = len(NUDGE_MESSAGES)) -> int:
    return (last_index + 1) % pool_size


class HungryNudgeScheduler:
    """Schedules and cancels the single hungry nudge."""

    def __init__(
        self,
        center: NotificationCenter,
        defaults,
        clock: Callable[[], datetime] = now_local,
    ):
        """
        Initialize the scheduler.

        Args:
            center: Notification center holding permission + pending requests
            defaults: Private defaults storing lastNudgeDate / lastMessageIndex
            clock: Source of "now"
        """
        self.center = center
        self.defaults = defaults
        self.clock = clock

    # =========================================================================
    # Persisted nudge state
    # =========================================================================

    def load_state(self) -> NudgeState:
        index = self.defaults.get(LAST_MESSAGE_INDEX_KEY, 0)
        if isinstance(index, bool) or not isinstance(index, int):
            index = 0
        return NudgeState(
            last_nudge_date=parse_iso(self.defaults.get(LAST_NUDGE_DATE_KEY)),
            last_message_index=index,
        )

    def did_send_nudge_today(self, now: Optional[datetime] = None) -> bool:
        now = now or self.clock()
        last = self.load_state().last_nudge_date
        if last is None:
            return False
        return local_date(last) == local_date(now)

    def _record_nudge(self, now: datetime, index: int) -> None:
        """Persist the nudge date and message index as one record."""
        try:
            self.defaults.update({
                LAST_NUDGE_DATE_KEY: to_iso(now),
                LAST_MESSAGE_INDEX_KEY: index,
            })
        except PersistenceError as e:
            logger.error(f"Failed to record hungry nudge: {e}")

    def status(self, now: Optional[datetime] = None) -> NudgeStatus:
        if self.center.is_pending(NUDGE_IDENTIFIER):
            return NudgeStatus.PENDING
        if self.did_send_nudge_today(now):
            return NudgeStatus.SENT_TODAY
        return NudgeStatus.IDLE

    # =========================================================================
    # Permission
    # =========================================================================

    def ensure_authorized(self) -> bool:
        """Ask for permission when undetermined. Denial is not an error."""
        status = self.center.authorization_status()
        if status is AuthorizationStatus.AUTHORIZED:
            return True
        if status is AuthorizationStatus.DENIED:
            return False
        return self.center.request_authorization()

    # =========================================================================
    # Transitions
    # =========================================================================

    def cancel(self) -> None:
        self.center.cancel(NUDGE_IDENTIFIER)

    def refresh(self, hunger_level: int) -> NudgeDecision:
        """
        Re-evaluate the nudge for the current hunger level.

        Call this whenever hunger changes and on app launch.
        """
        if hunger_level > HUNGER_DANGER_THRESHOLD:
            self.cancel()
            return NudgeDecision(NudgeOutcome.CANCELLED)

        if not self.ensure_authorized():
            logger.info("Notifications not permitted; skipping hungry nudge")
            return NudgeDecision(NudgeOutcome.PERMISSION_DENIED)

        now = self.clock()
        if self.did_send_nudge_today(now):
            return NudgeDecision(NudgeOutcome.ALREADY_SENT_TODAY)

        return self._schedule_evening_nudge(now)

    def _schedule_evening_nudge(self, now: datetime) -> NudgeDecision:
        index = next_message_index(self.load_state().last_message_index)
        message = NUDGE_MESSAGES[index]
        fire_at = next_evening(now)

        request = NotificationRequest(
            identifier=NUDGE_IDENTIFIER,
            fire_at=fire_at,
            title=NUDGE_TITLE,
            body=message,
        )

        # Replace any existing pending nudge with the new one
        self.center.cancel(NUDGE_IDENTIFIER)
        if not self.center.schedule(request):
            logger.warning("Hungry nudge could not be scheduled")
            return NudgeDecision(NudgeOutcome.SCHEDULE_FAILED, message_index=index, message=message)

        self._record_nudge(now, index)
        logger.info(f"Hungry nudge scheduled for {fire_at.isoformat()}")
        return NudgeDecision(NudgeOutcome.SCHEDULED, fire_at=fire_at, message_index=index, message=message)

    def schedule_test_nudge(self, seconds: float = 10) -> bool:
        """
        Debug helper: schedule a nudge a few seconds from now.

        Uses its own identifier and leaves the de-duplication state alone.
        """
        if not self.ensure_authorized():
            return False
        request = NotificationRequest(
            identifier=TEST_NUDGE_IDENTIFIER,
            fire_at=self.clock() + timedelta(seconds=max(1, seconds)),
            title=NUDGE_TITLE,
            body=NUDGE_MESSAGES[0],
        )
        return self.center.schedule(request)
