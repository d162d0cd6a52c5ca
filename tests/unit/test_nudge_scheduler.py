"""
Unit tests for the hungry nudge scheduler.

Tests cover:
- Evening fire time (today vs tomorrow)
- Once-per-day de-duplication
- Message rotation across days
- Cancellation when Memmi is fed
- Permission handling
"""
from datetime import datetime, timedelta, timezone

import pytest

from Quotie.atomic_io import PersistenceError
from Quotie.defaults import InMemoryDefaults
from Quotie.notifications import (
    NUDGE_IDENTIFIER,
    NUDGE_MESSAGES,
    TEST_NUDGE_IDENTIFIER,
    AuthorizationStatus,
    HungryNudgeScheduler,
    InMemoryNotificationCenter,
    NudgeOutcome,
    NudgeStatus,
    next_evening,
    next_message_index,
)
from Quotie.notifications.scheduler import LAST_MESSAGE_INDEX_KEY, LAST_NUDGE_DATE_KEY


UTC = timezone.utc
CET = timezone(timedelta(hours=1))
CEST = timezone(timedelta(hours=2))


@pytest.fixture
def center():
    return InMemoryNotificationCenter(status=AuthorizationStatus.AUTHORIZED)


@pytest.fixture
def defaults():
    return InMemoryDefaults()


@pytest.fixture
def scheduler(center, defaults, clock):
    return HungryNudgeScheduler(center, defaults, clock=clock)


@pytest.mark.unit
class TestNextEvening:
    def test_before_six_is_today(self):
        now = datetime(2026, 6, 10, 17, 59, tzinfo=UTC)
        assert next_evening(now) == datetime(2026, 6, 10, 18, 0, tzinfo=UTC)

    def test_at_or_after_six_is_tomorrow(self):
        assert next_evening(datetime(2026, 6, 10, 18, 0, tzinfo=UTC)) == datetime(2026, 6, 11, 18, 0, tzinfo=UTC)
        assert next_evening(datetime(2026, 6, 10, 23, 0, tzinfo=UTC)) == datetime(2026, 6, 11, 18, 0, tzinfo=UTC)


@pytest.mark.unit
class TestMessageRotation:
    def test_wraps(self):
        assert next_message_index(0) == 1
        assert next_message_index(4) == 0
        assert len(NUDGE_MESSAGES) == 5


@pytest.mark.unit
class TestRefresh:
    """Test refresh(hunger_level) transitions."""

    def test_low_hunger_schedules_for_this_evening(self, scheduler, center, clock):
        decision = scheduler.refresh(2)
        assert decision.outcome is NudgeOutcome.SCHEDULED
        assert decision.fire_at == datetime(2026, 6, 10, 18, 0, tzinfo=UTC)

        pending = center.pending()
        assert len(pending) == 1
        assert pending[0].identifier == NUDGE_IDENTIFIER
        assert pending[0].title == "Memmi"
        assert pending[0].body == NUDGE_MESSAGES[1]
        assert scheduler.status() is NudgeStatus.PENDING

    def test_threshold_is_inclusive(self, scheduler):
        assert scheduler.refresh(3).outcome is NudgeOutcome.SCHEDULED

    def test_only_once_per_day(self, scheduler, center, defaults):
        scheduler.refresh(2)
        index_after_first = defaults.get(LAST_MESSAGE_INDEX_KEY)

        decision = scheduler.refresh(1)
        assert decision.outcome is NudgeOutcome.ALREADY_SENT_TODAY
        assert len(center.pending()) == 1
        assert defaults.get(LAST_MESSAGE_INDEX_KEY) == index_after_first

    def test_message_rotates_on_following_days(self, scheduler, center, clock):
        bodies = []
        for _ in range(6):
            bodies.append(scheduler.refresh(0).message)
            clock.advance(days=1)
        assert bodies == [NUDGE_MESSAGES[i] for i in (1, 2, 3, 4, 0, 1)]
        assert len(center.pending()) == 1

    def test_fed_memmi_cancels_pending_nudge(self, scheduler, center):
        scheduler.refresh(2)
        decision = scheduler.refresh(4)
        assert decision.outcome is NudgeOutcome.CANCELLED
        assert center.pending() == []
        assert scheduler.status() is NudgeStatus.SENT_TODAY

    def test_cancel_without_pending_is_fine(self, scheduler, defaults):
        assert scheduler.refresh(5).outcome is NudgeOutcome.CANCELLED
        assert defaults.get(LAST_NUDGE_DATE_KEY) is None

    def test_evening_launch_schedules_for_tomorrow(self, scheduler, clock):
        clock.set(hour=19)
        decision = scheduler.refresh(1)
        assert decision.fire_at == datetime(2026, 6, 11, 18, 0, tzinfo=UTC)

    def test_schedule_failure_does_not_mark_today(self, scheduler, center, defaults, mocker):
        mocker.patch.object(center, "schedule", return_value=False)
        decision = scheduler.refresh(1)
        assert decision.outcome is NudgeOutcome.SCHEDULE_FAILED
        assert defaults.get(LAST_NUDGE_DATE_KEY) is None

    def test_idle_status(self, scheduler):
        assert scheduler.status() is NudgeStatus.IDLE


@pytest.mark.unit
class TestPermission:
    """Test notification permission handling."""

    def test_denied_schedules_nothing(self, defaults, clock):
        center = InMemoryNotificationCenter(status=AuthorizationStatus.DENIED)
        scheduler = HungryNudgeScheduler(center, defaults, clock=clock)
        assert scheduler.refresh(0).outcome is NudgeOutcome.PERMISSION_DENIED
        assert center.pending() == []
        assert defaults.get(LAST_NUDGE_DATE_KEY) is None

    def test_undetermined_asks_once(self, defaults, clock):
        center = InMemoryNotificationCenter(grant_on_request=True)
        scheduler = HungryNudgeScheduler(center, defaults, clock=clock)
        scheduler.refresh(0)
        clock.advance(days=1)
        scheduler.refresh(0)
        assert center.authorization_requests == 1

    def test_user_declines(self, defaults, clock):
        center = InMemoryNotificationCenter(grant_on_request=False)
        scheduler = HungryNudgeScheduler(center, defaults, clock=clock)
        assert scheduler.refresh(0).outcome is NudgeOutcome.PERMISSION_DENIED
        assert center.status is AuthorizationStatus.DENIED


@pytest.mark.unit
class TestTestNudge:
    def test_uses_separate_identifier(self, scheduler, center, defaults, clock):
        assert scheduler.schedule_test_nudge(5) is True
        pending = center.pending()
        assert [r.identifier for r in pending] == [TEST_NUDGE_IDENTIFIER]
        assert (pending[0].fire_at - clock()).total_seconds() == 5
        assert defaults.get(LAST_NUDGE_DATE_KEY) is None


@pytest.mark.unit
class TestAcrossDst:
    """Evening time and "today" follow local wall-clock time."""

    def test_tomorrow_evening_after_spring_forward(self, berlin_local_time):
        now = datetime(2026, 3, 28, 19, 0, tzinfo=CET)
        fire_at = next_evening(now)
        assert fire_at == datetime(2026, 3, 29, 18, 0, tzinfo=CEST)
        assert fire_at.utcoffset() == timedelta(hours=2)

    def test_sent_today_survives_fall_back(self, berlin_local_time, center, defaults):
        defaults.set(LAST_NUDGE_DATE_KEY, "2026-10-25T00:30:00+02:00")

        def evening():
            return datetime(2026, 10, 25, 20, 0, tzinfo=CET)

        scheduler = HungryNudgeScheduler(center, defaults, clock=evening)
        assert scheduler.did_send_nudge_today() is True
        assert scheduler.refresh(1).outcome is NudgeOutcome.ALREADY_SENT_TODAY


@pytest.mark.unit
class TestNudgeRecord:
    """Nudge date and message index are stored as one record."""

    def test_written_together(self, scheduler, defaults, clock, mocker):
        spy = mocker.spy(defaults, "update")
        scheduler.refresh(2)
        spy.assert_called_once()
        written = spy.call_args.args[0]
        assert set(written) == {LAST_NUDGE_DATE_KEY, LAST_MESSAGE_INDEX_KEY}
        assert written[LAST_MESSAGE_INDEX_KEY] == 1

    def test_failed_write_keeps_previous_record(self, scheduler, defaults, mocker):
        defaults.set(LAST_MESSAGE_INDEX_KEY, 3)
        mocker.patch.object(defaults, "update", side_effect=PersistenceError("disk full"))
        scheduler.refresh(2)
        assert defaults.get(LAST_MESSAGE_INDEX_KEY) == 3
        assert defaults.get(LAST_NUDGE_DATE_KEY) is None
