#!/usr/bin/env python3
"""
Daily / derived state for Quotie.

Pure functions compute the time-dependent values:
    - quote of the day: quotes[day_of_year(date) % len(quotes)]
    - hunger decay: one level lost per whole calendar day since last feeding
    - feeding: +1 per added quote, +2 for long (>= 77 char) quotes, max 5
    - resurfacing candidate: favorites first, otherwise everything

HungerMeter wraps the hunger functions with persistence in the app's
private defaults and notifies a listener whenever the level changes.

Usage:
    from Quotie.daily_state import HungerMeter, quote_of_the_day

    meter = HungerMeter(defaults, on_change=scheduler.refresh)
    meter.apply_daily_decay()
    today = quote_of_the_day(store.quotes, date.today())
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

from .atomic_io import PersistenceError
from .models import HungerState, Quote, now_local, parse_iso, to_iso


logger = logging.getLogger(__name__)

HUNGER_MIN = 0
HUNGER_MAX = 5
LONG_QUOTE_THRESHOLD = 77
LONG_QUOTE_BONUS = 2
FEED_AMOUNT = 1

HUNGER_LEVEL_KEY = "memmi.hungerLevel"
LAST_FED_DATE_KEY = "memmi.lastFedDate"


def local_date(value: datetime) -> date:
    """Calendar date of value in the system local zone (naive means local)."""
    return value.astimezone().date()


# =============================================================================
# Quote of the day
# =============================================================================

def day_of_year(value: date) -> int:
    """1-based ordinal day within the year (Jan 1 = 1)."""
    return value.timetuple().tm_yday


def quote_of_the_day(quotes: Sequence[Quote], value: date) -> Optional[Quote]:
    """
    Deterministic daily pick.

    Same collection and same date always give the same quote. Adding or
    deleting quotes shifts the index, so the pick can change mid-day.
    """
    if not quotes:
        return None
    if isinstance(value, datetime):
        value = local_date(value)
    return quotes[day_of_year(value) % len(quotes)]


# =============================================================================
# Hunger
# =============================================================================

def whole_days_between(earlier: datetime, later: datetime) -> int:
    """
    Calendar days from earlier to later, never negative.

    Both instants are placed on the local calendar using the zone rules in
    force at each of them, so 23:59 -> 00:01 is one day and a DST switch
    overnight neither adds nor hides a day.
    """
    return max((local_date(later) - local_date(earlier)).days, 0)


def apply_decay(state: HungerState, now: datetime) -> bool:
    """
    Lose one hunger level per calendar day since last feeding.

    Returns:
        True if the state was changed. When no whole day has passed the
        state is left untouched.
    """
    days_passed = whole_days_between(state.last_fed_date, now)
    if days_passed <= 0:
        return False
    state.hunger_level = max(state.hunger_level - days_passed, HUNGER_MIN)
    state.last_fed_date = now
    return True


def feed_amount(text: str) -> int:
    return LONG_QUOTE_BONUS if len(text) >= LONG_QUOTE_THRESHOLD else FEED_AMOUNT


def feed(state: HungerState, text: str, now: datetime) -> int:
    """Feed Memmi for a newly added quote. Returns the new level."""
    state.hunger_level = min(state.hunger_level + feed_amount(text), HUNGER_MAX)
    state.last_fed_date = now
    return state.hunger_level


# =============================================================================
# Resurfacing
# =============================================================================

def resurface_pool(quotes: Sequence[Quote]) -> List[Quote]:
    favorites = [q for q in quotes if q.is_favorite]
    return favorites if favorites else list(quotes)


def choose_resurface_candidate(quotes: Sequence[Quote], rng) -> Optional[Quote]:
    """
    Pick a quote to resurface.

    Args:
        quotes: The whole collection
        rng: Random source exposing choice() (e.g. random.Random)

    Returns:
        A favorite when any exist, otherwise any quote; None when empty
    """
    pool = resurface_pool(quotes)
    if not pool:
        return None
    return rng.choice(pool)


# =============================================================================
# Persistent hunger meter
# =============================================================================

class HungerMeter:
    """
    Persisted hunger state with change notification.

    The state lives in the private defaults under memmi.hungerLevel and
    memmi.lastFedDate. It is created on first use with level 0 and
    last_fed_date = now.
    """

    def __init__(
        self,
        defaults,
        clock: Callable[[], datetime] = now_local,
        on_change: Optional[Callable[[int], None]] = None,
    ):
        self.defaults = defaults
        self.clock = clock
        self.on_change = on_change
        self._state = self._load()

    def _load(self) -> HungerState:
        level = self.defaults.get(HUNGER_LEVEL_KEY)
        last_fed = parse_iso(self.defaults.get(LAST_FED_DATE_KEY))

        if isinstance(level, bool) or not isinstance(level, int) or last_fed is None:
            state = HungerState(hunger_level=HUNGER_MIN, last_fed_date=self.clock())
            self._save(state)
            return state

        level = min(max(level, HUNGER_MIN), HUNGER_MAX)
        return HungerState(hunger_level=level, last_fed_date=last_fed)

    def _save(self, state: HungerState) -> bool:
        try:
            self.defaults.update({
                HUNGER_LEVEL_KEY: state.hunger_level,
                LAST_FED_DATE_KEY: to_iso(state.last_fed_date),
            })
            return True
        except PersistenceError as e:
            logger.error(f"Failed to save hunger state: {e}")
            return False

    @property
    def level(self) -> int:
        return self._state.hunger_level

    @property
    def state(self) -> HungerState:
        return HungerState(self._state.hunger_level, self._state.last_fed_date)

    def _changed(self) -> None:
        self._save(self._state)
        if self.on_change is not None:
            self.on_change(self._state.hunger_level)

    def apply_daily_decay(self) -> bool:
        """Apply decay for the days since last feeding. True if anything changed."""
        before = self._state.hunger_level
        if not apply_decay(self._state, self.clock()):
            return False
        logger.info(f"Hunger decayed {before} -> {self._state.hunger_level}")
        self._changed()
        return True

    def feed(self, text: str) -> int:
        """Feed for one added quote and return the new level."""
        before = self._state.hunger_level
        feed(self._state, text, self.clock())
        logger.debug(f"Fed Memmi: {before} -> {self._state.hunger_level}")
        self._changed()
        return self._state.hunger_level
