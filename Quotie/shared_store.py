#!/usr/bin/env python3
"""
Shared State Store - the publication channel between the app and the widget.

The app publishes a reduced projection of its quotes (a SharedQuote) into a
small set of named slots. The widget process only ever reads. Slots are
independent: publishing one never touches another.

Slots:
    SLOT_LATEST ("latestQuote"): the most recently added quote
    SLOT_TODAY ("quoteOfTheDay"): today's deterministic pick

Besides the slots, the shared defaults carry:
    WIDGET_ENABLED_KEY: whether the widget shows a daily quote at all
    WIDGET_RELOAD_KEY: timestamp of the last "please re-render" request

Usage:
    from Quotie.shared_store import DefaultsSharedStateStore, SLOT_LATEST

    store = DefaultsSharedStateStore(FileDefaults(config.shared_defaults_path))
    store.publish(SLOT_LATEST, SharedQuote.from_quote(quote))
    latest = store.read(SLOT_LATEST)  # None on first run
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from .atomic_io import PersistenceError
from .defaults import InMemoryDefaults
from .models import SharedQuote, now_local, to_iso


logger = logging.getLogger(__name__)

SLOT_LATEST = "latestQuote"
SLOT_TODAY = "quoteOfTheDay"
SLOTS = (SLOT_LATEST, SLOT_TODAY)

WIDGET_ENABLED_KEY = "widgetDailyQuotesEnabled"
WIDGET_RELOAD_KEY = "widgetReloadRequestedAt"


class SharedStateStore(Protocol):
    """Read/publish contract for the shared projection slots."""

    def publish(self, slot: str, quote: SharedQuote) -> bool:
        ...

    def read(self, slot: str) -> Optional[SharedQuote]:
        ...

    def clear(self, slot: str) -> bool:
        ...

    def widget_enabled(self) -> bool:
        ...

    def set_widget_enabled(self, enabled: bool) -> bool:
        ...


def _check_slot(slot: str) -> None:
    if slot not in SLOTS:
        raise ValueError(f"Unknown shared slot: {slot!r}")


class DefaultsSharedStateStore:
    """
    SharedStateStore over a defaults key/value store.

    publish() and clear() report write failures by returning False; the
    caller's own state is never rolled back.
    """

    def __init__(self, defaults):
        self.defaults = defaults

    def publish(self, slot: str, quote: SharedQuote) -> bool:
        _check_slot(slot)
        try:
            self.defaults.set(slot, quote.to_dict())
            return True
        except PersistenceError as e:
            logger.error(f"Failed to publish {slot}: {e}")
            return False

    def read(self, slot: str) -> Optional[SharedQuote]:
        _check_slot(slot)
        raw = self.defaults.get(slot)
        if raw is None:
            return None
        shared = SharedQuote.from_dict(raw)
        if shared is None:
            logger.warning(f"Ignoring undecodable shared record in {slot}")
        return shared

    def clear(self, slot: str) -> bool:
        _check_slot(slot)
        try:
            self.defaults.remove(slot)
            return True
        except PersistenceError as e:
            logger.error(f"Failed to clear {slot}: {e}")
            return False

    # -------------------------------------------------------------------------
    # Widget settings
    # -------------------------------------------------------------------------

    def widget_enabled(self) -> bool:
        return self.defaults.get_bool(WIDGET_ENABLED_KEY, default=True)

    def set_widget_enabled(self, enabled: bool) -> bool:
        try:
            self.defaults.set(WIDGET_ENABLED_KEY, bool(enabled))
            return True
        except PersistenceError as e:
            logger.error(f"Failed to store widget setting: {e}")
            return False


class InMemorySharedStateStore(DefaultsSharedStateStore):
    """Shared store held in process memory."""

    def __init__(self):
        super().__init__(InMemoryDefaults())


# =============================================================================
# Widget reload signal
# =============================================================================

class WidgetReloader:
    """
    Fire-and-forget "please re-render soon" signal for the widget.

    Records the request time in the shared defaults; the widget host picks
    it up on its next refresh. Failures are logged and swallowed.
    """

    def __init__(self, defaults, clock: Callable[[], datetime] = now_local):
        self.defaults = defaults
        self.clock = clock

    def reload_all_timelines(self) -> None:
        try:
            self.defaults.set(WIDGET_RELOAD_KEY, to_iso(self.clock()))
        except PersistenceError as e:
            logger.warning(f"Widget reload signal not recorded: {e}")

    def last_requested(self) -> Optional[str]:
        return self.defaults.get_str(WIDGET_RELOAD_KEY)


class NullWidgetReloader:
    """Reloader that only counts requests (single-process use and tests)."""

    def __init__(self):
        self.count = 0

    def reload_all_timelines(self) -> None:
        self.count += 1
