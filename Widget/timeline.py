#!/usr/bin/env python3
"""
Quote of the Day widget timeline.

Runs in the widget process. It never opens the quotes file or the app's
private state: everything it shows comes from the shared store slots the
app publishes. A missing slot renders the empty state, never an error.

Timeline policy: one entry for "now", refreshed at 00:05 the next day so
the quote can change daily.

Usage:
    python -m Widget.timeline            # print today's widget entry
    python -m Widget.timeline --json     # as JSON
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional

from Quotie.config import QuotieConfig
from Quotie.daily_state import local_date
from Quotie.defaults import FileDefaults
from Quotie.models import SharedQuote, now_local
from Quotie.shared_store import SLOT_LATEST, SLOT_TODAY, DefaultsSharedStateStore


logger = logging.getLogger(__name__)

REFRESH_TIME = time(hour=0, minute=5)

PLACEHOLDER_TEXT = "Your next favorite quote will show up here."
PLACEHOLDER_AUTHOR = "Quotie"
EMPTY_TITLE = "No quote yet"
EMPTY_MESSAGE = "Open Quotich and pick a quote for your widget."

# Gradient base per card color; unknown styles fall back to blue
STYLE_COLORS = {
    "mint": "mint",
    "blush": "pink",
    "lilac": "purple",
    "sky": "blue",
    "peach": "orange",
    "butter": "yellow",
}
FALLBACK_COLOR = "blue"


def color_for(style_raw: Optional[str]) -> str:
    return STYLE_COLORS.get(style_raw or "", FALLBACK_COLOR)


@dataclass
class WidgetEntry:
    """What the widget renders at a point in time."""
    date: datetime
    quote: Optional[SharedQuote]

    @property
    def is_empty(self) -> bool:
        return self.quote is None

    def to_dict(self) -> dict:
        if self.quote is None:
            return {
                "date": self.date.isoformat(),
                "title": EMPTY_TITLE,
                "message": EMPTY_MESSAGE,
            }
        return {
            "date": self.date.isoformat(),
            "text": self.quote.text,
            "author": (self.quote.author or "").strip() or None,
            "color": color_for(self.quote.color_style_raw),
        }


@dataclass
class Timeline:
    entries: List[WidgetEntry]
    refresh_after: datetime


def next_refresh(now: datetime) -> datetime:
    """00:05 local time on the day after now."""
    return datetime.combine(local_date(now) + timedelta(days=1), REFRESH_TIME).astimezone()


class WidgetTimelineProvider:
    """Builds widget entries from the shared store only."""

    def __init__(self, shared_store, clock: Callable[[], datetime] = now_local):
        self.shared_store = shared_store
        self.clock = clock

    @classmethod
    def from_config(cls, config: QuotieConfig) -> "WidgetTimelineProvider":
        return cls(DefaultsSharedStateStore(FileDefaults(config.shared_defaults_path)))

    def placeholder(self) -> WidgetEntry:
        now = self.clock()
        sample = SharedQuote(
            id="placeholder",
            text=PLACEHOLDER_TEXT,
            author=PLACEHOLDER_AUTHOR,
            created_at=now,
            color_style_raw="mint",
        )
        return WidgetEntry(date=now, quote=sample)

    def snapshot(self) -> WidgetEntry:
        """Quick preview: the latest added quote."""
        quote = self.shared_store.read(SLOT_LATEST) if self.shared_store.widget_enabled() else None
        return WidgetEntry(date=self.clock(), quote=quote)

    def current_quote(self) -> Optional[SharedQuote]:
        """Today's quote, falling back to the latest one."""
        if not self.shared_store.widget_enabled():
            return None
        return self.shared_store.read(SLOT_TODAY) or self.shared_store.read(SLOT_LATEST)

    def timeline(self) -> Timeline:
        now = self.clock()
        entry = WidgetEntry(date=now, quote=self.current_quote())
        if entry.is_empty:
            logger.debug("No shared quote published yet; rendering empty state")
        return Timeline(entries=[entry], refresh_after=next_refresh(now))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render the Quotie widget entry")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    args = parser.parse_args(argv)

    provider = WidgetTimelineProvider.from_config(QuotieConfig.from_env())
    timeline = provider.timeline()
    entry = timeline.entries[0]

    if args.json:
        payload = entry.to_dict()
        payload["refreshAfter"] = timeline.refresh_after.isoformat()
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    elif entry.quote is None:
        print(f"{EMPTY_TITLE}\n{EMPTY_MESSAGE}")
    else:
        author = (entry.quote.author or "").strip()
        print(f"“{entry.quote.text}”")
        if author:
            print(f"— {author}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
