#!/usr/bin/env python3
"""
Quote Repository for Quotie.

Owns the canonical, ordered list of quotes. Every mutation writes the whole
collection through to the shared quotes file, then refreshes the widget
projection (latest + quote of the day) and signals the widget to reload.

Append order is chronological: the last quote in the list is the newest.

Usage:
    from Quotie.quote_store import QuoteStore

    store = QuoteStore(
        quotes_path=config.quotes_path,
        shared_store=shared_store,
        reloader=WidgetReloader(shared_defaults),
        hunger=hunger_meter,
    )
    quote = store.add("Hope is a thing with feathers.", author="Emily Dickinson")
    store.toggle_favorite(quote.id)
    resurfaced = store.resurface()
"""

import logging
import random
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .atomic_io import PersistenceError, read_json_bytes, write_json_atomic
from .codec import CURRENT_VERSION, DecodeFormat, decode_quotes, encode_envelope
from .daily_state import choose_resurface_candidate, quote_of_the_day
from .models import FontStyle, PastelStyle, Quote, SharedQuote, now_local
from .search import SourceCategory, search_quotes
from .shared_store import SLOT_LATEST, SLOT_TODAY


logger = logging.getLogger(__name__)

RECENT_LIMIT = 10


class QuoteStore:
    """Ordered, write-through quote collection."""

    def __init__(
        self,
        quotes_path: Path,
        shared_store=None,
        reloader=None,
        hunger=None,
        clock: Callable[[], datetime] = now_local,
        rng=None,
    ):
        """
        Initialize and load the collection.

        Args:
            quotes_path: Quotes file in the shared app group directory
            shared_store: SharedStateStore receiving the widget projection
            reloader: Widget reload signal (reload_all_timelines())
            hunger: HungerMeter fed once per add()
            clock: Source of "now"
            rng: Random source with choice(); defaults to random.Random()
        """
        self.quotes_path = Path(quotes_path)
        self.shared_store = shared_store
        self.reloader = reloader
        self.hunger = hunger
        self.clock = clock
        self.rng = rng or random.Random()

        self.last_added_id: Optional[str] = None
        self.last_save_error: Optional[str] = None
        self.loaded_format: Optional[DecodeFormat] = None
        self.loaded_version: Optional[int] = None
        self.quotes: List[Quote] = []
        self.load()

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> List[Quote]:
        """
        Read the collection from disk.

        Tries the versioned envelope, then the legacy bare array, then falls
        back to the built-in samples. Never raises.

        On first run (no file at all) the samples are saved right away so
        their ids are the same in every process. An unreadable file is left
        untouched until the next mutation.
        """
        raw = read_json_bytes(self.quotes_path)
        result = decode_quotes(raw)
        self.quotes = result.quotes
        self.loaded_format = result.format
        self.loaded_version = result.version
        logger.debug(f"Loaded {len(result.quotes)} quotes ({result.format.value})")

        if raw is None and not self.quotes_path.exists():
            self.save()
        return self.quotes

    def save(self) -> bool:
        """
        Write the whole collection as a versioned envelope.

        Returns:
            True if saved. On failure the error is logged and kept in
            last_save_error; the in-memory collection is left as is.
        """
        try:
            write_json_atomic(self.quotes_path, encode_envelope(self.quotes, CURRENT_VERSION))
            self.last_save_error = None
            return True
        except PersistenceError as e:
            self.last_save_error = str(e)
            logger.error(f"Failed to save quotes: {e}")
            return False

    def _commit(self) -> bool:
        saved = self.save()
        self.refresh_projection()
        if self.reloader is not None:
            self.reloader.reload_all_timelines()
        return saved

    # =========================================================================
    # Widget projection
    # =========================================================================

    def latest_quote(self) -> Optional[Quote]:
        """The last added quote if it still exists, else the newest one."""
        if self.last_added_id is not None:
            quote = self.get(self.last_added_id)
            if quote is not None:
                return quote
        return self.quotes[-1] if self.quotes else None

    def quote_of_the_day(self, when: Optional[datetime] = None) -> Optional[Quote]:
        when = when or self.clock()
        return quote_of_the_day(self.quotes, when.date())

    def refresh_projection(self) -> None:
        """Publish the latest quote and today's quote into the shared store."""
        if self.shared_store is None:
            return
        now = self.clock()
        for slot, quote in (
            (SLOT_LATEST, self.latest_quote()),
            (SLOT_TODAY, self.quote_of_the_day(now)),
        ):
            if quote is None:
                self.shared_store.clear(slot)
            else:
                self.shared_store.publish(slot, SharedQuote.from_quote(quote, created_at=now))

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def count(self) -> int:
        return len(self.quotes)

    def _index_of(self, quote_id: str) -> Optional[int]:
        for index, quote in enumerate(self.quotes):
            if quote.id == quote_id:
                return index
        return None

    def get(self, quote_id: str) -> Optional[Quote]:
        index = self._index_of(quote_id)
        return self.quotes[index] if index is not None else None

    def favorites(self) -> List[Quote]:
        return [q for q in self.quotes if q.is_favorite]

    def recent(self, limit: int = RECENT_LIMIT) -> List[Quote]:
        """Newest first."""
        if limit <= 0:
            return []
        return list(reversed(self.quotes[-limit:]))

    def search(self, query: str = "", category: Optional[SourceCategory] = None) -> List[Quote]:
        return search_quotes(self.quotes, query, category)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(
        self,
        text: str,
        author: str = "",
        source: str = "",
        color_style: PastelStyle = PastelStyle.MINT,
        font_style: FontStyle = FontStyle.ROUNDED,
    ) -> Quote:
        """Append a new quote, persist it, and feed Memmi once."""
        quote = Quote.create(
            text=text,
            author=author,
            source=source,
            color_style=color_style,
            font_style=font_style,
        )
        self.quotes.append(quote)
        self.last_added_id = quote.id
        self._commit()

        if self.hunger is not None:
            self.hunger.feed(text)

        logger.info(f"Added quote {quote.id}")
        return quote

    def toggle_favorite(self, quote_id: str) -> bool:
        """Flip is_favorite. Returns False (and does nothing) for an unknown id."""
        index = self._index_of(quote_id)
        if index is None:
            return False
        current = self.quotes[index]
        self.quotes[index] = current.copy(is_favorite=not current.is_favorite)
        self._commit()
        return True

    def delete(self, quote_id: str) -> bool:
        index = self._index_of(quote_id)
        if index is None:
            return False
        del self.quotes[index]
        self._commit()
        logger.info(f"Deleted quote {quote_id}")
        return True

    def update(self, updated: Quote) -> bool:
        """Replace the quote with the same id. Callers pass the full entity."""
        index = self._index_of(updated.id)
        if index is None:
            return False
        self.quotes[index] = updated
        self._commit()
        return True

    def resurface(self) -> Optional[Quote]:
        """
        Bring back a past quote.

        Favorites are preferred when any exist. The chosen quote's
        times_resurfaced is incremented and last_resurfaced_at set to now.

        Returns:
            The updated quote, or None when the collection is empty
        """
        chosen = choose_resurface_candidate(self.quotes, self.rng)
        if chosen is None:
            return None

        index = self._index_of(chosen.id)
        resurfaced = chosen.copy(
            times_resurfaced=chosen.times_resurfaced + 1,
            last_resurfaced_at=self.clock(),
        )
        self.quotes[index] = resurfaced
        self._commit()
        return resurfaced
