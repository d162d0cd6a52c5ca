#!/usr/bin/env python3
"""
Quotie application composition root.

Builds every app-side service once and wires them together:

    QuoteStore --feeds--> HungerMeter --on_change--> HungryNudgeScheduler
        |
        +--publishes--> SharedStateStore (read by the widget process)
        +--signals----> WidgetReloader

Nothing here is a global: each process constructs its own QuotieApp (or,
for the widget, its own WidgetTimelineProvider) at start-up.

Usage:
    from Quotie.app import QuotieApp
    from Quotie.config import QuotieConfig

    app = QuotieApp.from_config(QuotieConfig.from_env())
    app.on_launch()
    app.add_quote("Feelings are data.", author="Esther Perel")
"""

import logging
import random
from datetime import datetime
from typing import Callable, List, Optional

import requests

from .config import QuotieConfig
from .daily_state import HungerMeter
from .defaults import FileDefaults, InMemoryDefaults
from .enrichment import MemmiClient, MemmiServiceError
from .models import FontStyle, PastelStyle, Quote, now_local
from .notifications import (
    FileNotificationCenter,
    HungryNudgeScheduler,
    InMemoryNotificationCenter,
    NotificationCenter,
    NudgeDecision,
)
from .quote_store import QuoteStore
from .shared_store import (
    DefaultsSharedStateStore,
    InMemorySharedStateStore,
    NullWidgetReloader,
    WidgetReloader,
)
from .snacks import SnackQuote


logger = logging.getLogger(__name__)


class QuotieApp:
    """Top-level holder of the app-side services."""

    def __init__(
        self,
        store: QuoteStore,
        hunger: HungerMeter,
        nudges: HungryNudgeScheduler,
        shared_store,
        enrichment: Optional[MemmiClient] = None,
    ):
        self.store = store
        self.hunger = hunger
        self.nudges = nudges
        self.shared_store = shared_store
        self.enrichment = enrichment
        self.last_nudge_decision: Optional[NudgeDecision] = None

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def build(
        cls,
        quotes_path,
        private_defaults,
        shared_store,
        center: NotificationCenter,
        reloader=None,
        enrichment: Optional[MemmiClient] = None,
        clock: Callable[[], datetime] = now_local,
        rng: Optional[random.Random] = None,
    ) -> "QuotieApp":
        """Wire services from already-constructed collaborators."""
        nudges = HungryNudgeScheduler(center, private_defaults, clock=clock)
        hunger = HungerMeter(private_defaults, clock=clock)
        store = QuoteStore(
            quotes_path=quotes_path,
            shared_store=shared_store,
            reloader=reloader,
            hunger=hunger,
            clock=clock,
            rng=rng,
        )
        app = cls(store, hunger, nudges, shared_store, enrichment)
        hunger.on_change = app._on_hunger_changed
        return app

    @classmethod
    def from_config(
        cls,
        config: QuotieConfig,
        permission_prompt: Optional[Callable[[], bool]] = None,
        clock: Callable[[], datetime] = now_local,
    ) -> "QuotieApp":
        """Build the file-backed app described by config."""
        private_defaults = FileDefaults(config.private_defaults_path)
        shared_defaults = FileDefaults(config.shared_defaults_path)
        center = FileNotificationCenter(
            config.pending_notifications_path,
            private_defaults,
            mode=config.notifications,
            prompt=permission_prompt,
        )
        enrichment = None
        if config.enrichment_enabled:
            enrichment = MemmiClient(config.memmi_base_url, timeout=config.memmi_timeout)

        return cls.build(
            quotes_path=config.quotes_path,
            private_defaults=private_defaults,
            shared_store=DefaultsSharedStateStore(shared_defaults),
            center=center,
            reloader=WidgetReloader(shared_defaults, clock=clock),
            enrichment=enrichment,
            clock=clock,
        )

    @classmethod
    def in_memory(
        cls,
        quotes_path,
        clock: Callable[[], datetime] = now_local,
        rng: Optional[random.Random] = None,
        center: Optional[NotificationCenter] = None,
    ) -> "QuotieApp":
        """App with in-memory counters, shared store and notifications."""
        return cls.build(
            quotes_path=quotes_path,
            private_defaults=InMemoryDefaults(),
            shared_store=InMemorySharedStateStore(),
            center=center or InMemoryNotificationCenter(),
            reloader=NullWidgetReloader(),
            clock=clock,
            rng=rng,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _on_hunger_changed(self, level: int) -> None:
        self.last_nudge_decision = self.nudges.refresh(level)

    def on_launch(self) -> NudgeDecision:
        """
        App start-up: decay hunger, publish today's quote, refresh the nudge.

        The nudge is refreshed even when decay changed nothing.
        """
        self.hunger.apply_daily_decay()
        self.store.refresh_projection()
        self.last_nudge_decision = self.nudges.refresh(self.hunger.level)
        return self.last_nudge_decision

    # =========================================================================
    # User actions
    # =========================================================================

    def add_quote(
        self,
        text: str,
        author: str = "",
        source: str = "",
        color_style: PastelStyle = PastelStyle.MINT,
        font_style: FontStyle = FontStyle.ROUNDED,
        enrich: bool = True,
    ) -> Quote:
        """
        Save a new quote.

        Raises:
            ValueError: If text is blank
        """
        text = text.strip()
        if not text:
            raise ValueError("Quote text must not be empty")

        quote = self.store.add(
            text=text,
            author=author.strip(),
            source=source.strip(),
            color_style=color_style,
            font_style=font_style,
        )

        if enrich and self.enrichment is not None:
            quote = self.enrich_quote(quote)
        return quote

    def enrich_quote(self, quote: Quote) -> Quote:
        """Attach Memmi's reaction. Failures are logged and the quote returned as is."""
        if self.enrichment is None:
            return quote
        try:
            response = self.enrichment.enrich_quote(quote.text)
        except (MemmiServiceError, requests.RequestException) as e:
            logger.warning(f"Memmi enrichment failed for {quote.id}: {e}")
            return quote

        current = self.store.get(quote.id)
        if current is None:
            return quote
        enriched = current.copy(memmi_reaction=response.memmi)
        self.store.update(enriched)
        return enriched

    def add_snack(self, snack: SnackQuote) -> Quote:
        return self.add_quote(
            text=snack.text,
            author=snack.author,
            source=snack.origin,
            color_style=PastelStyle.MINT,
            font_style=FontStyle.ROUNDED,
        )

    def edit_quote(self, quote_id: str, **changes) -> Optional[Quote]:
        """Apply a partial edit by rebuilding the full quote first."""
        current = self.store.get(quote_id)
        if current is None:
            return None
        updated = current.copy(**changes)
        self.store.update(updated)
        return updated

    def set_widget_enabled(self, enabled: bool) -> bool:
        saved = self.shared_store.set_widget_enabled(enabled)
        if self.store.reloader is not None:
            self.store.reloader.reload_all_timelines()
        return saved

    def pending_nudges(self) -> List:
        return self.nudges.center.pending()
