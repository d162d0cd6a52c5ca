"""
Unit tests for Quotie data models.

Tests cover:
- Quote creation (unique ids, default counters)
- Persisted JSON shape and tolerant parsing
- SharedQuote projection (author normalization, optional keys)
"""
from datetime import datetime, timezone

import pytest

from Quotie.models import FontStyle, PastelStyle, Quote, SharedQuote, parse_iso, to_iso


@pytest.mark.unit
class TestQuoteCreate:
    """Test Quote.create() defaults."""

    def test_new_quotes_get_unique_ids(self):
        ids = {Quote.create(text="same text").id for _ in range(50)}
        assert len(ids) == 50

    def test_defaults(self):
        quote = Quote.create(text="Be kind.")
        assert quote.is_favorite is False
        assert quote.times_resurfaced == 0
        assert quote.last_resurfaced_at is None
        assert quote.memmi_reaction is None
        assert quote.color_style is PastelStyle.MINT
        assert quote.font_style is FontStyle.ROUNDED

    def test_copy_keeps_identity(self, make_quote):
        quote = make_quote()
        copy = quote.copy(is_favorite=True)
        assert copy.id == quote.id
        assert copy.is_favorite is True
        assert quote.is_favorite is False


@pytest.mark.unit
class TestQuoteSerialization:
    """Test Quote to_dict()/from_dict()."""

    def test_camel_case_keys(self, make_quote):
        data = make_quote(color_style=PastelStyle.PEACH).to_dict()
        assert data["colorStyle"] == "peach"
        assert data["fontStyle"] == "rounded"
        assert data["isFavorite"] is False
        assert data["timesResurfaced"] == 0
        assert "lastResurfacedAt" not in data
        assert "memmiReaction" not in data

    def test_round_trip_with_optional_fields(self, make_quote):
        when = datetime(2026, 6, 10, 9, 30, tzinfo=timezone.utc)
        quote = make_quote().copy(last_resurfaced_at=when, memmi_reaction="Yum!", times_resurfaced=2)
        assert Quote.from_dict(quote.to_dict()) == quote

    def test_missing_optional_keys_use_defaults(self):
        quote = Quote.from_dict({"id": "a", "text": "t", "author": "", "source": ""})
        assert quote is not None
        assert quote.color_style is PastelStyle.MINT
        assert quote.font_style is FontStyle.ROUNDED
        assert quote.times_resurfaced == 0

    @pytest.mark.parametrize("broken", [
        {"text": "t", "author": "", "source": ""},
        {"id": "a", "text": 5, "author": "", "source": ""},
        {"id": "a", "text": "t", "author": "", "source": "", "colorStyle": "neon"},
        {"id": "a", "text": "t", "author": "", "source": "", "fontStyle": "comic"},
        {"id": "a", "text": "t", "author": "", "source": "", "timesResurfaced": "3"},
        {"id": "a", "text": "t", "author": "", "source": "", "lastResurfacedAt": "yesterday"},
        "not a dict",
    ])
    def test_malformed_records_are_rejected(self, broken):
        assert Quote.from_dict(broken) is None


@pytest.mark.unit
class TestSharedQuote:
    """Test the widget projection record."""

    def test_blank_author_becomes_none(self, make_quote, clock):
        shared = SharedQuote.from_quote(make_quote(author="   "), created_at=clock())
        assert shared.author is None
        assert "author" not in shared.to_dict()

    def test_projection_fields(self, make_quote, clock):
        quote = make_quote(color_style=PastelStyle.BUTTER)
        shared = SharedQuote.from_quote(quote, created_at=clock())
        assert shared.id == quote.id
        assert shared.text == quote.text
        assert shared.author == "Esther Perel"
        assert shared.color_style_raw == "butter"
        assert shared.created_at == clock()

    def test_round_trip(self, make_quote, clock):
        shared = SharedQuote.from_quote(make_quote(), created_at=clock())
        assert SharedQuote.from_dict(shared.to_dict()) == shared

    def test_undecodable_record(self):
        assert SharedQuote.from_dict({"id": "a", "text": "t"}) is None
        assert SharedQuote.from_dict({"id": "a", "text": "t", "colorStyleRaw": "mint", "createdAt": "??"}) is None


@pytest.mark.unit
class TestIsoHelpers:
    def test_parse_z_suffix(self):
        parsed = parse_iso("2026-06-10T09:00:00Z")
        assert parsed == datetime(2026, 6, 10, 9, 0, tzinfo=timezone.utc)

    def test_parse_garbage(self):
        assert parse_iso("not a date") is None
        assert parse_iso(None) is None
        assert parse_iso(42) is None

    def test_to_iso_round_trip(self, clock):
        assert parse_iso(to_iso(clock())) == clock()
