"""
Unit tests for search, source categories, quote input parsing and the
snack library.
"""
import random

import pytest

from Quotie.search import SourceCategory, parse_quote_input, search_quotes
from Quotie.snacks import SNACK_LIBRARY, SnackSource, by_source, recommended


@pytest.mark.unit
class TestSourceCategory:
    """Test keyword heuristics for source buckets."""

    @pytest.mark.parametrize("source,category", [
        ("Kindle highlights", SourceCategory.BOOKS),
        ("The Sun Also Rises", SourceCategory.BOOKS),
        ("Netflix documentary", SourceCategory.MOVIES),
        ("Huberman podcast", SourceCategory.PODCASTS),
        ("TEDx talk", SourceCategory.SPEECHES),
        ("Substack newsletter", SourceCategory.ARTICLES),
        ("Song lyrics", SourceCategory.SONGS),
    ])
    def test_matches(self, source, category):
        assert category.matches(source)

    def test_title_heuristic_has_blockers(self):
        assert not SourceCategory.BOOKS.matches("Keynote at WWDC")
        assert not SourceCategory.BOOKS.matches("https://example.com/post")
        assert not SourceCategory.BOOKS.matches("Conversation")

    def test_misc_matches_any_non_empty_source(self):
        assert SourceCategory.MISC.matches("a napkin")
        assert not SourceCategory.MISC.matches("   ")


@pytest.mark.unit
class TestSearchQuotes:
    def test_query_matches_text_author_and_source(self, sample_collection):
        assert len(search_quotes(sample_collection, "feathers")) == 1
        assert len(search_quotes(sample_collection, "ram dass")) == 1
        assert len(search_quotes(sample_collection, "PODCAST")) == 1

    def test_blank_query_returns_all(self, sample_collection):
        assert search_quotes(sample_collection, "  ") == sample_collection

    def test_category_then_query(self, sample_collection):
        results = search_quotes(sample_collection, "be", SourceCategory.PODCASTS)
        assert [q.author for q in results] == ["Esther Perel"]


@pytest.mark.unit
class TestParseQuoteInput:
    """Test splitting "Text. By Author. Source"."""

    def test_full_line(self):
        parsed = parse_quote_input("“Feelings are data.” By Esther Perel. Podcast")
        assert parsed.text == "Feelings are data"
        assert parsed.author == "Esther Perel"
        assert parsed.source == "Podcast"

    def test_text_only(self):
        parsed = parse_quote_input("Be here now")
        assert parsed.text == "Be here now"
        assert parsed.author == ""
        assert parsed.source == ""

    @pytest.mark.parametrize("raw", ["", "   ", "“”", "..."])
    def test_blank(self, raw):
        assert parse_quote_input(raw) is None


@pytest.mark.unit
class TestSnacks:
    def test_library_covers_every_source(self):
        assert {s.source for s in SNACK_LIBRARY} == set(SnackSource)

    def test_by_source(self):
        songs = by_source(SnackSource.SONGS)
        assert songs
        assert all(s.source is SnackSource.SONGS for s in songs)
        assert len(by_source()) == len(SNACK_LIBRARY)

    def test_recommended_is_deterministic_with_seed(self):
        first = recommended(5, rng=random.Random(7))
        second = recommended(5, rng=random.Random(7))
        assert first == second
        assert len(set(first)) == 5

    def test_recommended_count_is_bounded(self):
        assert len(recommended(1000, rng=random.Random(1))) == len(SNACK_LIBRARY)
        assert recommended(-3) == []
