"""
Pytest configuration and shared fixtures for Quotie tests.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
import os
import random
import sys
import time

import pytest


# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from Quotie.codec import encode_envelope  # noqa: E402
from Quotie.models import FontStyle, PastelStyle, Quote  # noqa: E402
from Quotie.atomic_io import write_json_atomic  # noqa: E402


class FakeClock:
    """Settable clock; call it to get "now"."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, **kwargs) -> datetime:
        self.now = self.now.replace(**kwargs)
        return self.now


def _set_local_timezone(name):
    if name is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = name
    time.tzset()


@pytest.fixture(autouse=True)
def utc_local_time():
    """Run every test with the process timezone pinned to UTC."""
    previous = os.environ.get("TZ")
    _set_local_timezone("UTC")
    yield
    _set_local_timezone(previous)


@pytest.fixture
def berlin_local_time(utc_local_time):
    """Switch the process timezone to one with DST (CET/CEST)."""
    _set_local_timezone("Europe/Berlin")


@pytest.fixture
def project_root_path():
    """Return the project root directory path."""
    return project_root


@pytest.fixture
def clock():
    """Mid-June morning in UTC, clear of any DST switch."""
    return FakeClock(datetime(2026, 6, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_quote():
    """Factory for quotes with sensible defaults."""
    def _make(text="Feelings are data.", author="Esther Perel", source="Podcast", **kwargs):
        return Quote.create(text=text, author=author, source=source, **kwargs)
    return _make


@pytest.fixture
def sample_collection(make_quote):
    return [
        make_quote("Hope is a thing with feathers.", "Emily Dickinson", "Collected Poems",
                   color_style=PastelStyle.LILAC, font_style=FontStyle.SERIF),
        make_quote("Feelings are data.", "Esther Perel", "Where Should We Begin podcast",
                   is_favorite=True),
        make_quote("Be here now.", "Ram Dass", "Be Here Now", color_style=PastelStyle.SKY),
    ]


@pytest.fixture
def app_group_dir(tmp_path):
    group_dir = tmp_path / "group.com.QuotichApp.Quotich"
    group_dir.mkdir()
    return group_dir


@pytest.fixture
def empty_quotes_file(app_group_dir):
    """A valid but empty envelope, so no sample quotes are loaded."""
    path = app_group_dir / "quotes.json"
    write_json_atomic(path, encode_envelope([]))
    return path


@pytest.fixture
def quotie_env(tmp_path, monkeypatch):
    """Point every QUOTIE_* variable at a temp directory."""
    monkeypatch.setenv("QUOTIE_APP_GROUP_DIR", str(tmp_path / "group"))
    monkeypatch.setenv("QUOTIE_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("QUOTIE_LOG_PATH", str(tmp_path / "logs" / "quotie.log"))
    monkeypatch.setenv("QUOTIE_MEMMI_BASE_URL", "")
    monkeypatch.setenv("QUOTIE_MEMMI_TIMEOUT", "10")
    monkeypatch.setenv("QUOTIE_NOTIFICATIONS", "granted")
    return tmp_path
