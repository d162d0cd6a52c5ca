#!/usr/bin/env python3
"""
Data models shared by the Quotie app and its widget.

Quote is the canonical entity owned by the QuoteStore. SharedQuote is the
read-optimized projection published into the shared store for the widget.
HungerState and NudgeState are the small counter records persisted in the
app's private defaults file.

Usage:
    from Quotie.models import Quote, PastelStyle, FontStyle

    quote = Quote.create(text="Be kind.", author="Ian Maclaren", source="Book")
    payload = quote.to_dict()
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class PastelStyle(Enum):
    """Card color styles."""
    MINT = "mint"
    BLUSH = "blush"
    LILAC = "lilac"
    SKY = "sky"
    PEACH = "peach"
    BUTTER = "butter"


class FontStyle(Enum):
    """Card font styles."""
    STANDARD = "standard"
    SERIF = "serif"
    ROUNDED = "rounded"


def now_local() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def to_iso(value: datetime) -> str:
    """Serialize a datetime as ISO8601, assuming local time when naive."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


def parse_iso(value: Any) -> Optional[datetime]:
    """Parse an ISO8601 string, returning None for anything unparseable."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass
class Quote:
    """A saved quote with its styling and resurfacing counters."""
    id: str
    text: str
    author: str
    source: str
    is_favorite: bool = False
    color_style: PastelStyle = PastelStyle.MINT
    times_resurfaced: int = 0
    last_resurfaced_at: Optional[datetime] = None
    font_style: FontStyle = FontStyle.ROUNDED
    memmi_reaction: Optional[str] = None

    @classmethod
    def create(
        cls,
        text: str,
        author: str = "",
        source: str = "",
        color_style: PastelStyle = PastelStyle.MINT,
        font_style: FontStyle = FontStyle.ROUNDED,
        is_favorite: bool = False,
    ) -> "Quote":
        """Build a new quote with a fresh id and default counters."""
        return cls(
            id=str(uuid.uuid4()),
            text=text,
            author=author,
            source=source,
            is_favorite=is_favorite,
            color_style=color_style,
            font_style=font_style,
        )

    def copy(self, **changes) -> "Quote":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON shape (camelCase keys)."""
        data: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "source": self.source,
            "isFavorite": self.is_favorite,
            "colorStyle": self.color_style.value,
            "timesResurfaced": self.times_resurfaced,
            "fontStyle": self.font_style.value,
        }
        if self.last_resurfaced_at is not None:
            data["lastResurfacedAt"] = to_iso(self.last_resurfaced_at)
        if self.memmi_reaction is not None:
            data["memmiReaction"] = self.memmi_reaction
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Quote"]:
        """
        Build a Quote from its persisted shape.

        Returns None instead of raising when the record is malformed:
        a required key is missing, a field has the wrong type, or an enum
        value is outside its closed set.
        """
        if not isinstance(data, dict):
            return None

        for key in ("id", "text", "author", "source"):
            if not isinstance(data.get(key), str):
                return None

        is_favorite = data.get("isFavorite", False)
        if not isinstance(is_favorite, bool):
            return None

        color_raw = data.get("colorStyle", PastelStyle.MINT.value)
        font_raw = data.get("fontStyle", FontStyle.ROUNDED.value)
        if color_raw not in _PASTEL_VALUES or font_raw not in _FONT_VALUES:
            return None

        times = data.get("timesResurfaced", 0)
        if isinstance(times, bool) or not isinstance(times, int):
            return None

        last_raw = data.get("lastResurfacedAt")
        last_resurfaced_at = None
        if last_raw is not None:
            last_resurfaced_at = parse_iso(last_raw)
            if last_resurfaced_at is None:
                return None

        reaction = data.get("memmiReaction")
        if reaction is not None and not isinstance(reaction, str):
            return None

        return cls(
            id=data["id"],
            text=data["text"],
            author=data["author"],
            source=data["source"],
            is_favorite=is_favorite,
            color_style=PastelStyle(color_raw),
            times_resurfaced=times,
            last_resurfaced_at=last_resurfaced_at,
            font_style=FontStyle(font_raw),
            memmi_reaction=reaction,
        )


_PASTEL_VALUES = {style.value for style in PastelStyle}
_FONT_VALUES = {style.value for style in FontStyle}


@dataclass(frozen=True)
class SharedQuote:
    """Projection of a Quote published for the widget."""
    id: str
    text: str
    author: Optional[str]
    created_at: datetime
    color_style_raw: str

    @classmethod
    def from_quote(cls, quote: Quote, created_at: Optional[datetime] = None) -> "SharedQuote":
        author = quote.author.strip()
        return cls(
            id=quote.id,
            text=quote.text,
            author=author or None,
            created_at=created_at or now_local(),
            color_style_raw=quote.color_style.value,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "createdAt": to_iso(self.created_at),
            "colorStyleRaw": self.color_style_raw,
        }
        if self.author is not None:
            data["author"] = self.author
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SharedQuote"]:
        if not isinstance(data, dict):
            return None
        if not all(isinstance(data.get(key), str) for key in ("id", "text", "colorStyleRaw")):
            return None
        created_at = parse_iso(data.get("createdAt"))
        if created_at is None:
            return None
        author = data.get("author")
        if author is not None and not isinstance(author, str):
            return None
        return cls(
            id=data["id"],
            text=data["text"],
            author=author,
            created_at=created_at,
            color_style_raw=data["colorStyleRaw"],
        )


@dataclass
class HungerState:
    """Memmi's hunger counter (0 = starving, 5 = full)."""
    hunger_level: int = 0
    last_fed_date: datetime = field(default_factory=now_local)


@dataclass
class NudgeState:
    """De-duplication and rotation state for the hungry nudge."""
    last_nudge_date: Optional[datetime] = None
    last_message_index: int = 0
