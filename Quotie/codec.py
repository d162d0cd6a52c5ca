#!/usr/bin/env python3
"""
Quote file codec.

The quotes file has had two shapes over time:

    envelope  {"version": 1, "quotes": [...]}     (current)
    legacy    [...]                               (pre-versioning)

Loading walks an ordered list of decode strategies. Each strategy inspects
the parsed JSON and returns a DecodeResult; the first successful result
wins. When none succeeds the built-in sample quotes are used.

Usage:
    from Quotie.codec import decode_quotes, encode_envelope

    result = decode_quotes(raw_bytes)
    quotes = result.quotes
    payload = encode_envelope(quotes)
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .models import Quote
from .sample_quotes import sample_quotes


logger = logging.getLogger(__name__)

CURRENT_VERSION = 1


class DecodeFormat(Enum):
    """Which strategy produced a decoded collection."""
    ENVELOPE = "envelope"
    LEGACY_ARRAY = "legacy_array"
    SAMPLES = "samples"


@dataclass
class DecodeResult:
    """Outcome of one decode strategy."""
    ok: bool
    format: Optional[DecodeFormat] = None
    quotes: List[Quote] = field(default_factory=list)
    version: Optional[int] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, fmt: DecodeFormat, quotes: List[Quote], version: Optional[int] = None) -> "DecodeResult":
        return cls(ok=True, format=fmt, quotes=quotes, version=version)

    @classmethod
    def failure(cls, reason: str) -> "DecodeResult":
        return cls(ok=False, reason=reason)


# =============================================================================
# Encoding
# =============================================================================

def encode_envelope(quotes: List[Quote], version: int = CURRENT_VERSION) -> dict:
    """Build the versioned envelope payload for a collection."""
    return {"version": version, "quotes": [q.to_dict() for q in quotes]}


def encode_legacy_array(quotes: List[Quote]) -> list:
    """Build the pre-versioning bare array payload."""
    return [q.to_dict() for q in quotes]


# =============================================================================
# Decode strategies
# =============================================================================

def _decode_quote_list(items: Any) -> Optional[List[Quote]]:
    """Decode every record; a repeated id keeps only its first occurrence."""
    if not isinstance(items, list):
        return None
    quotes = []
    seen = set()
    for item in items:
        quote = Quote.from_dict(item)
        if quote is None:
            return None
        if quote.id in seen:
            logger.warning(f"Dropping duplicate quote id {quote.id}")
            continue
        seen.add(quote.id)
        quotes.append(quote)
    return quotes


def decode_envelope(document: Any) -> DecodeResult:
    """Decode the {"version", "quotes"} envelope."""
    if not isinstance(document, dict):
        return DecodeResult.failure("not an object")
    version = document.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        return DecodeResult.failure("missing or invalid version")
    quotes = _decode_quote_list(document.get("quotes"))
    if quotes is None:
        return DecodeResult.failure("invalid quotes array")
    return DecodeResult.success(DecodeFormat.ENVELOPE, quotes, version=version)


def decode_legacy_array(document: Any) -> DecodeResult:
    """Decode the legacy bare array of quote objects."""
    quotes = _decode_quote_list(document)
    if quotes is None:
        return DecodeResult.failure("not an array of quotes")
    return DecodeResult.success(DecodeFormat.LEGACY_ARRAY, quotes)


DECODE_STRATEGIES: Tuple[Callable[[Any], DecodeResult], ...] = (
    decode_envelope,
    decode_legacy_array,
)


def _parse_json(raw: bytes) -> Tuple[bool, Any]:
    try:
        return True, json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return False, None


def decode_quotes(raw: Optional[bytes]) -> DecodeResult:
    """
    Decode persisted quote bytes, falling back to the sample set.

    Args:
        raw: File contents, or None when there is no file

    Returns:
        A successful DecodeResult. format is SAMPLES when neither the
        envelope nor the legacy format could be read.
    """
    if raw is None:
        return DecodeResult.success(DecodeFormat.SAMPLES, sample_quotes())

    parsed, document = _parse_json(raw)
    if parsed:
        for strategy in DECODE_STRATEGIES:
            result = strategy(document)
            if result.ok:
                return result
            logger.debug(f"{strategy.__name__} rejected quotes file: {result.reason}")

    logger.warning("Quotes file unreadable in every known format; using sample quotes")
    return DecodeResult.success(DecodeFormat.SAMPLES, sample_quotes())
