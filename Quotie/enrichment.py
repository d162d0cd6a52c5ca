#!/usr/bin/env python3
"""
Memmi enrichment client.

Posts a quote's text to the Memmi service, which answers with a short
reaction that is stored on the quote as memmi_reaction. Enrichment is best
effort: the quote is always saved first, and a failed call only means the
quote has no reaction.

API:
    POST {base_url}/api/v1/quotes/enrich
    {"quote": "<text>"}
    -> {"received": "<text>", "memmi": "<reaction>", "source": "<model>"}

Usage:
    from Quotie.enrichment import MemmiClient

    client = MemmiClient(base_url="https://memmi.example.com")
    response = client.enrich_quote("Hope is a thing with feathers.")
    print(response.memmi)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests


logger = logging.getLogger(__name__)

ENRICH_PATH = "/api/v1/quotes/enrich"


class MemmiServiceError(Exception):
    """Raised when the enrichment service returns an unusable response."""
    pass


@dataclass
class MemmiResponse:
    received: str
    memmi: str
    source: str


class MemmiClient:
    """HTTP client for the Memmi enrichment service."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            base_url: Service root, e.g. https://memmi.example.com
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{ENRICH_PATH}"

    def enrich_quote(self, quote: str) -> MemmiResponse:
        """
        Ask Memmi to react to a quote.

        Raises:
            MemmiServiceError: Non-2xx status or malformed body
            requests.RequestException: Network failure or timeout
        """
        poster = self.session.post if self.session is not None else requests.post
        response = poster(
            self.endpoint,
            json={"quote": quote},
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

        if not 200 <= response.status_code <= 299:
            raise MemmiServiceError(f"Bad response from Memmi: HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise MemmiServiceError(f"Memmi returned invalid JSON: {e}") from e

        if not isinstance(body, dict) or not all(
            isinstance(body.get(key), str) for key in ("received", "memmi", "source")
        ):
            raise MemmiServiceError("Memmi response missing required fields")

        return MemmiResponse(
            received=body["received"],
            memmi=body["memmi"],
            source=body["source"],
        )
