"""Analyzer interface.

An Analyzer is a stateless, process-wide adapter over an external lookup
service. It has one or both capabilities:

- Searcher: builds a lookup URL from a query, no I/O.
- Scanner: submits the query with a credential and returns a report URL.

A service that offers both (urlscan.io, VirusTotal ...) is a single analyzer,
so its name stays unique and one SearcherStates switch covers both.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..models import HashKind, IndicatorType

if TYPE_CHECKING:
    from ..transport import Transport


class ValidationMismatch(ValueError):
    """A query does not fit the indicator type it was paired with."""

    def __init__(self, indicator_type: str, query: str):
        super().__init__(f"{query!r} is not a valid {indicator_type}")
        self.indicator_type = indicator_type
        self.query = query


class ApiKeyMissing(Exception):
    """A scanner was invoked without its credential."""

    def __init__(self, scanner: str):
        super().__init__(f"API key for {scanner} is not set")
        self.scanner = scanner


class RequestFailed(Exception):
    """The scanner's network call failed."""


class Analyzer:
    # Stable name used as menu label, config key and dispatch target.
    name: str

    endpoint: str

    search_types: tuple[IndicatorType, ...] = ()
    scan_types: tuple[IndicatorType, ...] = ()

    # Hash kinds the searcher accepts; empty means all of them.
    supported_hash_kinds: tuple[HashKind, ...] = ()

    @property
    def supported_types(self) -> tuple[IndicatorType, ...]:
        out = list(self.search_types)
        out.extend(t for t in self.scan_types if t not in out)
        return tuple(out)

    def can_search(self, indicator_type: IndicatorType, hash_kind: Optional[HashKind] = None) -> bool:
        if not isinstance(self, Searcher) or indicator_type not in self.search_types:
            return False
        if indicator_type == "hash" and hash_kind and self.supported_hash_kinds:
            return hash_kind in self.supported_hash_kinds
        return True

    def can_scan(self, indicator_type: IndicatorType) -> bool:
        return isinstance(self, Scanner) and indicator_type in self.scan_types

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class Searcher(Analyzer):
    """Builds a lookup URL. Never performs I/O and never fails for a validated query."""

    def search(self, indicator_type: IndicatorType, query: str) -> str:
        raise NotImplementedError

    def search_by_ip(self, query: str) -> str:
        return self.search("ip", query)

    def search_by_domain(self, query: str) -> str:
        return self.search("domain", query)

    def search_by_url(self, query: str) -> str:
        return self.search("url", query)

    def search_by_hash(self, query: str) -> str:
        return self.search("hash", query)

    def search_by_text(self, query: str) -> str:
        return self.search("text", query)


class Scanner(Analyzer):
    """Submits the query to a remote service and returns a report URL.

    Raises ApiKeyMissing when `api_key` is empty and RequestFailed on any
    transport or response error.
    """

    def scan(
        self,
        indicator_type: IndicatorType,
        query: str,
        api_key: Optional[str],
        transport: "Transport",
    ) -> str:
        raise NotImplementedError

    def require_key(self, api_key: Optional[str]) -> str:
        if not api_key or not api_key.strip():
            raise ApiKeyMissing(self.name)
        return api_key.strip()
