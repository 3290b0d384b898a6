"""Turn a text selection into analyzer entries.

The Selector classifies one selection:

1. normalize it (trim, strip wrappers, refang, optional IDN);
2. if the whole string validates, every matching type becomes an indicator
   with the whole string as its query;
3. otherwise every extractor runs over the text and each candidate is
   re-validated against its own type;
4. with nothing found, the text itself becomes a single `text` indicator.

Entries are then emitted per indicator, per analyzer, in type priority and
registry order. Nothing here raises for "no match"; an empty selection simply
has no entries.
"""

from __future__ import annotations

import logging
from typing import Optional

from .analyzers.base import ValidationMismatch
from .analyzers.registry import Registry, default_registry, is_enabled
from .extractors import extract_all
from .models import AnalyzerEntry, Indicator, SearcherStates
from .normalize import normalize
from .validators import classify, hash_kind, validate

logger = logging.getLogger(__name__)


class Selector:
    def __init__(
        self,
        text: str,
        *,
        enable_idn: bool = False,
        registry: Optional[Registry] = None,
    ):
        self.text = text
        self.enable_idn = enable_idn
        self.registry = registry if registry is not None else default_registry()
        self.normalized = normalize(text, enable_idn=enable_idn)

    def _indicator(self, indicator_type, value: str) -> Indicator:
        kind = hash_kind(value) if indicator_type == "hash" else None
        return Indicator(type=indicator_type, value=value, hash_kind=kind)

    def indicators(self) -> list[Indicator]:
        """Resolved indicators, primary first."""
        value = self.normalized
        if not value:
            return []

        types = classify(value)
        if types:
            return [self._indicator(t, value) for t in types]

        out: list[Indicator] = []
        seen: set[tuple[str, str]] = set()
        for indicator_type, candidates in extract_all(value).items():
            for candidate in candidates:
                if (indicator_type, candidate) in seen:
                    continue
                if not validate(indicator_type, candidate):
                    logger.debug("skipped: %s", ValidationMismatch(indicator_type, candidate))
                    continue
                seen.add((indicator_type, candidate))
                out.append(self._indicator(indicator_type, candidate))

        if not out:
            return [Indicator(type="text", value=value)]
        return out

    def primary(self) -> Optional[Indicator]:
        found = self.indicators()
        return found[0] if found else None

    def get_searcher_entries(
        self,
        searcher_states: Optional[SearcherStates] = None,
    ) -> list[AnalyzerEntry]:
        entries: list[AnalyzerEntry] = []
        for ind in self.indicators():
            for searcher in self.registry.searchers_for(ind.type, ind.hash_kind):
                if not is_enabled(searcher.name, searcher_states):
                    continue
                entries.append(AnalyzerEntry(analyzer=searcher, type=ind.type, query=ind.value))
        return entries

    def get_scanner_entries(
        self,
        searcher_states: Optional[SearcherStates] = None,
    ) -> list[AnalyzerEntry]:
        """Scanners only ever act on the primary indicator."""
        ind = self.primary()
        if ind is None:
            return []
        return [
            AnalyzerEntry(analyzer=scanner, type=ind.type, query=ind.value)
            for scanner in self.registry.scanners_for(ind.type)
            if is_enabled(scanner.name, searcher_states)
        ]


def get_searcher_entries(
    text: str,
    searcher_states: Optional[SearcherStates] = None,
    *,
    enable_idn: bool = False,
    registry: Optional[Registry] = None,
) -> list[AnalyzerEntry]:
    return Selector(text, enable_idn=enable_idn, registry=registry).get_searcher_entries(
        searcher_states
    )


def get_scanner_entries(
    text: str,
    searcher_states: Optional[SearcherStates] = None,
    *,
    enable_idn: bool = False,
    registry: Optional[Registry] = None,
) -> list[AnalyzerEntry]:
    return Selector(text, enable_idn=enable_idn, registry=registry).get_scanner_entries(
        searcher_states
    )
