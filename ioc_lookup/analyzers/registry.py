"""Analyzer registry + selection helpers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from ..models import ALL, HashKind, IndicatorType, SearcherStates
from .base import Analyzer, Scanner, Searcher
from .scanners import builtin_scanners
from .searchers import builtin_searchers


def is_enabled(name: str, searcher_states: Optional[SearcherStates]) -> bool:
    """A missing key means enabled."""
    if not searcher_states:
        return True
    return bool(searcher_states.get(name, True))


@dataclass(frozen=True)
class Registry:
    analyzers: tuple[Analyzer, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for a in self.analyzers:
            if a.name == ALL:
                raise ValueError(f"Analyzer name {a.name!r} is reserved")
            if a.name in seen:
                raise ValueError(f"Duplicate analyzer name: {a.name}")
            seen.add(a.name)

    def get(self, name: str) -> Optional[Analyzer]:
        for a in self.analyzers:
            if a.name == name:
                return a
        return None

    def list_names(self) -> list[str]:
        return [a.name for a in self.analyzers]

    def analyzers_for(
        self,
        indicator_type: IndicatorType,
        hash_kind: Optional[HashKind] = None,
    ) -> list[Analyzer]:
        return [
            a
            for a in self.analyzers
            if a.can_search(indicator_type, hash_kind) or a.can_scan(indicator_type)
        ]

    def searchers_for(
        self,
        indicator_type: IndicatorType,
        hash_kind: Optional[HashKind] = None,
    ) -> list[Searcher]:
        return [
            a
            for a in self.analyzers
            if isinstance(a, Searcher) and a.can_search(indicator_type, hash_kind)
        ]

    def scanners_for(self, indicator_type: IndicatorType) -> list[Scanner]:
        return [a for a in self.analyzers if isinstance(a, Scanner) and a.can_scan(indicator_type)]

    def select(
        self,
        names: Iterable[str] | None = None,
        *,
        searcher_states: Optional[SearcherStates] = None,
    ) -> list[Analyzer]:
        if names is None:
            names = self.list_names()

        selected: list[Analyzer] = []
        for name in names:
            a = self.get(name)
            if a is None:
                continue
            if not is_enabled(name, searcher_states):
                continue
            selected.append(a)
        return selected


def build_registry() -> Registry:
    """Build the built-in catalogue, ordered by name."""
    analyzers: list[Analyzer] = [*builtin_searchers(), *builtin_scanners()]
    analyzers.sort(key=lambda a: a.name.lower())
    return Registry(tuple(analyzers))


@lru_cache(maxsize=1)
def default_registry() -> Registry:
    return build_registry()
