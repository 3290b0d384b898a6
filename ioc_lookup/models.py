"""Models for ioc-lookup.

Plain dataclasses; these are created per selection/click and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Mapping, Optional

if TYPE_CHECKING:
    from .analyzers.base import Analyzer

IndicatorType = Literal[
    "ip",
    "domain",
    "url",
    "email",
    "hash",
    "cve",
    "asn",
    "btc",
    "eth",
    "xmr",
    "mac",
    "ga",
    "text",
]
HashKind = Literal["md5", "sha1", "sha256", "sha512"]
Action = Literal["search", "scan"]
ErrorKind = Literal["validation_mismatch", "api_key_missing", "request_failed"]

# Resolution priority. The first matching type is the "primary" one.
INDICATOR_TYPES: tuple[IndicatorType, ...] = (
    "hash",
    "ip",
    "domain",
    "url",
    "email",
    "cve",
    "asn",
    "btc",
    "eth",
    "xmr",
    "mac",
    "ga",
    "text",
)

HASH_KINDS: tuple[HashKind, ...] = ("md5", "sha1", "sha256", "sha512")

# Command target meaning "every enabled searcher"; never an analyzer name.
ALL = "all"

SearcherStates = Mapping[str, bool]
ApiKeys = Mapping[str, str]


@dataclass(frozen=True)
class Indicator:
    """A resolved (type, value) pair."""

    type: IndicatorType
    value: str

    # Only set for hashes.
    hash_kind: Optional[HashKind] = None


@dataclass(frozen=True)
class AnalyzerEntry:
    analyzer: "Analyzer"
    type: IndicatorType
    query: str

    @property
    def name(self) -> str:
        return self.analyzer.name

    def to_dict(self) -> dict[str, Any]:
        return {"analyzer": self.analyzer.name, "type": self.type, "query": self.query}


@dataclass(frozen=True)
class DispatchError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a single menu click.

    An empty `urls` list means "do not navigate".
    """

    action: Action
    target: str
    urls: list[str] = field(default_factory=list)
    error: Optional[DispatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def url(self) -> str:
        return self.urls[0] if self.urls else ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "action": self.action,
            "target": self.target,
            "urls": list(self.urls),
            "ok": self.ok,
        }
        if self.error is not None:
            out["error"] = {"kind": self.error.kind, "message": self.error.message}
        return out
