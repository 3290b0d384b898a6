"""Menu commands: encoding, parsing and dispatch.

A Command is what a menu item carries: an action, an indicator type, a query
and a target (an analyzer name, or "all" to search on every enabled
searcher). It is serialized as a query string, so a query containing "&",
"=", spaces or words like "scan" round-trips unchanged::

    action=search&type=ip&query=8.8.8.8&target=Shodan

Every dispatch function returns a DispatchResult. Scanner failures are caught
here and never escape to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlencode

from .analyzers.base import ApiKeyMissing, RequestFailed, Scanner, Searcher, ValidationMismatch
from .analyzers.registry import Registry, default_registry, is_enabled
from .config import Settings, load_settings
from .models import (
    ALL,
    INDICATOR_TYPES,
    Action,
    AnalyzerEntry,
    ApiKeys,
    DispatchError,
    DispatchResult,
    IndicatorType,
    SearcherStates,
)
from .transport import Transport, UrllibTransport
from .validators import hash_kind, validate

logger = logging.getLogger(__name__)

ACTIONS: tuple[Action, ...] = ("search", "scan")
_FIELDS = ("action", "type", "query", "target")


@dataclass(frozen=True)
class Command:
    action: Action
    type: IndicatorType
    query: str
    target: str

    @classmethod
    def from_entry(cls, entry: AnalyzerEntry, action: Action = "search") -> "Command":
        return cls(action=action, type=entry.type, query=entry.query, target=entry.name)

    def to_menu_id(self) -> str:
        return urlencode([(k, getattr(self, k)) for k in _FIELDS])

    @classmethod
    def parse(cls, menu_id: str) -> "Command":
        """Inverse of to_menu_id. Raises ValueError on anything else."""
        try:
            parsed = parse_qs(menu_id, keep_blank_values=True, strict_parsing=True)
        except ValueError as e:
            raise ValueError(f"Malformed menu id: {menu_id!r}") from e

        unknown = set(parsed) - set(_FIELDS)
        if unknown:
            raise ValueError(f"Unknown menu id field(s): {', '.join(sorted(unknown))}")

        values: dict[str, str] = {}
        for k in _FIELDS:
            got = parsed.get(k)
            if not got or len(got) != 1 or not got[0]:
                raise ValueError(f"Menu id needs exactly one non-empty '{k}'")
            values[k] = got[0]

        if values["action"] not in ACTIONS:
            raise ValueError(f"Unknown action: {values['action']}")
        if values["type"] not in INDICATOR_TYPES:
            raise ValueError(f"Unknown indicator type: {values['type']}")
        if values["action"] == "scan" and values["target"] == ALL:
            raise ValueError("Scans need a single target")

        return cls(
            action=values["action"],  # type: ignore[arg-type]
            type=values["type"],  # type: ignore[arg-type]
            query=values["query"],
            target=values["target"],
        )


def _mismatch(command: Command, message: str) -> DispatchResult:
    logger.debug("Rejected %s: %s", command.to_menu_id(), message)
    return DispatchResult(
        action=command.action,
        target=command.target,
        error=DispatchError(kind="validation_mismatch", message=message),
    )


def _check_query(command: Command) -> Optional[DispatchResult]:
    if not validate(command.type, command.query):
        return _mismatch(command, str(ValidationMismatch(command.type, command.query)))
    return None


def search(command: Command, registry: Optional[Registry] = None) -> DispatchResult:
    """Build the URL for one (searcher, type, query)."""
    registry = registry or default_registry()
    bad = _check_query(command)
    if bad:
        return bad

    analyzer = registry.get(command.target)
    kind = hash_kind(command.query) if command.type == "hash" else None
    if not isinstance(analyzer, Searcher) or not analyzer.can_search(command.type, kind):
        return _mismatch(command, f"{command.target} cannot search {command.type}")

    try:
        url = analyzer.search(command.type, command.query)
    except ValidationMismatch as e:
        return _mismatch(command, str(e))
    return DispatchResult(action="search", target=analyzer.name, urls=[url])


def search_all(
    command: Command,
    registry: Optional[Registry] = None,
    searcher_states: Optional[SearcherStates] = None,
) -> DispatchResult:
    """One URL per enabled searcher supporting the type, in registry order."""
    registry = registry or default_registry()
    bad = _check_query(command)
    if bad:
        return bad

    kind = hash_kind(command.query) if command.type == "hash" else None
    urls: list[str] = []
    for searcher in registry.searchers_for(command.type, kind):
        if not is_enabled(searcher.name, searcher_states):
            continue
        try:
            urls.append(searcher.search(command.type, command.query))
        except ValidationMismatch as e:
            logger.debug("%s skipped: %s", searcher.name, e)
    return DispatchResult(action="search", target=ALL, urls=urls)


def scan(
    command: Command,
    registry: Optional[Registry] = None,
    api_keys: Optional[ApiKeys] = None,
    transport: Optional[Transport] = None,
) -> DispatchResult:
    """Submit the query to one scanner and return its report URL.

    ApiKeyMissing is raised (and caught below) before the transport is used.
    """
    registry = registry or default_registry()
    bad = _check_query(command)
    if bad:
        return bad

    analyzer = registry.get(command.target)
    if not isinstance(analyzer, Scanner) or not analyzer.can_scan(command.type):
        return _mismatch(command, f"{command.target} cannot scan {command.type}")

    api_key = (api_keys or {}).get(analyzer.name)
    try:
        url = analyzer.scan(command.type, command.query, api_key, transport or UrllibTransport())
    except ApiKeyMissing as e:
        logger.warning("%s", e)
        return DispatchResult(
            action="scan",
            target=analyzer.name,
            error=DispatchError(kind="api_key_missing", message=str(e)),
        )
    except RequestFailed as e:
        logger.warning("Scan on %s failed: %s", analyzer.name, e)
        return DispatchResult(
            action="scan",
            target=analyzer.name,
            error=DispatchError(kind="request_failed", message=str(e)),
        )
    return DispatchResult(action="scan", target=analyzer.name, urls=[url])


def dispatch(
    command: Command,
    *,
    registry: Optional[Registry] = None,
    settings: Optional[Settings] = None,
    transport: Optional[Transport] = None,
) -> DispatchResult:
    """Run a parsed command against a fresh settings snapshot."""
    settings = settings if settings is not None else load_settings()
    registry = registry or default_registry()

    if command.action == "scan":
        return scan(
            command,
            registry,
            settings.api_keys,
            transport or UrllibTransport(timeout=settings.timeout),
        )
    if command.target == ALL:
        return search_all(command, registry, settings.searcher_states)
    return search(command, registry)


def dispatch_menu_id(menu_id: str, **kwargs) -> DispatchResult:
    """Parse and dispatch. Raises ValueError for a malformed id."""
    return dispatch(Command.parse(menu_id), **kwargs)
