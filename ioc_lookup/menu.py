"""Context menu construction for a selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .analyzers.registry import Registry
from .command import ALL, Command
from .config import Settings
from .models import AnalyzerEntry
from .selector import Selector


@dataclass(frozen=True)
class MenuItem:
    id: str
    title: str
    command: Command

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "action": self.command.action,
            "type": self.command.type,
            "query": self.command.query,
            "target": self.command.target,
        }


def _item(command: Command) -> MenuItem:
    verb = "Search" if command.action == "search" else "Scan"
    return MenuItem(
        id=command.to_menu_id(),
        title=f"{verb} this {command.type} on {command.target}",
        command=command,
    )


def build_menu(
    text: str,
    *,
    settings: Optional[Settings] = None,
    registry: Optional[Registry] = None,
) -> list[MenuItem]:
    """Menu items in display order.

    - one "Search this <type> on <name>" per enabled searcher entry
    - "Search this <type> on all" for the first non-text entry
    - one "Scan this <type> on <name>" per enabled scanner entry
    """
    settings = settings or Settings()
    selector = Selector(text, enable_idn=settings.enable_idn, registry=registry)

    items: list[MenuItem] = []
    first_non_text: Optional[AnalyzerEntry] = None
    for entry in selector.get_searcher_entries(settings.searcher_states):
        if entry.type != "text" and first_non_text is None:
            first_non_text = entry
        items.append(_item(Command.from_entry(entry, "search")))

    if first_non_text is not None:
        items.append(
            _item(
                Command(
                    action="search",
                    type=first_non_text.type,
                    query=first_non_text.query,
                    target=ALL,
                )
            )
        )

    for entry in selector.get_scanner_entries(settings.searcher_states):
        items.append(_item(Command.from_entry(entry, "scan")))

    return items
