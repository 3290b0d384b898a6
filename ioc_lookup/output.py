"""Output helpers (notifications, renderers, exit codes).

Presentation only: everything here is derived from menu items, extraction
results and DispatchResult values.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .menu import MenuItem
from .models import DispatchResult

NOTIFICATION_TITLE = "ioc-lookup"

EXIT_OK = 0
EXIT_DISPATCH_ERROR = 1
EXIT_USAGE = 2


@dataclass(frozen=True)
class Notification:
    title: str
    message: str

    @classmethod
    def from_result(cls, result: DispatchResult) -> "Notification | None":
        """A notification for a failed dispatch, None on success."""
        if result.error is None:
            return None
        return cls(title=NOTIFICATION_TITLE, message=result.error.message)

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "message": self.message}


def exit_code_from_result(result: DispatchResult) -> int:
    return EXIT_OK if result.ok else EXIT_DISPATCH_ERROR


def _md_code(value: Any) -> str:
    """Render an inline code span, handling backticks safely."""
    s = str(value)
    ticks = 0
    for m in re.finditer(r"`+", s):
        ticks = max(ticks, len(m.group(0)))
    delim = "`" * (ticks + 1)
    if s.startswith(" ") or s.endswith(" "):
        return f"{delim} {s} {delim}"
    return f"{delim}{s}{delim}"


def _cell(value: Any) -> str:
    """Escape text for use in a Markdown table cell."""
    s = str(value).replace("\r", "").replace("\n", " ")
    return s.replace("|", "\\|")


# --- menu ---


def menu_to_json(items: Sequence[MenuItem]) -> str:
    return json.dumps([i.to_dict() for i in items], indent=2, ensure_ascii=False)


def menu_to_pretty(items: Sequence[MenuItem]) -> str:
    if not items:
        return "No analyzers for this selection."
    lines = []
    for i in items:
        icon = "🔍" if i.command.action == "search" else "🛰️"
        lines.append(f"{icon} {i.title}  [{i.command.query}]")
    return "\n".join(lines)


def menu_to_markdown(items: Sequence[MenuItem]) -> str:
    out = ["| Action | Type | Query | Target |", "|---|---|---|---|"]
    for i in items:
        c = i.command
        out.append(f"| {c.action} | {c.type} | {_md_code(_cell(c.query))} | {_cell(c.target)} |")
    return "\n".join(out)


# --- extraction ---


def extraction_to_json(found: Mapping[str, Sequence[str]]) -> str:
    return json.dumps({k: list(v) for k, v in found.items()}, indent=2, ensure_ascii=False)


def extraction_to_pretty(found: Mapping[str, Sequence[str]]) -> str:
    if not found:
        return "No indicators found."
    lines = []
    for indicator_type, values in found.items():
        lines.append(f"{indicator_type} ({len(values)}):")
        lines.extend(f"  {v}" for v in values)
    return "\n".join(lines)


def extraction_to_markdown(found: Mapping[str, Sequence[str]]) -> str:
    out = ["| Type | Indicator |", "|---|---|"]
    for indicator_type, values in found.items():
        for v in values:
            out.append(f"| {indicator_type} | {_md_code(_cell(v))} |")
    return "\n".join(out)


# --- dispatch ---


def result_to_json(result: DispatchResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def result_to_pretty(result: DispatchResult) -> str:
    if result.error is not None:
        return f"❌ {result.error.kind}: {result.error.message}"
    if not result.urls:
        return "Nothing to open."
    return "\n".join(result.urls)


def result_to_markdown(result: DispatchResult) -> str:
    if result.error is not None:
        return f"**{result.error.kind}**: {_cell(result.error.message)}"
    return "\n".join(f"- <{u}>" for u in result.urls)


RENDERERS = {
    "menu": {"pretty": menu_to_pretty, "json": menu_to_json, "markdown": menu_to_markdown},
    "extract": {
        "pretty": extraction_to_pretty,
        "json": extraction_to_json,
        "markdown": extraction_to_markdown,
    },
    "result": {"pretty": result_to_pretty, "json": result_to_json, "markdown": result_to_markdown},
}


def render(kind: str, payload: Any, fmt: str = "pretty") -> str:
    return RENDERERS[kind][fmt](payload)
