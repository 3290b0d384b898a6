"""ioc-lookup: classify selected text into indicators and build analyzer URLs."""

__version__ = "1.0.0"

from .command import Command, dispatch
from .extractors import extract_all
from .menu import build_menu
from .normalize import defang, normalize, refang
from .selector import Selector, get_scanner_entries, get_searcher_entries

__all__ = [
    "Command",
    "Selector",
    "build_menu",
    "defang",
    "dispatch",
    "extract_all",
    "get_scanner_entries",
    "get_searcher_entries",
    "normalize",
    "refang",
]
