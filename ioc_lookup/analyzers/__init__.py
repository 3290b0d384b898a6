from .base import Analyzer, ApiKeyMissing, RequestFailed, Scanner, Searcher, ValidationMismatch
from .registry import Registry, build_registry, default_registry
from .searchers import TemplateSearcher

__all__ = [
    "Analyzer",
    "ApiKeyMissing",
    "RequestFailed",
    "Registry",
    "Scanner",
    "Searcher",
    "TemplateSearcher",
    "ValidationMismatch",
    "build_registry",
    "default_registry",
]
