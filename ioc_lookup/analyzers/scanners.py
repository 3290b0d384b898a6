"""Analyzers that can submit a query for active scanning.

Each of these services also has a plain lookup page, so every class here is a
TemplateSearcher as well as a Scanner. Network I/O only happens in `scan`,
through the injected transport.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any, Optional

from ..models import IndicatorType
from .base import RequestFailed, Scanner
from .searchers import TemplateSearcher

if TYPE_CHECKING:
    from ..transport import Transport

logger = logging.getLogger(__name__)


def _field(payload: dict[str, Any], *path: str) -> str:
    cur: Any = payload
    for key in path:
        if not isinstance(cur, dict):
            cur = None
            break
        cur = cur.get(key)
    if not isinstance(cur, str) or not cur:
        raise RequestFailed(f"Missing {'.'.join(path)} in response")
    return cur


class URLScan(TemplateSearcher, Scanner):
    scan_types = ("ip", "domain", "url")

    # Scans are public unless configured otherwise.
    visibility: str = "public"

    def __init__(self) -> None:
        super().__init__(
            "urlscan.io",
            "https://urlscan.io",
            {
                "ip": "{endpoint}/ip/{query}",
                "domain": "{endpoint}/domain/{query}",
                "url": "{endpoint}/search/#page.url%3A{query}",
            },
        )

    def scan(
        self,
        indicator_type: IndicatorType,
        query: str,
        api_key: Optional[str],
        transport: "Transport",
    ) -> str:
        key = self.require_key(api_key)
        payload = transport.post(
            f"{self.endpoint}/api/v1/scan/",
            headers={"API-Key": key},
            json_body={"url": query, "visibility": self.visibility},
        )
        uuid = _field(payload, "uuid")
        logger.debug("urlscan.io accepted %s as %s", query, uuid)
        return f"{self.endpoint}/result/{uuid}/"


class VirusTotal(TemplateSearcher, Scanner):
    """VirusTotal identifies a URL report by the sha256 of the URL itself."""

    scan_types = ("url",)

    def __init__(self) -> None:
        super().__init__(
            "VirusTotal",
            "https://www.virustotal.com",
            {
                "ip": "{endpoint}/gui/ip-address/{query}",
                "domain": "{endpoint}/gui/domain/{query}",
                "url": "{endpoint}/gui/url/{raw}",
                "hash": "{endpoint}/gui/file/{query}",
            },
        )

    def search(self, indicator_type: IndicatorType, query: str) -> str:
        if indicator_type == "url":
            query = hashlib.sha256(query.encode("utf-8")).hexdigest()
        return super().search(indicator_type, query)

    def scan(
        self,
        indicator_type: IndicatorType,
        query: str,
        api_key: Optional[str],
        transport: "Transport",
    ) -> str:
        key = self.require_key(api_key)
        payload = transport.post(
            f"{self.endpoint}/api/v3/urls",
            headers={"x-apikey": key},
            form={"url": query},
        )
        # Analysis ids look like "u-<sha256>-<timestamp>".
        analysis_id = _field(payload, "data", "id")
        parts = analysis_id.split("-")
        if len(parts) < 2 or len(parts[1]) != 64:
            raise RequestFailed(f"Unexpected analysis id: {analysis_id}")
        return f"{self.endpoint}/gui/url/{parts[1]}"


class HybridAnalysis(TemplateSearcher, Scanner):
    scan_types = ("url",)

    def __init__(self) -> None:
        super().__init__(
            "HybridAnalysis",
            "https://www.hybrid-analysis.com",
            {
                "ip": "{endpoint}/search?query={query}",
                "domain": "{endpoint}/search?query={query}",
                "hash": "{endpoint}/search?query={query}",
            },
        )

    def scan(
        self,
        indicator_type: IndicatorType,
        query: str,
        api_key: Optional[str],
        transport: "Transport",
    ) -> str:
        key = self.require_key(api_key)
        payload = transport.post(
            f"{self.endpoint}/api/v2/quick-scan/url",
            headers={"api-key": key, "User-Agent": "Falcon Sandbox"},
            form={"scan_type": "all", "url": query},
        )
        sha256 = _field(payload, "sha256")
        return f"{self.endpoint}/sample/{sha256}"


def builtin_scanners() -> list[Scanner]:
    return [HybridAnalysis(), URLScan(), VirusTotal()]
