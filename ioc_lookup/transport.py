"""HTTP transport used by scanners.

Scanners never import urllib directly; they receive a Transport so tests can
swap in a stub and never touch the network.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Mapping, Optional, Protocol

from .analyzers.base import RequestFailed

logger = logging.getLogger(__name__)

USER_AGENT = "ioc-lookup"


class Transport(Protocol):
    def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        json_body: Optional[Mapping[str, Any]] = None,
        form: Optional[Mapping[str, str]] = None,
    ) -> dict[str, Any]:
        ...


class UrllibTransport:
    """POSTs with urllib.request and decodes the JSON response."""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        json_body: Optional[Mapping[str, Any]] = None,
        form: Optional[Mapping[str, str]] = None,
    ) -> dict[str, Any]:
        if json_body is not None:
            data = json.dumps(json_body).encode("utf-8")
            content_type = "application/json"
        else:
            data = urllib.parse.urlencode(form or {}).encode("utf-8")
            content_type = "application/x-www-form-urlencoded"

        req = urllib.request.Request(url, data=data, method="POST")
        req.add_header("Content-Type", content_type)
        req.add_header("Accept", "application/json")
        req.add_header("User-Agent", USER_AGENT)
        for k, v in headers.items():
            req.add_header(k, v)

        logger.debug("POST %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise RequestFailed(f"HTTP {e.code}: {e.reason}") from e
        except Exception as e:
            raise RequestFailed(str(e)) from e

        try:
            payload = json.loads(body) if body else {}
        except json.JSONDecodeError as e:
            raise RequestFailed(f"Invalid JSON response from {url}") from e
        if not isinstance(payload, dict):
            raise RequestFailed(f"Unexpected response from {url}")
        return payload
