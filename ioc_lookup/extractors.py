"""Extract indicators embedded in free-form text.

Extractors share their grammar with the validators but are not anchored, so
they are deliberately looser: the resolver re-validates every candidate.
Every function returns a new list in left-to-right order of appearance with
duplicates (within that one type) removed. Overlaps across types are kept;
a domain inside a URL is returned by both `extract_domains` and
`extract_urls`.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

from . import patterns
from .models import IndicatorType
from .validators import is_ipv6

_IPV4_RE = re.compile(rf"(?<![0-9.]){patterns.IPV4}(?![0-9]|\.[0-9])")
_IPV6_RE = re.compile(rf"(?<![0-9A-Fa-f:]){patterns.IPV6}(?![0-9A-Fa-f:])")
_DOMAIN_RE = re.compile(rf"(?<![\w@.-]){patterns.DOMAIN}(?![\w@-])")
_URL_RE = re.compile(patterns.URL, re.IGNORECASE)
_EMAIL_RE = re.compile(rf"(?<![\w.%+-]){patterns.EMAIL}(?![\w-])")
_HASH_RES = {
    kind: re.compile(rf"\b[0-9A-Fa-f]{{{length}}}\b")
    for length, kind in patterns.HASH_LENGTHS.items()
}
_CVE_RE = re.compile(rf"\b{patterns.CVE}\b", re.IGNORECASE)
_ASN_RE = re.compile(rf"\b{patterns.ASN}\b", re.IGNORECASE)
_BTC_RE = re.compile(rf"\b(?:{patterns.BTC_BECH32}|{patterns.BTC_BASE58})\b")
_ETH_RE = re.compile(rf"\b{patterns.ETH}\b")
_XMR_RE = re.compile(rf"\b{patterns.XMR}\b")
_MAC_RE = re.compile(rf"\b{patterns.MAC}\b")
_GA_RE = re.compile(rf"\b{patterns.GA}\b")


def _scan(
    pattern: re.Pattern[str],
    text: str,
    *,
    check: Optional[Callable[[str], bool]] = None,
    strip: str = "",
) -> list[tuple[int, str]]:
    found: list[tuple[int, str]] = []
    for m in pattern.finditer(text):
        value = m.group(0)
        if strip:
            value = value.rstrip(strip)
        if not value:
            continue
        if check is not None and not check(value):
            continue
        found.append((m.start(), value))
    return found


def _unique(found: Iterable[tuple[int, str]]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for _, value in sorted(found, key=lambda item: item[0]):
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def _is_ipv6_candidate(value: str) -> bool:
    return value != "::" and is_ipv6(value)


def extract_ipv4(text: str) -> list[str]:
    return _unique(_scan(_IPV4_RE, text))


def _scan_ipv6(text: str) -> list[tuple[int, str]]:
    # The IPv6 shape is loose enough to hit clock times and MACs; confirm it.
    found: list[tuple[int, str]] = []
    for start, value in _scan(_IPV6_RE, text):
        # A lone trailing colon is prose ("2001:db8::1: done"), "::" is not.
        if value.endswith(":") and not value.endswith("::"):
            value = value[:-1]
        if _is_ipv6_candidate(value):
            found.append((start, value))
    return found


def extract_ipv6(text: str) -> list[str]:
    return _unique(_scan_ipv6(text))


def extract_ips(text: str) -> list[str]:
    return _unique(_scan(_IPV4_RE, text) + _scan_ipv6(text))


def extract_domains(text: str) -> list[str]:
    return _unique(_scan(_DOMAIN_RE, text))


def extract_urls(text: str) -> list[str]:
    return _unique(_scan(_URL_RE, text, strip=patterns.TRAILING_PUNCTUATION))


def extract_emails(text: str) -> list[str]:
    return _unique(_scan(_EMAIL_RE, text))


def extract_md5(text: str) -> list[str]:
    return _unique(_scan(_HASH_RES["md5"], text))


def extract_sha1(text: str) -> list[str]:
    return _unique(_scan(_HASH_RES["sha1"], text))


def extract_sha256(text: str) -> list[str]:
    return _unique(_scan(_HASH_RES["sha256"], text))


def extract_sha512(text: str) -> list[str]:
    return _unique(_scan(_HASH_RES["sha512"], text))


def extract_hashes(text: str) -> list[str]:
    found: list[tuple[int, str]] = []
    for pattern in _HASH_RES.values():
        found.extend(_scan(pattern, text))
    return _unique(found)


def extract_cves(text: str) -> list[str]:
    return _unique(_scan(_CVE_RE, text))


def extract_asns(text: str) -> list[str]:
    return _unique(_scan(_ASN_RE, text))


def extract_btc(text: str) -> list[str]:
    return _unique(_scan(_BTC_RE, text))


def extract_eth(text: str) -> list[str]:
    return _unique(_scan(_ETH_RE, text))


def extract_xmr(text: str) -> list[str]:
    return _unique(_scan(_XMR_RE, text))


def extract_macs(text: str) -> list[str]:
    return _unique(_scan(_MAC_RE, text))


def extract_ga(text: str) -> list[str]:
    return _unique(_scan(_GA_RE, text))


EXTRACTORS: dict[IndicatorType, Callable[[str], list[str]]] = {
    "hash": extract_hashes,
    "ip": extract_ips,
    "domain": extract_domains,
    "url": extract_urls,
    "email": extract_emails,
    "cve": extract_cves,
    "asn": extract_asns,
    "btc": extract_btc,
    "eth": extract_eth,
    "xmr": extract_xmr,
    "mac": extract_macs,
    "ga": extract_ga,
}


def extract_all(text: str) -> dict[IndicatorType, list[str]]:
    """Run every extractor; types come back in resolution priority order."""
    out: dict[IndicatorType, list[str]] = {}
    for indicator_type, fn in EXTRACTORS.items():
        values = fn(text)
        if values:
            out[indicator_type] = values
    return out
