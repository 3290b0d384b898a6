"""Anchored validators, one per indicator type.

Every predicate looks at the whole (already normalized) string; a value with
internal whitespace never validates.
"""

from __future__ import annotations

import hashlib
import ipaddress
import re
from typing import Callable, Optional
from urllib.parse import urlsplit

import tldextract

from . import patterns
from .models import HashKind, IndicatorType

_IPV4_RE = re.compile(patterns.IPV4)
_DOMAIN_RE = re.compile(patterns.DOMAIN)
_EMAIL_LOCAL_RE = re.compile(patterns.EMAIL_LOCAL)
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_CVE_RE = re.compile(patterns.CVE, re.IGNORECASE)
_ASN_RE = re.compile(patterns.ASN, re.IGNORECASE)
_BTC_BASE58_RE = re.compile(patterns.BTC_BASE58)
_BTC_BECH32_RE = re.compile(patterns.BTC_BECH32)
_ETH_RE = re.compile(patterns.ETH)
_XMR_RE = re.compile(patterns.XMR)
_MAC_RE = re.compile(patterns.MAC)
_GA_RE = re.compile(patterns.GA)

# Bundled Public Suffix List snapshot only; classification never goes online.
_SUFFIXES = tldextract.TLDExtract(suffix_list_urls=())

_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3


def _has_whitespace(value: str) -> bool:
    return any(c.isspace() for c in value)


def is_ipv4(value: str) -> bool:
    return _IPV4_RE.fullmatch(value) is not None


def is_ipv6(value: str) -> bool:
    if ":" not in value or _has_whitespace(value):
        return False
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def is_ip(value: str) -> bool:
    return is_ipv4(value) or is_ipv6(value)


def is_domain(value: str) -> bool:
    if len(value) > 253 or _DOMAIN_RE.fullmatch(value) is None:
        return False
    parts = _SUFFIXES(value)
    return bool(parts.domain and parts.suffix)


def is_url(value: str) -> bool:
    if _has_whitespace(value):
        return False
    try:
        parts = urlsplit(value)
        # Accessing .port validates it.
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in patterns.URL_SCHEMES:
        return False
    if not value.lower().startswith(parts.scheme.lower() + "://"):
        return False

    host = parts.hostname or ""
    if not host:
        return False
    if "[" in parts.netloc:
        return is_ipv6(host)
    return is_ipv4(host) or is_domain(host)


def is_email(value: str) -> bool:
    if value.count("@") != 1:
        return False
    local, domain = value.split("@")
    return _EMAIL_LOCAL_RE.fullmatch(local) is not None and is_domain(domain)


def hash_kind(value: str) -> Optional[HashKind]:
    """Return md5/sha1/sha256/sha512 by exact hex length, else None."""
    if _HEX_RE.fullmatch(value) is None:
        return None
    kind = patterns.HASH_LENGTHS.get(len(value))
    return kind  # type: ignore[return-value]


def is_md5(value: str) -> bool:
    return hash_kind(value) == "md5"


def is_sha1(value: str) -> bool:
    return hash_kind(value) == "sha1"


def is_sha256(value: str) -> bool:
    return hash_kind(value) == "sha256"


def is_sha512(value: str) -> bool:
    return hash_kind(value) == "sha512"


def is_hash(value: str) -> bool:
    return hash_kind(value) is not None


def is_cve(value: str) -> bool:
    return _CVE_RE.fullmatch(value) is not None


def is_asn(value: str) -> bool:
    if _ASN_RE.fullmatch(value) is None:
        return False
    return int(value[2:]) <= 0xFFFFFFFF


def _b58decode(value: str) -> Optional[bytes]:
    n = 0
    for c in value:
        idx = patterns.BASE58_ALPHABET.find(c)
        if idx < 0:
            return None
        n = n * 58 + idx
    pad = len(value) - len(value.lstrip("1"))
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
    return b"\x00" * pad + body


def _is_base58check_address(value: str) -> bool:
    raw = _b58decode(value)
    if raw is None or len(raw) != 25:
        return False
    # 0x00 = P2PKH, 0x05 = P2SH (mainnet)
    if raw[0] not in (0x00, 0x05):
        return False
    digest = hashlib.sha256(hashlib.sha256(raw[:21]).digest()).digest()
    return digest[:4] == raw[21:]


def _bech32_polymod(values: list[int]) -> int:
    gen = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            if (top >> i) & 1:
                chk ^= gen[i]
    return chk


def _bech32_hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _is_bech32_address(value: str) -> bool:
    if value.lower() != value and value.upper() != value:
        return False
    value = value.lower()
    if len(value) > 90:
        return False
    hrp, _, data_part = value.rpartition("1")
    if hrp != "bc" or len(data_part) < 7:
        return False
    data = []
    for c in data_part:
        idx = patterns.BECH32_CHARSET.find(c)
        if idx < 0:
            return False
        data.append(idx)
    # data[0] is the witness version
    if data[0] > 16:
        return False
    const = _bech32_polymod(_bech32_hrp_expand(hrp) + data)
    if data[0] == 0:
        return const == _BECH32_CONST
    return const == _BECH32M_CONST


def is_btc(value: str) -> bool:
    if _BTC_BASE58_RE.fullmatch(value):
        return _is_base58check_address(value)
    if _BTC_BECH32_RE.fullmatch(value):
        return _is_bech32_address(value)
    return False


def is_eth(value: str) -> bool:
    # EIP-55 mixed-case checksums need keccak-256, which hashlib does not ship.
    return _ETH_RE.fullmatch(value) is not None


def is_xmr(value: str) -> bool:
    if _XMR_RE.fullmatch(value) is None:
        return False
    return all(c in patterns.BASE58_ALPHABET for c in value)


def is_mac(value: str) -> bool:
    return _MAC_RE.fullmatch(value) is not None


def is_ga(value: str) -> bool:
    return _GA_RE.fullmatch(value) is not None


VALIDATORS: dict[IndicatorType, Callable[[str], bool]] = {
    "hash": is_hash,
    "ip": is_ip,
    "domain": is_domain,
    "url": is_url,
    "email": is_email,
    "cve": is_cve,
    "asn": is_asn,
    "btc": is_btc,
    "eth": is_eth,
    "xmr": is_xmr,
    "mac": is_mac,
    "ga": is_ga,
}


def validate(indicator_type: IndicatorType, value: str) -> bool:
    """Check `value` against the validator for `indicator_type`.

    `text` accepts any non-blank string.
    """
    if indicator_type == "text":
        return bool(value.strip())
    fn = VALIDATORS.get(indicator_type)
    if fn is None:
        return False
    return fn(value)


def classify(value: str) -> list[IndicatorType]:
    """Return every type whose validator accepts `value`, in priority order."""
    if not value or _has_whitespace(value):
        return []
    return [t for t, fn in VALIDATORS.items() if fn(value)]
