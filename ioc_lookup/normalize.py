"""Refanging, defanging and selection cleanup.

`normalize()` runs before classification. It is a pure function and never
raises: anything it does not recognize passes through unchanged.
"""

from __future__ import annotations

import re

# Ordered: bracketed forms first so "[.]" is not half-consumed by "\.".
_REFANG_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\s?[\[\(\{]\s*(?:\.|dot)\s*[\]\)\}]\s?", re.IGNORECASE), "."),
    (re.compile(r"\[://\]"), "://"),
    (re.compile(r"[\[\(\{]:[\]\)\}]"), ":"),
    (re.compile(r"\s?[\[\(\{]\s*(?:@|at)\s*[\]\)\}]\s?", re.IGNORECASE), "@"),
    (re.compile(r"\bh(?:xx|__|\*\*|\[tt\])p(s?)(?=(?::|\[:\])//)", re.IGNORECASE), r"http\1"),
    (re.compile(r"\bfxp(s?)(?=(?::|\[:\])//)", re.IGNORECASE), r"ftp\1"),
    (re.compile(r"\\\."), "."),
]

_ZERO_WIDTH = dict.fromkeys(map(ord, "\u200b\u200c\u200d\u2060\ufeff"))

_WRAPPERS = {'"': '"', "'": "'", "<": ">", "\u201c": "\u201d", "\u2018": "\u2019", "`": "`"}

# Hostname-ish runs; \w is Unicode aware so IDN labels are included.
_HOST_RUN = re.compile(r"(?:[\w-]+\.)+[\w-]+", re.UNICODE)
_BARE_HOST = re.compile(r"([(\[<'\"]*)((?:[\w-]+\.)+[\w-]+)([.,;:!?)\]>'\"]*)", re.UNICODE)
_NETLOC = re.compile(r"[^/?#]*")
_TOKEN = re.compile(r"\S+")


def _to_punycode(host: str) -> str:
    """Convert unicode hostname to punycode (idna)."""
    try:
        return host.encode("idna").decode("ascii")
    except Exception:
        return host


def refang(text: str) -> str:
    """Reverse common defanging notations (hxxp, [.], (dot), [@] ...)."""
    out = text
    for pattern, repl in _REFANG_RULES:
        out = pattern.sub(repl, out)
    return out


def defang(text: str) -> str:
    """Defang an indicator for display so it cannot be clicked by accident."""
    out = re.sub(r"\bhttp(?=s?://)", "hxxp", text, flags=re.IGNORECASE)
    out = re.sub(r"\bftp(?=s?://)", "fxp", out, flags=re.IGNORECASE)
    return out.replace(".", "[.]").replace("@", "[@]")


def _convert_host(host: str) -> str:
    if host.isascii() or _HOST_RUN.fullmatch(host) is None:
        return host
    return _to_punycode(host)


def _convert_netloc(netloc: str) -> str:
    userinfo, at, hostport = netloc.rpartition("@")
    if hostport.startswith("["):
        return netloc
    host, colon, port = hostport.partition(":")
    return f"{userinfo}{at}{_convert_host(host)}{colon}{port}"


def _convert_token(token: str) -> str:
    if token.isascii():
        return token
    scheme, sep, rest = token.partition("://")
    if sep:
        netloc = _NETLOC.match(rest).group(0)
        return f"{scheme}{sep}{_convert_netloc(netloc)}{rest[len(netloc):]}"
    if token.count("@") == 1:
        local, domain = token.split("@")
        m = _BARE_HOST.fullmatch(domain)
        if m:
            return f"{local}@{_convert_host(m.group(2))}{m.group(3)}"
        return token
    m = _BARE_HOST.fullmatch(token)
    if m is None:
        return token
    lead, host, trail = m.groups()
    return f"{lead}{_convert_host(host)}{trail}"


def idn_to_ascii(text: str) -> str:
    """Punycode the hostnames in `text`.

    URLs and email addresses only have their host part converted, so paths
    and query strings survive unchanged.
    """
    return _TOKEN.sub(lambda m: _convert_token(m.group(0)), text)


def clean(text: str) -> str:
    """Trim whitespace, zero-width characters and one layer of wrapping quotes."""
    out = text.translate(_ZERO_WIDTH).strip()
    if len(out) >= 2 and _WRAPPERS.get(out[0]) == out[-1]:
        out = out[1:-1].strip()
    return out


def normalize(text: str, enable_idn: bool = False) -> str:
    out = refang(clean(text))
    if enable_idn:
        out = idn_to_ascii(out)
    return out
