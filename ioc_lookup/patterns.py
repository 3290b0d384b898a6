"""Regex building blocks shared by validators and extractors.

Validators compile these anchored (fullmatch); extractors compile them with
lookaround boundaries so they can scan free-form text.
"""

from __future__ import annotations

IPV4_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"
IPV4 = rf"{IPV4_OCTET}(?:\.{IPV4_OCTET}){{3}}"

# Loose shape only; candidates are confirmed with ipaddress.
IPV6 = r"(?:[0-9A-Fa-f]{0,4}:){2,7}(?:[0-9A-Fa-f]{1,4}|" + IPV4 + r")?(?:%[0-9A-Za-z]+)?"

LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
DOMAIN = rf"(?:{LABEL}\.)+(?:[A-Za-z]{{2,63}}|xn--[A-Za-z0-9-]{{1,59}})"

URL_SCHEMES = ("http", "https", "ftp")
URL = r"(?:https?|ftp)://[^\s<>\"'`]+"

EMAIL_LOCAL = r"[A-Za-z0-9._%+-]+"
EMAIL = rf"{EMAIL_LOCAL}@{DOMAIN}"

HASH_LENGTHS = {32: "md5", 40: "sha1", 64: "sha256", 128: "sha512"}

CVE = r"CVE-[0-9]{4}-[0-9]{4,}"
ASN = r"AS[0-9]{1,10}"

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

BTC_BASE58 = r"[13][a-km-zA-HJ-NP-Z1-9]{25,34}"
BTC_BECH32 = r"(?:bc1|BC1)[02-9ac-hj-np-zAC-HJ-NP-Z]{11,87}"
ETH = r"0x[0-9A-Fa-f]{40}"
XMR = r"[48][0-9AB][1-9A-HJ-NP-Za-km-z]{93}(?:[1-9A-HJ-NP-Za-km-z]{11})?"

MAC = r"[0-9A-Fa-f]{2}([-:])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}"

GA = r"(?:UA-[0-9]{4,10}-[0-9]{1,4}|G-[A-Z0-9]{10})"

# Characters commonly glued to an indicator by surrounding prose.
TRAILING_PUNCTUATION = ".,;:!?)]}>'\"”’"
