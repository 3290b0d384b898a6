"""Built-in searchers.

Almost every lookup service is a pure string substitution, so searchers are
data: a name, an endpoint and one URL template per indicator type. Template
placeholders:

- {endpoint}  the analyzer's base URL
- {query}     the query, percent-encoded
- {raw}       the query as-is
- {number}    digits of an ASN ("AS13335" -> "13335")
- {b64}       base64 of the query

A hash template may be keyed by hash kind (md5/sha1/sha256/sha512) instead of
"hash"; only the listed kinds are then supported.
"""

from __future__ import annotations

import base64
from typing import Mapping, Optional
from urllib.parse import quote

from ..models import HASH_KINDS, HashKind, IndicatorType
from ..validators import hash_kind
from .base import Searcher, ValidationMismatch


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


class TemplateSearcher(Searcher):
    def __init__(self, name: str, endpoint: str, templates: Mapping[str, str]):
        self.name = name
        self.endpoint = endpoint
        self.templates = dict(templates)

        types: list[IndicatorType] = []
        kinds: list[HashKind] = []
        for key in self.templates:
            if key in HASH_KINDS:
                kinds.append(key)  # type: ignore[arg-type]
                key = "hash"
            if key not in types:
                types.append(key)  # type: ignore[arg-type]
        self.search_types = tuple(types)
        self.supported_hash_kinds = () if "hash" in self.templates else tuple(kinds)

    def _template_for(self, indicator_type: IndicatorType, query: str) -> Optional[str]:
        if indicator_type == "hash":
            kind = hash_kind(query)
            if kind and kind in self.templates:
                return self.templates[kind]
        return self.templates.get(indicator_type)

    def render(self, template: str, query: str) -> str:
        number = query[2:] if query[:2].upper() == "AS" else query
        return template.format(
            endpoint=self.endpoint,
            query=quote(query, safe=""),
            raw=query,
            number=number,
            b64=quote(_b64(query), safe=""),
        )

    def search(self, indicator_type: IndicatorType, query: str) -> str:
        template = self._template_for(indicator_type, query)
        if template is None:
            raise ValidationMismatch(indicator_type, query)
        return self.render(template, query)


class FOFA(TemplateSearcher):
    """FOFA takes a base64-encoded query expression (ip="..." / domain="...")."""

    def __init__(self) -> None:
        super().__init__(
            "FOFA",
            "https://fofa.info",
            {
                "ip": '{endpoint}/result?qbase64={b64}',
                "domain": '{endpoint}/result?qbase64={b64}',
            },
        )

    def search(self, indicator_type: IndicatorType, query: str) -> str:
        template = self._template_for(indicator_type, query)
        if template is None:
            raise ValidationMismatch(indicator_type, query)
        expression = f'{indicator_type}="{query}"'
        return template.format(endpoint=self.endpoint, b64=quote(_b64(expression), safe=""))


def _t(name: str, endpoint: str, **templates: str) -> TemplateSearcher:
    return TemplateSearcher(name, endpoint, templates)


def builtin_searchers() -> list[Searcher]:
    """Search-only analyzers. Services that can also scan live in scanners.py."""
    return [
        _t("AbuseIPDB", "https://www.abuseipdb.com", ip="{endpoint}/check/{query}"),
        _t("ANY.RUN", "https://app.any.run", hash="{endpoint}/submissions/#filehash:{query}"),
        _t("archive.org", "https://web.archive.org", url="{endpoint}/web/*/{raw}"),
        _t(
            "BGPView",
            "https://bgpview.io",
            ip="{endpoint}/ip/{query}",
            asn="{endpoint}/asn/{number}",
        ),
        _t(
            "BinaryEdge",
            "https://app.binaryedge.io",
            ip="{endpoint}/services/query?query=ip:{query}",
            domain="{endpoint}/services/domains?query={query}",
        ),
        _t(
            "Blockchair",
            "https://blockchair.com",
            btc="{endpoint}/bitcoin/address/{query}",
            eth="{endpoint}/ethereum/address/{query}",
        ),
        _t("BlockCypher", "https://live.blockcypher.com", btc="{endpoint}/btc/address/{query}"),
        _t(
            "BuiltWith",
            "https://builtwith.com",
            domain="{endpoint}/{query}",
            ga="{endpoint}/relationships/tag/{query}",
        ),
        _t(
            "Censys",
            "https://search.censys.io",
            ip="{endpoint}/hosts/{query}",
            domain="{endpoint}/search?resource=hosts&q={query}",
            asn="{endpoint}/search?resource=hosts&q=autonomous_system.asn%3A{number}",
        ),
        _t("crt.sh", "https://crt.sh", domain="{endpoint}/?q={query}"),
        _t("CVE.org", "https://www.cve.org", cve="{endpoint}/CVERecord?id={query}"),
        _t(
            "DNSlytics",
            "https://dnslytics.com",
            ip="{endpoint}/ip/{query}",
            domain="{endpoint}/domain/{query}",
            asn="{endpoint}/bgp/as{number}",
        ),
        _t(
            "DomainTools",
            "https://whois.domaintools.com",
            ip="{endpoint}/{query}",
            domain="{endpoint}/{query}",
        ),
        _t("DuckDuckGo", "https://duckduckgo.com", text="{endpoint}/?q={query}"),
        _t("EmailRep", "https://emailrep.io", email="{endpoint}/{raw}"),
        _t("Etherscan", "https://etherscan.io", eth="{endpoint}/address/{query}"),
        FOFA(),
        _t(
            "FortiGuard",
            "https://www.fortiguard.com",
            ip="{endpoint}/search?q={query}",
            url="{endpoint}/search?q={query}",
            cve="{endpoint}/search?q={query}",
        ),
        _t(
            "Google",
            "https://www.google.com",
            cve="{endpoint}/search?q={query}",
            text="{endpoint}/search?q={query}",
        ),
        _t(
            "GoogleSafeBrowsing",
            "https://transparencyreport.google.com",
            domain="{endpoint}/safe-browsing/search?url={query}",
            url="{endpoint}/safe-browsing/search?url={query}",
        ),
        _t(
            "GreyNoise",
            "https://viz.greynoise.io",
            ip="{endpoint}/ip/{query}",
            cve="{endpoint}/query?gnql=cve%3A{query}",
        ),
        _t(
            "HurricaneElectric",
            "https://bgp.he.net",
            ip="{endpoint}/ip/{query}",
            domain="{endpoint}/dns/{query}",
            asn="{endpoint}/AS{number}",
        ),
        _t(
            "IntelligenceX",
            "https://intelx.io",
            ip="{endpoint}/?s={query}",
            domain="{endpoint}/?s={query}",
            url="{endpoint}/?s={query}",
            email="{endpoint}/?s={query}",
            btc="{endpoint}/?s={query}",
            eth="{endpoint}/?s={query}",
        ),
        _t(
            "IPinfo",
            "https://ipinfo.io",
            ip="{endpoint}/{query}",
            asn="{endpoint}/AS{number}",
        ),
        _t("JoeSandbox", "https://www.joesandbox.com", hash="{endpoint}/search?q={query}"),
        _t("MACLookup", "https://maclookup.app", mac="{endpoint}/search/result?mac={query}"),
        _t(
            "MalShare",
            "https://malshare.com",
            hash="{endpoint}/sample.php?action=detail&hash={query}",
        ),
        _t(
            "Maltiverse",
            "https://maltiverse.com",
            ip="{endpoint}/ip/{query}",
            domain="{endpoint}/hostname/{query}",
            sha256="{endpoint}/sample/{query}",
        ),
        _t(
            "MalwareBazaar",
            "https://bazaar.abuse.ch",
            md5="{endpoint}/browse.php?search=md5%3A{query}",
            sha1="{endpoint}/browse.php?search=sha1%3A{query}",
            sha256="{endpoint}/browse.php?search=sha256%3A{query}",
        ),
        _t("NVD", "https://nvd.nist.gov", cve="{endpoint}/vuln/detail/{query}"),
        _t("ONYPHE", "https://www.onyphe.io", ip="{endpoint}/ip/{query}"),
        _t(
            "OTX",
            "https://otx.alienvault.com",
            ip="{endpoint}/indicator/ip/{query}",
            domain="{endpoint}/indicator/domain/{query}",
            url="{endpoint}/indicator/url/{query}",
            hash="{endpoint}/indicator/file/{query}",
            cve="{endpoint}/indicator/cve/{query}",
        ),
        _t(
            "Pulsedive",
            "https://pulsedive.com",
            ip="{endpoint}/indicator/?ioc={b64}",
            domain="{endpoint}/indicator/?ioc={b64}",
            url="{endpoint}/indicator/?ioc={b64}",
        ),
        _t(
            "SecurityTrails",
            "https://securitytrails.com",
            ip="{endpoint}/list/ip/{query}",
            domain="{endpoint}/domain/{query}/dns",
        ),
        _t(
            "Shodan",
            "https://www.shodan.io",
            ip="{endpoint}/host/{query}",
            domain="{endpoint}/search?query=hostname%3A{query}",
            asn="{endpoint}/search?query=asn%3A{query}",
        ),
        _t("Sploitus", "https://sploitus.com", cve="{endpoint}/?query={query}"),
        _t(
            "SpyOnWeb",
            "https://spyonweb.com",
            ip="{endpoint}/{query}",
            domain="{endpoint}/{query}",
            ga="{endpoint}/{query}",
        ),
        _t(
            "Talos",
            "https://talosintelligence.com",
            ip="{endpoint}/reputation_center/lookup?search={query}",
            domain="{endpoint}/reputation_center/lookup?search={query}",
        ),
        _t(
            "ThreatMiner",
            "https://www.threatminer.org",
            ip="{endpoint}/host.php?q={query}",
            domain="{endpoint}/domain.php?q={query}",
            hash="{endpoint}/sample.php?q={query}",
        ),
        _t("Triage", "https://tria.ge", hash="{endpoint}/s?q={query}"),
        _t(
            "URLhaus",
            "https://urlhaus.abuse.ch",
            ip="{endpoint}/browse.php?search={query}",
            domain="{endpoint}/browse.php?search={query}",
            url="{endpoint}/browse.php?search={query}",
            md5="{endpoint}/browse.php?search={query}",
            sha256="{endpoint}/browse.php?search={query}",
        ),
        _t(
            "ViewDNS",
            "https://viewdns.info",
            ip="{endpoint}/reverseip/?host={query}&t=1",
            domain="{endpoint}/iphistory/?domain={query}",
        ),
        _t("Vulmon", "https://vulmon.com", cve="{endpoint}/vulnerabilitydetails?qid={query}"),
        _t(
            "X-Force Exchange",
            "https://exchange.xforce.ibmcloud.com",
            ip="{endpoint}/ip/{query}",
            domain="{endpoint}/url/{query}",
            url="{endpoint}/url/{query}",
            hash="{endpoint}/malware/{query}",
            cve="{endpoint}/vulnerabilities/search/{query}",
        ),
        _t("Xmrchain", "https://xmrchain.net", xmr="{endpoint}/search?value={query}"),
    ]
