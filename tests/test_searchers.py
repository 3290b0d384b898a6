"""
Tests for searcher URL building.
"""

import hashlib
import unittest

from ioc_lookup.analyzers import ValidationMismatch, default_registry
from ioc_lookup.analyzers.searchers import TemplateSearcher

MD5 = "d41d8cd98f00b204e9800998ecf8427e"


def _searcher(name):
    analyzer = default_registry().get(name)
    assert analyzer is not None, name
    return analyzer


class TestTemplateSearcher(unittest.TestCase):
    def test_types_from_templates(self):
        s = TemplateSearcher(
            "Example",
            "https://search.example",
            {"ip": "{endpoint}/ip/{query}", "md5": "{endpoint}/md5/{query}"},
        )
        self.assertEqual(s.search_types, ("ip", "hash"))
        self.assertEqual(s.supported_hash_kinds, ("md5",))
        self.assertTrue(s.can_search("hash", "md5"))
        self.assertFalse(s.can_search("hash", "sha1"))
        self.assertFalse(s.can_scan("ip"))

    def test_query_is_percent_encoded(self):
        s = TemplateSearcher("Example", "https://search.example", {"text": "{endpoint}/?q={query}"})
        self.assertEqual(s.search("text", "a b&c"), "https://search.example/?q=a%20b%26c")

    def test_raw_placeholder(self):
        s = TemplateSearcher("Example", "https://search.example", {"url": "{endpoint}/{raw}"})
        self.assertEqual(
            s.search_by_url("https://example.com/a"), "https://search.example/https://example.com/a"
        )

    def test_unsupported_type_raises(self):
        s = TemplateSearcher("Example", "https://search.example", {"ip": "{endpoint}/{query}"})
        with self.assertRaises(ValidationMismatch):
            s.search("domain", "example.com")


class TestBuiltinSearchers(unittest.TestCase):
    def test_onyphe(self):
        self.assertEqual(_searcher("ONYPHE").search_by_ip("8.8.8.8"), "https://www.onyphe.io/ip/8.8.8.8")

    def test_shodan(self):
        self.assertEqual(_searcher("Shodan").search_by_ip("8.8.8.8"), "https://www.shodan.io/host/8.8.8.8")

    def test_asn_number_placeholder(self):
        self.assertEqual(_searcher("BGPView").search("asn", "AS13335"), "https://bgpview.io/asn/13335")

    def test_nvd(self):
        self.assertEqual(
            _searcher("NVD").search("cve", "CVE-2021-44228"),
            "https://nvd.nist.gov/vuln/detail/CVE-2021-44228",
        )

    def test_malwarebazaar_per_kind(self):
        s = _searcher("MalwareBazaar")
        self.assertEqual(
            s.search_by_hash(MD5), f"https://bazaar.abuse.ch/browse.php?search=md5%3A{MD5}"
        )
        self.assertFalse(s.can_search("hash", "sha512"))
        self.assertTrue(s.can_search("hash", "md5"))

    def test_virustotal_url_uses_sha256(self):
        url = "https://example.com/"
        digest = hashlib.sha256(url.encode()).hexdigest()
        self.assertEqual(
            _searcher("VirusTotal").search_by_url(url), f"https://www.virustotal.com/gui/url/{digest}"
        )

    def test_virustotal_hash(self):
        self.assertEqual(
            _searcher("VirusTotal").search_by_hash(MD5), f"https://www.virustotal.com/gui/file/{MD5}"
        )

    def test_fofa_base64_expression(self):
        self.assertEqual(
            _searcher("FOFA").search_by_ip("1.2.3.4"),
            "https://fofa.info/result?qbase64=aXA9IjEuMi4zLjQi",
        )

    def test_pulsedive_base64(self):
        self.assertEqual(
            _searcher("Pulsedive").search_by_ip("8.8.8.8"),
            "https://pulsedive.com/indicator/?ioc=OC44LjguOA%3D%3D",
        )

    def test_text_searchers(self):
        self.assertEqual(
            _searcher("Google").search_by_text("hello world"),
            "https://www.google.com/search?q=hello%20world",
        )

    def test_every_searcher_builds_for_every_type(self):
        samples = {
            "ip": "8.8.8.8",
            "domain": "example.com",
            "url": "https://example.com/",
            "email": "alice@example.com",
            "hash": MD5,
            "cve": "CVE-2021-44228",
            "asn": "AS13335",
            "btc": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa",
            "eth": "0x52908400098527886E0F7030069857D2E4169EE7",
            "mac": "00:1A:2B:3C:4D:5E",
            "ga": "UA-12345678-1",
            "text": "hello",
        }
        for a in default_registry().analyzers:
            for t in a.search_types:
                if t not in samples:
                    continue
                query = samples[t]
                if t == "hash" and a.supported_hash_kinds and "md5" not in a.supported_hash_kinds:
                    query = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
                with self.subTest(analyzer=a.name, type=t):
                    url = a.search(t, query)
                    self.assertTrue(url.startswith(a.endpoint), url)


if __name__ == "__main__":
    unittest.main()
