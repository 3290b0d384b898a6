"""
Tests for menu-id encoding and dispatch.
"""

import unittest
from unittest.mock import MagicMock, patch

from ioc_lookup.command import Command, dispatch, dispatch_menu_id, scan, search, search_all
from ioc_lookup.config import Settings
from ioc_lookup.analyzers import RequestFailed, default_registry


class TestMenuId(unittest.TestCase):
    def test_round_trip(self):
        cmd = Command(action="search", type="ip", query="8.8.8.8", target="Shodan")
        self.assertEqual(Command.parse(cmd.to_menu_id()), cmd)

    def test_round_trip_special_characters(self):
        for query in ("a&b=c", "Search x as a ip on all", "100% sure", "q?x=1#frag", "例え"):
            with self.subTest(query=query):
                cmd = Command(action="search", type="text", query=query, target="Google")
                self.assertEqual(Command.parse(cmd.to_menu_id()), cmd)

    def test_malformed(self):
        bad = [
            "",
            "garbage",
            "action=search&type=ip&query=8.8.8.8",
            "action=fly&type=ip&query=8.8.8.8&target=Shodan",
            "action=search&type=nope&query=8.8.8.8&target=Shodan",
            "action=search&type=ip&query=&target=Shodan",
            "action=search&action=scan&type=ip&query=8.8.8.8&target=Shodan",
            "action=search&type=ip&query=8.8.8.8&target=Shodan&extra=1",
            "action=scan&type=url&query=https%3A%2F%2Fexample.com%2F&target=all",
        ]
        for menu_id in bad:
            with self.subTest(menu_id=menu_id):
                with self.assertRaises(ValueError):
                    Command.parse(menu_id)


class TestSearch(unittest.TestCase):
    def test_single_target(self):
        result = search(Command("search", "ip", "8.8.8.8", "Shodan"))
        self.assertTrue(result.ok)
        self.assertEqual(result.urls, ["https://www.shodan.io/host/8.8.8.8"])
        self.assertEqual(result.url, "https://www.shodan.io/host/8.8.8.8")

    def test_unknown_analyzer_is_empty_sentinel(self):
        result = search(Command("search", "ip", "8.8.8.8", "NoSuchAnalyzer"))
        self.assertFalse(result.ok)
        self.assertEqual(result.url, "")
        self.assertEqual(result.error.kind, "validation_mismatch")

    def test_unsupported_type_is_empty_sentinel(self):
        result = search(Command("search", "cve", "CVE-2021-44228", "Shodan"))
        self.assertEqual(result.url, "")
        self.assertEqual(result.error.kind, "validation_mismatch")

    def test_query_must_validate(self):
        result = search(Command("search", "ip", "256.1.1.1", "Shodan"))
        self.assertEqual(result.url, "")
        self.assertEqual(result.error.kind, "validation_mismatch")

    def test_search_all_order_and_states(self):
        cmd = Command("search", "ip", "8.8.8.8", "all")
        expected = [s.search("ip", "8.8.8.8") for s in default_registry().searchers_for("ip")]
        self.assertEqual(search_all(cmd).urls, expected)

        disabled = search_all(cmd, searcher_states={"Shodan": False})
        self.assertNotIn("https://www.shodan.io/host/8.8.8.8", disabled.urls)
        self.assertEqual(len(disabled.urls), len(expected) - 1)


class TestScan(unittest.TestCase):
    def test_missing_key_no_navigation_no_network(self):
        transport = MagicMock()
        result = scan(
            Command("scan", "url", "https://example.com/", "urlscan.io"),
            api_keys={},
            transport=transport,
        )
        self.assertFalse(result.ok)
        self.assertEqual(result.url, "")
        self.assertEqual(result.error.kind, "api_key_missing")
        self.assertIn("urlscan.io", result.error.message)
        transport.post.assert_not_called()

    def test_request_failed(self):
        transport = MagicMock()
        transport.post.side_effect = RequestFailed("HTTP 500: Internal Server Error")
        result = scan(
            Command("scan", "url", "https://example.com/", "urlscan.io"),
            api_keys={"urlscan.io": "k"},
            transport=transport,
        )
        self.assertEqual(result.error.kind, "request_failed")
        self.assertIn("HTTP 500", result.error.message)
        self.assertEqual(result.url, "")

    def test_success(self):
        transport = MagicMock()
        transport.post.return_value = {"uuid": "u-1"}
        result = scan(
            Command("scan", "ip", "8.8.8.8", "urlscan.io"),
            api_keys={"urlscan.io": "k"},
            transport=transport,
        )
        self.assertTrue(result.ok)
        self.assertEqual(result.url, "https://urlscan.io/result/u-1/")

    def test_searcher_only_target_cannot_scan(self):
        result = scan(Command("scan", "ip", "8.8.8.8", "Shodan"), api_keys={"Shodan": "k"})
        self.assertEqual(result.error.kind, "validation_mismatch")


class TestDispatch(unittest.TestCase):
    def test_routes_by_action_and_target(self):
        settings = Settings(searcher_states={"Shodan": False})
        single = dispatch(Command("search", "ip", "8.8.8.8", "Shodan"), settings=settings)
        self.assertEqual(single.urls, ["https://www.shodan.io/host/8.8.8.8"])

        every = dispatch(Command("search", "ip", "8.8.8.8", "all"), settings=settings)
        self.assertEqual(every.target, "all")
        self.assertNotIn("https://www.shodan.io/host/8.8.8.8", every.urls)

    def test_scan_uses_settings_keys(self):
        transport = MagicMock()
        transport.post.return_value = {"sha256": "f" * 64}
        settings = Settings(api_keys={"HybridAnalysis": "k"})
        result = dispatch(
            Command("scan", "url", "https://example.com/", "HybridAnalysis"),
            settings=settings,
            transport=transport,
        )
        self.assertEqual(result.url, f"https://www.hybrid-analysis.com/sample/{'f' * 64}")

    def test_loads_fresh_settings_when_not_given(self):
        with patch("ioc_lookup.command.load_settings", return_value=Settings()) as loader:
            dispatch(Command("search", "ip", "8.8.8.8", "all"))
            dispatch(Command("search", "ip", "8.8.8.8", "all"))
        self.assertEqual(loader.call_count, 2)

    def test_dispatch_menu_id(self):
        cmd = Command("search", "domain", "example.com", "crt.sh")
        result = dispatch_menu_id(cmd.to_menu_id(), settings=Settings())
        self.assertEqual(result.urls, ["https://crt.sh/?q=example.com"])

    def test_result_to_dict(self):
        result = dispatch(
            Command("scan", "url", "https://example.com/", "VirusTotal"),
            settings=Settings(),
            transport=MagicMock(),
        )
        self.assertEqual(
            result.to_dict(),
            {
                "action": "scan",
                "target": "VirusTotal",
                "urls": [],
                "ok": False,
                "error": {"kind": "api_key_missing", "message": "API key for VirusTotal is not set"},
            },
        )


if __name__ == "__main__":
    unittest.main()
