"""
Tests for scanners. No network: every test injects a stub transport.
"""

import unittest
from unittest.mock import MagicMock

from ioc_lookup.analyzers import ApiKeyMissing, RequestFailed
from ioc_lookup.analyzers.scanners import HybridAnalysis, URLScan, VirusTotal

SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _transport(payload=None, error=None):
    t = MagicMock()
    if error is not None:
        t.post.side_effect = error
    else:
        t.post.return_value = payload or {}
    return t


class TestURLScan(unittest.TestCase):
    def test_scan_returns_result_url(self):
        t = _transport({"uuid": "abc-123"})
        url = URLScan().scan("url", "https://example.com/", "k3y", t)

        self.assertEqual(url, "https://urlscan.io/result/abc-123/")
        args, kwargs = t.post.call_args
        self.assertEqual(args[0], "https://urlscan.io/api/v1/scan/")
        self.assertEqual(kwargs["headers"], {"API-Key": "k3y"})
        self.assertEqual(kwargs["json_body"]["url"], "https://example.com/")

    def test_missing_key_never_touches_transport(self):
        t = _transport({"uuid": "abc"})
        for key in (None, "", "   "):
            with self.subTest(key=key):
                with self.assertRaises(ApiKeyMissing) as ctx:
                    URLScan().scan("ip", "8.8.8.8", key, t)
                self.assertIn("urlscan.io", str(ctx.exception))
        t.post.assert_not_called()

    def test_missing_uuid(self):
        with self.assertRaises(RequestFailed):
            URLScan().scan("domain", "example.com", "k", _transport({"message": "queued"}))

    def test_transport_error_propagates(self):
        t = _transport(error=RequestFailed("HTTP 429: Too Many Requests"))
        with self.assertRaises(RequestFailed) as ctx:
            URLScan().scan("url", "https://example.com/", "k", t)
        self.assertIn("429", str(ctx.exception))


class TestVirusTotal(unittest.TestCase):
    def test_scan_maps_analysis_id(self):
        t = _transport({"data": {"type": "analysis", "id": f"u-{SHA256}-1700000000"}})
        url = VirusTotal().scan("url", "https://example.com/", "k", t)

        self.assertEqual(url, f"https://www.virustotal.com/gui/url/{SHA256}")
        _, kwargs = t.post.call_args
        self.assertEqual(kwargs["headers"], {"x-apikey": "k"})
        self.assertEqual(kwargs["form"], {"url": "https://example.com/"})

    def test_unexpected_id(self):
        with self.assertRaises(RequestFailed):
            VirusTotal().scan("url", "https://example.com/", "k", _transport({"data": {"id": "x"}}))

    def test_missing_data(self):
        with self.assertRaises(RequestFailed):
            VirusTotal().scan("url", "https://example.com/", "k", _transport({"error": {}}))


class TestHybridAnalysis(unittest.TestCase):
    def test_scan_returns_sample_url(self):
        t = _transport({"sha256": SHA256, "id": "1"})
        url = HybridAnalysis().scan("url", "https://example.com/", "k", t)

        self.assertEqual(url, f"https://www.hybrid-analysis.com/sample/{SHA256}")
        _, kwargs = t.post.call_args
        self.assertEqual(kwargs["headers"]["api-key"], "k")
        self.assertEqual(kwargs["form"], {"scan_type": "all", "url": "https://example.com/"})

    def test_missing_key(self):
        with self.assertRaises(ApiKeyMissing):
            HybridAnalysis().scan("url", "https://example.com/", None, _transport())


if __name__ == "__main__":
    unittest.main()
