import unittest

from fastapi.testclient import TestClient

from ioc_lookup.command import Command
from ioc_lookup.config import Settings
from ioc_lookup.web import app, get_settings


class TestWebAPI(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[get_settings] = lambda: Settings(searcher_states={"Shodan": False})
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")

    def test_analyzers(self):
        r = self.client.get("/api/analyzers", params={"type": "xmr"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual([a["name"] for a in r.json()], ["Xmrchain"])

    def test_analyzers_unknown_type(self):
        self.assertEqual(self.client.get("/api/analyzers", params={"type": "nope"}).status_code, 400)

    def test_menu_applies_settings(self):
        r = self.client.post("/api/menu", json={"text": "8.8.8.8"})
        self.assertEqual(r.status_code, 200)
        titles = [i["title"] for i in r.json()["items"]]
        self.assertIn("Search this ip on Censys", titles)
        self.assertNotIn("Search this ip on Shodan", titles)

    def test_extract(self):
        r = self.client.post("/api/extract", json={"text": "CVE-2021-44228 on 10.0.0.1"})
        self.assertEqual(r.json(), {"ip": ["10.0.0.1"], "cve": ["CVE-2021-44228"]})

    def test_dispatch_menu_id(self):
        menu_id = Command("search", "ip", "8.8.8.8", "ONYPHE").to_menu_id()
        r = self.client.post("/api/dispatch", json={"menu_id": menu_id})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["urls"], ["https://www.onyphe.io/ip/8.8.8.8"])

    def test_dispatch_fields(self):
        r = self.client.post(
            "/api/dispatch",
            json={"action": "search", "type": "asn", "query": "AS13335", "target": "IPinfo"},
        )
        self.assertEqual(r.json()["urls"], ["https://ipinfo.io/AS13335"])

    def test_dispatch_scan_without_key(self):
        r = self.client.post(
            "/api/dispatch",
            json={"action": "scan", "type": "url", "query": "https://example.com/", "target": "VirusTotal"},
        )
        body = r.json()
        self.assertEqual(r.status_code, 200)
        self.assertFalse(body["ok"])
        self.assertEqual(body["urls"], [])
        self.assertEqual(body["error"]["kind"], "api_key_missing")
        self.assertEqual(body["notification"]["title"], "ioc-lookup")

    def test_dispatch_bad_request(self):
        r = self.client.post("/api/dispatch", json={"menu_id": "garbage"})
        self.assertEqual(r.status_code, 400)


if __name__ == "__main__":
    unittest.main()
