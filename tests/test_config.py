import json
import tempfile
import unittest
from pathlib import Path

from ioc_lookup.config import ConfigError, Settings, default_config_path, load_settings


class TestLoadSettings(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, data):
        path = self.dir / "config.json"
        path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
        return path

    def test_missing_file_gives_defaults(self):
        settings = load_settings(self.dir / "missing.json", environ={})
        self.assertEqual(settings, Settings())

    def test_file_values(self):
        path = self._write(
            {
                "searcher_states": {"Shodan": False},
                "api_keys": {"urlscan.io": "file-key"},
                "general": {"enable_idn": True},
                "timeout": 10,
            }
        )
        settings = load_settings(path, environ={})
        self.assertEqual(dict(settings.searcher_states), {"Shodan": False})
        self.assertEqual(settings.api_key("urlscan.io"), "file-key")
        self.assertTrue(settings.enable_idn)
        self.assertEqual(settings.timeout, 10)

    def test_env_overrides_file(self):
        path = self._write({"api_keys": {"urlscan.io": "file-key"}, "general": {"enable_idn": True}})
        env = {
            "URLSCAN_API_KEY": "env-key",
            "VIRUSTOTAL_API_KEY": "vt-key",
            "IOC_LOOKUP_ENABLE_IDN": "0",
        }
        settings = load_settings(path, environ=env)
        self.assertEqual(settings.api_key("urlscan.io"), "env-key")
        self.assertEqual(settings.api_key("VirusTotal"), "vt-key")
        self.assertIsNone(settings.api_key("HybridAnalysis"))
        self.assertFalse(settings.enable_idn)

    def test_invalid_json(self):
        with self.assertRaises(ConfigError):
            load_settings(self._write("{not json"), environ={})

    def test_invalid_shapes(self):
        for data in ([], {"api_keys": []}, {"timeout": 0}, {"general": "yes"}):
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    load_settings(self._write(data), environ={})

    def test_default_config_path(self):
        self.assertEqual(
            default_config_path({"IOC_LOOKUP_CONFIG": "/etc/ioc.json"}), Path("/etc/ioc.json")
        )
        self.assertEqual(
            default_config_path({"XDG_CONFIG_HOME": "/xdg"}), Path("/xdg/ioc-lookup/config.json")
        )

    def test_config_path_from_env(self):
        path = self._write({"searcher_states": {"Censys": False}})
        settings = load_settings(environ={"IOC_LOOKUP_CONFIG": str(path)})
        self.assertEqual(dict(settings.searcher_states), {"Censys": False})


if __name__ == "__main__":
    unittest.main()
