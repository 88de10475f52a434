"""
Config Tests
============
"""

import json
import os
import tempfile
import unittest
from pathlib import Path

from lenta_scraper.config import (
    ConfigError, ScraperConfig, load_config, env_overrides,
    DEFAULT_OUT_CSV, DEFAULT_TIMEOUT_SEC, DEFAULT_SCROLLS,
)

YAML_CONFIG = """
proxy: http://45.11.21.182:3000
proxy_user: user
proxy_pass: secret
address: "Москва, Тверская улица, 1"
categories:
  - https://lenta.com/catalog/moloko-602/
  - https://lenta.com/catalog/khleb-886/
headless: true
scrolls: 3
"""


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, text):
        path = self.dir / name
        path.write_text(text, encoding='utf-8')
        return path

    def test_yaml(self):
        config = load_config(self.write("config.yaml", YAML_CONFIG), environ={})
        self.assertEqual(config.proxy, "http://45.11.21.182:3000")
        self.assertEqual(config.proxy_user, "user")
        self.assertEqual(len(config.categories), 2)
        self.assertTrue(config.headless)
        self.assertEqual(config.scrolls, 3)

    def test_defaults(self):
        config = load_config(self.write("config.yaml", YAML_CONFIG), environ={})
        self.assertEqual(config.out_csv, DEFAULT_OUT_CSV)
        self.assertEqual(config.timeout_sec, DEFAULT_TIMEOUT_SEC)
        self.assertFalse(config.skip_address)
        self.assertEqual(config.home_url, "https://lenta.com")

    def test_non_positive_values_replaced_by_defaults(self):
        text = YAML_CONFIG.replace("scrolls: 3", "scrolls: 0\ntimeout_sec: -1\nout_csv: ''")
        config = load_config(self.write("config.yaml", text), environ={})
        self.assertEqual(config.scrolls, DEFAULT_SCROLLS)
        self.assertEqual(config.timeout_sec, DEFAULT_TIMEOUT_SEC)
        self.assertEqual(config.out_csv, DEFAULT_OUT_CSV)

    def test_json(self):
        data = {
            "proxy": "http://proxy:3000",
            "address": "Санкт-Петербург",
            "categories": ["https://lenta.com/catalog/a/"],
            "out_csv": "out/items.csv",
        }
        config = load_config(self.write("config.json", json.dumps(data)), environ={})
        self.assertEqual(config.out_csv, "out/items.csv")
        self.assertEqual(config.proxy_user, "")

    def test_missing_proxy(self):
        text = YAML_CONFIG.replace("proxy: http://45.11.21.182:3000", "proxy:")
        with self.assertRaisesRegex(ConfigError, "proxy is required"):
            load_config(self.write("config.yaml", text), environ={})

    def test_missing_address(self):
        text = YAML_CONFIG.replace('address: "Москва, Тверская улица, 1"', "")
        with self.assertRaisesRegex(ConfigError, "address is required"):
            load_config(self.write("config.yaml", text), environ={})

    def test_missing_categories(self):
        with self.assertRaisesRegex(ConfigError, "categories are required"):
            load_config(self.write("config.yaml", "proxy: p\naddress: a\n"), environ={})

    def test_unreadable_file(self):
        with self.assertRaises(ConfigError):
            load_config(self.dir / "missing.yaml", environ={})

    def test_malformed_file(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("config.yaml", "proxy: [unclosed"), environ={})
        with self.assertRaises(ConfigError):
            load_config(self.write("config.yaml", "- just\n- a list\n"), environ={})

    def test_env_overrides_file(self):
        environ = {
            "LENTA_PROXY": "http://env-proxy:8080",
            "LENTA_HEADLESS": "false",
            "LENTA_SCROLLS": "10",
        }
        config = load_config(self.write("config.yaml", YAML_CONFIG), environ=environ)
        self.assertEqual(config.proxy, "http://env-proxy:8080")
        self.assertFalse(config.headless)
        self.assertEqual(config.scrolls, 10)

    def test_env_only(self):
        environ = {
            "LENTA_PROXY": "http://env-proxy:8080",
            "LENTA_ADDRESS": "Москва",
            "LENTA_CATEGORIES": "https://lenta.com/a/, https://lenta.com/b/",
            "LENTA_SKIP_ADDRESS": "yes",
            "LENTA_HOME_URL": "https://spb.lenta.com",
        }
        config = load_config(environ=environ)
        self.assertEqual(config.categories, ["https://lenta.com/a/", "https://lenta.com/b/"])
        self.assertTrue(config.skip_address)
        self.assertEqual(config.home_url, "https://spb.lenta.com")

    def test_dotenv_file(self):
        env_file = self.write(".env", "LENTA_OUT_CSV=from_dotenv.csv\n")
        previous = os.environ.pop("LENTA_OUT_CSV", None)
        try:
            config = load_config(self.write("config.yaml", YAML_CONFIG), env_file=str(env_file))
            self.assertEqual(config.out_csv, "from_dotenv.csv")
        finally:
            os.environ.pop("LENTA_OUT_CSV", None)
            if previous is not None:
                os.environ["LENTA_OUT_CSV"] = previous

    def test_empty_env_values_ignored(self):
        self.assertEqual(env_overrides({"LENTA_PROXY": ""}), {})

    def test_model_direct(self):
        config = ScraperConfig(proxy="p", address="a", categories="https://x/")
        self.assertEqual(config.categories, ["https://x/"])


if __name__ == "__main__":
    unittest.main()
