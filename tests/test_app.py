"""
Run Orchestration Tests
=======================

The browser layer is patched out: a fake session hands out a fake page, and
"browsing" a category emits canned JSON responses on it.
"""

import asyncio
import csv
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lenta_scraper import app as app_module
from lenta_scraper.app import ScraperApp
from lenta_scraper.config import ScraperConfig

from test_capture import FakePage, FakeResponse

CATEGORY_RESPONSES = {
    "https://lenta.com/catalog/milk/": [
        b'{"items":[{"name":"Milk","price":89.9,"url":"/p/milk"},{"name":"Kefir","price":"65,90"}]}',
        b'{"items":[{"name":"Milk","price":89.9,"url":"/p/milk"}]}',
    ],
    "https://lenta.com/catalog/bread/": [
        b'{"data":{"products":[{"title":"Bread","prices":{"regular":45},"sku":"B-1"}]}}',
        b'not json at all',
    ],
}


class FakeSession:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.page = FakePage()
        FakeSession.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def new_page(self):
        return self.page


async def fake_collect(page, category_url, scrolls):
    if category_url not in CATEGORY_RESPONSES:
        raise RuntimeError("net::ERR_NAME_NOT_RESOLVED")
    for body in CATEGORY_RESPONSES[category_url]:
        page.emit('response', FakeResponse(category_url + "api", "application/json", body))
    await asyncio.sleep(0)


async def fake_select_address(page, address, home_url):
    raise RuntimeError("address input not found")


class TestScraperApp(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.out = Path(self.tmp.name) / "dump.csv"
        FakeSession.instances = []
        patches = [
            mock.patch.object(app_module, 'BrowserSession', FakeSession),
            mock.patch.object(app_module, 'collect_category', fake_collect),
            mock.patch.object(app_module, 'select_address', fake_select_address),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self):
        self.tmp.cleanup()

    def config(self, **overrides):
        data = dict(
            proxy="http://proxy:3000",
            proxy_user="user",
            proxy_pass="secret",
            address="Москва",
            categories=list(CATEGORY_RESPONSES) + ["https://broken.example/"],
            out_csv=str(self.out),
        )
        data.update(overrides)
        return ScraperConfig(**data)

    async def test_run_collects_and_writes_csv(self):
        result = await ScraperApp(self.config()).run()

        self.assertEqual(
            set((i.name, i.price, i.url) for i in result.items),
            {
                ("Milk", "89.9", "https://lenta.com/p/milk"),
                ("Kefir", "65.90", "https://lenta.com/catalog/milk/api"),
                ("Bread", "45", "https://lenta.com/search/?q=B-1"),
            },
        )
        with open(result.csv_path, newline='', encoding='utf-8') as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows[0], ["name", "price", "url"])
        self.assertEqual(len(rows), 4)

    async def test_failures_do_not_abort_run(self):
        result = await ScraperApp(self.config()).run()
        self.assertFalse(result.address_selected)
        self.assertEqual(result.failed_categories, ["https://broken.example/"])
        self.assertEqual(result.stats["unique_items"], 3)

    async def test_session_gets_proxy_settings(self):
        await ScraperApp(self.config(headless=True)).run()
        kwargs = FakeSession.instances[0].kwargs
        self.assertEqual(kwargs["proxy"], "http://proxy:3000")
        self.assertEqual(kwargs["proxy_user"], "user")
        self.assertTrue(kwargs["headless"])

    async def test_skip_address(self):
        with mock.patch.object(app_module, 'select_address') as select:
            result = await ScraperApp(self.config(skip_address=True)).run()
        select.assert_not_called()
        self.assertFalse(result.address_selected)

    async def test_listener_removed_after_run(self):
        await ScraperApp(self.config()).run()
        page = FakeSession.instances[0].page
        self.assertEqual(page.handlers['response'], [])


if __name__ == "__main__":
    unittest.main()
