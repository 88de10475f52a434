"""
Category browsing.

Opening a category and scrolling it makes the frontend request product
listings page by page; ResponseCapture picks those responses up.
"""

import asyncio

from playwright.async_api import Page

from ..logger import get_logger

log = get_logger('browser.collect')

SETTLE_AFTER_LOAD = 5.0
SCROLL_DELAY = 1.2
SETTLE_AFTER_SCROLL = 3.0


async def collect_category(page: Page, category_url: str, scrolls: int):
    """Open a category page and scroll to the bottom `scrolls` times."""
    await page.goto(category_url, wait_until='domcontentloaded')
    await asyncio.sleep(SETTLE_AFTER_LOAD)

    for i in range(scrolls):
        try:
            await page.evaluate("window.scrollTo(0, document.body.scrollHeight);")
        except Exception as e:
            # Navigation in the middle of a scroll; keep going
            log.debug(f"Scroll {i + 1}/{scrolls} failed: {e}")
        await asyncio.sleep(SCROLL_DELAY)

    await asyncio.sleep(SETTLE_AFTER_SCROLL)
