"""
Browser session.

All Playwright setup lives here so extraction/output code never depends on
the browser implementation.

Usage:
    async with BrowserSession(proxy="http://45.11.21.182:3000",
                              proxy_user="user", proxy_pass="secret") as session:
        page = await session.new_page()
        await page.goto("https://lenta.com")
"""

from typing import Optional, List

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from ..logger import get_logger

log = get_logger('browser')

LOCALE = 'ru-RU'


def get_launch_args() -> List[str]:
    """Chromium flags for running in containers and on CI boxes."""
    return [
        '--disable-gpu',
        '--no-sandbox',
        '--disable-dev-shm-usage',
        f'--lang={LOCALE}',
    ]


def build_proxy_settings(proxy: str, proxy_user: str = "", proxy_pass: str = "") -> dict:
    """Playwright proxy settings; credentials answer the proxy's auth challenge."""
    settings = {'server': proxy}
    if proxy_user:
        settings['username'] = proxy_user
        settings['password'] = proxy_pass or ""
    return settings


class BrowserSession:
    """
    Context manager owning playwright, one browser and one context.

    A proxy is required: the store geo-blocks and rate-limits direct traffic.
    """

    def __init__(
        self,
        proxy: str,
        proxy_user: str = "",
        proxy_pass: str = "",
        headless: bool = True,
    ):
        if not proxy:
            raise ValueError("proxy is required")
        self.proxy = proxy
        self.proxy_user = proxy_user
        self.proxy_pass = proxy_pass
        self.headless = headless

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        log.info(f"Launching browser (headless={self.headless}, proxy={self.proxy})")
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=get_launch_args(),
                proxy=build_proxy_settings(self.proxy, self.proxy_user, self.proxy_pass),
            )
            self._context = await self._browser.new_context(
                locale=LOCALE,
                viewport={'width': 1920, 'height': 1080},
                extra_http_headers={'Accept-Language': 'ru-RU,ru;q=0.9,en;q=0.8'},
            )
        except Exception:
            await self.close()
            raise

    async def close(self):
        """Close context, browser and playwright; safe to call twice."""
        if self._context:
            try:
                await self._context.close()
            except Exception as e:
                log.debug(f"Context close failed: {e}")
            self._context = None
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                log.debug(f"Browser close failed: {e}")
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def new_page(self) -> Page:
        if not self._context:
            raise RuntimeError("BrowserSession is not started")
        return await self._context.new_page()

    @property
    def context(self) -> Optional[BrowserContext]:
        return self._context
