"""
Response capture.

Listens to every network response of a page and hands JSON ones to the
payload workers. We never parse the page markup: the data the frontend
renders arrives as JSON from backend APIs, and that survives redesigns.
"""

from urllib.parse import urlparse

from playwright.async_api import Page, Response

from ..pipeline import PayloadWorkers
from ..logger import get_logger

log = get_logger('browser.capture')

# Domains to ignore (tracking, analytics, etc.)
IGNORE_DOMAINS = [
    'google', 'facebook', 'analytics', 'tracking', 'pixel',
    'doubleclick', 'criteo', 'mc.yandex', 'top-fwz1', 'vk.com',
]


def _is_tracking_domain(url: str) -> bool:
    """Check if the URL's host is a tracking/analytics domain. Path and query are ignored."""
    try:
        host = urlparse(url).netloc.lower()
    except ValueError:
        return False
    return any(domain in host for domain in IGNORE_DOMAINS)


def _header(headers: dict, name: str) -> str:
    """Case-insensitive header lookup."""
    name = name.lower()
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return str(value)
    return ""


class ResponseCapture:
    """
    Feeds JSON responses of attached pages into PayloadWorkers.

    Usage:
        capture = ResponseCapture(workers)
        capture.attach(page)
        await page.goto(url)          # responses are processed as they arrive
        capture.detach(page)
    """

    def __init__(self, workers: PayloadWorkers):
        self.workers = workers
        self.seen = 0
        self.captured = 0
        self.skipped = 0

    def attach(self, page: Page):
        page.on('response', self.on_response)

    def detach(self, page: Page):
        # Reused pages would otherwise accumulate handlers
        page.remove_listener('response', self.on_response)

    def on_response(self, response: Response):
        """Response handler: submit JSON bodies, skip everything else."""
        self.seen += 1
        req_url = response.url

        if _is_tracking_domain(req_url):
            self.skipped += 1
            return

        content_type = _header(response.headers, 'content-type')
        if 'json' not in content_type.lower():
            self.skipped += 1
            return

        self.captured += 1
        log.debug(f"JSON response: {req_url}")
        self.workers.submit(req_url, response.body)

    def stats(self) -> dict:
        return {"seen": self.seen, "captured": self.captured, "skipped": self.skipped}
