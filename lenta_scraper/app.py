"""
Run orchestration.

    config ─> BrowserSession ─> ResponseCapture ─> PayloadWorkers ─> DedupCollector
                  │                                                     │
                  ├─ select_address (best effort)                      │
                  └─ collect_category × N (per-category timeout)       │
                                                                        v
                                                       snapshot() ─> write_csv
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import ScraperConfig
from .models import Item
from .collector import DedupCollector
from .extract import ProductMatcher
from .pipeline import PayloadWorkers
from .browser import BrowserSession, ResponseCapture, select_address, collect_category
from .output import write_csv
from .logger import get_logger

log = get_logger('app')

# How long to wait for bodies still being fetched after the last category
DRAIN_TIMEOUT_SEC = 15


@dataclass
class RunResult:
    """Outcome of one run."""
    items: List[Item]
    csv_path: Optional[Path] = None
    failed_categories: List[str] = field(default_factory=list)
    address_selected: bool = False
    stats: dict = field(default_factory=dict)


class ScraperApp:
    """One scraping run: browse categories, collect items, write CSV."""

    def __init__(self, config: ScraperConfig, matcher: Optional[ProductMatcher] = None):
        self.config = config
        self.collector = DedupCollector()
        self.workers = PayloadWorkers(self.collector, matcher)
        self.capture = ResponseCapture(self.workers)

    async def run(self) -> RunResult:
        cfg = self.config
        log.info(f"Starting lenta-scraper (headless={cfg.headless})")
        log.info(f"Categories: {len(cfg.categories)}, out: {cfg.out_csv}")

        result = RunResult(items=[])
        timeout = cfg.timeout_sec

        async with BrowserSession(
            proxy=cfg.proxy,
            proxy_user=cfg.proxy_user,
            proxy_pass=cfg.proxy_pass,
            headless=cfg.headless,
        ) as session:
            page = await session.new_page()
            self.capture.attach(page)
            try:
                if cfg.skip_address:
                    log.info("Skipping address selection (skip_address=true)")
                else:
                    result.address_selected = await self._select_address(page, timeout)

                for category_url in cfg.categories:
                    if not await self._collect(page, category_url, timeout):
                        result.failed_categories.append(category_url)

                await self.workers.drain(timeout=DRAIN_TIMEOUT_SEC)
            finally:
                self.capture.detach(page)
                await self.workers.cancel()

        result.items = self.collector.snapshot()
        log.info(f"Collected items: {len(result.items)}")

        result.csv_path = write_csv(cfg.out_csv, result.items)
        result.stats = {
            **self.capture.stats(),
            **self.workers.stats(),
            "unique_items": len(result.items),
        }
        log.info(f"Done: {result.csv_path}")
        return result

    async def _select_address(self, page, timeout: int) -> bool:
        log.info("Selecting delivery address (required step)...")
        try:
            await asyncio.wait_for(
                select_address(page, self.config.address, self.config.home_url),
                timeout=timeout,
            )
            return True
        except (asyncio.TimeoutError, RuntimeError) as e:
            # Not fatal: the store falls back to its default location
            log.warning(f"Failed to select address ({e or 'timeout'}), continue with default store context")
            return False

    async def _collect(self, page, category_url: str, timeout: int) -> bool:
        log.info(f"Collecting: {category_url}")
        before = len(self.collector)
        try:
            await asyncio.wait_for(
                collect_category(page, category_url, self.config.scrolls),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            log.error(f"Category timed out after {timeout}s: {category_url}")
            return False
        except Exception as e:
            log.error(f"Category error: {e}")
            return False
        log.info(f"Category done, +{len(self.collector) - before} item(s) so far")
        return True


def run(config: ScraperConfig) -> RunResult:
    """Synchronous entry point."""
    return asyncio.run(ScraperApp(config).run())
