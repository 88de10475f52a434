"""
Payload pipeline: captured response -> decoded JSON -> Items -> collector.

    capture ──submit()──> task: await body ─> thread: decode + extract ─> offer
                          task: ...
                          task: ...

One asyncio task per captured payload. Retrieving the body is the only
await; decoding and matching are pure CPU work and run in the default
thread pool so a huge payload does not stall the browser event loop.
Items are offered only after a payload has been fully extracted, so a task
cancelled at shutdown contributes nothing.
"""

import asyncio
import json
import time
from typing import Any, Awaitable, Callable, List, Optional, Set, Union

from .models import Item, Payload
from .collector import DedupCollector
from .extract import ProductMatcher
from .logger import get_logger

log = get_logger('pipeline')


def decode_payload(body: Union[bytes, str]) -> Any:
    """
    Decode a JSON body.

    Returns the decoded value, or None if the body is empty or malformed
    (the payload is then skipped, never an error for the run).
    """
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        log.debug(f"Skipping malformed payload: {e}")
        return None
    except RecursionError:
        log.debug("Skipping payload nested too deeply to decode")
        return None


def extract_payload(payload: Payload, matcher: ProductMatcher) -> List[Item]:
    """Decode and match one payload. Pure, safe to call from any thread."""
    value = decode_payload(payload.body)
    if value is None:
        return []
    if not payload.origin_url:
        log.debug("Skipping payload without origin URL")
        return []
    try:
        return matcher.extract(value, payload.origin_url)
    except RecursionError:
        log.debug(f"Skipping payload from {payload.origin_url}: nested too deeply")
        return []


def process_payload(payload: Payload, collector: DedupCollector, matcher: Optional[ProductMatcher] = None) -> int:
    """Decode, extract and offer one payload. Returns number of new items."""
    items = extract_payload(payload, matcher or ProductMatcher())
    if not items:
        return 0
    return collector.offer_many(items)


class PayloadWorkers:
    """
    Spawns and tracks one processing task per captured payload.

    Usage:
        workers = PayloadWorkers(collector)
        workers.submit(response.url, response.body)   # from a response handler
        ...
        await workers.drain(timeout=10)                # before taking a snapshot
    """

    def __init__(self, collector: DedupCollector, matcher: Optional[ProductMatcher] = None):
        self.collector = collector
        self.matcher = matcher or ProductMatcher()
        self._tasks: Set[asyncio.Task] = set()

        # Stats
        self.submitted = 0
        self.processed = 0
        self.failed = 0
        self.accepted = 0

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def submit(self, origin_url: str, fetch_body: Callable[[], Awaitable[Union[bytes, str]]]) -> asyncio.Task:
        """
        Start processing a payload in the background.

        Args:
            origin_url: URL of the request that produced the payload
            fetch_body: Coroutine function returning the raw body
        """
        task = asyncio.get_running_loop().create_task(self._run(origin_url, fetch_body))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.submitted += 1
        return task

    async def _run(self, origin_url: str, fetch_body) -> int:
        try:
            body = await fetch_body()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Redirects, evicted bodies, closed pages: nothing to extract
            self.failed += 1
            log.debug(f"Could not read body of {origin_url}: {e}")
            return 0

        payload = Payload(body=body, origin_url=origin_url)
        try:
            items = await asyncio.to_thread(extract_payload, payload, self.matcher)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failed += 1
            log.warning(f"Extraction failed for {origin_url}: {e}")
            return 0
        accepted = self.collector.offer_many(items)

        self.processed += 1
        self.accepted += accepted
        if accepted:
            log.debug(f"+{accepted} item(s) from {origin_url}")
        return accepted

    async def drain(self, timeout: Optional[float] = None) -> int:
        """
        Wait for in-flight payloads, including ones submitted while waiting.

        Tasks still running when the timeout expires are cancelled.

        Returns:
            Number of abandoned tasks
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._tasks:
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                break
            await asyncio.wait(set(self._tasks), timeout=remaining)

        abandoned = len(self._tasks)
        if abandoned:
            log.warning(f"Abandoning {abandoned} unfinished payload task(s)")
            await self.cancel()
        return abandoned

    async def cancel(self):
        """Cancel every pending task and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def stats(self) -> dict:
        return {
            "submitted": self.submitted,
            "processed": self.processed,
            "failed": self.failed,
            "accepted": self.accepted,
            "pending": self.pending_count,
        }
