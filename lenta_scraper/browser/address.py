"""
Delivery address selection.

The site returns different prices and availability depending on the chosen
store, so a run starts by picking a delivery address. Elements are found by
"soft" XPath lookups on visible texts and placeholders to depend as little as
possible on the exact markup.
"""

import asyncio
from typing import List

from playwright.async_api import Page

from ..logger import get_logger

log = get_logger('browser.address')

ADDRESS_BUTTONS = [
    "//button[contains(., 'Адрес')]",
    "//button[contains(., 'Доставка')]",
    "//a[contains(., 'Адрес')]",
    "//a[contains(., 'Доставка')]",
]

ADDRESS_INPUT = (
    "//input[contains(@placeholder,'Адрес') or contains(@aria-label,'Адрес')"
    " or contains(@name,'address') or contains(@placeholder,'улиц')]"
)

SUGGESTIONS = [
    "(//li[contains(@class,'suggest') or contains(@class,'dropdown') or contains(@class,'option')])[1]",
    "(//div[contains(@class,'suggest') or contains(@class,'dropdown') or contains(@class,'option')])[1]",
    "(//button[contains(@class,'suggest') or contains(@class,'dropdown') or contains(@class,'option')])[1]",
]

CONFIRM_BUTTONS = [
    "//button[contains(., 'Подтвердить')]",
    "//button[contains(., 'Сохранить')]",
    "//button[contains(., 'Выбрать')]",
    "//button[contains(., 'Готово')]",
]

STEP_TIMEOUT_MS = 10000


async def click_first_match(page: Page, xpaths: List[str]) -> bool:
    """Click the first xpath that matches anything. Returns False if none did."""
    for xp in xpaths:
        locator = page.locator(f"xpath={xp}")
        if await locator.count() > 0:
            await locator.first.click(timeout=STEP_TIMEOUT_MS)
            return True
    return False


async def try_click_any(page: Page, xpaths: List[str]) -> bool:
    """Like click_first_match, but a failed click is not an error."""
    try:
        return await click_first_match(page, xpaths)
    except Exception as e:
        log.debug(f"Optional click failed: {e}")
        return False


async def _select_once(page: Page, address: str, home_url: str):
    await page.goto(home_url, wait_until='domcontentloaded')
    await asyncio.sleep(3)

    await click_first_match(page, ADDRESS_BUTTONS)
    await asyncio.sleep(0.2)

    address_input = page.locator(f"xpath={ADDRESS_INPUT}").first
    await address_input.fill("", timeout=STEP_TIMEOUT_MS)
    await address_input.type(address, timeout=STEP_TIMEOUT_MS)
    await asyncio.sleep(1.5)

    await click_first_match(page, SUGGESTIONS)
    await asyncio.sleep(2)

    await try_click_any(page, CONFIRM_BUTTONS)
    await asyncio.sleep(2)


async def select_address(page: Page, address: str, home_url: str, attempts: int = 3):
    """
    Select the delivery address, retrying the whole flow.

    Raises:
        RuntimeError: all attempts failed
    """
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            await _select_once(page, address, home_url)
            log.info(f"Delivery address selected: {address}")
            return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            last_error = e
            log.debug(f"Address attempt {attempt}/{attempts} failed: {e}")
            if attempt < attempts:
                await asyncio.sleep(1.5)
    raise RuntimeError(f"address selection failed: {last_error}") from last_error
