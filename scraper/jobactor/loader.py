"""Search page loading and scroll-triggered lazy loading."""
from __future__ import annotations
from typing import Optional
import logging

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from .errors import NavigationTimeout
from .extract import CARD_SELECTOR, CARD_WAIT_SELECTOR, SHOW_MORE_SELECTOR
from .settings import SETTINGS, Settings

logger = logging.getLogger('loader')

SCROLL_TO_BOTTOM_JS = "() => window.scrollTo(0, document.body.scrollHeight)"
DOCUMENT_HEIGHT_JS = "() => document.body.scrollHeight"


def count_cards(page, selector: str = CARD_SELECTOR) -> int:
    return len(page.query_selector_all(selector))


def scroll_to_load_items(page, target_count: int, item_selector: str = CARD_SELECTOR,
                         settings: Optional[Settings] = None) -> int:
    """Scroll until ``target_count`` items are loaded or the page stops growing.

    The page counts as stalled when the document height is unchanged after a scroll;
    the loop ends after ``max_stalled_scrolls`` consecutive stalls. Returns the number
    of loaded items.
    """
    s = settings or SETTINGS
    previous_height = 0
    current_count = 0
    stalls = 0
    while current_count < target_count and stalls < s.max_stalled_scrolls:
        page.evaluate(SCROLL_TO_BOTTOM_JS)
        page.wait_for_timeout(s.scroll_pause_ms)
        show_more = page.query_selector(SHOW_MORE_SELECTOR)
        if show_more:
            try:
                show_more.click()
            except PlaywrightError:
                logger.debug("Show-more click failed", exc_info=True)
            page.wait_for_timeout(s.show_more_pause_ms)
        current_count = count_cards(page, item_selector)
        new_height = page.evaluate(DOCUMENT_HEIGHT_JS)
        if new_height == previous_height:
            stalls += 1
        else:
            stalls = 0
        previous_height = new_height
        logger.info(f"Loaded {current_count}/{target_count} items (scroll attempt {stalls})")
    return current_count


def load_results(page, url: str, target_count: int, settings: Optional[Settings] = None) -> None:
    """Navigate to the search URL and lazy-load until ``target_count`` cards (best-effort).

    Only the navigation itself is fatal. A result list that never shows up is tolerated;
    extraction then works with whatever rendered.
    """
    s = settings or SETTINGS
    try:
        page.goto(url, wait_until='domcontentloaded', timeout=s.search_timeout_ms)
    except PlaywrightTimeoutError as e:
        raise NavigationTimeout(url, 'search') from e
    try:
        page.wait_for_selector(CARD_WAIT_SELECTOR, timeout=s.results_wait_ms)
    except PlaywrightTimeoutError:
        logger.warning(f"No result cards appeared within {s.results_wait_ms}ms; continuing with loaded content")
    page.wait_for_timeout(s.search_settle_ms)
    if target_count > s.page_size:
        scroll_to_load_items(page, target_count, settings=s)
