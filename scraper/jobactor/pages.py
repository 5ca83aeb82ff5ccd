"""Single-page utilities: caller-supplied selectors, one page, one session.

No pagination, enrichment or caching here. Each call acquires its own session and
releases it on every exit path.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import logging

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .session import SteelSessionManager
from .settings import SETTINGS, Settings

logger = logging.getLogger('pages')

DEFAULT_JOB_SELECTOR = '[class*="job"], [class*="listing"], article'
MAX_JOB_ELEMENTS = 50
WAIT_FOR_TIMEOUT_MS = 10_000
JOB_SETTLE_MS = 2_000

FieldConfig = Union[str, Dict[str, str]]


def _open(session, url: str, settings: Settings):
    page = session.new_page()
    page.goto(url, wait_until='domcontentloaded', timeout=settings.search_timeout_ms)
    return page


def _wait_quietly(page, selector: Optional[str]) -> None:
    if not selector:
        return
    try:
        page.wait_for_selector(selector, timeout=WAIT_FOR_TIMEOUT_MS)
    except PlaywrightTimeoutError:
        logger.debug(f"Selector {selector!r} did not appear")


def _child_text(element, selector: str) -> Optional[str]:
    el = element.query_selector(selector)
    return el.text_content() if el else None


class PageTools:
    def __init__(self, session_manager: Optional[SteelSessionManager] = None, settings: Optional[Settings] = None):
        self.settings = settings or SETTINGS
        self.sessions = session_manager or SteelSessionManager(self.settings)

    def scrape_page(self, url: str, selectors: Optional[Dict[str, str]] = None, wait_for: Optional[str] = None) -> Dict[str, Any]:
        with self.sessions.session() as session:
            page = _open(session, url, self.settings)
            _wait_quietly(page, wait_for)
            data: Dict[str, Any] = {'url': url}
            if selectors:
                for key, selector in selectors.items():
                    data[key] = [el.text_content() for el in page.query_selector_all(selector)]
            else:
                data['title'] = page.title()
                body = page.query_selector('body')
                data['text'] = body.inner_text() if body else ''
            return data

    def scrape_job_listings(self, url: str, job_selector: Optional[str] = None, fields: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        with self.sessions.session() as session:
            page = _open(session, url, self.settings)
            page.wait_for_timeout(JOB_SETTLE_MS)
            jobs: List[Dict[str, Any]] = []
            for element in page.query_selector_all(job_selector or DEFAULT_JOB_SELECTOR)[:MAX_JOB_ELEMENTS]:
                if fields:
                    job = {key: _child_text(element, sel) for key, sel in fields.items()}
                else:
                    link = element.query_selector('a')
                    job = {
                        'title': _child_text(element, '[class*="title"], h2, h3'),
                        'company': _child_text(element, '[class*="company"]'),
                        'location': _child_text(element, '[class*="location"]'),
                        'link': link.get_attribute('href') if link else None,
                    }
                if any(job.values()):
                    jobs.append(job)
            return jobs

    def scrape_list(self, url: str, item_selector: str, fields: Optional[Dict[str, FieldConfig]] = None, max_items: int = 100) -> List[Dict[str, Any]]:
        with self.sessions.session() as session:
            page = _open(session, url, self.settings)
            _wait_quietly(page, item_selector)
            items: List[Dict[str, Any]] = []
            for element in page.query_selector_all(item_selector)[:max_items]:
                item: Dict[str, Any] = {}
                if fields:
                    for key, config in fields.items():
                        sel = config if isinstance(config, str) else config.get('selector')
                        attr = None if isinstance(config, str) else config.get('attr')
                        if not sel:
                            continue
                        el = element.query_selector(sel)
                        if el:
                            item[key] = el.get_attribute(attr) if attr else el.text_content()
                else:
                    item['text'] = element.text_content()
                items.append(item)
            return items

    def screenshot(self, url: str, full_page: bool = False) -> bytes:
        with self.sessions.session() as session:
            page = _open(session, url, self.settings)
            return page.screenshot(full_page=full_page, type='png')

    def render_pdf(self, url: str) -> bytes:
        with self.sessions.session() as session:
            page = _open(session, url, self.settings)
            return page.pdf(format='A4')
