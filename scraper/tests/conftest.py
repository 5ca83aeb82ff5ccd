"""Global pytest fixtures.
 - Sets env vars to disable logging side effects.
 - Provides fake Playwright page / browser objects and a fake Steel service so no
   test touches the network or a real browser.
"""
from __future__ import annotations
import dataclasses
import json
import os
from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

os.environ.setdefault('SCRAPER_DISABLE_FILE_LOGS', '1')
os.environ.setdefault('SCRAPER_DISABLE_EVENTS', '1')

from scraper.jobactor.settings import load_settings  # noqa: E402
from scraper.jobactor.session import SteelSessionManager  # noqa: E402

SEARCH_URL_PREFIX = 'https://www.linkedin.com/jobs/search'


# --- HTML builders ---

def card_html(job_id: str, title: Optional[str], company: str = 'Acme', company_url: Optional[str] = None,
              link: Optional[str] = None, location: str = 'Madrid, Spain', salary: Optional[str] = None) -> str:
    title_el = f'<h3 class="base-search-card__title">\n  {title}\n</h3>' if title is not None else ''
    company_el = (
        f'<h4 class="base-search-card__subtitle"><a data-tracking-control-name="public_jobs_jserp-result_job-search-card-subtitle_company" '
        f'href="{company_url}">{company}</a></h4>'
        if company_url else f'<h4 class="base-search-card__subtitle">{company}</h4>'
    )
    salary_el = f'<span class="job-search-card__salary-info">{salary}</span>' if salary else ''
    link = link or f'https://www.linkedin.com/jobs/view/{job_id}'
    return f'''
    <div class="base-card base-search-card job-search-card" data-entity-urn="urn:li:jobPosting:{job_id}">
      <a class="base-card__full-link" href="{link}"></a>
      <div class="search-entity-media"><img class="artdeco-entity-image" src="https://media.licdn.com/{job_id}.png"></div>
      <div class="base-search-card__info">
        {title_el}
        {company_el}
        <div class="base-search-card__metadata">
          <span class="job-search-card__location">{location}</span>
          {salary_el}
          <time class="job-search-card__listdate" datetime="2025-01-0{int(job_id) % 9 + 1}">1 week ago</time>
        </div>
      </div>
    </div>'''


def search_html(cards: List[str]) -> str:
    return '<html><body><ul class="jobs-search__results-list">' + ''.join(f'<li>{c}</li>' for c in cards) + '</ul></body></html>'


def detail_html(description: str = 'Build <b>distributed</b> systems', salary: Optional[str] = '$120,000 - $150,000',
                applicants: Optional[str] = 'Over 200 applicants', seniority: str = 'Mid-Senior level',
                employment: str = 'Full-time') -> str:
    salary_el = f'<div class="salary compensation__salary">{salary}</div>' if salary else ''
    applicants_el = f'<span class="num-applicants__caption">{applicants}</span>' if applicants else ''
    return f'''<html><body>
      {applicants_el}
      <a class="apply-button" data-tracking-control-name="public_jobs_apply-link-offsite" href="https://careers.example.com/apply/1">Apply</a>
      {salary_el}
      <div class="description__text"><div class="show-more-less-html__markup">{description}</div></div>
      <ul class="description__job-criteria-list">
        <li class="description__job-criteria-item"><h3 class="description__job-criteria-subheader">Seniority level</h3>
          <span class="description__job-criteria-text">{seniority}</span></li>
        <li class="description__job-criteria-item"><h3 class="description__job-criteria-subheader">Employment type</h3>
          <span class="description__job-criteria-text">{employment}</span></li>
        <li class="description__job-criteria-item"><h3 class="description__job-criteria-subheader">Job function</h3>
          <span class="description__job-criteria-text">Engineering</span></li>
        <li class="description__job-criteria-item"><h3 class="description__job-criteria-subheader">Industries</h3>
          <span class="description__job-criteria-text">Software Development</span></li>
      </ul>
      <div class="hirer-card__hirer-information">
        <a href="/in/jane-recruiter"><h3>Jane Recruiter</h3></a><h4>Talent Partner</h4>
      </div>
    </body></html>'''


def company_html(description: str = 'Acme builds rockets.', website: str = 'https://acme.example.com',
                 employees: str = '1,001-5,000 employees') -> str:
    return f'''<html><body>
      <img class="org-top-card-primary-content__logo" src="https://media.licdn.com/acme-logo.png">
      <a data-tracking-control-name="about_website" href="{website}">Website</a>
      <section class="core-section-container"><div class="core-section-container__content"><p>{description}</p></div></section>
      <dl><div class="company-size"><dd class="employee-count">{employees}</dd></div></dl>
    </body></html>'''


# --- fake Playwright objects ---

class FakeElement:
    def __init__(self, text: Optional[str] = None, attrs: Optional[Dict[str, str]] = None,
                 children: Optional[Dict[str, Union['FakeElement', List['FakeElement']]]] = None,
                 on_click: Optional[Callable[[], None]] = None):
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.on_click = on_click
        self.clicks = 0

    def text_content(self):
        return self.text

    def inner_text(self):
        return (self.text or '').strip()

    def get_attribute(self, name):
        return self.attrs.get(name)

    def query_selector(self, selector):
        child = self.children.get(selector)
        if isinstance(child, list):
            return child[0] if child else None
        return child

    def query_selector_all(self, selector):
        child = self.children.get(selector)
        if child is None:
            return []
        return child if isinstance(child, list) else [child]

    def click(self):
        self.clicks += 1
        if self.on_click:
            self.on_click()


class FakePage:
    """Serves canned HTML per URL; an Exception value is raised on navigation."""

    def __init__(self, documents: Optional[Dict[str, Union[str, Exception]]] = None, show_cards: bool = True):
        self.documents = documents or {}
        self.show_cards = show_cards
        self.url = 'about:blank'
        self.html = ''
        self.visited: List[str] = []
        self.timeouts: List[int] = []
        self.elements: Dict[str, List[FakeElement]] = {}
        self.closed = False
        self.title_text = 'Fake page'

    def _lookup(self, url):
        if url in self.documents:
            return self.documents[url]
        for key, value in self.documents.items():
            if url.startswith(key):
                return value
        return '<html><body></body></html>'

    def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        doc = self._lookup(url)
        if isinstance(doc, Exception):
            raise doc
        self.url = url
        self.html = doc

    def wait_for_selector(self, selector, timeout=None):
        if not self.show_cards:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return FakeElement()

    def wait_for_timeout(self, ms):
        self.timeouts.append(ms)

    def content(self):
        return self.html

    def title(self):
        return self.title_text

    def evaluate(self, script, *args):
        return None

    def query_selector(self, selector):
        found = self.elements.get(selector) or []
        return found[0] if found else None

    def query_selector_all(self, selector):
        return list(self.elements.get(selector) or [])

    def screenshot(self, full_page=False, type='png'):
        return b'\x89PNG-fake'

    def pdf(self, format='A4'):
        return b'%PDF-fake'

    def close(self):
        self.closed = True


class FakeContext:
    def __init__(self, page_factory: Callable[[], FakePage]):
        self.page_factory = page_factory
        self.pages: List[FakePage] = []

    def new_page(self):
        page = self.page_factory()
        self.pages.append(page)
        return page


class FakeBrowser:
    def __init__(self, context: FakeContext):
        self.contexts = [context]
        self.closed = False

    def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self, browser: Optional[FakeBrowser] = None, connect_error: Optional[Exception] = None):
        self.browser = browser
        self.connect_error = connect_error
        self.connected_to: List[str] = []
        self.stopped = False
        self.chromium = self

    # sync_playwright() compatible entry
    def __call__(self):
        return self

    def start(self):
        return self

    def stop(self):
        self.stopped = True

    def connect_over_cdp(self, endpoint):
        self.connected_to.append(endpoint)
        if self.connect_error:
            raise self.connect_error
        return self.browser


class FakeSteelService:
    """httpx MockTransport handler recording session create/release calls."""

    def __init__(self, create_status: int = 201, release_status: int = 200, session_ids: Optional[List[str]] = None):
        self.create_status = create_status
        self.release_status = release_status
        self.session_ids = list(session_ids or ['sess-1', 'sess-2', 'sess-3', 'sess-4'])
        self.created: List[dict] = []
        self.released: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == 'POST' and path == '/v1/sessions':
            body = json.loads(request.content or b'{}')
            self.created.append(body)
            if self.create_status >= 300:
                return httpx.Response(self.create_status, json={'error': 'no capacity'})
            return httpx.Response(self.create_status, json={'id': self.session_ids.pop(0)})
        if request.method == 'POST' and path.endswith('/release'):
            self.released.append(path.split('/')[3])
            return httpx.Response(self.release_status, json={'success': self.release_status < 300})
        return httpx.Response(404)


@pytest.fixture
def fast_settings():
    return dataclasses.replace(
        load_settings(),
        steel_browser_url='http://steel.test:3000',
        search_settle_ms=0,
        page_settle_ms=0,
        request_delay_ms=0,
        scroll_pause_ms=0,
        show_more_pause_ms=0,
        page_size=25,
        max_stalled_scrolls=20,
    )


@pytest.fixture
def steel_service():
    return FakeSteelService()


@pytest.fixture
def make_manager(fast_settings, steel_service):
    """Build a SteelSessionManager wired to the fake service and a fake browser."""
    def _make(page_factory: Callable[[], FakePage], connect_error: Optional[Exception] = None):
        context = FakeContext(page_factory)
        browser = FakeBrowser(context)
        pw = FakePlaywright(browser, connect_error=connect_error)
        manager = SteelSessionManager(fast_settings, transport=httpx.MockTransport(steel_service), playwright_factory=pw)
        return manager, context, browser, pw
    return _make
