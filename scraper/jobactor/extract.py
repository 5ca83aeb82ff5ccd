"""Declarative field extraction over rendered HTML.

Each field is an ordered tuple of fallback CSS selectors; the first selector that
matches wins. Extraction never raises for a missing or odd element: the field is
``None``. Parsing works on the HTML snapshot of a page (``page.content()``), which
keeps it independent of the browser driver and testable with plain fixtures.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin
import logging
import re

from bs4 import BeautifulSoup, Tag

from .models import JobSummary, JobDetail, CompanyProfile

logger = logging.getLogger(__name__)

CARD_SELECTOR = '.base-search-card, .job-search-card, .base-card'
CARD_WAIT_SELECTOR = '.base-search-card, .job-search-card'
SHOW_MORE_SELECTOR = 'button.infinite-scroller__show-more-button, button[aria-label*="more"]'

SALARY_TOKEN_RGX = re.compile(r"[$€£][\d,]+(?:\s*-\s*[$€£]?[\d,]+)?")
DIGITS_RGX = re.compile(r"\d+")
EMPLOYEES_RGX = re.compile(r"[\d,]+(?:-[\d,]+)?\s*employees", re.I)
BG_URL_RGX = re.compile(r"url\(\s*[\"']?([^\"')]+)[\"']?\s*\)")


@dataclass(frozen=True)
class FieldSpec:
    name: str
    selectors: Tuple[str, ...]
    attr: Optional[str] = None          # None -> stripped text content
    html: bool = False                  # inner HTML instead of text
    text_fallback: bool = False         # use text when the attribute is empty
    transform: Optional[Callable[[str], Any]] = None


def _select_first(root: Tag, selectors: Sequence[str]) -> Optional[Tag]:
    for sel in selectors:
        try:
            el = root.select_one(sel)
        except Exception:
            logger.debug(f"Unsupported selector {sel!r}", exc_info=True)
            continue
        if el is not None:
            return el
    return None


def _text(el: Tag) -> str:
    return el.get_text().strip()


def _attr(el: Tag, attr: str, base_url: str) -> Optional[str]:
    v = el.get(attr)
    if isinstance(v, list):
        v = ' '.join(v)
    if not v:
        return None
    v = v.strip()
    if attr in ('href', 'src') and base_url:
        return urljoin(base_url, v)
    return v


def extract_field(root: Tag, spec: FieldSpec, base_url: str = '') -> Any:
    el = _select_first(root, spec.selectors)
    if el is None:
        return None
    if spec.html:
        value: Optional[str] = el.decode_contents()
    elif spec.attr:
        value = _attr(el, spec.attr, base_url)
        if value is None and spec.text_fallback:
            value = _text(el)
    else:
        value = _text(el)
    if value is None:
        return None
    if spec.transform is not None:
        try:
            return spec.transform(value)
        except Exception:
            logger.debug(f"Transform failed for field {spec.name}", exc_info=True)
            return None
    return value


def extract_fields(root: Tag, specs: Iterable[FieldSpec], base_url: str = '') -> Dict[str, Any]:
    return {spec.name: extract_field(root, spec, base_url) for spec in specs}


# --- value parsers ---

def split_salary_range(text: str) -> Optional[List[str]]:
    parts = [p.strip() for p in re.split(r"\s*-\s*", text.strip())]
    parts = [p for p in parts if p]
    return parts or None


def salary_tokens(text: str) -> Optional[List[str]]:
    found = SALARY_TOKEN_RGX.findall(text or '')
    return found or None


def first_number(text: str) -> Optional[str]:
    m = DIGITS_RGX.search(text or '')
    return m.group(0) if m else None


def employees_count(text: str) -> Optional[str]:
    m = EMPLOYEES_RGX.search(text or '')
    if not m:
        return None
    return re.sub(r"[^\d-]", '', m.group(0)) or None


def entity_id(urn: str) -> Optional[str]:
    # "urn:li:jobPosting:3791234567" -> "3791234567"
    return urn.split(':')[-1] or None


def background_image_url(style: str) -> Optional[str]:
    m = BG_URL_RGX.search(style or '')
    return m.group(1) if m else None


# --- field maps ---

CARD_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec('title', ('.base-search-card__title', 'h3.base-search-card__title')),
    FieldSpec('company', ('.base-search-card__subtitle', 'h4.base-search-card__subtitle')),
    FieldSpec('company_linkedin_url', ('a[data-tracking-control-name*="company"]', 'h4 a'), attr='href'),
    FieldSpec('company_logo', ('img.artdeco-entity-image', '.search-entity-media img'), attr='src'),
    FieldSpec('location', ('.job-search-card__location', '.base-search-card__metadata')),
    FieldSpec('link', ('a.base-card__full-link', 'a'), attr='href'),
    FieldSpec('posted_at', ('time', '.job-search-card__listdate'), attr='datetime', text_fallback=True),
    FieldSpec('salary_info', ('.job-search-card__salary-info', '[class*="salary"]'), transform=split_salary_range),
)

DETAIL_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec('description_html', ('.description__text', '.show-more-less-html__markup', '.jobs-description__content'), html=True),
    FieldSpec('description_text', ('.description__text', '.show-more-less-html__markup', '.jobs-description__content')),
    FieldSpec('salary_info', ('.salary-main-rail__data-body', '.compensation__salary', '[class*="salary"]'), transform=salary_tokens),
    FieldSpec('applicants_count', ('.num-applicants__caption', '.jobs-unified-top-card__applicant-count', '[class*="applicant"]'), transform=first_number),
    FieldSpec('apply_url', ('a.apply-button', 'a[data-tracking-control-name*="apply"]', '.jobs-apply-button'), attr='href'),
    FieldSpec('job_poster_name', ('.jobs-poster__name', '.hirer-card__hirer-information h3')),
    FieldSpec('job_poster_title', ('.jobs-poster__headline', '.hirer-card__hirer-information h4')),
    FieldSpec('job_poster_photo', ('.jobs-poster__photo img', '.hirer-card__hirer-photo img'), attr='src'),
    FieldSpec('job_poster_profile_url', ('.jobs-poster__profile-link', '.hirer-card__hirer-information a'), attr='href'),
)

CRITERIA_ITEM = ('.description__job-criteria-item', '.job-criteria__item')
CRITERIA_LABEL = ('.description__job-criteria-subheader', '.job-criteria__subheader')
CRITERIA_VALUE = ('.description__job-criteria-text', '.job-criteria__text')

# detail field -> accepted criteria keys, first present wins
CRITERIA_FIELDS = {
    'seniority_level': ('seniority_level', 'experience_level'),
    'employment_type': ('employment_type', 'job_type'),
    'job_function': ('job_function', 'function'),
    'industries': ('industries', 'industry'),
}

COMPANY_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec('company_description', ('.core-section-container__content p', '.org-top-card-summary-info-list', '.org-about-us-organization-description__text')),
    FieldSpec('company_website', ('a[data-tracking-control-name*="website"]', '.org-top-card-primary-actions__inner a[href*="http"]'), attr='href'),
    FieldSpec('company_employees_count', ('.org-top-card-summary-info-list__info-item:nth-child(2)', '[class*="employee"]'), transform=employees_count),
)
COMPANY_LOGO = ('.org-top-card-primary-content__logo', '.artdeco-entity-image')


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or '', 'html.parser')


def parse_criteria(root: Tag) -> Dict[str, str]:
    """Job criteria list ("Seniority level: Mid-Senior level", ...) keyed by snake_case label."""
    criteria: Dict[str, str] = {}
    for item in root.select(', '.join(CRITERIA_ITEM)):
        label = _select_first(item, CRITERIA_LABEL)
        value = _select_first(item, CRITERIA_VALUE)
        if label is None or value is None:
            continue
        key = re.sub(r"\s+", '_', _text(label).lower())
        criteria[key] = _text(value)
    return criteria


def parse_summaries(html: str, base_url: str = '', max_count: Optional[int] = None) -> List[JobSummary]:
    """Result cards in document order; cards without a title are skipped."""
    soup = _soup(html)
    cards = soup.select(CARD_SELECTOR)
    if max_count is not None:
        cards = cards[:max_count]
    out: List[JobSummary] = []
    for card in cards:
        record = extract_fields(card, CARD_FIELDS, base_url)
        if not record.get('title'):
            continue
        urn = card.get('data-entity-urn')
        record['id'] = entity_id(urn) if urn else None
        out.append(JobSummary(**record))
    return out


def parse_detail(html: str, base_url: str = '') -> JobDetail:
    soup = _soup(html)
    record = extract_fields(soup, DETAIL_FIELDS, base_url)
    criteria = parse_criteria(soup)
    for field, keys in CRITERIA_FIELDS.items():
        record[field] = next((criteria[k] for k in keys if criteria.get(k)), None)
    return JobDetail(**record)


def parse_company(html: str, base_url: str = '') -> CompanyProfile:
    soup = _soup(html)
    record = extract_fields(soup, COMPANY_FIELDS, base_url)
    logo = None
    el = _select_first(soup, COMPANY_LOGO)
    if el is not None:
        logo = _attr(el, 'src', base_url) or background_image_url(el.get('style') or '')
    record['company_logo'] = logo
    return CompanyProfile(**record)


def extract_summaries(page, max_count: int) -> List[JobSummary]:
    """Parse the currently loaded result page (no navigation)."""
    return parse_summaries(page.content(), page.url, max_count)
