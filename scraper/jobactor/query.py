"""LinkedIn public job-search URL builder.

Codes follow LinkedIn's guest search dialect (may change without notice):
  f_E   experience level   1 Internship .. 6 Executive
  f_JT  job type           F P C T V I O
  f_WT  work schedule      1 On-site, 2 Remote, 3 Hybrid
  f_TPR posted within      r86400 (24h), r604800 (week), r2592000 (month)

The guest surface has no company-name filter, so a company allowlist is folded into
the keyword term as a quoted OR disjunction.
"""
from __future__ import annotations
from typing import List, Optional, Union, Iterable
from urllib.parse import urlencode

from .models import QueryFilters

SEARCH_BASE = "https://www.linkedin.com/jobs/search"
TRACKING_PARAM = ('trk', 'public_jobs_jobs-search-bar_search-submit')

EXPERIENCE_LEVELS = {'1': 'Internship', '2': 'Entry level', '3': 'Associate', '4': 'Mid-Senior level', '5': 'Director', '6': 'Executive'}
JOB_TYPES = {'F': 'Full-time', 'P': 'Part-time', 'C': 'Contract', 'T': 'Temporary', 'V': 'Volunteer', 'I': 'Internship', 'O': 'Other'}
WORK_SCHEDULES = {'1': 'On-site', '2': 'Remote', '3': 'Hybrid'}
POST_TIMES = {'r86400': 'Past 24 hours', 'r604800': 'Past week', 'r2592000': 'Past month'}


def _as_list(value: Optional[Union[str, Iterable[str]]]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value if v not in (None, '')]


def company_disjunction(names: Iterable[str]) -> str:
    return ' OR '.join(f'"{n}"' for n in names if n)


def build_search_params(filters: QueryFilters) -> List[tuple]:
    params: List[tuple] = []
    keywords = filters.keywords or ''
    companies = company_disjunction(filters.company_names)
    if companies:
        keywords = f"{keywords} {companies}" if keywords else companies
    if keywords:
        params.append(('keywords', keywords))
    if filters.location:
        params.append(('location', filters.location))
    if filters.start_from > 0:
        params.append(('start', str(filters.start_from)))
    for name, value in (
        ('f_E', filters.experience_level),
        ('f_JT', filters.job_type),
        ('f_WT', filters.work_schedule),
        ('f_TPR', filters.job_post_time),
    ):
        codes = _as_list(value)
        if codes:
            params.append((name, ','.join(codes)))
    params.append(TRACKING_PARAM)
    return params


def build_search_url(filters: QueryFilters) -> str:
    return f"{SEARCH_BASE}?{urlencode(build_search_params(filters))}"
