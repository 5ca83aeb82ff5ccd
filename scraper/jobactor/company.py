"""Company profile enrichment with a per-run URL cache."""
from __future__ import annotations
from typing import Dict, List, Optional, Sequence
import logging

from .detail import fetch_document, pause
from .extract import parse_company
from .logging_config import log_event
from .models import CompanyProfile, Job
from .settings import SETTINGS, Settings

logger = logging.getLogger('company')


class CompanyEnricher:
    """Visits each distinct company URL at most once and merges the profile into every job.

    The cache lives on the instance, so one enricher must serve exactly one run. A failed
    visit caches ``None`` and is never retried within the run.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or SETTINGS
        self.cache: Dict[str, Optional[CompanyProfile]] = {}

    @property
    def visits(self) -> int:
        return len(self.cache)

    def fetch(self, page, url: str) -> Optional[CompanyProfile]:
        try:
            html = fetch_document(page, url, self.settings)
            return parse_company(html, url)
        except Exception as e:
            logger.warning(f"Failed to extract company details from {url}: {e}")
            log_event('company_failed', url=url, message=str(e))
            return None

    def profile_for(self, page, url: str, company: Optional[str] = None) -> Optional[CompanyProfile]:
        if url not in self.cache:
            logger.info(f"Getting company details for: {company or url}")
            self.cache[url] = self.fetch(page, url)
            pause(page, self.settings.request_delay_ms)
        return self.cache[url]

    def enrich(self, page, jobs: Sequence[Job]) -> List[Job]:
        out: List[Job] = []
        for job in jobs:
            if not job.company_linkedin_url:
                out.append(job)
                continue
            profile = self.profile_for(page, job.company_linkedin_url, job.company)
            out.append(job.merged(profile))
        return out
