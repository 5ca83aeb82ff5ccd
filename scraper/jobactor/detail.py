"""Per-job detail page enrichment."""
from __future__ import annotations
from typing import List, Optional, Sequence
import logging

from playwright.sync_api import Error as PlaywrightError

from .extract import parse_detail
from .logging_config import log_event
from .models import Job, JobDetail
from .settings import SETTINGS, Settings

logger = logging.getLogger('detail')


def fetch_document(page, url: str, settings: Settings) -> str:
    page.goto(url, wait_until='domcontentloaded', timeout=settings.page_timeout_ms)
    # client-side rendering settles after DOMContentLoaded
    page.wait_for_timeout(settings.page_settle_ms)
    return page.content()


def pause(page, ms: int) -> None:
    """Inter-request delay. A dead page skips it."""
    try:
        page.wait_for_timeout(ms)
    except PlaywrightError as e:
        logger.debug(f"Delay skipped: {e}")


class DetailEnricher:
    """Visits each job's detail URL on one reused page and merges the JobDetail fields.

    A failed visit leaves that job exactly as it was; the batch carries on.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or SETTINGS
        self.visits = 0
        self.failures = 0

    def fetch(self, page, url: str) -> Optional[JobDetail]:
        self.visits += 1
        try:
            html = fetch_document(page, url, self.settings)
            return parse_detail(html, url)
        except Exception as e:
            self.failures += 1
            logger.warning(f"Failed to extract details from {url}: {e}")
            log_event('detail_failed', url=url, message=str(e))
            return None

    def enrich(self, page, jobs: Sequence[Job]) -> List[Job]:
        out: List[Job] = []
        total = len(jobs)
        for i, job in enumerate(jobs, 1):
            if not job.link:
                out.append(job)
                continue
            logger.info(f"Getting details for job {i}/{total}: {job.title}")
            details = self.fetch(page, job.link)
            out.append(job.merged(details))
            pause(page, self.settings.request_delay_ms)
        return out
