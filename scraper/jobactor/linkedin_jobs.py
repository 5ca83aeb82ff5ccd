"""LinkedIn Jobs actor: search, lazy-load, per-job detail and per-company enrichment.

One run owns one remote browser session for its whole lifetime; the session is
released on every exit path. Only session acquisition and the initial search
navigation are fatal. Detail and company visits fail per item.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import time

from .company import CompanyEnricher
from .detail import DetailEnricher
from .extract import extract_summaries
from .loader import load_results
from .logging_config import log_event
from .models import Job, LinkedInJobsInput, QueryFilters, ScrapeOptions, ScrapeResult
from .query import build_search_url, EXPERIENCE_LEVELS, JOB_TYPES, WORK_SCHEDULES, POST_TIMES
from .session import SteelSessionManager
from .settings import SETTINGS, Settings, VERSION

logger = logging.getLogger('actor.linkedin_jobs')


def _close_quietly(page) -> None:
    try:
        page.close()
    except Exception:
        logger.debug("Page close failed", exc_info=True)


class LinkedInJobsActor:
    actor_id = 'linkedin-jobs'

    def __init__(self, session_manager: Optional[SteelSessionManager] = None, settings: Optional[Settings] = None):
        self.settings = settings or SETTINGS
        self.sessions = session_manager or SteelSessionManager(self.settings)

    def run(self, filters: QueryFilters, options: ScrapeOptions) -> ScrapeResult:
        url = build_search_url(filters)
        logger.info(f"Starting LinkedIn Jobs scrape: {url}")
        logger.info(f"Options: limit={options.limit}, includeDetails={options.include_details}, scrapeCompany={options.scrape_company}")
        log_event('run_start', url=url, limit=options.limit, include_details=options.include_details, scrape_company=options.scrape_company)
        started = time.time()
        try:
            with self.sessions.session() as session:
                jobs = self._scrape(session, url, options)
        except Exception as e:
            logger.error(f"LinkedIn Jobs error: {e}")
            log_event('run_failed', url=url, message=str(e))
            raise
        log_event('run_complete', count=len(jobs), elapsed_s=round(time.time() - started, 2))
        return ScrapeResult.build(filters, options, jobs)

    def _scrape(self, session, url: str, options: ScrapeOptions) -> List[Job]:
        context = session.context()
        page = context.new_page()
        try:
            load_results(page, url, options.limit, self.settings)
            log_event('search_loaded', url=page.url)
            summaries = extract_summaries(page, options.limit)
        finally:
            _close_quietly(page)
        logger.info(f"Found {len(summaries)} jobs from search results")
        log_event('summaries_extracted', count=len(summaries))
        jobs = [Job.from_summary(s) for s in summaries]

        if options.include_details and jobs:
            logger.info("Extracting detailed info for each job...")
            detail_page = context.new_page()
            try:
                jobs = DetailEnricher(self.settings).enrich(detail_page, jobs)
            finally:
                _close_quietly(detail_page)

        if options.scrape_company and jobs:
            logger.info("Extracting company details...")
            company_page = context.new_page()
            try:
                jobs = CompanyEnricher(self.settings).enrich(company_page, jobs)
            finally:
                _close_quietly(company_page)
        return jobs

    def run_payload(self, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Validate a raw request body, run, and return the wire response."""
        data = LinkedInJobsInput.model_validate(payload or {})
        return self.run(data.to_filters(), data.to_options()).to_wire()


META: Dict[str, Any] = {
    'id': LinkedInJobsActor.actor_id,
    'name': 'LinkedIn Jobs Scraper',
    'version': VERSION,
    'description': 'Advanced LinkedIn Jobs scraper with detailed job info, filters, and company data',
    'endpoint': '/actors/linkedin-jobs',
    'method': 'POST',
    'input': {
        'keywords': {'type': 'string', 'description': 'Search keywords', 'required': False},
        'location': {'type': 'string', 'description': 'Job location', 'required': False},
        'limit': {'type': 'integer', 'description': 'Max results', 'default': 25},
        'startFrom': {'type': 'integer', 'description': 'Pagination offset', 'default': 0},
        'experienceLevel': {'type': 'string|array', 'description': 'Experience level filter', 'enum': EXPERIENCE_LEVELS},
        'jobType': {'type': 'string|array', 'description': 'Job type filter', 'enum': JOB_TYPES},
        'workSchedule': {'type': 'string|array', 'description': 'Work location type', 'enum': WORK_SCHEDULES},
        'jobPostTime': {'type': 'string|array', 'description': 'Filter by posting time', 'enum': POST_TIMES},
        'companyNames': {'type': 'array', 'description': 'Filter by company names (folded into keywords)'},
        'includeDetails': {'type': 'boolean', 'description': 'Fetch full job details', 'default': True},
        'scrapeCompany': {'type': 'boolean', 'description': 'Fetch company details', 'default': False},
    },
    'output': {
        'id': 'LinkedIn job ID',
        'title': 'Job title',
        'company': 'Company name',
        'companyLinkedinUrl': 'Company LinkedIn URL',
        'companyLogo': 'Company logo URL',
        'location': 'Job location',
        'link': 'Job posting URL',
        'postedAt': 'Date posted',
        'salaryInfo': 'Salary range (array)',
        'descriptionHtml': 'Job description (HTML)',
        'descriptionText': 'Job description (text)',
        'applicantsCount': 'Number of applicants',
        'applyUrl': 'Direct apply URL',
        'seniorityLevel': 'Seniority level',
        'employmentType': 'Employment type',
        'jobFunction': 'Job function',
        'industries': 'Industry',
        'jobPosterName': 'Recruiter name',
        'jobPosterTitle': 'Recruiter title',
        'jobPosterPhoto': 'Recruiter photo URL',
        'jobPosterProfileUrl': 'Recruiter profile URL',
        'companyDescription': 'Company description (if scrapeCompany=true)',
        'companyWebsite': 'Company website (if scrapeCompany=true)',
        'companyEmployeesCount': 'Employee count (if scrapeCompany=true)',
    },
    'examples': [
        {'name': 'Basic search', 'input': {'keywords': 'Software Engineer', 'location': 'Spain', 'limit': 10}},
        {'name': 'Remote jobs', 'input': {'keywords': 'Data Scientist', 'workSchedule': '2', 'jobType': 'F', 'limit': 20}},
        {'name': 'With company info', 'input': {'keywords': 'Product Manager', 'includeDetails': True, 'scrapeCompany': True, 'limit': 5}},
    ],
}
