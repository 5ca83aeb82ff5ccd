from __future__ import annotations
from typing import List, Optional, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Categorical filters take a single code or a collection of codes
FilterValue = Optional[Union[str, List[str]]]


class _WireModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self, **kwargs) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, **kwargs)


def _code(v):
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return str(v)


class _FilterFields(_WireModel):
    """Query fields shared by the request body and the built filters."""
    keywords: str = ''
    location: str = ''
    start_from: int = Field(default=0, ge=0)
    experience_level: FilterValue = None
    job_type: FilterValue = None
    work_schedule: FilterValue = None
    job_post_time: FilterValue = None
    company_names: List[str] = Field(default_factory=list)

    @field_validator('experience_level', 'job_type', 'work_schedule', 'job_post_time', mode='before')
    @classmethod
    def coerce_codes(cls, v):
        # numeric codes are common in hand-written payloads ({"experienceLevel": 2})
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return _code(v)
        if isinstance(v, (list, tuple, set)):
            return [_code(x) for x in v]
        return v

    @field_validator('company_names', mode='before')
    @classmethod
    def ensure_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class QueryFilters(_FilterFields):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ScrapeOptions(_WireModel):
    limit: int = Field(default=25, ge=1)
    start_from: int = Field(default=0, ge=0)
    include_details: bool = True
    scrape_company: bool = False


class LinkedInJobsInput(_FilterFields):
    """Flat request body accepted by the linkedin-jobs actor."""
    limit: int = Field(default=25, ge=1)
    include_details: bool = True
    scrape_company: bool = False

    def to_filters(self) -> QueryFilters:
        return QueryFilters(
            keywords=self.keywords or '',
            location=self.location or '',
            start_from=self.start_from,
            experience_level=self.experience_level,
            job_type=self.job_type,
            work_schedule=self.work_schedule,
            job_post_time=self.job_post_time,
            company_names=self.company_names,
        )

    def to_options(self) -> ScrapeOptions:
        return ScrapeOptions(
            limit=self.limit,
            start_from=self.start_from,
            include_details=self.include_details,
            scrape_company=self.scrape_company,
        )


class JobSummary(_WireModel):
    id: Optional[str] = None
    title: str
    company: Optional[str] = None
    company_linkedin_url: Optional[str] = None
    company_logo: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None
    posted_at: Optional[str] = None
    salary_info: Optional[List[str]] = None


class JobDetail(_WireModel):
    description_html: Optional[str] = None
    description_text: Optional[str] = None
    salary_info: Optional[List[str]] = None
    applicants_count: Optional[str] = None
    apply_url: Optional[str] = None
    seniority_level: Optional[str] = None
    employment_type: Optional[str] = None
    job_function: Optional[str] = None
    industries: Optional[str] = None
    job_poster_name: Optional[str] = None
    job_poster_title: Optional[str] = None
    job_poster_photo: Optional[str] = None
    job_poster_profile_url: Optional[str] = None


class CompanyProfile(_WireModel):
    company_description: Optional[str] = None
    company_website: Optional[str] = None
    company_employees_count: Optional[str] = None
    company_logo: Optional[str] = None


class Job(JobSummary):
    """Merged record: JobSummary + JobDetail + CompanyProfile.

    Only fields that were actually provided are serialized, so a job that was never
    enriched carries no detail or company keys.
    """
    description_html: Optional[str] = None
    description_text: Optional[str] = None
    applicants_count: Optional[str] = None
    apply_url: Optional[str] = None
    seniority_level: Optional[str] = None
    employment_type: Optional[str] = None
    job_function: Optional[str] = None
    industries: Optional[str] = None
    job_poster_name: Optional[str] = None
    job_poster_title: Optional[str] = None
    job_poster_photo: Optional[str] = None
    job_poster_profile_url: Optional[str] = None
    company_description: Optional[str] = None
    company_website: Optional[str] = None
    company_employees_count: Optional[str] = None

    @classmethod
    def from_summary(cls, summary: JobSummary) -> 'Job':
        return cls.model_validate(summary.model_dump(exclude_unset=True))

    def merged(self, layer: Optional[BaseModel]) -> 'Job':
        """Return a new Job with ``layer`` applied.

        A non-null layer value overrides; a null layer value only introduces the key
        when the job does not have it yet, so it never clobbers a filled field.
        """
        if layer is None:
            return self
        data = self.model_dump(exclude_unset=True)
        for key, value in layer.model_dump().items():
            if value is not None or data.get(key) is None:
                data[key] = value
        return type(self).model_validate(data)

    def to_wire(self, **kwargs) -> Dict[str, Any]:
        kwargs.setdefault('exclude_unset', True)
        return self.model_dump(by_alias=True, **kwargs)


class ScrapeResult(_WireModel):
    success: bool = True
    query: Dict[str, Any]
    options: Dict[str, Any]
    count: int = 0
    jobs: List[Job] = Field(default_factory=list)

    @classmethod
    def build(cls, filters: QueryFilters, options: ScrapeOptions, jobs: List[Job]) -> 'ScrapeResult':
        query = filters.to_wire(exclude={'start_from'})
        return cls(query=query, options=options.to_wire(), count=len(jobs), jobs=jobs)

    def to_wire(self, **kwargs) -> Dict[str, Any]:
        return {
            'success': self.success,
            'query': self.query,
            'options': self.options,
            'count': self.count,
            'jobs': [j.to_wire() for j in self.jobs],
        }
