"""Job actor package public API."""
from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("jobactor")
except Exception:  # fallback when not installed
    __version__ = "3.0.0"

from .jobactor.linkedin_jobs import LinkedInJobsActor  # re-export
from .jobactor.models import Job, QueryFilters, ScrapeOptions, ScrapeResult  # re-export
from .jobactor.session import SteelSessionManager  # re-export

__all__ = ["__version__", "LinkedInJobsActor", "Job", "QueryFilters", "ScrapeOptions", "ScrapeResult", "SteelSessionManager"]
