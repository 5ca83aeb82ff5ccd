from __future__ import annotations
from typing import Any, Dict, Optional, Union
import logging
import os

from fastapi import Body, Depends, FastAPI
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from scraper.jobactor.models import LinkedInJobsInput
from scraper.jobactor.pages import PageTools
from scraper.jobactor.registry import get_actor, list_actors, run_actor
from scraper.jobactor.session import SteelSessionManager
from scraper.jobactor.settings import SETTINGS, VERSION

logger = logging.getLogger('web')

app = FastAPI(title="Crawlee API", version=VERSION, description="Steel-browser backed scraping actors")


def get_session_manager() -> SteelSessionManager:
    return SteelSessionManager(SETTINGS)


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScrapeRequest(_Body):
    url: Optional[str] = None
    selectors: Optional[Dict[str, str]] = None
    wait_for: Optional[str] = None


class JobsRequest(_Body):
    url: Optional[str] = None
    job_selector: Optional[str] = None
    fields: Optional[Dict[str, str]] = None


class ListRequest(_Body):
    url: Optional[str] = None
    item_selector: Optional[str] = None
    fields: Optional[Dict[str, Union[str, Dict[str, str]]]] = None
    max_items: int = 100


class CaptureRequest(_Body):
    url: Optional[str] = None
    full_page: bool = False


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={'error': message})


def _failure(label: str, e: Exception) -> JSONResponse:
    logger.error(f"{label} error: {e}")
    return _error(500, str(e))


@app.get("/")
def root():
    return {
        'service': 'Crawlee API',
        'version': VERSION,
        'documentation': '/docs',
        'endpoints': {
            'docs': 'GET /docs - Swagger UI',
            'openapi': 'GET /docs.json',
            'health': 'GET /health',
            'actors': 'GET /actors',
            'runActor': 'POST /actors/:id',
            'scrape': 'POST /scrape',
            'scrapeJobs': 'POST /scrape/jobs',
            'scrapeList': 'POST /scrape/list',
            'screenshot': 'POST /screenshot',
            'pdf': 'POST /pdf',
        },
    }


@app.get("/docs.json", include_in_schema=False)
def docs_json():
    return app.openapi()


@app.get("/health")
def health():
    return {'status': 'ok', 'service': 'crawlee-api', 'version': VERSION, 'steelBrowser': SETTINGS.steel_browser_url}


@app.get("/actors")
def actors():
    return {'actors': list_actors()}


@app.get("/actors/{actor_id}")
def actor_info(actor_id: str):
    try:
        return get_actor(actor_id).describe(actor_id)
    except KeyError:
        return _error(404, f"Actor '{actor_id}' not found")


ACTOR_INPUT_SCHEMA = LinkedInJobsInput.model_json_schema(by_alias=True)


@app.post("/actors/{actor_id}", openapi_extra={
    "requestBody": {"content": {"application/json": {"schema": ACTOR_INPUT_SCHEMA}}},
})
def actor_run(actor_id: str, payload: Optional[Dict[str, Any]] = Body(default=None),
              sessions: SteelSessionManager = Depends(get_session_manager)):
    try:
        get_actor(actor_id)
    except KeyError:
        return _error(404, f"Actor '{actor_id}' not found")
    try:
        return run_actor(actor_id, payload, sessions)
    except ValidationError as e:
        return _error(400, f"Invalid input: {e.errors(include_url=False)}")
    except Exception as e:
        return _failure(f"Actor {actor_id}", e)


@app.post("/scrape")
def scrape(req: ScrapeRequest, sessions: SteelSessionManager = Depends(get_session_manager)):
    if not req.url:
        return _error(400, 'URL is required')
    try:
        data = PageTools(sessions).scrape_page(req.url, req.selectors, req.wait_for)
    except Exception as e:
        return _failure("Scrape", e)
    return {'success': True, 'data': data}


@app.post("/scrape/jobs")
def scrape_jobs(req: JobsRequest, sessions: SteelSessionManager = Depends(get_session_manager)):
    if not req.url:
        return _error(400, 'URL is required')
    try:
        jobs = PageTools(sessions).scrape_job_listings(req.url, req.job_selector, req.fields)
    except Exception as e:
        return _failure("Jobs scraper", e)
    return {'success': True, 'count': len(jobs), 'jobs': jobs}


@app.post("/scrape/list")
def scrape_list(req: ListRequest, sessions: SteelSessionManager = Depends(get_session_manager)):
    if not req.url or not req.item_selector:
        return _error(400, 'URL and itemSelector required')
    try:
        items = PageTools(sessions).scrape_list(req.url, req.item_selector, req.fields, req.max_items)
    except Exception as e:
        return _failure("List scraper", e)
    return {'success': True, 'count': len(items), 'items': items}


@app.post("/screenshot")
def screenshot(req: CaptureRequest, sessions: SteelSessionManager = Depends(get_session_manager)):
    if not req.url:
        return _error(400, 'URL is required')
    try:
        png = PageTools(sessions).screenshot(req.url, req.full_page)
    except Exception as e:
        return _failure("Screenshot", e)
    return Response(content=png, media_type='image/png')


@app.post("/pdf")
def pdf(req: CaptureRequest, sessions: SteelSessionManager = Depends(get_session_manager)):
    if not req.url:
        return _error(400, 'URL is required')
    try:
        data = PageTools(sessions).render_pdf(req.url)
    except Exception as e:
        return _failure("PDF", e)
    return Response(content=data, media_type='application/pdf')


if __name__ == "__main__":
    import uvicorn
    from scraper.jobactor.logging_config import setup_logging
    setup_logging()
    port = int(os.environ.get("PORT", "3001"))
    logger.info(f"Crawlee API v{VERSION} running on port {port}")
    logger.info(f"Steel Browser: {SETTINGS.steel_browser_url}")
    uvicorn.run(app, host="0.0.0.0", port=port)
