"""Remote browser session lifecycle (Steel browser service).

A session is created over HTTP, then driven through Playwright's CDP connection:

    POST {base}/v1/sessions              {"sessionTimeout": ms} -> {"id": ...}
    ws://{host}/v1/sessions/{id}/cdp     control connection
    POST {base}/v1/sessions/{id}/release

Release is best-effort: failures are logged and never raised, so they cannot mask
the outcome of the pipeline that owned the session.
"""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional
import logging

import httpx
from playwright.sync_api import sync_playwright

from .errors import SessionCreationError, SessionReleaseFailure
from .logging_config import log_event
from .settings import SETTINGS, Settings

logger = logging.getLogger('session')


@dataclass
class ScrapeSession:
    session_id: str
    browser: Any
    timeout_ms: int
    playwright: Any = None
    released: bool = False

    def context(self):
        """First browser context of the remote session (created when the session has none)."""
        contexts = self.browser.contexts
        return contexts[0] if contexts else self.browser.new_context()

    def new_page(self):
        return self.context().new_page()


def cdp_endpoint(base_url: str, session_id: str) -> str:
    if base_url.startswith('https://'):
        scheme, host = 'wss', base_url[len('https://'):]
    else:
        scheme, host = 'ws', base_url.replace('http://', '', 1)
    return f"{scheme}://{host.rstrip('/')}/v1/sessions/{session_id}/cdp"


class SteelSessionManager:
    """Acquires and releases exclusive remote browser sessions. Holds no session state itself."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None,
                 playwright_factory: Optional[Callable[[], Any]] = None):
        self.settings = settings or SETTINGS
        self.base_url = self.settings.steel_browser_url.rstrip('/')
        self._transport = transport
        self._playwright_factory = playwright_factory or sync_playwright

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.settings.http_timeout, transport=self._transport)

    def _create_remote(self, timeout_ms: int) -> str:
        try:
            with self._client() as client:
                resp = client.post('/v1/sessions', json={'sessionTimeout': timeout_ms})
        except httpx.HTTPError as e:
            raise SessionCreationError(f"Failed to create Steel session: {e}") from e
        if not resp.is_success:
            raise SessionCreationError(f"Failed to create Steel session: {resp.reason_phrase or resp.status_code}", status=resp.status_code)
        try:
            session_id = resp.json()['id']
        except (ValueError, KeyError, TypeError) as e:
            raise SessionCreationError("Failed to create Steel session: response carried no session id", status=resp.status_code) from e
        return str(session_id)

    def _post_release(self, session_id: str) -> None:
        try:
            with self._client() as client:
                resp = client.post(f'/v1/sessions/{session_id}/release')
        except httpx.HTTPError as e:
            raise SessionReleaseFailure(str(e)) from e
        if not resp.is_success:
            raise SessionReleaseFailure(f"release returned HTTP {resp.status_code}")

    def acquire(self, timeout_ms: Optional[int] = None) -> ScrapeSession:
        timeout_ms = timeout_ms or self.settings.session_timeout_ms
        session_id = self._create_remote(timeout_ms)
        ws_url = cdp_endpoint(self.base_url, session_id)
        pw = None
        try:
            pw = self._playwright_factory().start()
            browser = pw.chromium.connect_over_cdp(ws_url)
        except Exception as e:
            logger.error(f"CDP connection to session {session_id} failed: {e}")
            if pw is not None:
                try:
                    pw.stop()
                except Exception:
                    logger.debug("Playwright stop failed", exc_info=True)
            # the remote session exists already; give it back before surfacing the error
            self.release(ScrapeSession(session_id=session_id, browser=None, timeout_ms=timeout_ms))
            raise SessionCreationError(f"Failed to connect to Steel session {session_id}: {e}") from e
        logger.info(f"Acquired Steel session {session_id}")
        return ScrapeSession(session_id=session_id, browser=browser, timeout_ms=timeout_ms, playwright=pw)

    def release(self, session: ScrapeSession) -> bool:
        """Close the CDP connection and release the remote session. Idempotent; never raises."""
        if session.released:
            return True
        session.released = True
        if session.browser is not None:
            try:
                session.browser.close()
            except Exception:
                logger.debug(f"Browser close failed for session {session.session_id}", exc_info=True)
        if session.playwright is not None:
            try:
                session.playwright.stop()
            except Exception:
                logger.debug("Playwright stop failed", exc_info=True)
        try:
            self._post_release(session.session_id)
        except SessionReleaseFailure as e:
            logger.error(f"Failed to release session {session.session_id}: {e}")
            log_event('session_release_failed', session_id=session.session_id, message=str(e))
            return False
        logger.info(f"Released Steel session {session.session_id}")
        return True

    @contextmanager
    def session(self, timeout_ms: Optional[int] = None) -> Iterator[ScrapeSession]:
        s = self.acquire(timeout_ms)
        try:
            yield s
        finally:
            self.release(s)
