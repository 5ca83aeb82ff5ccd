"""Centralized settings with environment + runtime config overlay.
Provides typed accessors to avoid scattering magic numbers (timeouts, delays, scroll limits).
"""
from __future__ import annotations
from pathlib import Path
import os, yaml
from dataclasses import dataclass

_RUNTIME_CACHE: dict | None = None

CONFIG_DIR = Path(__file__).resolve().parent.parent / 'config'

def _load_runtime() -> dict:
    global _RUNTIME_CACHE
    if _RUNTIME_CACHE is None:
        cfg_file = CONFIG_DIR / 'runtime.yml'
        if cfg_file.exists():
            try:
                _RUNTIME_CACHE = yaml.safe_load(cfg_file.read_text(encoding='utf-8')) or {}
            except Exception:
                _RUNTIME_CACHE = {}
        else:
            _RUNTIME_CACHE = {}
    return _RUNTIME_CACHE

def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is not None:
        try:
            return float(v)
        except ValueError:
            return default
    return float(_load_runtime().get(name.lower(), default))

def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is not None:
        try:
            return int(v)
        except ValueError:
            return default
    return int(_load_runtime().get(name.lower(), default))

def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    if v is not None:
        return v
    return str(_load_runtime().get(name.lower(), default))

VERSION = '3.0'

@dataclass(frozen=True)
class Settings:
    steel_browser_url: str
    session_timeout_ms: int
    http_timeout: float
    search_timeout_ms: int
    results_wait_ms: int
    search_settle_ms: int
    page_timeout_ms: int
    page_settle_ms: int
    request_delay_ms: int
    scroll_pause_ms: int
    show_more_pause_ms: int
    max_stalled_scrolls: int
    page_size: int

def load_settings() -> Settings:
    return Settings(
        steel_browser_url=_env_str('STEEL_BROWSER_URL', 'http://steel-browser:3000').rstrip('/'),
        session_timeout_ms=_env_int('SCRAPER_SESSION_TIMEOUT_MS', 600_000),
        http_timeout=_env_float('SCRAPER_HTTP_TIMEOUT', 30.0),
        search_timeout_ms=_env_int('SCRAPER_SEARCH_TIMEOUT_MS', 30_000),
        results_wait_ms=_env_int('SCRAPER_RESULTS_WAIT_MS', 15_000),
        search_settle_ms=_env_int('SCRAPER_SEARCH_SETTLE_MS', 2_000),
        page_timeout_ms=_env_int('SCRAPER_PAGE_TIMEOUT_MS', 20_000),
        page_settle_ms=_env_int('SCRAPER_PAGE_SETTLE_MS', 1_500),
        request_delay_ms=_env_int('SCRAPER_REQUEST_DELAY_MS', 500),
        scroll_pause_ms=_env_int('SCRAPER_SCROLL_PAUSE_MS', 1_500),
        show_more_pause_ms=_env_int('SCRAPER_SHOW_MORE_PAUSE_MS', 2_000),
        max_stalled_scrolls=_env_int('SCRAPER_MAX_STALLED_SCROLLS', 20),
        page_size=_env_int('SCRAPER_PAGE_SIZE', 25),
    )

SETTINGS = load_settings()
