"""Failure types raised by the actor pipeline.

Only stage-level operations raise. A selector that matches nothing is not an error:
the corresponding field is simply ``None``.
"""
from __future__ import annotations
from typing import Optional


class ActorError(Exception):
    """Base actor error."""


class SessionCreationError(ActorError):
    """Remote browser service unreachable, rejected the session, or CDP connect failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class NavigationTimeout(ActorError):
    def __init__(self, url: str, stage: str, message: str = ''):
        super().__init__(message or f"Navigation timed out during {stage}: {url}")
        self.url = url
        self.stage = stage


class SessionReleaseFailure(ActorError):
    """Release call failed. Logged by the session manager, never propagated."""
