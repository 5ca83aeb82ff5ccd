"""Actor registry. Add new actors here."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .linkedin_jobs import LinkedInJobsActor, META as LINKEDIN_JOBS_META
from .session import SteelSessionManager


@dataclass
class ActorEntry:
    meta: Dict[str, Any]
    factory: Callable[[Optional[SteelSessionManager]], Any]

    def describe(self, actor_id: str) -> Dict[str, Any]:
        return {**self.meta, 'id': actor_id}


ACTORS: Dict[str, ActorEntry] = {
    'linkedin-jobs': ActorEntry(meta=LINKEDIN_JOBS_META, factory=lambda sm: LinkedInJobsActor(session_manager=sm, settings=sm.settings if sm else None)),
}


def list_actors() -> List[Dict[str, Any]]:
    return [entry.describe(actor_id) for actor_id, entry in ACTORS.items()]


def get_actor(actor_id: str) -> ActorEntry:
    try:
        return ACTORS[actor_id]
    except KeyError:
        raise KeyError(f"Actor '{actor_id}' not found") from None


def run_actor(actor_id: str, payload: Optional[Dict[str, Any]], session_manager: Optional[SteelSessionManager] = None) -> Dict[str, Any]:
    actor = get_actor(actor_id).factory(session_manager)
    return actor.run_payload(payload)
