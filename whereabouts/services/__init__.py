"""Services layer - Application orchestration.

Available services:
- EntityStore: Per-run visited/pending/association state
- FrontierSearch: Traversal producing current-location candidates
- SubmissionLoop: Bounded submit / reject / retry loop
- LocationResolverService: Note-to-outcome orchestration
"""

from .entity_store import EntityStore
from .frontier_search import FrontierSearch, SearchState
from .location_resolver import LocationResolverService
from .submission_loop import SubmissionLoop

__all__ = [
    "EntityStore",
    "FrontierSearch",
    "SearchState",
    "SubmissionLoop",
    "LocationResolverService",
]
