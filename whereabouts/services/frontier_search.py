"""Frontier search over the person/place co-occurrence relation.

The relation is only observable one entity at a time through the lookup
oracles. Starting from the names found in a note, the search alternates
a person phase and a place phase, each draining its pending queue, until
both queues are empty. Only never-visited entities are ever queued and
the set of reachable canonical ids is finite, so the loop reaches a
fixed point.

A place becomes a current-location candidate when
1. its lookup is restricted (the target is there, details withheld), or
2. its lookup lists the target among the persons seen there,
and in both cases only if the note does not already place the target
there in the past. The two conditions are independent; a place flagged
by both is listed once.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..domain.models import (
    Entity,
    EntityKind,
    ExtractedEntities,
    LookupResult,
    SearchResult,
)
from ..ports.lookup import LookupPort
from ..ports.oracles import NormalizerPort
from .entity_store import EntityStore


@dataclass
class SearchState:
    """Everything one search run owns.

    Attributes:
        target_id: Canonical id of the person being located
        known_prior_locations: Places the target is documented to have left
        store: Visited sets, pending queues, associations and candidates
    """

    target_id: str
    known_prior_locations: frozenset[str]
    store: EntityStore = field(default_factory=EntityStore)

    _restricted: List[str] = field(default_factory=list, repr=False)
    _flags: List[str] = field(default_factory=list, repr=False)
    _lookups: int = field(default=0, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def note_lookup(self, result: LookupResult) -> None:
        with self._lock:
            self._lookups += 1
            if result.flag and result.flag not in self._flags:
                self._flags.append(result.flag)

    def note_restricted(self, place: Entity) -> None:
        with self._lock:
            self._restricted.append(place.canonical_id)

    def to_result(self) -> SearchResult:
        with self._lock:
            return SearchResult(
                candidates=self.store.candidates(),
                associations=self.store.associations(),
                visited_persons=self.store.visited(EntityKind.PERSON),
                visited_places=self.store.visited(EntityKind.PLACE),
                known_prior_locations=self.known_prior_locations,
                restricted_places=tuple(self._restricted),
                flags=tuple(self._flags),
                lookups=self._lookups,
                target_id=self.target_id,
            )


@dataclass
class FrontierSearch:
    """Worklist traversal producing current-location candidates.

    Attributes:
        lookup: Person/place lookup oracles
        normalizer: Canonicalizes every name before it is queued
        max_workers: Lookups run concurrently within a phase when > 1
        max_rounds: Optional ceiling on person+place rounds
    """

    lookup: LookupPort
    normalizer: NormalizerPort
    max_workers: int = 1
    max_rounds: Optional[int] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def run(self, seeds: ExtractedEntities, target_name: str) -> SearchResult:
        """Explore the relation from the seeds until both queues are empty.

        Args:
            seeds: Raw names extracted from the note.
            target_name: Name of the person being located.

        Returns:
            SearchResult with candidates in discovery order.
        """
        state = self._seed(seeds, target_name)

        if self.max_workers > 1:
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="frontier"
            ) as executor:
                rounds = self._drain(state, executor)
        else:
            rounds = self._drain(state, None)

        result = state.to_result()
        self._logger.info(
            "Frontier search finished",
            extra={
                "rounds": rounds,
                "lookups": result.lookups,
                "persons": len(result.visited_persons),
                "places": len(result.visited_places),
                "candidates": list(result.candidates),
            },
        )
        return result

    def _seed(self, seeds: ExtractedEntities, target_name: str) -> SearchState:
        target_id = self.normalizer.normalize(target_name, EntityKind.PERSON)
        prior = frozenset(
            entity.canonical_id
            for entity in (
                self._entity(raw, EntityKind.PLACE)
                for raw in sorted(seeds.prior_locations)
            )
            if entity is not None
        )
        state = SearchState(target_id=target_id, known_prior_locations=prior)

        for kind, raws in (
            (EntityKind.PERSON, seeds.persons),
            (EntityKind.PLACE, seeds.places),
        ):
            for raw in sorted(raws):
                entity = self._entity(raw, kind)
                if entity is not None:
                    state.store.enqueue_if_new(entity)

        self._logger.info(
            "Search seeded",
            extra={
                "target": target_id,
                "persons": list(state.store.pending(EntityKind.PERSON)),
                "places": list(state.store.pending(EntityKind.PLACE)),
                "prior_locations": sorted(prior),
            },
        )
        return state

    def _drain(self, state: SearchState, executor: Optional[Executor]) -> int:
        rounds = 0
        while state.store.has_pending():
            if self.max_rounds is not None and rounds >= self.max_rounds:
                self._logger.warning(
                    "Round ceiling reached with work pending",
                    extra={
                        "max_rounds": self.max_rounds,
                        "persons": list(state.store.pending(EntityKind.PERSON)),
                        "places": list(state.store.pending(EntityKind.PLACE)),
                    },
                )
                break
            rounds += 1

            persons = state.store.claim_pending(EntityKind.PERSON)
            self._dispatch(executor, persons, lambda p: self._expand_person(state, p))

            places = state.store.claim_pending(EntityKind.PLACE)
            self._dispatch(executor, places, lambda c: self._expand_place(state, c))
        return rounds

    @staticmethod
    def _dispatch(
        executor: Optional[Executor],
        entities: Sequence[Entity],
        expand: Callable[[Entity], None],
    ) -> None:
        if executor is None or len(entities) < 2:
            for entity in entities:
                expand(entity)
            return
        # consume the iterator so worker exceptions propagate
        list(executor.map(expand, entities))

    def _expand_person(self, state: SearchState, person: Entity) -> None:
        result = self.lookup.lookup_person(person.canonical_id)
        state.note_lookup(result)
        state.store.record_empty(person)

        if not result.is_ok:
            self._logger.debug(
                "Person not expanded",
                extra={"person": person.canonical_id, "status": result.status.name},
            )
            return

        for token in result.tokens:
            place = self._entity(token, EntityKind.PLACE)
            if place is None:
                continue
            state.store.record_association(person, place)
            state.store.enqueue_if_new(place)

    def _expand_place(self, state: SearchState, place: Entity) -> None:
        result = self.lookup.lookup_place(place.canonical_id)
        state.note_lookup(result)
        state.store.record_empty(place)

        if result.is_restricted:
            state.note_restricted(place)
            self._flag_candidate(state, place, "restricted")
            return

        if not result.is_ok:
            self._logger.debug(
                "Place not expanded",
                extra={"place": place.canonical_id, "status": result.status.name},
            )
            return

        target_seen = False
        for token in result.tokens:
            person = self._entity(token, EntityKind.PERSON)
            if person is None:
                continue
            state.store.record_association(person, place)
            state.store.enqueue_if_new(person)
            if state.target_id and person.canonical_id == state.target_id:
                target_seen = True

        if target_seen:
            self._flag_candidate(state, place, "target_seen")

    def _flag_candidate(self, state: SearchState, place: Entity, reason: str) -> None:
        if place.canonical_id in state.known_prior_locations:
            self._logger.info(
                "Candidate ignored, target was there before",
                extra={"place": place.canonical_id, "reason": reason},
            )
            return
        if state.store.add_candidate(place):
            self._logger.info(
                "Candidate found",
                extra={"place": place.canonical_id, "reason": reason},
            )

    def _entity(self, raw: str, kind: EntityKind) -> Optional[Entity]:
        canonical_id = self.normalizer.normalize(raw, kind)
        if not canonical_id:
            self._logger.debug(
                "Name normalized to nothing, skipped",
                extra={"raw": raw, "kind": kind.name},
            )
            return None
        return Entity(canonical_id, kind)
