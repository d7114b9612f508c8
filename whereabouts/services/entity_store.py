"""Per-run search state: visited sets, pending queues, associations.

One EntityStore is created for each resolution run and dropped with it.
Nothing is ever removed from it except entities leaving a pending queue
when they are claimed for lookup.

All methods take the same lock, and claiming an entity (check visited,
mark visited, hand it out) happens inside one critical section, so no
two workers can ever dispatch the same entity.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Set

from ..domain.models import AssociationMap, Entity, EntityKind


@dataclass
class EntityStore:
    """Mutable, thread-safe state of one frontier search."""

    _visited: Dict[EntityKind, Set[str]] = field(
        default_factory=lambda: {kind: set() for kind in EntityKind}, repr=False
    )
    # dicts used as insertion-ordered sets
    _pending: Dict[EntityKind, Dict[str, None]] = field(
        default_factory=lambda: {kind: {} for kind in EntityKind}, repr=False
    )
    _person_to_places: Dict[str, Dict[str, None]] = field(
        default_factory=dict, repr=False
    )
    _place_to_persons: Dict[str, Dict[str, None]] = field(
        default_factory=dict, repr=False
    )
    _candidates: Dict[str, None] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def mark_visited(self, entity: Entity) -> bool:
        """Mark an entity visited.

        Returns:
            True if the entity had not been visited before.
        """
        with self._lock:
            visited = self._visited[entity.kind]
            if entity.canonical_id in visited:
                return False
            visited.add(entity.canonical_id)
            self._pending[entity.kind].pop(entity.canonical_id, None)
            return True

    def enqueue_if_new(self, entity: Entity) -> bool:
        """Queue an entity for lookup unless it is visited or already queued.

        Returns:
            True if the entity was added to its pending queue.
        """
        with self._lock:
            cid = entity.canonical_id
            if cid in self._visited[entity.kind] or cid in self._pending[entity.kind]:
                return False
            self._pending[entity.kind][cid] = None
            return True

    def claim_pending(self, kind: EntityKind) -> List[Entity]:
        """Drain a pending queue, marking every claimed entity visited.

        Returns:
            The claimed entities in discovery order. Each entity is
            returned by at most one call for the lifetime of the store.
        """
        with self._lock:
            claimed = [
                Entity(cid, kind)
                for cid in self._pending[kind]
                if cid not in self._visited[kind]
            ]
            self._pending[kind].clear()
            self._visited[kind].update(e.canonical_id for e in claimed)
            return claimed

    def record_association(self, first: Entity, second: Entity) -> None:
        """Record that a person was seen in a place, in both directions.

        Raises:
            ValueError: If both entities are of the same kind.
        """
        if first.kind is second.kind:
            raise ValueError(
                f"Association needs a person and a place, got two {first.kind.name}"
            )
        person, place = (first, second) if first.is_person else (second, first)
        with self._lock:
            self._person_to_places.setdefault(person.canonical_id, {})[
                place.canonical_id
            ] = None
            self._place_to_persons.setdefault(place.canonical_id, {})[
                person.canonical_id
            ] = None

    def record_empty(self, entity: Entity) -> None:
        """Make an entity appear in its adjacency map, possibly with no edges."""
        target = (
            self._person_to_places if entity.is_person else self._place_to_persons
        )
        with self._lock:
            target.setdefault(entity.canonical_id, {})

    def add_candidate(self, place: Entity) -> bool:
        """Append a current-location candidate unless already present.

        Returns:
            True if the candidate is new.
        """
        if not place.is_place:
            raise ValueError("Only places can be location candidates")
        with self._lock:
            if place.canonical_id in self._candidates:
                return False
            self._candidates[place.canonical_id] = None
            return True

    def has_pending(self) -> bool:
        with self._lock:
            return any(self._pending[kind] for kind in EntityKind)

    def is_visited(self, entity: Entity) -> bool:
        with self._lock:
            return entity.canonical_id in self._visited[entity.kind]

    def visited(self, kind: EntityKind) -> frozenset[str]:
        with self._lock:
            return frozenset(self._visited[kind])

    def pending(self, kind: EntityKind) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._pending[kind])

    def candidates(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._candidates)

    def associations(self) -> AssociationMap:
        """Return an immutable snapshot of both adjacency maps."""
        with self._lock:
            return AssociationMap(
                person_to_places={
                    k: tuple(v) for k, v in self._person_to_places.items()
                },
                place_to_persons={
                    k: tuple(v) for k, v in self._place_to_persons.items()
                },
            )
