"""Immutable domain models for the location resolver.

All models are frozen dataclasses with slots. They carry results between
the search, the oracles and the submission loop; the only mutable state
of a run lives in services/entity_store.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, Optional


class EntityKind(Enum):
    """Side of the person/place co-occurrence relation."""

    PERSON = auto()
    PLACE = auto()


@dataclass(frozen=True, slots=True)
class Entity:
    """A canonical person or place.

    Equality is by kind and canonical id, so two spellings that the
    normalizer maps to the same id are the same entity.

    Attributes:
        canonical_id: Normalized identifier (e.g., 'GRUDZIADZ')
        kind: Whether this is a person or a place
    """

    canonical_id: str
    kind: EntityKind

    def __post_init__(self) -> None:
        if not self.canonical_id:
            raise ValueError("canonical_id must not be empty")

    @classmethod
    def person(cls, canonical_id: str) -> Entity:
        return cls(canonical_id, EntityKind.PERSON)

    @classmethod
    def place(cls, canonical_id: str) -> Entity:
        return cls(canonical_id, EntityKind.PLACE)

    @property
    def is_person(self) -> bool:
        return self.kind is EntityKind.PERSON

    @property
    def is_place(self) -> bool:
        return self.kind is EntityKind.PLACE


class LookupStatus(Enum):
    """Outcome of a person or place lookup."""

    OK = auto()
    RESTRICTED = auto()
    NOT_FOUND = auto()
    TRANSPORT_ERROR = auto()
    MALFORMED = auto()


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Decoded response of a lookup oracle.

    Attributes:
        status: Tagged outcome of the lookup
        tokens: Raw names returned when status is OK
        flag: Secret flag field, when the endpoint attached one
        detail: Free-form detail for logging (error message, response code)
    """

    status: LookupStatus
    tokens: tuple[str, ...] = field(default_factory=tuple)
    flag: Optional[str] = None
    detail: str = ""

    @classmethod
    def ok(cls, tokens: tuple[str, ...], flag: Optional[str] = None) -> LookupResult:
        return cls(LookupStatus.OK, tuple(tokens), flag=flag)

    @classmethod
    def restricted(cls, flag: Optional[str] = None) -> LookupResult:
        return cls(LookupStatus.RESTRICTED, flag=flag)

    @classmethod
    def not_found(cls, detail: str = "", flag: Optional[str] = None) -> LookupResult:
        return cls(LookupStatus.NOT_FOUND, flag=flag, detail=detail)

    @classmethod
    def transport_error(cls, detail: str = "") -> LookupResult:
        return cls(LookupStatus.TRANSPORT_ERROR, detail=detail)

    @classmethod
    def malformed(cls, detail: str = "") -> LookupResult:
        return cls(LookupStatus.MALFORMED, detail=detail)

    @property
    def is_ok(self) -> bool:
        return self.status is LookupStatus.OK

    @property
    def is_restricted(self) -> bool:
        return self.status is LookupStatus.RESTRICTED


@dataclass(frozen=True, slots=True)
class ExtractedEntities:
    """Raw names surfaced by the extraction oracle.

    Attributes:
        persons: Person names as written in the note
        places: City names as written in the note
        prior_locations: Cities where the target was previously documented
    """

    persons: frozenset[str] = field(default_factory=frozenset)
    places: frozenset[str] = field(default_factory=frozenset)
    prior_locations: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        """Check if extraction found nothing to start a search from."""
        return not self.persons and not self.places


@dataclass(frozen=True, slots=True)
class AssociationMap:
    """Person/place adjacency collected during a search.

    Both directions are kept; there is no separate edge list. Entities
    that were looked up without result appear with an empty tuple.

    Attributes:
        person_to_places: Person id -> place ids the person was seen in
        place_to_persons: Place id -> person ids seen in the place
    """

    person_to_places: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    place_to_persons: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def as_sorted_dicts(self) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        """Return both maps with sorted keys and values for stable output."""
        people = {k: sorted(v) for k, v in sorted(self.person_to_places.items())}
        places = {k: sorted(v) for k, v in sorted(self.place_to_persons.items())}
        return people, places


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Fixed point reached by the frontier search.

    Attributes:
        candidates: Current-location candidates in discovery order
        associations: Accumulated person/place adjacency
        visited_persons: Persons that were looked up
        visited_places: Places that were looked up
        known_prior_locations: Places the target was previously seen in
        restricted_places: Places whose lookup was restricted
        flags: Secret flags returned by lookups, in discovery order
        lookups: Number of lookup calls dispatched
        target_id: Canonical id of the target person
    """

    candidates: tuple[str, ...] = field(default_factory=tuple)
    associations: AssociationMap = field(default_factory=AssociationMap)
    visited_persons: frozenset[str] = field(default_factory=frozenset)
    visited_places: frozenset[str] = field(default_factory=frozenset)
    known_prior_locations: frozenset[str] = field(default_factory=frozenset)
    restricted_places: tuple[str, ...] = field(default_factory=tuple)
    flags: tuple[str, ...] = field(default_factory=tuple)
    lookups: int = 0
    target_id: str = ""

    @property
    def has_candidates(self) -> bool:
        """Check if at least one current-location candidate was found."""
        return len(self.candidates) > 0


@dataclass(frozen=True, slots=True)
class CandidateQuery:
    """Input to the candidate resolver oracle.

    Attributes:
        note: The note being resolved
        associations: Accumulated person/place adjacency
        candidates: Current-location candidates in discovery order
        excluded: Candidates already rejected in this run
        target_name: Name of the person being located
    """

    note: str
    associations: AssociationMap
    candidates: tuple[str, ...]
    excluded: frozenset[str] = field(default_factory=frozenset)
    target_name: str = ""


@dataclass(frozen=True, slots=True)
class SubmissionReceipt:
    """Response of the submission endpoint to an accepted answer."""

    answer: str
    code: int = 0
    message: str = ""


@dataclass(frozen=True, slots=True)
class SubmissionAttempt:
    """One submission made by the submission loop.

    Attributes:
        answer: The submitted candidate
        accepted: Whether the endpoint accepted it
        detail: Endpoint message or failure reason
    """

    answer: str
    accepted: bool
    detail: str = ""


class ResolutionStatus(Enum):
    """Terminal state of a resolution run."""

    ACCEPTED = auto()
    NO_CANDIDATE = auto()
    UNKNOWN = auto()
    CANDIDATES_EXHAUSTED = auto()
    ATTEMPTS_EXHAUSTED = auto()


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Result of the submission loop.

    Attributes:
        status: Terminal state reached
        answer: Accepted candidate, if any
        attempts: Every submission in order
        excluded: Exclusion set at the end of the loop, in rejection order
        failure: Error describing a terminal failure, if any
    """

    status: ResolutionStatus
    answer: Optional[str] = None
    attempts: tuple[SubmissionAttempt, ...] = field(default_factory=tuple)
    excluded: tuple[str, ...] = field(default_factory=tuple)
    failure: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        return self.status is ResolutionStatus.ACCEPTED


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """End-to-end result of resolving a note.

    Attributes:
        status: Terminal state reached
        answer: Accepted location, if any
        search: Frontier search result
        submission: Submission loop result, absent when no candidate was found
    """

    status: ResolutionStatus
    answer: Optional[str] = None
    search: SearchResult = field(default_factory=SearchResult)
    submission: Optional[SubmissionOutcome] = None

    @property
    def is_success(self) -> bool:
        return self.status is ResolutionStatus.ACCEPTED

    @property
    def excluded(self) -> tuple[str, ...]:
        return self.submission.excluded if self.submission else ()

    @property
    def failure(self) -> Optional[Exception]:
        return self.submission.failure if self.submission else None
