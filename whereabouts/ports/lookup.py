"""Lookup ports - The person/place oracles and the answer endpoint.

These protocols describe the HTTP-shaped side of the resolver: two
lookups that expose the person/place co-occurrence relation one
entity at a time, and the endpoint that judges a final answer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import LookupResult, SubmissionReceipt


class LookupPort(Protocol):
    """Port for the co-occurrence oracles.

    Implementation: adapters/centrala/lookup_client.py

    Implementations never raise for transport problems; they return a
    LookupResult tagged TRANSPORT_ERROR instead so a traversal keeps
    going.
    """

    def lookup_person(self, canonical_id: str) -> LookupResult:
        """List the places a person was seen in.

        Args:
            canonical_id: Normalized person id (e.g., 'ADAM').

        Returns:
            LookupResult whose tokens are raw place names.
        """
        ...

    def lookup_place(self, canonical_id: str) -> LookupResult:
        """List the persons seen in a place.

        Args:
            canonical_id: Normalized place id (e.g., 'KRAKOW').

        Returns:
            LookupResult whose tokens are raw person names.
        """
        ...


class SubmissionPort(Protocol):
    """Port for the answer endpoint.

    Implementation: adapters/centrala/submission_client.py
    """

    def submit(self, answer: str) -> SubmissionReceipt:
        """Submit a candidate location.

        Args:
            answer: Canonical place id to submit.

        Returns:
            SubmissionReceipt when the answer was accepted.

        Raises:
            SubmissionRejected: If the endpoint refused the answer.
            TransportError: If the endpoint could not be reached.
        """
        ...
