"""Submit / reject / retry loop over the candidate locations.

    Selecting -> Submitted -> Accepted                  (success)
                           -> Rejected -> Selecting     (exclude, retry)

The loop ends on acceptance, when the resolver has nothing (new) to
propose, when every candidate is excluded, or after max_attempts
submissions. An excluded candidate is never submitted again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..domain.errors import AttemptsExhaustedError, SubmissionRejected, TransportError
from ..domain.models import (
    CandidateQuery,
    ResolutionStatus,
    SearchResult,
    SubmissionAttempt,
    SubmissionOutcome,
)
from ..ports.lookup import SubmissionPort
from ..ports.oracles import CandidateResolverPort


@dataclass
class SubmissionLoop:
    """Bounded retry loop choosing and submitting candidates.

    Attributes:
        resolver: Oracle picking the best candidate
        submitter: Endpoint judging the answer
        max_attempts: Hard ceiling on submissions per run
    """

    resolver: CandidateResolverPort
    submitter: SubmissionPort
    max_attempts: int = 5

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    def run(
        self, note: str, search: SearchResult, target_name: str = ""
    ) -> SubmissionOutcome:
        """Choose and submit candidates until one is accepted or the loop ends.

        Args:
            note: The note being resolved, forwarded to the resolver.
            search: Frontier search result (candidates and associations).
            target_name: Name of the person being located.

        Returns:
            SubmissionOutcome with the full attempt history.
        """
        # dict as an insertion-ordered set
        excluded: Dict[str, None] = {}
        attempts: List[SubmissionAttempt] = []

        def outcome(
            status: ResolutionStatus,
            answer: Optional[str] = None,
            failure: Optional[Exception] = None,
        ) -> SubmissionOutcome:
            return SubmissionOutcome(
                status=status,
                answer=answer,
                attempts=tuple(attempts),
                excluded=tuple(excluded),
                failure=failure,
            )

        while len(attempts) < self.max_attempts:
            if all(c in excluded for c in search.candidates):
                self._logger.warning(
                    "Every candidate was rejected",
                    extra={"excluded": list(excluded)},
                )
                return outcome(ResolutionStatus.CANDIDATES_EXHAUSTED)

            answer = self.resolver.choose(
                CandidateQuery(
                    note=note,
                    associations=search.associations,
                    candidates=search.candidates,
                    excluded=frozenset(excluded),
                    target_name=target_name,
                )
            )
            if answer is None or answer in excluded:
                self._logger.warning(
                    "Resolver has no new candidate",
                    extra={"answer": answer, "excluded": list(excluded)},
                )
                return outcome(ResolutionStatus.UNKNOWN)

            self._logger.info(
                "Submitting candidate",
                extra={"answer": answer, "attempt": len(attempts) + 1},
            )
            try:
                receipt = self.submitter.submit(answer)
            except (SubmissionRejected, TransportError) as e:
                excluded[answer] = None
                attempts.append(
                    SubmissionAttempt(answer, accepted=False, detail=str(e))
                )
                self._logger.warning(
                    "Candidate rejected, excluding it",
                    extra={"answer": answer, "error": str(e)},
                )
                continue

            attempts.append(
                SubmissionAttempt(answer, accepted=True, detail=receipt.message)
            )
            return outcome(ResolutionStatus.ACCEPTED, answer=answer)

        failure = AttemptsExhaustedError(
            f"No answer accepted after {len(attempts)} attempts",
            attempts=tuple(a.answer for a in attempts),
            excluded=tuple(excluded),
            candidates=search.candidates,
        )
        self._logger.error(
            "Submission attempts exhausted",
            extra={"attempts": list(failure.attempts)},
        )
        return outcome(ResolutionStatus.ATTEMPTS_EXHAUSTED, failure=failure)
