"""Tests for the submit / reject / retry loop."""

from __future__ import annotations

import pytest

from whereabouts.domain.errors import AttemptsExhaustedError
from whereabouts.domain.models import (
    AssociationMap,
    ResolutionStatus,
    SearchResult,
)
from whereabouts.services.submission_loop import SubmissionLoop

from tests.fakes import ScriptedResolver, ScriptedSubmitter

NOTE = "Barbara left Kraków. Adam met her later."


def search_with(*candidates: str) -> SearchResult:
    return SearchResult(
        candidates=tuple(candidates),
        associations=AssociationMap(
            person_to_places={"ADAM": tuple(candidates)},
            place_to_persons={c: ("ADAM",) for c in candidates},
        ),
    )


def first_allowed(query):
    return next(c for c in query.candidates if c not in query.excluded)


class TestAcceptance:
    def test_first_answer_accepted(self):
        resolver = ScriptedResolver(["GRUDZIADZ"])
        submitter = ScriptedSubmitter(accepted={"GRUDZIADZ"})
        loop = SubmissionLoop(resolver=resolver, submitter=submitter)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ", "ELBLAG"), "Barbara")

        assert outcome.is_success
        assert outcome.answer == "GRUDZIADZ"
        assert outcome.excluded == ()
        assert len(outcome.attempts) == 1
        assert outcome.attempts[0].accepted
        assert outcome.attempts[0].detail == "{{FLG:FOUND}}"

    def test_query_carries_note_and_associations(self):
        resolver = ScriptedResolver(["GRUDZIADZ"])
        loop = SubmissionLoop(
            resolver=resolver, submitter=ScriptedSubmitter(accepted={"GRUDZIADZ"})
        )
        search = search_with("GRUDZIADZ")

        loop.run(NOTE, search, "Barbara")

        query = resolver.queries[0]
        assert query.note == NOTE
        assert query.associations is search.associations
        assert query.candidates == ("GRUDZIADZ",)
        assert query.excluded == frozenset()
        assert query.target_name == "Barbara"


class TestRejection:
    def test_rejected_answer_is_excluded_on_next_query(self):
        resolver = ScriptedResolver(["GRUDZIADZ", "ELBLAG"])
        submitter = ScriptedSubmitter(accepted={"ELBLAG"})
        loop = SubmissionLoop(resolver=resolver, submitter=submitter)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ", "ELBLAG"))

        assert outcome.status is ResolutionStatus.ACCEPTED
        assert outcome.answer == "ELBLAG"
        assert resolver.queries[1].excluded == {"GRUDZIADZ"}
        assert outcome.excluded == ("GRUDZIADZ",)
        assert [a.accepted for a in outcome.attempts] == [False, True]
        assert "rejected" in outcome.attempts[0].detail

    def test_excluded_candidate_is_never_resubmitted(self):
        resolver = ScriptedResolver(["GRUDZIADZ", "GRUDZIADZ"])
        submitter = ScriptedSubmitter()
        loop = SubmissionLoop(resolver=resolver, submitter=submitter)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ", "ELBLAG"))

        assert outcome.status is ResolutionStatus.UNKNOWN
        assert submitter.submitted == ["GRUDZIADZ"]

    def test_transport_error_counts_as_rejection(self):
        resolver = ScriptedResolver([first_allowed, first_allowed])
        submitter = ScriptedSubmitter(accepted={"ELBLAG"}, unreachable={"GRUDZIADZ"})
        loop = SubmissionLoop(resolver=resolver, submitter=submitter)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ", "ELBLAG"))

        assert outcome.answer == "ELBLAG"
        assert outcome.excluded == ("GRUDZIADZ",)
        assert "connection reset" in outcome.attempts[0].detail

    def test_every_candidate_rejected(self):
        resolver = ScriptedResolver([first_allowed] * 5)
        submitter = ScriptedSubmitter()
        loop = SubmissionLoop(resolver=resolver, submitter=submitter)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ", "ELBLAG"))

        assert outcome.status is ResolutionStatus.CANDIDATES_EXHAUSTED
        assert submitter.submitted == ["GRUDZIADZ", "ELBLAG"]
        assert len(resolver.queries) == 2


class TestTermination:
    def test_resolver_unknown(self):
        resolver = ScriptedResolver([None])
        submitter = ScriptedSubmitter()
        loop = SubmissionLoop(resolver=resolver, submitter=submitter)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ"))

        assert outcome.status is ResolutionStatus.UNKNOWN
        assert outcome.answer is None
        assert submitter.submitted == []

    def test_attempts_are_bounded(self):
        # The resolver proposes cities outside the candidate set forever
        resolver = ScriptedResolver([f"CITY{i}" for i in range(20)])
        submitter = ScriptedSubmitter()
        loop = SubmissionLoop(resolver=resolver, submitter=submitter, max_attempts=3)

        outcome = loop.run(NOTE, search_with("GRUDZIADZ"))

        assert outcome.status is ResolutionStatus.ATTEMPTS_EXHAUSTED
        assert submitter.submitted == ["CITY0", "CITY1", "CITY2"]
        assert len(resolver.queries) == 3

    def test_exhaustion_reports_history(self):
        resolver = ScriptedResolver(["A", "B"])
        loop = SubmissionLoop(
            resolver=resolver, submitter=ScriptedSubmitter(), max_attempts=2
        )

        outcome = loop.run(NOTE, search_with("A", "B", "C"))

        failure = outcome.failure
        assert isinstance(failure, AttemptsExhaustedError)
        assert failure.attempts == ("A", "B")
        assert failure.excluded == ("A", "B")
        assert failure.candidates == ("A", "B", "C")
        assert outcome.excluded == ("A", "B")

    def test_empty_candidates_end_immediately(self):
        resolver = ScriptedResolver(["GRUDZIADZ"])
        loop = SubmissionLoop(resolver=resolver, submitter=ScriptedSubmitter())

        outcome = loop.run(NOTE, search_with())

        assert outcome.status is ResolutionStatus.CANDIDATES_EXHAUSTED
        assert resolver.queries == []

    @pytest.mark.parametrize("max_attempts", [0, -1])
    def test_invalid_max_attempts(self, max_attempts):
        with pytest.raises(ValueError):
            SubmissionLoop(
                resolver=ScriptedResolver([]),
                submitter=ScriptedSubmitter(),
                max_attempts=max_attempts,
            )
