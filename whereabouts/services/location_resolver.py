"""Location resolver service - Main orchestrator.

Runs one resolution from a note to a terminal outcome:
1. Seed extraction
2. Frontier search
3. Candidate choice and submission
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..domain.errors import ExtractionError
from ..domain.models import ResolutionOutcome, ResolutionStatus
from ..ports.oracles import ExtractorPort
from .frontier_search import FrontierSearch
from .submission_loop import SubmissionLoop


@dataclass
class LocationResolverService:
    """Main service for locating a person described in a note.

    Attributes:
        extractor: Pulls seed names out of the note
        search: Frontier search engine
        submission: Submit / reject / retry loop
        target_name: Name of the person being located
    """

    extractor: ExtractorPort
    search: FrontierSearch
    submission: SubmissionLoop
    target_name: str = "Barbara"

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve(self, note: str) -> ResolutionOutcome:
        """Resolve the target's current location from a note.

        Domain failures (nothing found, every answer rejected) are reported
        through the outcome status, never raised.

        Args:
            note: Free-text note mentioning people and cities.

        Returns:
            ResolutionOutcome describing the terminal state.
        """
        self._logger.info(
            "Starting location resolution",
            extra={"note_length": len(note), "target": self.target_name},
        )

        # Step 1: Seeds
        seeds = self.extractor.extract(note, self.target_name)
        if seeds.is_empty:
            self._logger.warning("Note yielded no person or place to start from")

        # Step 2: Frontier search
        search = self.search.run(seeds, self.target_name)
        for flag in search.flags:
            self._logger.info("Flag collected during search", extra={"flag": flag})

        if not search.has_candidates:
            self._logger.warning(
                "No candidate location found",
                extra={
                    "persons": len(search.visited_persons),
                    "places": len(search.visited_places),
                },
            )
            return ResolutionOutcome(ResolutionStatus.NO_CANDIDATE, search=search)

        # Step 3: Choice and submission
        submission = self.submission.run(note, search, self.target_name)
        self._logger.info(
            "Location resolution finished",
            extra={
                "status": submission.status.name,
                "answer": submission.answer,
                "attempts": len(submission.attempts),
            },
        )
        return ResolutionOutcome(
            status=submission.status,
            answer=submission.answer,
            search=search,
            submission=submission,
        )

    def resolve_file(self, path: Union[str, Path]) -> ResolutionOutcome:
        """Read a note from disk and resolve it.

        Raises:
            ExtractionError: If the note cannot be read.
        """
        note_path = Path(path)
        try:
            note = note_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ExtractionError(
                f"Cannot read note {note_path}", cause=e, source=str(note_path)
            )
        return self.resolve(note)

    def format_outcome(self, outcome: ResolutionOutcome) -> str:
        """Format an outcome as a human-readable report.

        Args:
            outcome: The outcome to render.

        Returns:
            Multi-line report including every collected lookup response.
        """
        lines = [f"Status: {outcome.status.name}"]
        if outcome.answer:
            lines.append(f"{self.target_name} is in: {outcome.answer}")

        search = outcome.search
        candidates = ", ".join(search.candidates) if search.candidates else "-"
        lines.append(f"Candidates: {candidates}")
        if outcome.submission is not None:
            for i, attempt in enumerate(outcome.submission.attempts, start=1):
                verdict = "accepted" if attempt.accepted else "rejected"
                line = f"Attempt {i}: {attempt.answer} ({verdict}) {attempt.detail}"
                lines.append(line.rstrip())
        if outcome.excluded:
            lines.append("Excluded: " + ", ".join(outcome.excluded))
        if outcome.failure is not None:
            lines.append(f"Failure: {outcome.failure}")
        for flag in search.flags:
            lines.append(f"Flag: {flag}")

        people, places = search.associations.as_sorted_dicts()
        lines.append("Person lookups: " + json.dumps(people, ensure_ascii=False))
        lines.append("Place lookups: " + json.dumps(places, ensure_ascii=False))
        return "\n".join(lines)

    def resolve_safe(
        self, path: Union[str, Path]
    ) -> tuple[Optional[ResolutionOutcome], Optional[str]]:
        """Resolve a note file, returning an error message instead of raising.

        Returns:
            Tuple of (ResolutionOutcome or None, error message or None).
        """
        try:
            return self.resolve_file(path), None
        except ExtractionError as e:
            return None, f"Extraction error: {e.message}"
        except Exception as e:
            self._logger.exception("Unexpected error in location resolution")
            return None, f"Error: {e}"
