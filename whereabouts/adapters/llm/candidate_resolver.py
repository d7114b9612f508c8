"""LLM-backed candidate choice."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...domain.errors import MalformedOracleResponse, TransportError
from ...domain.models import CandidateQuery
from ...ports.oracles import ChatModelPort
from .prompts import clean_answer, parse_json_object, render_candidate_prompt


@dataclass
class LLMCandidateResolver:
    """CandidateResolverPort implementation using a chat model.

    The model sees the note, both adjacency maps, the candidates and the
    exclusions, and answers {"city": ...}. A failed call or an unreadable
    answer counts as "unknown".

    Attributes:
        chat_model: Model asked to pick the location
    """

    chat_model: ChatModelPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def choose(self, query: CandidateQuery) -> Optional[str]:
        prompt = render_candidate_prompt(query)
        try:
            raw = self.chat_model.complete(
                [{"role": "user", "content": prompt}], json_mode=True
            )
            data = parse_json_object(raw, "candidate_resolver")
        except (TransportError, MalformedOracleResponse) as e:
            self._logger.warning(
                "Candidate choice failed, treating as unknown",
                extra={"error": str(e)},
            )
            return None

        city = data.get("city")
        answer = clean_answer(city if isinstance(city, str) else None)
        self._logger.info(
            "Candidate chosen",
            extra={
                "answer": answer,
                "candidates": list(query.candidates),
                "excluded": sorted(query.excluded),
            },
        )
        return answer
