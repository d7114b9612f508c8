"""LLM-backed seed extraction.

Two JSON-mode calls per note: one for every person and city mentioned,
one for the cities where the target was seen in the past. Either call
may fail or answer garbage; that part of the extraction is then empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...domain.errors import MalformedOracleResponse, TransportError
from ...domain.models import ExtractedEntities
from ...ports.oracles import ChatModelPort
from .prompts import (
    EXTRACT_ENTITIES,
    EXTRACT_PRIOR_LOCATIONS,
    parse_json_object,
    string_list,
)


@dataclass
class LLMEntityExtractor:
    """ExtractorPort implementation using a chat model.

    Attributes:
        chat_model: Model used for both extraction calls
    """

    chat_model: ChatModelPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def extract(self, note: str, target_name: str) -> ExtractedEntities:
        names, cities = self._extract_names_and_cities(note)
        prior = self._extract_prior_locations(note, target_name)

        self._logger.info(
            "Seeds extracted",
            extra={
                "persons": sorted(names),
                "places": sorted(cities),
                "prior_locations": sorted(prior),
            },
        )
        return ExtractedEntities(
            persons=frozenset(names),
            places=frozenset(cities),
            prior_locations=frozenset(prior),
        )

    def _extract_names_and_cities(self, note: str) -> tuple[list[str], list[str]]:
        messages = [
            {"role": "system", "content": EXTRACT_ENTITIES},
            {"role": "user", "content": note},
        ]
        try:
            data = parse_json_object(
                self.chat_model.complete(messages, json_mode=True), "extractor"
            )
        except (TransportError, MalformedOracleResponse) as e:
            self._logger.warning(
                "Entity extraction failed, starting from no seeds",
                extra={"error": str(e)},
            )
            return [], []
        return string_list(data, "names"), string_list(data, "cities")

    def _extract_prior_locations(self, note: str, target_name: str) -> list[str]:
        prompt = EXTRACT_PRIOR_LOCATIONS.format(target=target_name, note=note)
        try:
            data = parse_json_object(
                self.chat_model.complete(
                    [{"role": "user", "content": prompt}], json_mode=True
                ),
                "extractor",
            )
        except (TransportError, MalformedOracleResponse) as e:
            self._logger.warning(
                "Prior location extraction failed, assuming none",
                extra={"error": str(e)},
            )
            return []
        return string_list(data, "cities")
