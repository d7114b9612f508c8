"""Oracle ports - Language capabilities consumed by the resolver.

Extraction, normalization and the final candidate choice are delegated
to a language model in production. The search only depends on these
contracts, so it can be exercised with deterministic stubs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import CandidateQuery, EntityKind, ExtractedEntities


class ExtractorPort(Protocol):
    """Port for pulling seed names out of a note.

    Implementation: adapters/llm/extractor.py
    """

    def extract(self, note: str, target_name: str) -> ExtractedEntities:
        """Extract persons, places and the target's previous places.

        Args:
            note: Free-text note.
            target_name: Name of the person being located.

        Returns:
            ExtractedEntities with raw, unnormalized strings.
        """
        ...


class NormalizerPort(Protocol):
    """Port for canonicalizing raw names.

    Implementations:
    - adapters/normalization/rule_based.py (RuleBasedNormalizer)
    - adapters/llm/normalizer.py (LLMNormalizer)

    The contract is best effort: deterministic for a given input but not
    guaranteed injective.
    """

    def normalize(self, raw: str, kind: EntityKind) -> str:
        """Return the canonical id of a raw person or place name.

        An empty string means the input had nothing to normalize.
        """
        ...


class CandidateResolverPort(Protocol):
    """Port for choosing the single best current location.

    Implementation: adapters/llm/candidate_resolver.py
    """

    def choose(self, query: CandidateQuery) -> Optional[str]:
        """Pick one place, or None when the oracle does not know."""
        ...


class ChatModelPort(Protocol):
    """Port for a chat-completion language model.

    Implementation: adapters/llm/openai_adapter.py
    """

    def complete(
        self,
        messages: Sequence[Mapping[str, Any]],
        json_mode: bool = False,
    ) -> str:
        """Run a chat completion and return the assistant text.

        Args:
            messages: Chat messages as role/content mappings.
            json_mode: Ask the model for a JSON object response.

        Returns:
            The content of the first choice.

        Raises:
            TransportError: If the model could not be reached.
        """
        ...
