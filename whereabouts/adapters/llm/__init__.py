"""LLM adapters - Chat-model implementations of the oracle ports.

Available implementations:
- OpenAIChatModel: ChatModelPort over the openai SDK
- LLMEntityExtractor: ExtractorPort (names, cities, prior locations)
- LLMNormalizer: NormalizerPort with caching and rule-based fallback
- LLMCandidateResolver: CandidateResolverPort
"""

from .candidate_resolver import LLMCandidateResolver
from .extractor import LLMEntityExtractor
from .normalizer import LLMNormalizer
from .openai_adapter import OpenAIChatModel

__all__ = [
    "OpenAIChatModel",
    "LLMEntityExtractor",
    "LLMNormalizer",
    "LLMCandidateResolver",
]
