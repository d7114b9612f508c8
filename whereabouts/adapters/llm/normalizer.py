"""LLM-backed name normalizer with rule-based fallback.

Each (kind, spelling) pair costs one chat call, memoised through the
injected cache. When the model cannot be reached or answers nothing
usable, the rule-based normalizer takes over for that spelling and the
fallback is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...domain.errors import TransportError
from ...domain.models import EntityKind
from ...ports.cache import CachePort
from ...ports.oracles import ChatModelPort
from ..cache.memory_cache import InMemoryCache
from ..normalization.rule_based import RuleBasedNormalizer, fold_ascii
from .prompts import render_normalize_prompt


@dataclass
class LLMNormalizer:
    """NormalizerPort implementation using a chat model.

    Attributes:
        chat_model: Model asked to canonicalize each spelling
        cache: Memo of (kind, spelling) -> canonical id
        fallback: Normalizer used when the model fails
    """

    chat_model: ChatModelPort
    cache: CachePort[str] = field(
        default_factory=lambda: InMemoryCache(name="normalize")
    )
    fallback: RuleBasedNormalizer = field(default_factory=RuleBasedNormalizer)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def normalize(self, raw: str, kind: EntityKind) -> str:
        if not raw or not raw.strip():
            return ""

        key = f"{kind.name}:{raw.strip()}"
        return self.cache.get_or_compute(key, lambda: self._ask(raw.strip(), kind))

    def _ask(self, raw: str, kind: EntityKind) -> str:
        prompt = render_normalize_prompt(raw, kind)
        try:
            answer = self.chat_model.complete([{"role": "user", "content": prompt}])
        except TransportError as e:
            self._logger.warning(
                "Normalization call failed, using rule-based fallback",
                extra={"raw": raw, "kind": kind.name, "error": str(e)},
            )
            return self.fallback.normalize(raw, kind)

        # The model sometimes adds punctuation or keeps a diacritic
        canonical = fold_ascii(answer)
        if kind is EntityKind.PERSON:
            canonical = canonical.split(" ")[0]
        if not canonical:
            self._logger.warning(
                "Normalization answer empty, using rule-based fallback",
                extra={"raw": raw, "kind": kind.name, "answer": answer},
            )
            return self.fallback.normalize(raw, kind)

        self.fallback.remember(canonical, kind)
        return canonical
