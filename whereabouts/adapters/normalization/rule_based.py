"""Rule-based name normalizer.

Canonical ids are upper-case ASCII: diacritics are stripped (including
the Polish letters that Unicode does not decompose) and persons are
reduced to their first name, the form the Centrala API is queried with.

Typos and inflected forms are absorbed with rapidfuzz: once an id has
been produced, later spellings close enough to it snap onto it instead
of creating a new entity. This is best effort. Two ids that slip under
the threshold are never merged afterwards.

Example
-------
    >>> normalizer = RuleBasedNormalizer()
    >>> normalizer.normalize("Grudziądz", EntityKind.PLACE)
    'GRUDZIADZ'
    >>> normalizer.normalize("barbara zawadzka", EntityKind.PERSON)
    'BARBARA'
"""

from __future__ import annotations

import logging
import re
import threading
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rapidfuzz import fuzz, process

from ...domain.models import EntityKind

# Letters NFKD leaves untouched
_FOLDING = str.maketrans({"Ł": "L", "ł": "l", "Ø": "O", "ø": "o", "ß": "SS"})

_NON_ALNUM = re.compile(r"[^A-Z0-9 ]+")
_SPACES = re.compile(r"\s+")


def fold_ascii(text: str) -> str:
    """Upper-case a string and strip its diacritics.

    Args:
        text: Raw text in any script using Latin letters.

    Returns:
        Upper-case ASCII letters, digits and single spaces only.
    """
    decomposed = unicodedata.normalize("NFKD", text.translate(_FOLDING))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    letters = _NON_ALNUM.sub(" ", stripped.upper())
    return _SPACES.sub(" ", letters).strip()


@dataclass
class RuleBasedNormalizer:
    """NormalizerPort implementation without any model call.

    Attributes:
        fuzzy_threshold: rapidfuzz ratio (0-100) a spelling must exceed to
            snap onto an already known id; None disables snapping
    """

    fuzzy_threshold: Optional[float] = 90.0

    _known: Dict[EntityKind, List[str]] = field(
        default_factory=lambda: {kind: [] for kind in EntityKind}, repr=False
    )
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def normalize(self, raw: str, kind: EntityKind) -> str:
        folded = fold_ascii(raw)
        if not folded:
            return ""

        if kind is EntityKind.PERSON:
            folded = folded.split(" ")[0]

        return self._snap(folded, kind)

    def remember(self, canonical_id: str, kind: EntityKind) -> None:
        """Register an id produced elsewhere so later typos snap onto it."""
        with self._lock:
            if canonical_id and canonical_id not in self._known[kind]:
                self._known[kind].append(canonical_id)

    def known_ids(self, kind: EntityKind) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._known[kind])

    def _snap(self, folded: str, kind: EntityKind) -> str:
        with self._lock:
            known = self._known[kind]
            if folded in known:
                return folded

            if self.fuzzy_threshold is not None and known:
                match = process.extractOne(
                    folded,
                    known,
                    scorer=fuzz.ratio,
                    score_cutoff=self.fuzzy_threshold,
                )
                # A score equal to the threshold is not close enough
                if match is not None and match[1] > self.fuzzy_threshold:
                    self._logger.debug(
                        "Spelling snapped onto known id",
                        extra={
                            "raw": folded,
                            "canonical": match[0],
                            "score": match[1],
                        },
                    )
                    return match[0]

            known.append(folded)
            return folded
