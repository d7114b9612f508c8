"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the resolver core and the outside
world (the Centrala API and the language model). They enable dependency
injection and make the search testable with stubs.
"""

from .cache import CachePort
from .lookup import LookupPort, SubmissionPort
from .oracles import (
    CandidateResolverPort,
    ChatModelPort,
    ExtractorPort,
    NormalizerPort,
)

__all__ = [
    # Oracles
    "ExtractorPort",
    "NormalizerPort",
    "CandidateResolverPort",
    "ChatModelPort",
    # Centrala
    "LookupPort",
    "SubmissionPort",
    # Cache
    "CachePort",
]
