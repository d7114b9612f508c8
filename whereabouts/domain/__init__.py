"""Domain layer - Core models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    AttemptsExhaustedError,
    ConfigurationError,
    ExtractionError,
    MalformedOracleResponse,
    SubmissionRejected,
    TransportError,
    WhereaboutsError,
)
from .models import (
    AssociationMap,
    CandidateQuery,
    Entity,
    EntityKind,
    ExtractedEntities,
    LookupResult,
    LookupStatus,
    ResolutionOutcome,
    ResolutionStatus,
    SearchResult,
    SubmissionAttempt,
    SubmissionOutcome,
    SubmissionReceipt,
)

__all__ = [
    # Models
    "Entity",
    "EntityKind",
    "LookupStatus",
    "LookupResult",
    "ExtractedEntities",
    "AssociationMap",
    "SearchResult",
    "CandidateQuery",
    "SubmissionReceipt",
    "SubmissionAttempt",
    "SubmissionOutcome",
    "ResolutionStatus",
    "ResolutionOutcome",
    # Errors
    "WhereaboutsError",
    "TransportError",
    "MalformedOracleResponse",
    "SubmissionRejected",
    "AttemptsExhaustedError",
    "ExtractionError",
    "ConfigurationError",
]
