"""Typed domain errors for the location resolver.

Each error names one failure the resolver knows how to recover from
(or, for AttemptsExhaustedError, to report). Restricted lookups are
not errors and have no type here.

All errors inherit from WhereaboutsError and can optionally wrap a
root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class WhereaboutsError(Exception):
    """Base error for the location resolver domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class TransportError(WhereaboutsError):
    """Network or HTTP failure while talking to an oracle.

    Lookups turn this into an empty result; submissions count it as a
    rejection.

    Attributes:
        endpoint: URL or oracle name that failed
        status_code: HTTP status code, if a response was received
    """

    endpoint: str = ""
    status_code: Optional[int] = None


@dataclass
class MalformedOracleResponse(WhereaboutsError):
    """An oracle answered with something that could not be decoded.

    Attributes:
        oracle: Name of the oracle (extractor, normalizer, resolver, lookup)
        raw: The raw response text, truncated for logging
    """

    oracle: str = ""
    raw: str = ""


@dataclass
class SubmissionRejected(WhereaboutsError):
    """The submission endpoint refused an answer.

    Attributes:
        answer: The submitted candidate
        code: Response code returned by the endpoint
        response_message: Message returned by the endpoint
    """

    answer: str = ""
    code: Optional[int] = None
    response_message: str = ""


@dataclass
class AttemptsExhaustedError(WhereaboutsError):
    """No candidate was accepted within the attempt ceiling.

    Attributes:
        attempts: Every submitted answer, in submission order
        excluded: Exclusion set at the end of the run
        candidates: Candidate set the run started from
    """

    attempts: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()
    candidates: tuple[str, ...] = ()


@dataclass
class ExtractionError(WhereaboutsError):
    """The note could not be read or processed at all.

    Attributes:
        source: Path or description of the note source
    """

    source: str = ""


@dataclass
class ConfigurationError(WhereaboutsError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None
