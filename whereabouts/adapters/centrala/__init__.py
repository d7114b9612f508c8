"""Centrala adapters - HTTP implementations of the lookup ports.

Available implementations:
- CentralaHttpClient: JSON POST client with API key injection and retries
- CentralaLookupClient: LookupPort over /people and /places
- CentralaSubmissionClient: SubmissionPort over /report
"""

from .http_client import CentralaHttpClient
from .lookup_client import CentralaLookupClient, CentralaResponse, classify_response
from .submission_client import CentralaSubmissionClient

__all__ = [
    "CentralaHttpClient",
    "CentralaLookupClient",
    "CentralaResponse",
    "CentralaSubmissionClient",
    "classify_response",
]
