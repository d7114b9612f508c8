"""Centrala person/place lookup adapter.

Decodes the `/people` and `/places` answers into tagged LookupResults at
the boundary, so nothing downstream ever handles the raw JSON.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ...config import RESTRICTED_SENTINEL, CentralaConfig, get_config
from ...domain.errors import MalformedOracleResponse, TransportError
from ...domain.models import LookupResult
from .http_client import CentralaHttpClient


class CentralaResponse(BaseModel):
    """Wire shape shared by every Centrala endpoint."""

    model_config = ConfigDict(extra="ignore")

    code: int
    message: str = ""
    flag: Optional[str] = None


def classify_response(
    payload: Any, restricted_sentinel: str = RESTRICTED_SENTINEL
) -> LookupResult:
    """Turn a decoded lookup response into a LookupResult.

    Precedence: malformed payload, then non-zero code (not found), then
    the restricted sentinel, then a whitespace-delimited token list.

    Args:
        payload: Decoded JSON body.
        restricted_sentinel: Marker meaning the data is withheld.

    Returns:
        The classified LookupResult.
    """
    try:
        response = CentralaResponse.model_validate(payload)
    except ValidationError as e:
        return LookupResult.malformed(detail=str(e).splitlines()[0])

    if response.code != 0:
        return LookupResult.not_found(
            detail=f"code={response.code} {response.message}".strip(),
            flag=response.flag,
        )

    if response.message.strip() == restricted_sentinel:
        return LookupResult.restricted(flag=response.flag)

    return LookupResult.ok(tuple(response.message.split()), flag=response.flag)


@dataclass
class CentralaLookupClient:
    """LookupPort implementation over the Centrala HTTP API.

    Attributes:
        http: HTTP client used for the calls
        config: Centrala configuration (endpoints, sentinel)
    """

    http: CentralaHttpClient
    config: CentralaConfig = field(default_factory=lambda: get_config().centrala)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def lookup_person(self, canonical_id: str) -> LookupResult:
        return self._lookup(self.config.people_url, canonical_id)

    def lookup_place(self, canonical_id: str) -> LookupResult:
        return self._lookup(self.config.places_url, canonical_id)

    def _lookup(self, url: str, canonical_id: str) -> LookupResult:
        try:
            _, payload = self.http.post_json(url, {"query": canonical_id})
        except TransportError as e:
            self._logger.warning(
                "Lookup transport error, treating as empty",
                extra={"url": url, "query": canonical_id, "error": str(e)},
            )
            return LookupResult.transport_error(detail=str(e))
        except MalformedOracleResponse as e:
            self._logger.warning(
                "Lookup response malformed, treating as empty",
                extra={"url": url, "query": canonical_id, "raw": e.raw},
            )
            return LookupResult.malformed(detail=e.raw)

        result = classify_response(payload, self.config.restricted_sentinel)
        self._logger.info(
            "Lookup classified",
            extra={
                "url": url,
                "query": canonical_id,
                "status": result.status.name,
                "tokens": list(result.tokens),
            },
        )
        if result.flag:
            self._logger.info(
                "Lookup carried a flag",
                extra={"query": canonical_id, "flag": result.flag},
            )
        return result
