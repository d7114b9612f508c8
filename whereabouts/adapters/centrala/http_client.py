"""HTTP client for the Centrala API.

Every Centrala endpoint takes a JSON body carrying the personal API key
and answers with a JSON object. This client owns the requests session,
injects the key, applies timeouts and retries, and turns transport
problems into TransportError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ...config import CentralaConfig, get_config
from ...domain.errors import MalformedOracleResponse, TransportError

_RETRY_STATUSES = (429, 500, 502, 503, 504)


@dataclass
class CentralaHttpClient:
    """JSON-over-HTTP client with API key injection and retries.

    Attributes:
        config: Centrala configuration
        session: Optional pre-built session (tests inject a mock here)
    """

    config: CentralaConfig = field(default_factory=lambda: get_config().centrala)
    session: Optional[requests.Session] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.session is None:
            self.session = self._build_session()

    def _build_session(self) -> requests.Session:
        retry = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=_RETRY_STATUSES,
            allowed_methods=frozenset({"POST"}),
        )
        adapter = HTTPAdapter(max_retries=retry)
        session = requests.Session()
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update({"Content-Type": "application/json"})
        return session

    def post_json(self, url: str, payload: Mapping[str, Any]) -> Tuple[int, Any]:
        """POST a JSON body and decode the JSON answer.

        Client errors (4xx) with a JSON body are returned as-is: Centrala
        reports lookup misses and wrong answers that way.

        Args:
            url: Endpoint URL.
            payload: Request fields; the API key is added automatically.

        Returns:
            Tuple of (HTTP status code, decoded JSON).

        Raises:
            TransportError: On network failure, 5xx, or a non-JSON error page.
            MalformedOracleResponse: On a successful status with a non-JSON body.
        """
        body = {"apikey": self.config.api_key or "", **payload}
        if self.session is None:
            self.session = self._build_session()

        try:
            response = self.session.post(
                url, json=body, timeout=self.config.timeout_seconds
            )
        except requests.RequestException as e:
            self._logger.warning(
                "Centrala request failed",
                extra={"url": url, "error": str(e)},
            )
            raise TransportError("Centrala request failed", cause=e, endpoint=url)

        status = response.status_code
        if status >= 500:
            raise TransportError(
                f"Centrala answered HTTP {status}", endpoint=url, status_code=status
            )

        try:
            data = response.json()
        except ValueError as e:
            if status >= 400:
                raise TransportError(
                    f"Centrala answered HTTP {status}",
                    cause=e,
                    endpoint=url,
                    status_code=status,
                )
            raise MalformedOracleResponse(
                "Centrala response is not JSON",
                cause=e,
                oracle=url,
                raw=response.text[:200],
            )

        self._logger.debug(
            "Centrala response",
            extra={"url": url, "status": status},
        )
        return status, data
