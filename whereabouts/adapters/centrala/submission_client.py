"""Centrala answer submission adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from ...config import CentralaConfig, get_config
from ...domain.errors import MalformedOracleResponse, SubmissionRejected
from ...domain.models import SubmissionReceipt
from .http_client import CentralaHttpClient
from .lookup_client import CentralaResponse


@dataclass
class CentralaSubmissionClient:
    """SubmissionPort implementation posting to the report endpoint.

    An answer is accepted when the endpoint replies with a 2xx status and
    a zero code. Anything else raises SubmissionRejected; transport
    failures propagate as TransportError.

    Attributes:
        http: HTTP client used for the calls
        config: Centrala configuration (report URL, task name)
    """

    http: CentralaHttpClient
    config: CentralaConfig = field(default_factory=lambda: get_config().centrala)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def submit(self, answer: str) -> SubmissionReceipt:
        url = self.config.report_url
        try:
            status, payload = self.http.post_json(
                url, {"task": self.config.task_name, "answer": answer}
            )
        except MalformedOracleResponse as e:
            raise SubmissionRejected(
                "Report response is not JSON", cause=e, answer=answer
            )

        try:
            response = CentralaResponse.model_validate(payload)
        except ValidationError as e:
            raise SubmissionRejected(
                "Report response has no code", cause=e, answer=answer
            )

        if status >= 400 or response.code != 0:
            self._logger.info(
                "Answer rejected",
                extra={
                    "answer": answer,
                    "status": status,
                    "code": response.code,
                    "response": response.message,
                },
            )
            raise SubmissionRejected(
                f"Answer {answer!r} rejected",
                answer=answer,
                code=response.code,
                response_message=response.message,
            )

        self._logger.info(
            "Answer accepted",
            extra={"answer": answer, "response": response.message},
        )
        return SubmissionReceipt(
            answer=answer, code=response.code, message=response.message
        )
