"""OpenAI chat model adapter.

Wraps the openai SDK behind ChatModelPort. The client is created lazily
on first use so that wiring a container never needs network access or
an API key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

import openai

from ...config import LLMConfig, get_config
from ...domain.errors import TransportError


@dataclass
class OpenAIChatModel:
    """ChatModelPort implementation over the OpenAI chat completions API.

    Attributes:
        config: Chat model configuration
        client: Optional pre-built client (tests inject a mock here)
    """

    config: LLMConfig = field(default_factory=lambda: get_config().llm)
    client: Optional[Any] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_client(self) -> Any:
        if self.client is None:
            self._logger.debug(
                "Initializing OpenAI client",
                extra={"model": self.config.model, "base_url": self.config.base_url},
            )
            self.client = openai.OpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
            )
        return self.client

    def complete(
        self,
        messages: Sequence[Mapping[str, Any]],
        json_mode: bool = False,
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": [dict(m) for m in messages],
            "temperature": self.config.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = self._get_client().chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            self._logger.warning(
                "Chat completion failed",
                extra={"model": self.config.model, "error": str(e)},
            )
            raise TransportError("Chat completion failed", cause=e, endpoint="openai")

        content = completion.choices[0].message.content or ""
        self._logger.debug(
            "Chat completion",
            extra={"model": self.config.model, "chars": len(content)},
        )
        return content
