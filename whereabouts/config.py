"""Centralized configuration using Pydantic Settings.

Every tunable of the resolver lives here: the Centrala endpoints and
credentials, the chat model, the normalization strategy, the search
limits and logging.

Configuration can be overridden via environment variables:
- WHEREABOUTS_CENTRALA_API_KEY=...
- WHEREABOUTS_LLM_MODEL=gpt-4o
- WHEREABOUTS_NORMALIZER_STRATEGY=llm
- WHEREABOUTS_SEARCH_MAX_ATTEMPTS=3
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

RESTRICTED_SENTINEL = "[**RESTRICTED DATA**]"


class CentralaConfig(BaseSettings):
    """Centrala HTTP API configuration.

    Environment variables prefixed with WHEREABOUTS_CENTRALA_.
    """

    model_config = SettingsConfigDict(env_prefix="WHEREABOUTS_CENTRALA_")

    base_url: str = "https://c3ntrala.ag3nts.org"
    api_key: Optional[str] = None
    people_path: str = "/people"
    places_path: str = "/places"
    report_path: str = "/report"
    task_name: str = "loop"
    timeout_seconds: float = 10.0
    max_retries: int = 2
    backoff_factor: float = 0.5
    restricted_sentinel: str = RESTRICTED_SENTINEL

    @property
    def people_url(self) -> str:
        """Full URL of the person lookup endpoint."""
        return self.base_url.rstrip("/") + self.people_path

    @property
    def places_url(self) -> str:
        """Full URL of the place lookup endpoint."""
        return self.base_url.rstrip("/") + self.places_path

    @property
    def report_url(self) -> str:
        """Full URL of the answer submission endpoint."""
        return self.base_url.rstrip("/") + self.report_path


class LLMConfig(BaseSettings):
    """Chat model configuration.

    Environment variables prefixed with WHEREABOUTS_LLM_.
    """

    model_config = SettingsConfigDict(env_prefix="WHEREABOUTS_LLM_")

    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.0
    timeout_seconds: float = 30.0


class NormalizerConfig(BaseSettings):
    """Name and city normalization configuration.

    Environment variables prefixed with WHEREABOUTS_NORMALIZER_.
    """

    model_config = SettingsConfigDict(env_prefix="WHEREABOUTS_NORMALIZER_")

    strategy: Literal["rule_based", "llm"] = "llm"
    # rapidfuzz ratio (0-100) above which a spelling snaps onto a known id;
    # None disables snapping
    fuzzy_threshold: Optional[float] = 90.0
    cache_ttl_seconds: Optional[float] = None
    cache_max_size: Optional[int] = Field(default=None, ge=1)


class SearchConfig(BaseSettings):
    """Traversal and submission limits.

    Environment variables prefixed with WHEREABOUTS_SEARCH_.
    """

    model_config = SettingsConfigDict(env_prefix="WHEREABOUTS_SEARCH_")

    target_name: str = "Barbara"
    max_attempts: int = Field(default=5, ge=1)
    max_workers: int = Field(default=1, ge=1)
    max_rounds: Optional[int] = Field(default=None, ge=1)


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with WHEREABOUTS_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="WHEREABOUTS_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.search.target_name)
        print(config.centrala.places_url)

    Environment variables prefixed with WHEREABOUTS_.
    """

    model_config = SettingsConfigDict(env_prefix="WHEREABOUTS_")

    centrala: CentralaConfig = Field(default_factory=CentralaConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
