"""Dependency injection container.

A small DI container without external frameworks: ports are registered
against factories and resolved on demand, so tests can swap any oracle
for a stub without touching the services.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        resolver = container.resolve(LocationResolverService)

        # Testing
        container = Container.create_default()
        container.register(LookupPort, lambda: FakeLookup(...))
        resolver = container.resolve(LocationResolverService)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Re-registering a type replaces its factory and drops any cached
        instance.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Adapters are only instantiated on first resolution, so building
        the container needs neither network access nor API keys.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.centrala import (
            CentralaHttpClient,
            CentralaLookupClient,
            CentralaSubmissionClient,
        )
        from .adapters.llm import (
            LLMCandidateResolver,
            LLMEntityExtractor,
            LLMNormalizer,
            OpenAIChatModel,
        )
        from .adapters.normalization import RuleBasedNormalizer
        from .domain.errors import ConfigurationError
        from .ports.cache import CachePort
        from .ports.lookup import LookupPort, SubmissionPort
        from .ports.oracles import (
            CandidateResolverPort,
            ChatModelPort,
            ExtractorPort,
            NormalizerPort,
        )
        from .services import FrontierSearch, LocationResolverService, SubmissionLoop

        config = config or get_config()
        container = cls(config=config)

        container.register(
            CachePort,
            lambda: InMemoryCache(
                name="normalize",
                default_ttl_seconds=config.normalizer.cache_ttl_seconds,
                max_size=config.normalizer.cache_max_size,
            ),
        )

        # Language oracles
        container.register(ChatModelPort, lambda: OpenAIChatModel(config.llm))
        container.register(
            ExtractorPort,
            lambda: LLMEntityExtractor(container.resolve(ChatModelPort)),
        )
        container.register(
            CandidateResolverPort,
            lambda: LLMCandidateResolver(container.resolve(ChatModelPort)),
        )

        def create_normalizer() -> NormalizerPort:
            rule_based = RuleBasedNormalizer(config.normalizer.fuzzy_threshold)
            if config.normalizer.strategy == "rule_based":
                return rule_based
            return LLMNormalizer(
                chat_model=container.resolve(ChatModelPort),
                cache=container.resolve(CachePort),
                fallback=rule_based,
            )

        container.register(NormalizerPort, create_normalizer)

        # Centrala
        def create_http_client() -> CentralaHttpClient:
            if not config.centrala.api_key:
                raise ConfigurationError(
                    "Centrala API key is not set",
                    setting_name="WHEREABOUTS_CENTRALA_API_KEY",
                    expected_type="str",
                )
            return CentralaHttpClient(config.centrala)

        container.register(CentralaHttpClient, create_http_client)
        container.register(
            LookupPort,
            lambda: CentralaLookupClient(
                container.resolve(CentralaHttpClient), config.centrala
            ),
        )
        container.register(
            SubmissionPort,
            lambda: CentralaSubmissionClient(
                container.resolve(CentralaHttpClient), config.centrala
            ),
        )

        # Services
        container.register(
            FrontierSearch,
            lambda: FrontierSearch(
                lookup=container.resolve(LookupPort),
                normalizer=container.resolve(NormalizerPort),
                max_workers=config.search.max_workers,
                max_rounds=config.search.max_rounds,
            ),
        )
        container.register(
            SubmissionLoop,
            lambda: SubmissionLoop(
                resolver=container.resolve(CandidateResolverPort),
                submitter=container.resolve(SubmissionPort),
                max_attempts=config.search.max_attempts,
            ),
        )
        container.register(
            LocationResolverService,
            lambda: LocationResolverService(
                extractor=container.resolve(ExtractorPort),
                search=container.resolve(FrontierSearch),
                submission=container.resolve(SubmissionLoop),
                target_name=config.search.target_name,
            ),
        )

        return container
