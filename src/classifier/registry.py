"""
LLM Provider Registry
=====================

The registry turns the provider settings into model handles. It is built
once at process start from `Settings` and then shared read-only by every
activity invocation.

Two providers are known:

- ``openai``: the hosted OpenAI API. Available when ``OPENAI_API_KEY`` is
  set. Supports schema-constrained structured output.
- ``lmstudio``: a local OpenAI-compatible endpoint (LM Studio, Ollama...).
  Available when ``LMSTUDIO_BASE_URL`` is set. Only free-text generation is
  assumed, so JSON is extracted from the reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import structlog
from openai import AsyncOpenAI

from common.config import Settings

from .errors import ConfigurationError, ProviderError
from .schema import ClassificationSchema
from .strategies import (
    FreeTextExtractionStrategy,
    GenerationOutcome,
    GenerationParams,
    OutputStrategy,
    SchemaConstrainedStrategy,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    provider_id: str
    api_key: str | None = None
    base_url: str | None = None
    strategy: OutputStrategy = field(default_factory=SchemaConstrainedStrategy)


@dataclass(frozen=True)
class ModelHandle:
    """A resolved provider + model pair, ready to generate."""

    provider_id: str
    model: str
    client: AsyncOpenAI
    strategy: OutputStrategy
    params: GenerationParams

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: type[ClassificationSchema] = ClassificationSchema,
    ) -> GenerationOutcome:
        return await self.strategy.invoke(
            self.client,
            self.model,
            self.params,
            system_prompt,
            user_prompt,
            schema,
        )


@dataclass(frozen=True)
class ConfigurationReport:
    ok: bool
    errors: list[str]

    def raise_for_errors(self) -> None:
        if not self.ok:
            raise ConfigurationError(self.errors)


ClientFactory = Callable[[ProviderConfig, Settings], AsyncOpenAI]


def default_client_factory(config: ProviderConfig, settings: Settings) -> AsyncOpenAI:
    """Build an OpenAI-compatible async client with SDK retries disabled."""
    return AsyncOpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=settings.REQUEST_TIMEOUT,
        max_retries=0,
    )


def discover_providers(settings: Settings) -> dict[str, ProviderConfig]:
    """Return the providers whose required settings are present."""
    providers: dict[str, ProviderConfig] = {}

    if settings.OPENAI_API_KEY:
        providers["openai"] = ProviderConfig(
            provider_id="openai",
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            strategy=SchemaConstrainedStrategy(),
        )

    if settings.LMSTUDIO_BASE_URL:
        providers["lmstudio"] = ProviderConfig(
            provider_id="lmstudio",
            api_key=settings.LMSTUDIO_API_KEY,
            base_url=settings.LMSTUDIO_BASE_URL,
            strategy=FreeTextExtractionStrategy(),
        )

    return providers


class ProviderRegistry:
    """
    Resolves provider and model names into `ModelHandle` objects.

    Clients are created lazily, once per provider, and cached. Handles are
    immutable so they can be shared across concurrent classifications.
    """

    def __init__(
        self,
        settings: Settings,
        providers: dict[str, ProviderConfig] | None = None,
        client_factory: ClientFactory = default_client_factory,
    ):
        self.settings = settings
        self._providers = (
            dict(providers) if providers is not None else discover_providers(settings)
        )
        self._client_factory = client_factory
        self._clients: dict[str, AsyncOpenAI] = {}
        self._params = GenerationParams(
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.REQUEST_TIMEOUT,
        )

    @property
    def selected_provider(self) -> str:
        return self.settings.LLM_PROVIDER

    @property
    def selected_model(self) -> str:
        return self.settings.DEFAULT_MODEL

    def list_available(self) -> set[str]:
        return set(self._providers)

    def resolve(
        self, provider_id: str | None = None, model: str | None = None
    ) -> ModelHandle:
        """
        Return a handle for *provider_id* and *model*, defaulting to the
        configured selection.
        """
        provider_id = provider_id or self.selected_provider
        model = model or self.selected_model

        if not self._providers:
            raise ProviderError(
                "No LLM providers configured. Please check your environment variables.",
                "none",
            )

        config = self._providers.get(provider_id)
        if config is None:
            raise ProviderError(
                f"Failed to get model {model} from provider {provider_id}: "
                f"provider is not configured "
                f"(available: {', '.join(sorted(self._providers))})",
                provider_id,
            )
        if not model.strip():
            raise ProviderError(
                f"Failed to get model from provider {provider_id}: model name is empty",
                provider_id,
            )

        try:
            client = self._client_for(config)
        except Exception as e:
            raise ProviderError(
                f"Failed to get model {model} from provider {provider_id}",
                provider_id,
                cause=e,
            ) from e

        return ModelHandle(
            provider_id=provider_id,
            model=model,
            client=client,
            strategy=config.strategy,
            params=self._params,
        )

    def _client_for(self, config: ProviderConfig) -> AsyncOpenAI:
        client = self._clients.get(config.provider_id)
        if client is None:
            client = self._client_factory(config, self.settings)
            self._clients[config.provider_id] = client
        return client

    def validate_configuration(self) -> ConfigurationReport:
        """
        Check that the process can serve classifications.

        Run once at startup; the worker refuses to start when this fails.
        """
        errors: list[str] = []
        available = sorted(self._providers)
        selected = self.selected_provider

        if not available:
            errors.append("No LLM providers are configured")
        elif selected not in available:
            errors.append(
                f"Selected provider '{selected}' is not available. "
                f"Available providers: {', '.join(available)}"
            )

        if selected == "openai" and not self.settings.OPENAI_API_KEY:
            errors.append("OpenAI provider selected but OPENAI_API_KEY is not set")
        if selected == "lmstudio" and not self.settings.LMSTUDIO_BASE_URL:
            errors.append(
                "LM Studio provider selected but LMSTUDIO_BASE_URL is not set"
            )

        return ConfigurationReport(ok=not errors, errors=errors)

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
