"""
LLM Configuration – Shared types and configuration
===================================================
Provides LLMProvider enum, LLMConfig dataclass, and factory methods.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..core.config import EnrichmentConfig
from ..core.exceptions import UnsupportedProviderError


class LLMProvider(Enum):
    """Supported LLM providers"""
    GOOGLE_GEMINI = "google_gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    MOCK = "mock"


# Conventional credential variables, checked when no api_key is configured
API_KEY_ENV_VARS = {
    LLMProvider.GOOGLE_GEMINI: ("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    LLMProvider.OPENAI: ("OPENAI_API_KEY",),
    LLMProvider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
}


@dataclass
class LLMConfig:
    """Configuration for LLM provider"""
    provider: LLMProvider = LLMProvider.MOCK
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: int = 2048
    temperature: float = 0.7
    max_tags: int = 5
    max_people: int = 20
    extra_params: Dict[str, Any] = field(default_factory=dict)

    @property
    def requires_api_key(self) -> bool:
        return self.provider in API_KEY_ENV_VARS

    def resolved_api_key(self) -> Optional[str]:
        """Configured key, else the provider's conventional environment variable."""
        if self.api_key:
            return self.api_key
        for env_var in API_KEY_ENV_VARS.get(self.provider, ()):
            value = os.environ.get(env_var)
            if value:
                return value
        return None

    @property
    def is_configured(self) -> bool:
        """False when calls would have no credential (or no provider at all)."""
        if self.provider == LLMProvider.MOCK:
            return False
        if self.requires_api_key:
            return self.resolved_api_key() is not None
        return True

    # Provider-specific defaults
    @classmethod
    def google_gemini(cls, model: str = "gemini-2.5-flash", api_key: Optional[str] = None, **kwargs) -> 'LLMConfig':
        return cls(provider=LLMProvider.GOOGLE_GEMINI, model=model, api_key=api_key, **kwargs)

    @classmethod
    def openai(cls, model: str = "gpt-4o-mini", api_key: Optional[str] = None, **kwargs) -> 'LLMConfig':
        return cls(provider=LLMProvider.OPENAI, model=model, api_key=api_key, **kwargs)

    @classmethod
    def anthropic(cls, model: str = "claude-3-5-haiku-latest", api_key: Optional[str] = None, **kwargs) -> 'LLMConfig':
        return cls(provider=LLMProvider.ANTHROPIC, model=model, api_key=api_key, **kwargs)

    @classmethod
    def ollama(cls, model: str = "llama3.1", base_url: str = "http://localhost:11434", **kwargs) -> 'LLMConfig':
        return cls(provider=LLMProvider.OLLAMA, model=model, base_url=base_url, **kwargs)

    @classmethod
    def mock(cls, **kwargs) -> 'LLMConfig':
        return cls(provider=LLMProvider.MOCK, **kwargs)

    @classmethod
    def from_settings(cls, settings: EnrichmentConfig) -> 'LLMConfig':
        """Build from the ``enrichment`` section of the application config."""
        try:
            provider = LLMProvider(settings.provider)
        except ValueError:
            supported = [p.value for p in LLMProvider]
            raise UnsupportedProviderError(settings.provider, supported_providers=supported)

        base_url = settings.base_url
        if provider == LLMProvider.OLLAMA and not base_url:
            base_url = "http://localhost:11434"

        return cls(
            provider=provider,
            model=settings.model,
            api_key=settings.api_key,
            base_url=base_url,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            max_tags=settings.max_tags,
            max_people=settings.max_people,
        )


__all__ = ["LLMProvider", "LLMConfig", "API_KEY_ENV_VARS"]
