"""
LLM Client Factory – Creates clients for different providers
=============================================================
Factory for creating LLM clients for various providers.
"""

from typing import Any

from loguru import logger

from .config import LLMConfig, LLMProvider
from .ollama import OllamaClient
from ..core.exceptions import UnsupportedProviderError


class LLMClientFactory:
    """Factory for creating LLM clients"""

    @staticmethod
    def create_client(config: LLMConfig) -> Any:
        """
        Create an LLM client based on configuration.

        Returns None for the mock provider, when no credential is available,
        or when the provider SDK is not installed.
        """
        provider = config.provider

        if provider == LLMProvider.MOCK:
            return None

        if not config.is_configured:
            logger.warning(
                f"No API key configured for {provider.value}. AI features will not work."
            )
            return None

        if provider == LLMProvider.GOOGLE_GEMINI:
            return LLMClientFactory._create_gemini_client(config)

        if provider == LLMProvider.OPENAI:
            return LLMClientFactory._create_openai_client(config)

        if provider == LLMProvider.ANTHROPIC:
            return LLMClientFactory._create_anthropic_client(config)

        if provider == LLMProvider.OLLAMA:
            return OllamaClient(base_url=config.base_url, model=config.model)

        supported = [p.value for p in LLMProvider]
        raise UnsupportedProviderError(str(provider.value), supported_providers=supported)

    @staticmethod
    def _create_gemini_client(config: LLMConfig) -> Any:
        """Create Google Gemini client"""
        try:
            from google import genai
            return genai.Client(api_key=config.resolved_api_key())
        except ImportError:
            logger.warning("google-genai package not installed. Install with: pip install google-genai")
            return None

    @staticmethod
    def _create_openai_client(config: LLMConfig) -> Any:
        """Create OpenAI client"""
        try:
            from openai import OpenAI
            if config.base_url:
                return OpenAI(api_key=config.resolved_api_key(), base_url=config.base_url)
            return OpenAI(api_key=config.resolved_api_key())
        except ImportError:
            logger.warning("openai package not installed. Install with: pip install openai")
            return None

    @staticmethod
    def _create_anthropic_client(config: LLMConfig) -> Any:
        """Create Anthropic client"""
        try:
            import anthropic
            return anthropic.Anthropic(api_key=config.resolved_api_key())
        except ImportError:
            logger.warning("anthropic package not installed. Install with: pip install anthropic")
            return None


__all__ = ["LLMClientFactory"]
