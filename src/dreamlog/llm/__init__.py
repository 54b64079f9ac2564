"""
LLM Integration Package – Dream enrichment and pattern analysis
===============================================================
Multi-provider LLM support: Google Gemini, OpenAI, Anthropic and local Ollama.

Configuration:
    - LLMProvider: Enum of supported providers
    - LLMConfig: Configuration dataclass with provider-specific factory methods

Client Management:
    - LLMClientFactory: Factory for creating LLM clients
    - OllamaClient: Async HTTP client for Ollama

Capabilities:
    - DreamEnricher: title/tags/people for one dream description
    - PatternAnalyzer: multi-lens analysis over a set of dreams

Usage:
    from dreamlog.llm import LLMConfig, DreamEnricher

    config = LLMConfig.google_gemini(api_key="...")
    enricher = DreamEnricher.from_config(config)
    result = await enricher.enrich_text("I was flying over the sea with Sarah")
"""

from .config import LLMProvider, LLMConfig
from .factory import LLMClientFactory
from .ollama import OllamaClient, OllamaError
from .base import LLMCaller, parse_json_object
from .enrichment import DreamEnricher
from .analysis import AnalysisResult, PatternAnalyzer


__all__ = [
    # Configuration
    "LLMProvider",
    "LLMConfig",
    # Clients
    "LLMClientFactory",
    "OllamaClient",
    "OllamaError",
    "LLMCaller",
    "parse_json_object",
    # Capabilities
    "DreamEnricher",
    "AnalysisResult",
    "PatternAnalyzer",
]
