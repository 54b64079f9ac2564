"""
DreamLog - Dream Journal with AI Enrichment and Temporal Insights
=================================================================

Imports exported journal entries, enriches them with a language model and
unlocks pattern analyses as the journal grows.

Key Features:
    - HTML journal import with title/date/description extraction
    - Concurrent batch import with per-file failure isolation
    - Title, tag and people enrichment (Gemini, OpenAI, Anthropic, Ollama)
    - Rolling windows (last night, past week, month, year) with unlock rules

Main Packages:
    - core: Config, exceptions, dream model, journal, search
    - storage: JSON-file and in-memory stores
    - ingest: Field extraction and the import orchestrator
    - llm: Provider clients, enrichment and pattern analysis
    - insight: Time windows and window analysis
    - cli: Command-line interface

Quick Start:
    from dreamlog.core import DreamJournal, get_config
    from dreamlog.insight import compute_windows

    journal = DreamJournal.from_config(get_config())
    windows = compute_windows(journal.dreams)

Version: 0.1.0
"""

__version__ = "0.1.0"
