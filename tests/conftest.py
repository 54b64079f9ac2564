import sys
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pytest


# Ensure local src/ package imports work without editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dreamlog.core.config import reset_config  # noqa: E402
from dreamlog.core.journal import DreamJournal  # noqa: E402
from dreamlog.core.models import Dream, EnrichmentResult  # noqa: E402
from dreamlog.storage import InMemoryDreamStore, InMemoryTagStore  # noqa: E402


# =============================================================================
# Environment isolation
# =============================================================================

_PROVIDER_ENV = (
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """No test should pick up real credentials or DREAMLOG_* overrides."""
    import os

    for name in list(os.environ):
        if name.startswith("DREAMLOG_") or name in _PROVIDER_ENV:
            monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


# =============================================================================
# Builders
# =============================================================================

def make_dream(
    day: date,
    title: str = "A dream",
    description: str = "Something happened.",
    tags=(),
    people=(),
    dream_id: Optional[str] = None,
) -> Dream:
    return Dream.create(
        description=description,
        dream_date=day,
        title=title,
        tags=tags,
        people=people,
        dream_id=dream_id or f"dream-{day.isoformat()}-{title}",
    )


class FakeEnricher:
    """
    Enricher double keyed by description substring.

    ``failures`` lists substrings whose descriptions raise; ``results`` maps
    substrings to the EnrichmentResult to return.
    """

    def __init__(
        self,
        results: Optional[Dict[str, EnrichmentResult]] = None,
        failures: Optional[List[str]] = None,
    ):
        self.results = results or {}
        self.failures = failures or []
        self.calls: List[str] = []

    async def enrich_text(self, text: str) -> EnrichmentResult:
        self.calls.append(text)
        for needle in self.failures:
            if needle in text:
                raise RuntimeError(f"provider exploded on {needle}")
        for needle, result in self.results.items():
            if needle in text:
                return result
        return EnrichmentResult.empty()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def dream_store():
    return InMemoryDreamStore()


@pytest.fixture
def tag_store():
    return InMemoryTagStore()


@pytest.fixture
def journal(dream_store, tag_store):
    j = DreamJournal(dream_store, tag_store)
    j.load()
    return j


@pytest.fixture
def fake_enricher():
    return FakeEnricher()
