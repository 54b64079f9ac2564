"""
Window analysis – run the pattern analyzer over unlocked windows only.

Locked windows are reported with their progress message and never reach the
provider. A failed analysis is captured per window so one provider error
does not hide the others.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from dreamlog.core.exceptions import AnalysisError
from dreamlog.llm.analysis import AnalysisResult, PatternAnalyzer

from .windows import TimeWindow


@dataclass(frozen=True)
class WindowAnalysis:
    window: TimeWindow
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def is_locked(self) -> bool:
        return not self.window.is_unlocked

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window": self.window.to_dict(),
            "analysis": self.result.to_dict() if self.result is not None else None,
            "error": self.error,
        }


async def _analyze_one(window: TimeWindow, analyzer: PatternAnalyzer) -> WindowAnalysis:
    if not window.is_unlocked:
        return WindowAnalysis(window)
    try:
        result = await analyzer.analyze(window.dreams)
    except AnalysisError as e:
        logger.warning(f"[WindowAnalysis] {window.label} analysis failed: {e.message}")
        return WindowAnalysis(window, error=e.message)
    return WindowAnalysis(window, result=result)


async def analyze_windows(windows: Iterable[TimeWindow], analyzer: PatternAnalyzer) -> List[WindowAnalysis]:
    """Analyze every unlocked window concurrently, in window order."""
    return list(await asyncio.gather(*(_analyze_one(w, analyzer) for w in windows)))


__all__ = ["WindowAnalysis", "analyze_windows"]
