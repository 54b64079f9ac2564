"""
DreamLog Insight
================

Modules:
    windows:  rolling time windows and their unlock rules
    analysis: pattern analysis over the unlocked windows
"""

from .windows import (
    TemporalWindowEngine,
    TimeWindow,
    WindowSet,
    compute_windows,
    distinct_days,
    month_span,
)
from .analysis import WindowAnalysis, analyze_windows

__all__ = [
    "TemporalWindowEngine",
    "TimeWindow",
    "WindowSet",
    "compute_windows",
    "distinct_days",
    "month_span",
    "WindowAnalysis",
    "analyze_windows",
]
