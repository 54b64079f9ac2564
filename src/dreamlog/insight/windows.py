"""
Temporal Window Engine – rolling periods and unlock eligibility
===============================================================

Windows (dates compared as calendar dates relative to ``now``):
    Last Night – dated today or yesterday (dreams are logged the morning after)
    Past Week  – dated on/after today - 7 days
    Past Month – dated on/after today - 30 days
    Past Year  – dated on/after today - 1 year

Unlocking:
    Last Night – at least one dream
    Past Week  – dreams on >= 4 distinct dates in the window
    Past Month – dreams on >= 15 distinct dates in the window
    Past Year  – the whole collection spans >= 6 whole months

The engine is a pure function of (dreams, now): no I/O, no caching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, Union

from dateutil.relativedelta import relativedelta

from dreamlog.core.config import UnlockConfig
from dreamlog.core.models import Dream, sort_newest_first


LAST_NIGHT_MESSAGE = "Log the dream you had last night to see the analysis."
WEEK_MESSAGE = "Log dreams on {remaining} more day(s) this week to unlock."
MONTH_MESSAGE = "Log dreams on {remaining} more day(s) this month to unlock."
YEAR_MESSAGE = (
    "Log dreams over a {threshold}-month period to unlock your yearly analysis "
    "({remaining} more month(s) to go)."
)


@dataclass(frozen=True)
class TimeWindow:
    key: str
    label: str
    period: str
    dreams: Tuple[Dream, ...]
    is_unlocked: bool
    progress_message: str
    predicate: Callable[[date], bool] = field(compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.dreams)

    def contains(self, dream_date: date) -> bool:
        return self.predicate(dream_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "period": self.period,
            "dream_count": len(self.dreams),
            "distinct_days": distinct_days(self.dreams),
            "is_unlocked": self.is_unlocked,
            "progress_message": self.progress_message,
            "dream_ids": [d.id for d in self.dreams],
        }


@dataclass(frozen=True)
class WindowSet:
    last_night: TimeWindow
    past_week: TimeWindow
    past_month: TimeWindow
    past_year: TimeWindow

    def __iter__(self) -> Iterator[TimeWindow]:
        return iter((self.last_night, self.past_week, self.past_month, self.past_year))

    def get(self, key: str) -> TimeWindow:
        for window in self:
            if window.key == key:
                return window
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        return {w.key: w.to_dict() for w in self}


def distinct_days(dreams: Sequence[Dream]) -> int:
    return len({d.date for d in dreams})


def month_span(dreams: Sequence[Dream]) -> int:
    """
    Whole months between the oldest and newest dream.

    Zero when there are fewer than two dreams.
    """
    if len(dreams) < 2:
        return 0
    ordered = sort_newest_first(dreams)
    delta = relativedelta(ordered[0].date, ordered[-1].date)
    return delta.years * 12 + delta.months


def _as_date(now: Union[date, datetime]) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


class TemporalWindowEngine:
    """Buckets a collection into rolling windows and decides what is unlocked."""

    def __init__(self, week_min_days: int = 4, month_min_days: int = 15, year_min_months: int = 6):
        self.week_min_days = week_min_days
        self.month_min_days = month_min_days
        self.year_min_months = year_min_months

    @classmethod
    def from_config(cls, config: UnlockConfig) -> "TemporalWindowEngine":
        return cls(
            week_min_days=config.week_min_days,
            month_min_days=config.month_min_days,
            year_min_months=config.year_min_months,
        )

    def compute_windows(self, dreams: Sequence[Dream], now: Union[date, datetime]) -> WindowSet:
        today = _as_date(now)
        yesterday = today - timedelta(days=1)
        week_start = today - timedelta(days=7)
        month_start = today - timedelta(days=30)
        year_start = today - relativedelta(years=1)

        ordered = sort_newest_first(dreams)

        def select(predicate: Callable[[date], bool]) -> Tuple[Dream, ...]:
            return tuple(d for d in ordered if predicate(d.date))

        # Last night
        in_last_night = lambda d: d == today or d == yesterday
        last_night_dreams = select(in_last_night)
        last_night = TimeWindow(
            key="last_night",
            label="Last Night's Dream",
            period="last night",
            dreams=last_night_dreams,
            is_unlocked=bool(last_night_dreams),
            progress_message="" if last_night_dreams else LAST_NIGHT_MESSAGE,
            predicate=in_last_night,
        )

        # Past week / month: distinct logging days
        in_week = lambda d: d >= week_start
        past_week = self._days_window(
            "past_week", "Past Week", "the past week",
            select(in_week), in_week, self.week_min_days, WEEK_MESSAGE,
        )

        in_month = lambda d: d >= month_start
        past_month = self._days_window(
            "past_month", "Past Month", "the past month",
            select(in_month), in_month, self.month_min_days, MONTH_MESSAGE,
        )

        # Past year: span of the whole collection, not just this window
        in_year = lambda d: d >= year_start
        span = month_span(ordered)
        year_unlocked = span >= self.year_min_months
        past_year = TimeWindow(
            key="past_year",
            label="Past Year",
            period="the past year",
            dreams=select(in_year),
            is_unlocked=year_unlocked,
            progress_message="" if year_unlocked else YEAR_MESSAGE.format(
                threshold=self.year_min_months,
                remaining=self.year_min_months - span,
            ),
            predicate=in_year,
        )

        return WindowSet(
            last_night=last_night,
            past_week=past_week,
            past_month=past_month,
            past_year=past_year,
        )

    @staticmethod
    def _days_window(
        key: str,
        label: str,
        period: str,
        dreams: Tuple[Dream, ...],
        predicate: Callable[[date], bool],
        threshold: int,
        template: str,
    ) -> TimeWindow:
        days = distinct_days(dreams)
        unlocked = days >= threshold
        return TimeWindow(
            key=key,
            label=label,
            period=period,
            dreams=dreams,
            is_unlocked=unlocked,
            progress_message="" if unlocked else template.format(remaining=threshold - days),
            predicate=predicate,
        )


def compute_windows(
    dreams: Sequence[Dream],
    now: Optional[Union[date, datetime]] = None,
    config: Optional[UnlockConfig] = None,
) -> WindowSet:
    """Module-level convenience; ``now`` defaults to the current local time."""
    engine = TemporalWindowEngine.from_config(config or UnlockConfig())
    return engine.compute_windows(dreams, now if now is not None else datetime.now())


__all__ = [
    "TimeWindow",
    "WindowSet",
    "TemporalWindowEngine",
    "compute_windows",
    "distinct_days",
    "month_span",
]
