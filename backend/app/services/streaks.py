# backend/app/services/streaks.py
"""
Streak & Progress Engine

Computes per-habit statistics from raw completion history:
1. Current streak (consecutive periods, walking back from the evaluation instant)
2. Whether the current period is already completed
3. 30-day completion rate

A period is a calendar day (daily habits) or a calendar week starting on
Sunday (weekly habits), in the configured timezone. Nothing here touches the
database, so callers pass the completions they fetched and may inject a fixed
evaluation instant.
"""
import datetime as dt
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from app.config import settings
from app.models.habit import HabitFrequency

PROGRESS_WINDOW_DAYS = 30
EXPECTED_COMPLETIONS = {
    HabitFrequency.DAILY: PROGRESS_WINDOW_DAYS,
    HabitFrequency.WEEKLY: math.ceil(PROGRESS_WINDOW_DAYS / 7),
}

Frequency = Union[HabitFrequency, str]


@dataclass(frozen=True)
class HabitStats:
    """Statistics for one habit at one evaluation instant"""
    streak: int
    completed_current_period: bool
    progress_percent: int


def default_tz() -> dt.tzinfo:
    return ZoneInfo(settings.TIMEZONE)


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _as_aware(moment: dt.datetime) -> dt.datetime:
    # Naive datetimes are stored and produced as UTC throughout the app
    if moment.tzinfo is None:
        return moment.replace(tzinfo=dt.timezone.utc)
    return moment


def _timestamp_of(item) -> dt.datetime:
    if isinstance(item, dt.datetime):
        return item
    return item.completed_at


def _step(frequency: HabitFrequency) -> dt.timedelta:
    return dt.timedelta(days=7 if frequency == HabitFrequency.WEEKLY else 1)


def period_start(frequency: Frequency, moment: dt.datetime, tz: Optional[dt.tzinfo] = None) -> dt.date:
    """
    First calendar day of the period containing `moment`.

    Daily: the local date itself. Weekly: the most recent Sunday on or
    before the local date.
    """
    frequency = HabitFrequency(frequency)
    day = _as_aware(moment).astimezone(tz or default_tz()).date()
    if frequency == HabitFrequency.WEEKLY:
        # date.weekday(): Monday=0 ... Sunday=6
        day -= dt.timedelta(days=(day.weekday() + 1) % 7)
    return day


def period_window(
    frequency: Frequency,
    as_of: Optional[dt.datetime] = None,
    tz: Optional[dt.tzinfo] = None,
) -> Tuple[dt.datetime, dt.datetime]:
    """
    Half-open window [start, end) of the period containing `as_of`,
    as aware datetimes at local midnight.
    """
    frequency = HabitFrequency(frequency)
    tz = tz or default_tz()
    first_day = period_start(frequency, as_of or utc_now(), tz)
    start = dt.datetime.combine(first_day, dt.time.min, tzinfo=tz)
    end_day = first_day + _step(frequency)
    end = dt.datetime.combine(end_day, dt.time.min, tzinfo=tz)
    return start, end


def compute_streak(
    frequency: Frequency,
    completions: Iterable,
    as_of: Optional[dt.datetime] = None,
    tz: Optional[dt.tzinfo] = None,
) -> int:
    """
    Count consecutive periods with a completion, walking back from `as_of`'s period.

    Completions may come in any order. A completion later than the cursor
    (a second one inside an already counted period) is skipped; the first
    completion earlier than the cursor means a missed period and ends the walk.
    """
    frequency = HabitFrequency(frequency)
    tz = tz or default_tz()
    step = _step(frequency)
    stamps = sorted((_as_aware(_timestamp_of(c)) for c in completions), reverse=True)

    streak = 0
    cursor = period_start(frequency, as_of or utc_now(), tz)
    for stamp in stamps:
        period = period_start(frequency, stamp, tz)
        if period == cursor:
            streak += 1
            cursor -= step
        elif period < cursor:
            break
    return streak


def longest_streak(
    frequency: Frequency,
    completions: Iterable,
    tz: Optional[dt.tzinfo] = None,
) -> int:
    """Longest run of consecutive completed periods anywhere in the history."""
    frequency = HabitFrequency(frequency)
    tz = tz or default_tz()
    step = _step(frequency)
    periods = sorted({period_start(frequency, _as_aware(_timestamp_of(c)), tz) for c in completions})

    best = run = 0
    previous: Optional[dt.date] = None
    for period in periods:
        run = run + 1 if previous is not None and period - previous == step else 1
        best = max(best, run)
        previous = period
    return best


def compute_progress(
    frequency: Frequency,
    completions: Iterable,
    as_of: Optional[dt.datetime] = None,
) -> int:
    """Share of expected completions logged in the trailing 30 days, capped at 100."""
    frequency = HabitFrequency(frequency)
    since = _as_aware(as_of or utc_now()) - dt.timedelta(days=PROGRESS_WINDOW_DAYS)
    recent = sum(1 for c in completions if _as_aware(_timestamp_of(c)) >= since)
    # Half-up rounding; round() would round .5 to even
    percent = math.floor(recent * 100 / EXPECTED_COMPLETIONS[frequency] + 0.5)
    return min(100, percent)


def compute_habit_stats(
    frequency: Frequency,
    completions: Iterable,
    as_of: Optional[dt.datetime] = None,
    tz: Optional[dt.tzinfo] = None,
) -> HabitStats:
    """
    Compute streak, current-period completion and progress for one habit.

    Args:
        frequency: "daily" or "weekly"
        completions: Completion timestamps, or objects with a `completed_at` attribute
        as_of: Evaluation instant (defaults to now)
        tz: Calendar for day boundaries (defaults to settings.TIMEZONE)
    """
    completions: List = list(completions)
    as_of = as_of or utc_now()
    tz = tz or default_tz()

    current = period_start(frequency, as_of, tz)
    completed = any(period_start(frequency, _as_aware(_timestamp_of(c)), tz) == current for c in completions)

    return HabitStats(
        streak=compute_streak(frequency, completions, as_of, tz),
        completed_current_period=completed,
        progress_percent=compute_progress(frequency, completions, as_of),
    )
