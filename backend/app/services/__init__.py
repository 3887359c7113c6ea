"""
Services Module

Domain logic behind the API, independent of HTTP:
- streaks: Streak & Progress Engine (pure, no database access)
- habits: Habit CRUD and per-habit statistics
- checkins: Check-in / undo for the current period
- social: Follow edges, user search and the activity feed
- accounts: Registration, credential checks and profile statistics
"""

from .streaks import (
    HabitStats,
    compute_habit_stats,
    longest_streak,
    period_start,
    period_window,
)
from .social import build_activity_feed

__all__ = [
    "HabitStats",
    "compute_habit_stats",
    "longest_streak",
    "period_start",
    "period_window",
    "build_activity_feed",
]
