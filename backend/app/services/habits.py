# backend/app/services/habits.py
"""
Habit management: create, list with statistics, update and delete.

Every function takes the authenticated user explicitly; a habit owned by
someone else is reported exactly like a missing one.
"""
import datetime as dt
import logging
from typing import Optional

from tortoise.functions import Count
from tortoise.transactions import in_transaction

from app.core.db import parse_pk, with_timeout
from app.core.errors import Conflict, NotFound
from app.models import Completion, Habit, User
from app.models.habit import DEFAULT_HABIT_COLOR, HabitCategory, HabitFrequency
from app.services.presenters import habit_to_dict
from app.services.streaks import compute_habit_stats, utc_now

logger = logging.getLogger("uvicorn.error")

# Completions fetched per habit for streak/progress; bounds read cost
STATS_HISTORY_LIMIT = 30

DUPLICATE_NAME = "You already have a habit with this name"


async def get_owned_habit(habit_id, user: User) -> Habit:
    """
    Load a habit that belongs to `user`.

    Raises:
        NotFound: If the habit does not exist or is owned by another user
    """
    pk = parse_pk(habit_id)
    habit = await with_timeout(Habit.get_or_none(id=pk, user_id=user.id)) if pk else None
    if not habit:
        raise NotFound("Habit not found", code="HABIT_NOT_FOUND")
    return habit


async def _name_taken(user: User, name: str, exclude_id=None) -> bool:
    qs = Habit.filter(user_id=user.id, name=name)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return await with_timeout(qs.exists())


async def create_habit(
    user: User,
    name: str,
    category: HabitCategory,
    frequency: HabitFrequency,
    notes: Optional[str] = None,
    color: Optional[str] = None,
) -> Habit:
    """
    Create a habit for `user`.

    Raises:
        Conflict: If the user already has a habit with the same (trimmed) name
    """
    name = name.strip()
    async with in_transaction():
        if await _name_taken(user, name):
            raise Conflict(DUPLICATE_NAME, code="HABIT_NAME_EXISTS")
        habit = await with_timeout(Habit.create(
            user_id=user.id,
            name=name,
            category=category,
            frequency=frequency,
            notes=notes.strip() if notes else None,
            color=color or DEFAULT_HABIT_COLOR,
        ))
    logger.info("[habits] created habit=%s user=%s", habit.id, user.id)
    return habit


async def list_habits_with_stats(user: User, as_of: Optional[dt.datetime] = None) -> list[dict]:
    """
    Return the user's habits (newest first) with streak, progress,
    completedToday and totalCompletions.
    """
    as_of = as_of or utc_now()
    habits = await with_timeout(
        Habit.filter(user_id=user.id)
        .annotate(total_completions=Count("completions"))
        .order_by("-created_at")
    )
    items = []
    for habit in habits:
        history = await with_timeout(
            Completion.filter(habit_id=habit.id).order_by("-completed_at").limit(STATS_HISTORY_LIMIT)
        )
        stats = compute_habit_stats(habit.frequency, history, as_of)
        items.append({
            **habit_to_dict(habit),
            "streak": stats.streak,
            "progress": stats.progress_percent,
            "completedToday": stats.completed_current_period,
            "totalCompletions": habit.total_completions,
        })
    return items


async def update_habit(habit_id, user: User, changes: dict) -> Habit:
    """
    Apply a partial update to one of the user's habits.

    Args:
        changes: Only the fields the client sent (name, category, frequency, notes, color)

    Raises:
        NotFound: If the habit is missing or not owned by the user
        Conflict: If renaming onto another of the user's habit names
    """
    async with in_transaction():
        habit = await get_owned_habit(habit_id, user)
        if changes.get("name") is not None:
            changes["name"] = changes["name"].strip()
            if changes["name"] != habit.name and await _name_taken(user, changes["name"], exclude_id=habit.id):
                raise Conflict(DUPLICATE_NAME, code="HABIT_NAME_EXISTS")
        if changes.get("notes") is not None:
            changes["notes"] = changes["notes"].strip()
        for field in ("name", "category", "frequency", "notes", "color"):
            if changes.get(field) is not None:
                setattr(habit, field, changes[field])
        await with_timeout(habit.save())
    return habit


async def delete_habit(habit_id, user: User) -> None:
    """Delete one of the user's habits together with its completions."""
    async with in_transaction():
        habit = await get_owned_habit(habit_id, user)
        # Completions first, then the habit (FK cascades, but explicit is clearer)
        await with_timeout(Completion.filter(habit_id=habit.id).delete())
        await with_timeout(habit.delete())
    logger.info("[habits] deleted habit=%s user=%s", habit.id, user.id)
