# backend/app/services/checkins.py
"""
Check-in state per (habit, current period): not-completed <-> completed.

check_in moves a habit to completed for the current day/week, undo_check_in
moves it back. Streaks are never stored; the next stats read recomputes them
from the completion rows.
"""
import datetime as dt
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from app.core.db import with_timeout
from app.core.errors import Conflict, NotFound
from app.models import Completion, Habit, User
from app.services.habits import get_owned_habit
from app.services.streaks import period_start, period_window, utc_now

logger = logging.getLogger("uvicorn.error")

ALREADY_COMPLETED = "Already completed for this period"


async def _current_period_completion(habit: Habit, user: User, now: dt.datetime) -> Optional[Completion]:
    """
    The completion recorded in the period containing `now`, if any.

    Looks at completed_at, not the stored period_start, which reflects the
    frequency in force when the row was written.
    """
    start, end = (t.astimezone(dt.timezone.utc) for t in period_window(habit.frequency, now))
    return await with_timeout(
        Completion.filter(
            habit_id=habit.id,
            user_id=user.id,
            completed_at__gte=start,
            completed_at__lt=end,
        )
        .order_by("-completed_at")
        .first()
    )


async def check_in(habit_id, user: User, notes: Optional[str] = None, now: Optional[dt.datetime] = None) -> Completion:
    """
    Record a completion of the habit for the current period.

    The existence check and the insert share one transaction, and the
    (habit, period_start) unique constraint rejects a concurrent duplicate.

    Raises:
        NotFound: If the habit is missing or not owned by the user
        Conflict: If the current period already has a completion
    """
    now = now or utc_now()
    async with in_transaction():
        habit = await get_owned_habit(habit_id, user)
        if await _current_period_completion(habit, user, now):
            raise Conflict(ALREADY_COMPLETED, code="ALREADY_COMPLETED")
        try:
            completion = await with_timeout(Completion.create(
                habit_id=habit.id,
                user_id=user.id,
                completed_at=now,
                period_start=period_start(habit.frequency, now),
                notes=notes.strip() if notes else None,
            ))
        except IntegrityError:
            raise Conflict(ALREADY_COMPLETED, code="ALREADY_COMPLETED")
    logger.info("[checkin] habit=%s user=%s period=%s", habit.id, user.id, completion.period_start)
    return completion


async def undo_check_in(habit_id, user: User, now: Optional[dt.datetime] = None) -> None:
    """
    Delete the completion of the current period. Earlier periods are untouched.

    Raises:
        NotFound: If the habit is not the user's, or the current period has no completion
    """
    now = now or utc_now()
    async with in_transaction():
        habit = await get_owned_habit(habit_id, user)
        completion = await _current_period_completion(habit, user, now)
        if not completion:
            raise NotFound("No completion found for this period", code="NO_COMPLETION")
        await with_timeout(completion.delete())
    logger.info("[checkin] undone habit=%s user=%s", habit.id, user.id)
