# backend/app/services/accounts.py
"""
Account registration, credential checks and the profile with aggregate stats.
"""
import datetime as dt
import logging
from collections import defaultdict
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from app.core.db import with_timeout
from app.core.errors import Conflict, Unauthenticated
from app.core.security import hash_password, verify_password
from app.models import Completion, Friendship, Habit, User
from app.services.presenters import habit_to_dict, user_account
from app.services.streaks import compute_habit_stats, longest_streak, utc_now

logger = logging.getLogger("uvicorn.error")

# Same bound as the habit list: streak/progress use the most recent 30 rows
PROFILE_HISTORY_LIMIT = 30

INVALID_CREDENTIALS = "Invalid email or password"


async def register(email: str, username: str, password: str) -> User:
    """
    Create an account.

    Raises:
        Conflict: If the email or the username (case-insensitive) is taken
    """
    email = email.strip().lower()
    username = username.strip()
    existing = await with_timeout(
        User.filter(Q(email__iexact=email) | Q(username__iexact=username)).first()
    )
    if existing:
        if existing.email.lower() == email:
            raise Conflict("Email already registered", code="EMAIL_EXISTS")
        raise Conflict("Username already taken", code="USERNAME_EXISTS")
    try:
        user = await with_timeout(User.create(
            email=email,
            username=username,
            password_hash=hash_password(password),
        ))
    except IntegrityError:
        raise Conflict("Email or username already registered", code="ACCOUNT_EXISTS")
    logger.info("[auth] registered user=%s", user.id)
    return user


async def authenticate(email: str, password: str) -> User:
    """
    Check credentials.

    Raises:
        Unauthenticated: Same message whether the email is unknown or the password wrong
    """
    user = await with_timeout(User.get_or_none(email=email.strip().lower()))
    if not user or not verify_password(password, user.password_hash):
        logger.warning("[auth] rejected login attempt")
        raise Unauthenticated(INVALID_CREDENTIALS, code="AUTH_INVALID_CREDENTIALS")
    return user


async def update_profile(user: User, changes: dict) -> User:
    """
    Update username, bio and/or avatar.

    Raises:
        Conflict: If the new username belongs to another user
    """
    username = changes.get("username")
    if username and username != user.username:
        taken = await with_timeout(User.filter(username__iexact=username).exclude(id=user.id).exists())
        if taken:
            raise Conflict("Username already taken", code="USERNAME_EXISTS")
    for field in ("username", "bio", "avatar"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])
    try:
        await with_timeout(user.save())
    except IntegrityError:
        raise Conflict("Username already taken", code="USERNAME_EXISTS")
    return user


async def get_profile(user: User, as_of: Optional[dt.datetime] = None) -> dict:
    """
    Profile with aggregate statistics.

    currentStreak is the best current streak over the user's habits and
    longestStreak the best run found anywhere in their history.
    """
    as_of = as_of or utc_now()
    habits = await with_timeout(Habit.filter(user_id=user.id).order_by("-created_at"))
    completions = await with_timeout(
        Completion.filter(habit_id__in=[h.id for h in habits]).order_by("-completed_at")
    ) if habits else []

    by_habit = defaultdict(list)
    for c in completions:
        by_habit[c.habit_id].append(c)

    habit_items = []
    longest = 0
    for habit in habits:
        history = by_habit[habit.id]
        stats = compute_habit_stats(habit.frequency, history[:PROFILE_HISTORY_LIMIT], as_of)
        longest = max(longest, longest_streak(habit.frequency, history))
        habit_items.append({
            **habit_to_dict(habit),
            "streak": stats.streak,
            "progress": stats.progress_percent,
            "totalCompletions": len(history),
        })

    return {
        **user_account(user),
        "totalHabits": len(habits),
        "totalCompletions": await with_timeout(Completion.filter(user_id=user.id).count()),
        "followersCount": await with_timeout(Friendship.filter(following_id=user.id).count()),
        "followingCount": await with_timeout(Friendship.filter(follower_id=user.id).count()),
        "currentStreak": max((h["streak"] for h in habit_items), default=0),
        "longestStreak": longest,
        "habits": habit_items,
    }
