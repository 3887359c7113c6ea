# backend/app/services/presenters.py
"""
Convert model instances to the camelCase dictionaries returned by the API.
"""
import datetime as dt
from typing import Optional

from app.models import Completion, Friendship, Habit, User


def iso(value: Optional[dt.datetime]) -> Optional[str]:
    """ISO timestamp in UTC with a Z suffix"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc).isoformat().replace("+00:00", "Z")


def _enum_value(value):
    return getattr(value, "value", value)


def user_public(u: User) -> dict:
    return {"id": str(u.id), "username": u.username, "avatar": u.avatar}


def user_card(u: User) -> dict:
    """Public fields shown in follow lists and search results"""
    return {**user_public(u), "bio": u.bio}


def user_account(u: User) -> dict:
    """Fields only the account owner sees"""
    return {
        "id": str(u.id),
        "email": u.email,
        "username": u.username,
        "bio": u.bio,
        "avatar": u.avatar,
        "createdAt": iso(u.created_at),
    }


def habit_public(h: Habit) -> dict:
    return {
        "id": str(h.id),
        "name": h.name,
        "category": _enum_value(h.category),
        "frequency": _enum_value(h.frequency),
        "color": h.color,
    }


def habit_to_dict(h: Habit) -> dict:
    return {
        **habit_public(h),
        "userId": str(h.user_id),
        "notes": h.notes,
        "createdAt": iso(h.created_at),
    }


def completion_to_dict(c: Completion) -> dict:
    return {
        "id": str(c.id),
        "habitId": str(c.habit_id),
        "userId": str(c.user_id),
        "completedAt": iso(c.completed_at),
        "notes": c.notes,
    }


def friendship_to_dict(f: Friendship) -> dict:
    return {
        "id": str(f.id),
        "followerId": str(f.follower_id),
        "followingId": str(f.following_id),
        "createdAt": iso(f.created_at),
    }
