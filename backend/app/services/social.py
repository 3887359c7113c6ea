# backend/app/services/social.py
"""
Social Activity Aggregator and follow management.

Follows are one-way edges (Friendship rows). The activity feed lists the most
recent completions of followed users, each annotated with the acting user's
current streak for that habit.
"""
import datetime as dt
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q
from tortoise.functions import Count
from tortoise.transactions import in_transaction

from app.config import settings
from app.core.db import parse_pk, with_timeout
from app.core.errors import Conflict, NotFound, ValidationFailed
from app.models import Completion, Friendship, User
from app.services.presenters import habit_public, iso, user_card, user_public
from app.services.streaks import compute_habit_stats, utc_now

logger = logging.getLogger("uvicorn.error")

# Completions of the acting user per habit used to compute a feed entry's streak
FEED_STREAK_HISTORY = 30
SEARCH_LIMIT = 20


async def followed_ids(viewer_id) -> list:
    return await with_timeout(
        Friendship.filter(follower_id=viewer_id).values_list("following_id", flat=True)
    )


async def build_activity_feed(
    viewer_id,
    max_items: Optional[int] = None,
    as_of: Optional[dt.datetime] = None,
) -> list[dict]:
    """
    Recent completions by the users `viewer_id` follows, newest first.

    Args:
        viewer_id: The user whose follow list drives the feed
        max_items: Cap on returned events (default settings.FEED_LIMIT)
        as_of: Instant the streaks are evaluated at (default now)

    Returns:
        List of events: id, completedAt, notes, user {id, username, avatar},
        habit {id, name, category, frequency, color}, streak.

    Note:
        The streak is the pair's streak at query time, not at the event's
        timestamp. Events sharing a completed_at are ordered by id, which is
        stable between calls but otherwise arbitrary.
    """
    max_items = max_items or settings.FEED_LIMIT
    as_of = as_of or utc_now()

    following = await followed_ids(viewer_id)
    if not following:
        return []

    events = await with_timeout(
        Completion.filter(user_id__in=following)
        .order_by("-completed_at", "-id")
        .limit(max_items)
        .prefetch_related("user", "habit")
    )

    streaks: dict = {}
    feed = []
    for event in events:
        key = (event.habit_id, event.user_id)
        if key not in streaks:
            history = await with_timeout(
                Completion.filter(habit_id=event.habit_id, user_id=event.user_id)
                .order_by("-completed_at")
                .limit(FEED_STREAK_HISTORY)
            )
            streaks[key] = compute_habit_stats(event.habit.frequency, history, as_of).streak
        feed.append({
            "id": str(event.id),
            "completedAt": iso(event.completed_at),
            "notes": event.notes,
            "user": user_public(event.user),
            "habit": habit_public(event.habit),
            "streak": streaks[key],
        })
    return feed


def _with_counts(users) -> list[dict]:
    items = []
    for u in users:
        item = {
            **user_card(u),
            "totalHabits": u.total_habits,
            "totalCompletions": u.total_completions,
        }
        if hasattr(u, "followers_count"):
            item["followersCount"] = u.followers_count
        items.append(item)
    return items


async def _users_with_counts(user_ids: list) -> dict:
    if not user_ids:
        return {}
    rows = await with_timeout(
        User.filter(id__in=user_ids).annotate(
            total_habits=Count("habits", distinct=True),
            total_completions=Count("completions", distinct=True),
        )
    )
    return {u.id: u for u in rows}


async def list_following(viewer: User) -> list[dict]:
    """Users `viewer` follows, most recently followed first."""
    edges = await with_timeout(
        Friendship.filter(follower_id=viewer.id).order_by("-created_at").values_list("following_id", flat=True)
    )
    users = await _users_with_counts(list(edges))
    return _with_counts(users[uid] for uid in edges if uid in users)


async def list_followers(viewer: User) -> list[dict]:
    """Users following `viewer`, most recent first."""
    edges = await with_timeout(
        Friendship.filter(following_id=viewer.id).order_by("-created_at").values_list("follower_id", flat=True)
    )
    users = await _users_with_counts(list(edges))
    return _with_counts(users[uid] for uid in edges if uid in users)


async def search_users(viewer: User, query: str = "", limit: int = SEARCH_LIMIT) -> list[dict]:
    """
    Find users to follow by username or email substring (case-insensitive).
    Excludes the viewer and users they already follow.
    """
    exclude = [viewer.id, *await followed_ids(viewer.id)]
    qs = User.filter(Q(username__icontains=query) | Q(email__icontains=query)).exclude(id__in=exclude)
    rows = await with_timeout(
        qs.annotate(
            total_habits=Count("habits", distinct=True),
            total_completions=Count("completions", distinct=True),
            followers_count=Count("followers", distinct=True),
        )
        .order_by("-created_at")
        .limit(limit)
    )
    return _with_counts(rows)


async def follow_user(viewer: User, target_id) -> Friendship:
    """
    Make `viewer` follow `target_id`.

    Raises:
        ValidationFailed: If the viewer tries to follow themselves
        NotFound: If the target user does not exist
        Conflict: If the viewer already follows the target
    """
    pk = parse_pk(target_id)
    if pk == viewer.id:
        raise ValidationFailed("Cannot follow yourself", code="CANNOT_FOLLOW_SELF")
    async with in_transaction():
        target = await with_timeout(User.get_or_none(id=pk)) if pk else None
        if not target:
            raise NotFound("User not found", code="USER_NOT_FOUND")
        if await with_timeout(Friendship.filter(follower_id=viewer.id, following_id=target.id).exists()):
            raise Conflict("Already following this user", code="ALREADY_FOLLOWING")
        try:
            friendship = await with_timeout(Friendship.create(follower_id=viewer.id, following_id=target.id))
        except IntegrityError:
            raise Conflict("Already following this user", code="ALREADY_FOLLOWING")
    logger.info("[social] user=%s follows user=%s", viewer.id, target.id)
    return friendship


async def unfollow_user(viewer: User, target_id) -> None:
    """
    Remove the viewer's follow edge to `target_id`.

    Raises:
        NotFound: If the viewer does not follow the target
    """
    pk = parse_pk(target_id)
    friendship = await with_timeout(Friendship.get_or_none(follower_id=viewer.id, following_id=pk)) if pk else None
    if not friendship:
        raise NotFound("Not following this user", code="NOT_FOLLOWING")
    await with_timeout(friendship.delete())
    logger.info("[social] user=%s unfollowed user=%s", viewer.id, pk)
