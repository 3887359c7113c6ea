from typing import Literal
from fastapi import APIRouter, Depends, Query, status
from app.api.v1.deps import get_current_user
from app.config import settings
from app.models.user import User
from app.schemas.social import FollowIn
from app.services import social
from app.services.presenters import friendship_to_dict

router = APIRouter(prefix="/friends", tags=["friends"])

@router.get("")
async def get_friends(
    user: User = Depends(get_current_user),
    type: Literal["activity", "following", "followers"] = Query("activity"),
    limit: int = Query(settings.FEED_LIMIT, ge=1, le=200),
):
    """
    Activity feed, or the following/followers lists.

    Args:
        type: "activity" (default) for the feed of followed users' check-ins,
              "following" for users the caller follows,
              "followers" for users following the caller
        limit: Maximum number of feed events (activity only)

    Returns:
        dict: {"success": True, "data": {<type>: [...]}}
    """
    if type == "following":
        return {"success": True, "data": {"following": await social.list_following(user)}}
    if type == "followers":
        return {"success": True, "data": {"followers": await social.list_followers(user)}}
    feed = await social.build_activity_feed(user.id, max_items=limit)
    return {"success": True, "data": {"activity": feed}}

@router.post("", status_code=status.HTTP_201_CREATED)
async def follow(body: FollowIn, user: User = Depends(get_current_user)):
    """
    Follow a user.

    Raises:
        400 CANNOT_FOLLOW_SELF / ALREADY_FOLLOWING
        404 USER_NOT_FOUND
    """
    friendship = await social.follow_user(user, body.userId)
    return {"success": True, "data": {"friendship": friendship_to_dict(friendship)}}

@router.delete("/{user_id}")
async def unfollow(user_id: str, user: User = Depends(get_current_user)):
    await social.unfollow_user(user, user_id)
    return {"success": True, "data": {"message": "Unfollowed successfully"}}
