from fastapi import APIRouter, Depends, Query
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.services import social

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/search")
async def search_users(
    user: User = Depends(get_current_user),
    q: str = Query("", description="Substring of username or email"),
):
    """
    Search for users to follow (excluding yourself and users you already follow).
    """
    users = await social.search_users(user, q)
    return {"success": True, "data": {"users": users}}
