from fastapi import APIRouter, Depends
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.schemas.social import ProfileUpdateIn
from app.services import accounts
from app.services.presenters import user_account

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("")
async def get_profile(user: User = Depends(get_current_user)):
    """
    Profile with statistics: totals, follower counts, current and longest
    streak, and every habit with its streak and progress.
    """
    return {"success": True, "data": {"profile": await accounts.get_profile(user)}}

@router.put("")
async def update_profile(body: ProfileUpdateIn, user: User = Depends(get_current_user)):
    user = await accounts.update_profile(user, body.model_dump(exclude_unset=True))
    return {"success": True, "data": {"user": user_account(user)}}
