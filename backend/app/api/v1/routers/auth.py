from fastapi import APIRouter, Depends, Response, status
from app.api.v1.deps import get_current_user
from app.core.security import clear_auth_cookie, create_access_token, set_auth_cookie
from app.models.user import User
from app.schemas.auth import LoginIn, SignupIn
from app.services import accounts
from app.services.presenters import user_account

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupIn, response: Response):
    """
    Register a new user account and log it in.

    Returns:
        dict: Response containing:
            - success: bool
            - data: dict with user (id, email, username, bio, avatar, createdAt)
              and accessToken

    Error codes:
        - VALIDATION_ERROR: Malformed email, weak password or invalid username
        - EMAIL_EXISTS / USERNAME_EXISTS: Already registered (case-insensitive)

    Note:
        The token is also set as the HttpOnly "auth-token" cookie.
    """
    user = await accounts.register(body.email, body.username, body.password)
    token = create_access_token(str(user.id))
    set_auth_cookie(response, token)
    return {"success": True, "data": {"user": user_account(user), "accessToken": token}}

@router.post("/login")
async def login(body: LoginIn, response: Response):
    """
    Authenticate by email and password.

    Unknown email and wrong password produce the same 401
    (AUTH_INVALID_CREDENTIALS).
    """
    user = await accounts.authenticate(body.email, body.password)
    token = create_access_token(str(user.id))
    set_auth_cookie(response, token)
    return {"success": True, "data": {"user": user_account(user), "accessToken": token}}

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "data": {"user": user_account(user)}}

@router.post("/logout")
async def logout(response: Response):
    """
    Clear the auth cookie. Always succeeds.

    Note:
        The JWT itself stays valid until it expires.
    """
    clear_auth_cookie(response)
    return {"success": True, "data": {"message": "Logged out successfully"}}
