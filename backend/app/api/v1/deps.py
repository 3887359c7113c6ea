from fastapi import Header, Request
from app.config import settings
from app.core.db import parse_pk, with_timeout
from app.core.errors import Unauthenticated
from app.core.security import decode_access_token
from app.models.user import User

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    This dependency extracts and validates the JWT token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (auth-token) - browser clients

    The resolved user is passed explicitly into every service call; nothing
    about the identity is kept outside the request.

    Raises:
        Unauthenticated (401): If no token is provided (AUTH_REQUIRED)
        Unauthenticated (401): If token is invalid or expired (AUTH_INVALID_TOKEN)
        Unauthenticated (401): If user not found in database (AUTH_INVALID_TOKEN)

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie
    if not token:
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)

    if not token:
        raise Unauthenticated("Not authenticated", code="AUTH_REQUIRED")

    try:
        payload = decode_access_token(token)
        user_id = parse_pk(payload.get("sub"))
    except Exception:
        raise Unauthenticated("Invalid authentication token", code="AUTH_INVALID_TOKEN")

    user = await with_timeout(User.get_or_none(id=user_id)) if user_id else None
    if not user:
        raise Unauthenticated("Invalid authentication token", code="AUTH_INVALID_TOKEN")
    return user
