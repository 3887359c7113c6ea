"""
Pydantic schemas for follow and profile endpoints.
"""
from typing import Optional
from pydantic import BaseModel, HttpUrl, TypeAdapter, ValidationError, field_validator

from app.schemas.auth import check_username

_url_adapter = TypeAdapter(HttpUrl)


class FollowIn(BaseModel):
    userId: str  # Id of the user to follow

    @field_validator("userId")
    @classmethod
    def validate_user_id(cls, value: str) -> str:
        if not value:
            raise ValueError("User ID is required")
        return value


class ProfileUpdateIn(BaseModel):
    """All fields optional; only the ones sent are changed."""
    username: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None  # Absolute http(s) URL, stored as sent

    @field_validator("username")
    @classmethod
    def validate_username(cls, value):
        return check_username(value) if value is not None else value

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, value):
        if value is not None and len(value) > 500:
            raise ValueError("Bio must be less than 500 characters")
        return value

    @field_validator("avatar")
    @classmethod
    def validate_avatar(cls, value):
        if value is None:
            return value
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise ValueError("Invalid avatar URL")
        return value
