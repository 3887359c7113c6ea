"""
Pydantic schemas for authentication endpoints.
Validators raise with the message the client sees; the first failing rule wins.
"""
import re
from pydantic import BaseModel, EmailStr, field_validator

PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[A-Za-z\d@$!%*?&]{8,}$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def check_username(value: str) -> str:
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Username must be at least 3 characters")
    if len(value) > 30:
        raise ValueError("Username is too long")
    if not USERNAME_RE.match(value):
        raise ValueError("Username can only contain letters, numbers, underscores, and hyphens")
    return value


class SignupIn(BaseModel):
    """
    Request model for account registration.
    """
    email: EmailStr  # Stored lower-cased
    password: str
    username: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if len(value) > 255:
            raise ValueError("Email is too long")
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if len(value) > 100:
            raise ValueError("Password is too long")
        if not PASSWORD_RE.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return check_username(value)


class LoginIn(BaseModel):
    """
    Request model for login. Credentials are checked by email.
    """
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value
