"""
Database model for users.
Represents a user account: credentials and public profile fields.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Habits (related_name="habits")
    - Has many Completions (related_name="completions")
    - Follows other users through Friendship (related_name="following")
    - Is followed through Friendship (related_name="followers")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email is stored lower-cased; username is unique case-insensitively,
      which the service layer enforces with iexact lookups
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    email = fields.CharField(max_length=255, unique=True, index=True)  # Always lower-cased
    username = fields.CharField(max_length=30, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)
    bio = fields.CharField(max_length=500, null=True)
    avatar = fields.CharField(max_length=1024, null=True)  # Avatar image URL
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
