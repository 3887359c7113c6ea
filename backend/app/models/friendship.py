"""
Database model for follow edges.
"""
import uuid
from tortoise import fields, models

class Friendship(models.Model):
    """
    Directed follow edge: follower -> following.

    Despite the name this is one-way; "followers" of a user are rows where
    they are `following`, and the users they follow are rows where they are
    `follower`. Self-follows are rejected by the service layer.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    follower = fields.ForeignKeyField(
        "models.User",
        related_name="following",
        on_delete=fields.CASCADE,
    )
    following = fields.ForeignKeyField(
        "models.User",
        related_name="followers",
        on_delete=fields.CASCADE,
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "friendships"
        unique_together = (("follower", "following"),)
