"""
Database model for habits.
A habit belongs to one user and owns its history of completions.
"""
import uuid
from enum import Enum
from tortoise import fields, models

DEFAULT_HABIT_COLOR = "#3b82f6"


class HabitCategory(str, Enum):
    HEALTH = "health"
    STUDY = "study"
    PERSONAL = "personal"
    WORK = "work"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class Habit(models.Model):
    """
    Habit database model.

    Relationships:
    - Belongs to a User (many-to-one, cascade delete)
    - Has many Completions (related_name="completions")

    The name is unique per owner (compared after trimming, case-sensitive);
    the service layer checks it before every insert/rename.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="habits",
        on_delete=fields.CASCADE,
    )
    name = fields.CharField(max_length=100)
    category = fields.CharEnumField(HabitCategory, max_length=16)
    frequency = fields.CharEnumField(HabitFrequency, max_length=16)
    notes = fields.TextField(null=True)
    color = fields.CharField(max_length=32, default=DEFAULT_HABIT_COLOR)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "habits"
