"""
Database model for completions (check-ins).
"""
import uuid
from tortoise import fields, models

class Completion(models.Model):
    """
    A single check-in of a habit.

    user_id duplicates the habit's owner so feeds can filter by user without
    joining habits. period_start is the first day of the day/week the
    completion counts for; the (habit, period_start) unique constraint keeps
    concurrent check-ins from recording the same period twice.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    habit = fields.ForeignKeyField(
        "models.Habit",
        related_name="completions",
        on_delete=fields.CASCADE,
    )
    user = fields.ForeignKeyField(
        "models.User",
        related_name="completions",
        on_delete=fields.CASCADE,
    )
    completed_at = fields.DatetimeField(index=True)
    period_start = fields.DateField()
    notes = fields.TextField(null=True)

    class Meta:
        table = "completions"
        unique_together = (("habit", "period_start"),)
