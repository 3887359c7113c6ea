"""
Pydantic schemas for habit and check-in endpoints.
"""
from typing import Optional
from pydantic import BaseModel, field_validator

from app.models.habit import HabitCategory, HabitFrequency


def check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Habit name is required")
    if len(value) > 100:
        raise ValueError("Habit name too long")
    return value


def check_category(value):
    try:
        return HabitCategory(value)
    except (ValueError, TypeError):
        raise ValueError("Invalid category")


def check_frequency(value):
    try:
        return HabitFrequency(value)
    except (ValueError, TypeError):
        raise ValueError("Frequency must be daily or weekly")


class HabitCreateIn(BaseModel):
    name: str
    category: HabitCategory
    frequency: HabitFrequency
    notes: Optional[str] = None
    color: Optional[str] = None  # Hex color, defaults to #3b82f6

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return check_name(value)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, value):
        return check_category(value)

    @field_validator("frequency", mode="before")
    @classmethod
    def validate_frequency(cls, value):
        return check_frequency(value)


class HabitUpdateIn(BaseModel):
    """All fields optional; only the ones sent are changed."""
    name: Optional[str] = None
    category: Optional[HabitCategory] = None
    frequency: Optional[HabitFrequency] = None
    notes: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return check_name(value) if value is not None else value

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, value):
        return check_category(value) if value is not None else value

    @field_validator("frequency", mode="before")
    @classmethod
    def validate_frequency(cls, value):
        return check_frequency(value) if value is not None else value


class CheckInIn(BaseModel):
    notes: Optional[str] = None
