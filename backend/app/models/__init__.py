"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and public profile
- Habit: Daily or weekly habit owned by a user
- Completion: A check-in of a habit for one period
- Friendship: One-way follow edge between users
"""
from .user import User
from .habit import Habit, HabitCategory, HabitFrequency
from .completion import Completion
from .friendship import Friendship
