from fastapi import APIRouter, Depends, status
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.schemas.habit import CheckInIn, HabitCreateIn, HabitUpdateIn
from app.services import checkins, habits
from app.services.presenters import completion_to_dict, habit_to_dict

router = APIRouter(prefix="/habits", tags=["habits"])

@router.get("")
async def list_habits(user: User = Depends(get_current_user)):
    """
    List the authenticated user's habits, newest first.

    Each habit carries streak, progress (0-100, last 30 days),
    completedToday (current day or week already checked in) and
    totalCompletions.
    """
    items = await habits.list_habits_with_stats(user)
    return {"success": True, "data": {"habits": items}}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_habit(body: HabitCreateIn, user: User = Depends(get_current_user)):
    """
    Create a habit.

    Raises:
        400 VALIDATION_ERROR: Missing name, invalid category or frequency
        400 HABIT_NAME_EXISTS: The user already has a habit with this name
    """
    habit = await habits.create_habit(
        user,
        name=body.name,
        category=body.category,
        frequency=body.frequency,
        notes=body.notes,
        color=body.color,
    )
    return {"success": True, "data": {"habit": habit_to_dict(habit)}}

@router.put("/{habit_id}")
async def update_habit(habit_id: str, body: HabitUpdateIn, user: User = Depends(get_current_user)):
    habit = await habits.update_habit(habit_id, user, body.model_dump(exclude_unset=True))
    return {"success": True, "data": {"habit": habit_to_dict(habit)}}

@router.delete("/{habit_id}")
async def delete_habit(habit_id: str, user: User = Depends(get_current_user)):
    await habits.delete_habit(habit_id, user)
    return {"success": True, "data": {"id": habit_id, "deleted": True}}

@router.post("/{habit_id}/checkin", status_code=status.HTTP_201_CREATED)
async def check_in(habit_id: str, body: CheckInIn | None = None, user: User = Depends(get_current_user)):
    """
    Check the habit in for the current day (daily) or week (weekly, from Sunday).

    Raises:
        400 ALREADY_COMPLETED: The current period is already checked in
        404 HABIT_NOT_FOUND: Missing habit or owned by another user
    """
    completion = await checkins.check_in(habit_id, user, notes=body.notes if body else None)
    return {"success": True, "data": {"completion": completion_to_dict(completion)}}

@router.delete("/{habit_id}/checkin")
async def undo_check_in(habit_id: str, user: User = Depends(get_current_user)):
    """
    Remove the current period's check-in. Earlier periods are untouched.

    Raises:
        404 NO_COMPLETION: Nothing to undo in the current period
    """
    await checkins.undo_check_in(habit_id, user)
    return {"success": True, "data": {"message": "Check-in removed successfully"}}
