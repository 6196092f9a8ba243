"""
Habit API endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.habits.models import (
    CompleteHabitRequest,
    CreateHabitRequest,
    EditHabitRequest,
    Habit,
)
from modules.habits.viewmodel import HabitViewModel

from ..dependencies import get_habit_view_model
from ..models.errors import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("", response_model=list[Habit])
async def list_habits(
    due_on: Optional[date] = Query(default=None, description="Only habits due on this date"),
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> list[Habit]:
    """List the caller's habits, optionally only those due on a date."""
    if due_on is None:
        return view_model.habits
    return view_model.habits_due_on(due_on)


@router.post("/refresh", response_model=list[Habit])
async def refresh_habits(
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> list[Habit]:
    await view_model.refresh()
    return view_model.habits


@router.post("", response_model=Habit, status_code=201)
async def create_habit(
    request: CreateHabitRequest,
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> Habit:
    return await view_model.add_habit(
        request.title,
        interval=request.interval,
        description=request.description,
        start_date=request.start_date,
    )


@router.get("/{habit_id}", response_model=Habit)
async def get_habit(
    habit_id: str,
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> Habit:
    return view_model.get_habit(habit_id)


@router.patch("/{habit_id}", response_model=Habit)
async def edit_habit(
    habit_id: str,
    request: EditHabitRequest,
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> Habit:
    return await view_model.edit_habit(
        view_model.get_habit(habit_id),
        title=request.title,
        interval=request.interval,
        description=request.description,
    )


@router.post("/{habit_id}/complete", response_model=Habit)
async def complete_habit(
    habit_id: str,
    request: CompleteHabitRequest,
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> Habit:
    """Toggle the habit's completion for a day (today by default)."""
    return await view_model.complete_habit(view_model.get_habit(habit_id), request.date)


@router.delete("/{habit_id}", status_code=204)
async def delete_habit(
    habit_id: str,
    view_model: HabitViewModel = Depends(get_habit_view_model),
) -> None:
    await view_model.delete_habit(view_model.get_habit(habit_id))
