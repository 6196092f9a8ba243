"""
Habits module data models.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

# Weekday indexes used by Habit.interval
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

DayLike = Union[date, datetime]


def weekday_index(day: DayLike) -> int:
    """Weekday of a date with Sunday = 0 through Saturday = 6."""
    return day.isoweekday() % 7


def same_day(first: datetime, second: DayLike) -> bool:
    """Whether a timestamp falls on the calendar day of another date or timestamp."""
    if isinstance(second, datetime):
        if first.tzinfo is not None and second.tzinfo is not None:
            first = first.astimezone(second.tzinfo)
        return first.date() == second.date()
    return first.date() == second


class Habit(BaseModel):
    """
    A recurring activity.

    A habit is due on the weekdays listed in interval and completed for a
    day when completed_dates holds a timestamp on that calendar day.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Habit ID")
    title: str = Field(..., description="Habit title")
    interval: list[int] = Field(
        default_factory=list,
        description="Active weekdays, Sunday = 0 through Saturday = 6",
    )
    description: Optional[str] = Field(None, description="Optional notes")
    start_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_dates: list[datetime] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("interval")
    @classmethod
    def check_interval(cls, value: list[int]) -> list[int]:
        """Keep weekday indexes unique, sorted and within 0-6."""
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError(f"weekday index out of range: {day}")
        return sorted(set(value))

    def is_due_on(self, day: DayLike) -> bool:
        return weekday_index(day) in self.interval

    def is_completed_on(self, day: DayLike) -> bool:
        return any(same_day(completed, day) for completed in self.completed_dates)

    def toggled_completion(self, moment: datetime) -> "Habit":
        """
        Return a copy with the completion for moment's day toggled.

        An existing entry on the same calendar day is removed; otherwise
        moment is appended.
        """
        if not self.is_completed_on(moment):
            dates = [*self.completed_dates, moment]
            return self.model_copy(update={"completed_dates": dates})

        dates = list(self.completed_dates)
        for index, completed in enumerate(dates):
            if same_day(completed, moment):
                del dates[index]
                break
        return self.model_copy(update={"completed_dates": dates})


class CreateHabitRequest(BaseModel):
    """Request to add a habit."""

    title: str
    interval: list[int] = Field(default_factory=list)
    description: Optional[str] = None
    start_date: Optional[datetime] = None


class EditHabitRequest(BaseModel):
    """Request to edit a habit; unset fields are left unchanged."""

    title: Optional[str] = None
    interval: Optional[list[int]] = None
    description: Optional[str] = None


class CompleteHabitRequest(BaseModel):
    """Request to toggle a habit's completion; defaults to now."""

    date: Optional[datetime] = None
