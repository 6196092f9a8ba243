"""
Timers module data models.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .stopwatch import StopwatchState


class TimerEntry(BaseModel):
    """
    One saved stopwatch session.

    timestamp is assigned by the database when the entry is written and is
    None on an entry that hasn't been stored yet.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Entry ID")
    start_time: datetime = Field(..., description="First start instant")
    end_time: datetime = Field(..., description="Stop instant")
    elapsed_time: float = Field(..., ge=0, description="Measured seconds")
    timestamp: Optional[datetime] = Field(None, description="Save time, set by the server")
    description: str = Field(..., description="What the time was spent on")

    model_config = {"frozen": True}


class SaveTimerRequest(BaseModel):
    """Request to save the current stopwatch session."""

    description: Optional[str] = None


class UpdateTimerRequest(BaseModel):
    """Request to edit a saved entry."""

    description: str
    elapsed_time: float = Field(..., ge=0)


class SelectTimersRequest(BaseModel):
    """Request to toggle selection; no ids toggles select-all."""

    ids: list[str] = Field(default_factory=list)


class StopwatchStatus(BaseModel):
    """Current stopwatch state."""

    state: StopwatchState
    elapsed: float
    formatted: str
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None


class TimerListResponse(BaseModel):
    """Saved entries and stopwatch state of the signed-in user."""

    timers: list[TimerEntry] = Field(default_factory=list, description="Newest first")
    recent_descriptions: list[str] = Field(default_factory=list)
    selected_ids: list[str] = Field(default_factory=list)
    all_selected: bool = False
    stopwatch: StopwatchStatus
