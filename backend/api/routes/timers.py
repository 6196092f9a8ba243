"""
Timer API endpoints.

The stopwatch runs inside the caller's session, so start and pause can
come in separate requests.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.timers.models import (
    SaveTimerRequest,
    SelectTimersRequest,
    StopwatchStatus,
    TimerEntry,
    TimerListResponse,
    UpdateTimerRequest,
)
from modules.timers.viewmodel import TimerViewModel

from ..dependencies import get_timer_view_model
from ..models.errors import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


def _snapshot(view_model: TimerViewModel) -> TimerListResponse:
    return TimerListResponse(
        timers=view_model.filtered_timers(),
        recent_descriptions=view_model.recent_descriptions,
        selected_ids=sorted(view_model.selected_ids),
        all_selected=view_model.are_all_selected,
        stopwatch=view_model.status(),
    )


@router.get("", response_model=TimerListResponse)
async def list_timers(
    filter_text: Optional[str] = Query(
        default=None, alias="filter", description="Case-insensitive description filter"
    ),
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerListResponse:
    """Saved sessions (newest first) and the stopwatch state."""
    if filter_text is not None:
        view_model.filter_text = filter_text
    return _snapshot(view_model)


@router.post("/refresh", response_model=TimerListResponse)
async def refresh_timers(
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerListResponse:
    await view_model.refresh()
    return _snapshot(view_model)


# -----------------------------------------------------------------------------
# Stopwatch
# -----------------------------------------------------------------------------


@router.get("/stopwatch", response_model=StopwatchStatus)
async def get_stopwatch(
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> StopwatchStatus:
    return view_model.status()


@router.post("/stopwatch/start", response_model=StopwatchStatus)
async def start_stopwatch(
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> StopwatchStatus:
    view_model.start()
    return view_model.status()


@router.post("/stopwatch/pause", response_model=StopwatchStatus)
async def pause_stopwatch(
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> StopwatchStatus:
    view_model.pause()
    return view_model.status()


@router.post("/stopwatch/reset", response_model=StopwatchStatus)
async def reset_stopwatch(
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> StopwatchStatus:
    view_model.reset()
    return view_model.status()


@router.post("/stopwatch/save", response_model=TimerEntry, status_code=201)
async def save_stopwatch(
    request: SaveTimerRequest,
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerEntry:
    """Pause the stopwatch and store the session."""
    return await view_model.save(request.description)


# -----------------------------------------------------------------------------
# Selection
# -----------------------------------------------------------------------------


@router.post("/selection", response_model=TimerListResponse)
async def toggle_selection(
    request: SelectTimersRequest,
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerListResponse:
    """Toggle the listed entries, or toggle select-all when no ids are given."""
    if not request.ids:
        view_model.toggle_select_all()
    for timer_id in request.ids:
        view_model.toggle_select(timer_id)
    return _snapshot(view_model)


@router.delete("/selection", response_model=TimerListResponse)
async def delete_selection(
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerListResponse:
    await view_model.delete_selected()
    return _snapshot(view_model)


# -----------------------------------------------------------------------------
# Saved sessions
# -----------------------------------------------------------------------------


@router.get("/{timer_id}", response_model=TimerEntry)
async def get_timer(
    timer_id: str,
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerEntry:
    return view_model.get_timer(timer_id)


@router.put("/{timer_id}", response_model=TimerEntry)
async def update_timer(
    timer_id: str,
    request: UpdateTimerRequest,
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> TimerEntry:
    """Edit description and duration; the end time follows the duration."""
    return await view_model.update_timer(timer_id, request.description, request.elapsed_time)


@router.delete("/{timer_id}", status_code=204)
async def delete_timer(
    timer_id: str,
    view_model: TimerViewModel = Depends(get_timer_view_model),
) -> None:
    await view_model.delete_timer(timer_id)
