"""
Workouts router.

This router contains endpoints for:
- GET /workouts/plan - The built-in workout plan
- GET /workouts/sessions/resumable - Today's latest unfinished session
- POST /workouts/sessions/start - Start (or resume) a live session
- POST /workouts/sessions/pause|resume|end - Session transitions
- GET /workouts/sessions/current - Live session state
- GET /workouts/history - Recently completed workouts
- GET /workouts/progress/recent - Recent progress snapshots for charts
- GET /workouts/completed-today - Last workout completed today

Session endpoints are async: a live session's tick and autosave loops
run as tasks on the server's event loop.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from api.deps import (
    get_current_user,
    get_progress_repo,
    get_session_manager,
    get_user_context,
    get_workout_repo,
)
from api.schemas.workouts import EndSessionResponse, SessionStateResponse, StartSessionRequest
from application.exceptions import WorkoutSessionNotFoundError
from application.ports import ProgressRepository, WorkoutRepository
from application.user_context import UserContext
from backend.services.workout_sessions import WorkoutSessionManager
from domain.models.plan import DEFAULT_WORKOUT_PLAN
from domain.models.snapshot import WorkoutProgressSnapshot
from domain.models.stats import CompletedWorkoutRecord

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/workouts",
    tags=["Workouts"],
)


# =============================================================================
# Plan
# =============================================================================


@router.get("/plan")
def get_plan():
    """Return the built-in full body plan with its XP reward."""
    plan = DEFAULT_WORKOUT_PLAN
    return {**plan.model_dump(), "xp_reward": plan.xp_reward}


# =============================================================================
# Live Sessions
# =============================================================================


@router.get("/sessions/resumable", response_model=Optional[WorkoutProgressSnapshot])
async def get_resumable_session(
    user_id: str = Depends(get_current_user),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
):
    """
    Get today's latest unfinished snapshot, if any.

    Returns null when there is nothing to resume (or the stored state
    could not be read).
    """
    return await run_in_threadpool(session_manager.find_resumable, user_id)


@router.post("/sessions/start", response_model=SessionStateResponse)
async def start_session(
    request: StartSessionRequest,
    context: UserContext = Depends(get_user_context),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
):
    """
    Start a workout session, replacing any session the user already has.

    With resume=true the session is restored from today's latest unfinished
    snapshot and waits in the paused state until /sessions/resume.
    """
    plan = request.plan or DEFAULT_WORKOUT_PLAN
    snapshot = None
    if request.resume:
        snapshot = await run_in_threadpool(session_manager.find_resumable, context.user_id)
        if snapshot is None:
            raise HTTPException(status_code=404, detail="No workout to resume today")

    tracker = session_manager.start(context, plan, resume_from=snapshot)
    return SessionStateResponse.from_tracker(tracker)


@router.post("/sessions/pause", response_model=SessionStateResponse)
async def pause_session(
    user_id: str = Depends(get_current_user),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
):
    """Pause the running session. A progress snapshot is queued."""
    return SessionStateResponse.from_tracker(session_manager.pause(user_id))


@router.post("/sessions/resume", response_model=SessionStateResponse)
async def resume_session(
    user_id: str = Depends(get_current_user),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
):
    """Resume a paused (or restored) session."""
    return SessionStateResponse.from_tracker(session_manager.resume(user_id))


@router.post("/sessions/end", response_model=EndSessionResponse)
async def end_session(
    user_id: str = Depends(get_current_user),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
):
    """
    End the session early. No XP is awarded; sessions longer than a
    minute keep a partial snapshot.
    """
    saved = session_manager.end(user_id)
    return EndSessionResponse(success=True, saved=saved)


@router.get("/sessions/current", response_model=SessionStateResponse)
async def get_current_session(
    user_id: str = Depends(get_current_user),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
):
    """Get the live state of the user's session."""
    tracker = session_manager.get(user_id)
    if tracker is None:
        raise WorkoutSessionNotFoundError(user_id)
    return SessionStateResponse.from_tracker(tracker)


# =============================================================================
# History
# =============================================================================


@router.get("/history", response_model=List[CompletedWorkoutRecord])
def get_workout_history(
    user_id: str = Depends(get_current_user),
    limit: int = Query(5, ge=1, le=50, description="Maximum workouts to return"),
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
):
    """Get recently completed workouts, newest first."""
    return workout_repo.get_recent(user_id, limit=limit)


@router.get("/progress/recent", response_model=List[WorkoutProgressSnapshot])
def get_recent_progress(
    user_id: str = Depends(get_current_user),
    limit: int = Query(5, ge=1, le=50, description="Maximum snapshots to return"),
    progress_repo: ProgressRepository = Depends(get_progress_repo),
):
    """Get the most recent progress snapshots for charts."""
    return progress_repo.get_recent(user_id, limit=limit)


@router.get("/completed-today", response_model=Optional[CompletedWorkoutRecord])
def get_completed_today(
    user_id: str = Depends(get_current_user),
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
):
    """Get the last workout the user completed today (UTC), or null."""
    today = datetime.now(timezone.utc).date()
    return workout_repo.get_last_completed_on(user_id, today)
