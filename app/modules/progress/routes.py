from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import get_current_auth_user, get_progress_service
from app.modules.auth.schemas import AuthUser
from app.modules.progress.schemas import (
    Attempt, AttemptCreate, Certificate, Difficulty, Enrollment, EnrollmentCreate,
    EnrollmentStatusUpdate, LeaderboardEntry, ModuleProgressEvent,
    PathEnrollmentCreate, PathStatusUpdate, XpEvent
)
from app.modules.progress.service import ProgressService
from typing import Any, Dict, List, Optional

router = APIRouter(prefix="/progress", tags=["progress"])


def _ok(success: bool, detail: str) -> None:
    if not success:
        raise HTTPException(status_code=500, detail=detail)


@router.get("/attempts", response_model=List[Attempt])
async def list_attempts(
    industry: str,
    difficulty: Difficulty,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Attempts on one challenge track, oldest first"""
    return service.fetch_challenge_attempts(user.id, industry, difficulty.value)


@router.get("/attempts/correct", response_model=List[Dict[str, Any]])
async def list_correct_attempts(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    return service.fetch_all_user_attempts(user.id)


@router.post("/attempts", status_code=status.HTTP_204_NO_CONTENT)
async def log_attempt(
    attempt: AttemptCreate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.log_challenge_attempt(user.id, attempt), "Failed to log attempt")
    return None


@router.get("/modules", response_model=List[Dict[str, Any]])
async def list_module_progress(
    course_id: Optional[int] = None,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    return service.fetch_user_module_progress(user.id, course_id)


@router.post("/modules/{module_id}/start", status_code=status.HTTP_204_NO_CONTENT)
async def start_module(
    module_id: int,
    event: ModuleProgressEvent,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.log_module_start(user.id, event.course_id, module_id), "Failed to log module start")
    return None


@router.post("/modules/{module_id}/complete", status_code=status.HTTP_204_NO_CONTENT)
async def complete_module(
    module_id: int,
    event: ModuleProgressEvent,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.log_module_completion(user.id, event.course_id, module_id, event.xp), "Failed to log module completion")
    return None


@router.post("/xp", status_code=status.HTTP_204_NO_CONTENT)
async def add_xp(
    event: XpEvent,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.log_xp_event(user.id, event.xp, event.challenge_id), "Failed to log XP event")
    return None


@router.get("/enrollments", response_model=List[Enrollment])
async def list_enrollments(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Course enrollments, most recently accessed first"""
    return service.fetch_user_enrollments(user.id)


@router.post("/enrollments", status_code=status.HTTP_204_NO_CONTENT)
async def enroll(
    enrollment: EnrollmentCreate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.enroll_in_course(user.id, enrollment.course_id), "Failed to enroll")
    return None


@router.patch("/enrollments/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_enrollment(
    course_id: int,
    update: EnrollmentStatusUpdate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.update_enrollment_status(user.id, course_id, update.status), "Failed to update enrollment")
    return None


@router.get("/paths", response_model=List[Dict[str, Any]])
async def list_path_enrollments(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    return service.fetch_user_path_enrollments(user.id)


@router.post("/paths", status_code=status.HTTP_204_NO_CONTENT)
async def enroll_in_path(
    enrollment: PathEnrollmentCreate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.enroll_in_learning_path(user.id, enrollment.path_id), "Failed to enroll in path")
    return None


@router.patch("/paths/{path_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_path_enrollment(
    path_id: int,
    update: PathStatusUpdate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    _ok(service.update_path_enrollment_status(user.id, path_id, update.status), "Failed to update path status")
    return None


@router.get("/certificates", response_model=List[Certificate])
async def list_certificates(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    return service.fetch_user_certificates(user.id)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Top 10 learners by XP. Entries with the caller's username are flagged."""
    entries = service.fetch_leaderboard()
    for entry in entries:
        entry.is_user = entry.name == user.username
    return entries
