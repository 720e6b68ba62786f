from supabase import Client
from app.modules.progress.schemas import (
    Attempt, AttemptCreate, Certificate, Enrollment, EnrollmentStatus,
    LeaderboardEntry, PathStatus
)
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _epoch_ms(value: Optional[str]) -> int:
    if not value:
        return 0
    return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp() * 1000)


def _avatar(username: Optional[str]) -> str:
    return (username or "")[:2].upper()


class ProgressService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # --- challenge attempts ---

    def log_challenge_attempt(self, user_id: str, attempt: AttemptCreate) -> bool:
        try:
            self.supabase.table("challenge_attempts").insert({
                "user_id": user_id,
                "question_id": attempt.question_id,
                "query": attempt.query,
                "is_correct": attempt.is_correct,
                "points_earned": attempt.points_earned,
                "industry": attempt.industry,
                "difficulty": attempt.difficulty.value,
                "created_at": _now(),
            }).execute()
            return True
        except Exception as e:
            logger.error(f"Error logging attempt: {e}")
            return False

    def fetch_challenge_attempts(self, user_id: str, industry: str, difficulty: str) -> List[Attempt]:
        """Attempts for one challenge track, oldest first"""
        try:
            result = self.supabase.table("challenge_attempts")\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("industry", industry)\
                .eq("difficulty", difficulty)\
                .order("created_at")\
                .execute()
            return [
                Attempt(
                    question_id=row["question_id"],
                    query=row.get("query") or "",
                    is_correct=bool(row.get("is_correct")),
                    points_earned=row.get("points_earned") or 0,
                    timestamp=_epoch_ms(row.get("created_at")),
                )
                for row in result.data or []
            ]
        except Exception as e:
            logger.error(f"Error fetching attempts: {e}")
            return []

    def fetch_all_user_attempts(self, user_id: str) -> List[Dict[str, Any]]:
        """Raw rows of every correct attempt across tracks"""
        try:
            result = self.supabase.table("challenge_attempts")\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("is_correct", True)\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching all attempts: {e}")
            return []

    # --- module progress ---

    def log_module_completion(self, user_id: str, course_id: int, module_id: int, xp: int) -> bool:
        try:
            self.supabase.table("user_module_progress").upsert({
                "user_id": user_id,
                "course_id": course_id,
                "module_id": module_id,
                "status": "completed",
                "xp_earned": xp,
                "completed_at": _now(),
            }, on_conflict="user_id,module_id").execute()
            return True
        except Exception as e:
            logger.error(f"Error logging module completion: {e}")
            return False

    def log_module_start(self, user_id: str, course_id: int, module_id: int) -> bool:
        """Mark a module started. An existing row (started or completed) is left untouched."""
        try:
            self.supabase.table("user_module_progress").upsert({
                "user_id": user_id,
                "course_id": course_id,
                "module_id": module_id,
                "status": "started",
                "updated_at": _now(),
            }, on_conflict="user_id,module_id", ignore_duplicates=True).execute()
            return True
        except Exception as e:
            logger.error(f"Error logging module start: {e}")
            return False

    def fetch_user_module_progress(self, user_id: str, course_id: Optional[int] = None) -> List[Dict[str, Any]]:
        try:
            query = self.supabase.table("user_module_progress").select("*").eq("user_id", user_id)
            if course_id:
                query = query.eq("course_id", course_id)
            result = query.execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching module progress: {e}")
            return []

    def log_xp_event(self, user_id: str, xp: int, challenge_id: int) -> bool:
        """Record an XP event and add it to the profile total"""
        try:
            self.supabase.table("xp_events").insert({
                "user_id": user_id,
                "source": "challenge",
                "source_id": challenge_id,
                "xp": xp,
            }).execute()
            self.supabase.rpc("add_xp", {"user_id": user_id, "xp": xp}).execute()
            return True
        except Exception as e:
            logger.error(f"Error logging XP event: {e}")
            return False

    # --- course enrollments ---

    def enroll_in_course(self, user_id: str, course_id: int) -> bool:
        """Enroll, or just bump last_accessed when already enrolled"""
        try:
            existing = self.supabase.table("course_enrollments")\
                .select("id, status")\
                .eq("user_id", user_id)\
                .eq("course_id", course_id)\
                .maybe_single()\
                .execute()
            now = _now()
            if existing and existing.data:
                self.supabase.table("course_enrollments")\
                    .update({"last_accessed": now})\
                    .eq("id", existing.data["id"])\
                    .execute()
            else:
                self.supabase.table("course_enrollments").insert({
                    "user_id": user_id,
                    "course_id": course_id,
                    "status": EnrollmentStatus.ENROLLED.value,
                    "enrolled_at": now,
                    "last_accessed": now,
                }).execute()
            return True
        except Exception as e:
            logger.error(f"Error enrolling in course {course_id}: {e}")
            return False

    def fetch_user_enrollments(self, user_id: str) -> List[Enrollment]:
        try:
            result = self.supabase.table("course_enrollments")\
                .select("*, course:courses(*)")\
                .eq("user_id", user_id)\
                .order("last_accessed", desc=True)\
                .execute()
            return [Enrollment(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching enrollments: {e}")
            return []

    def update_enrollment_status(self, user_id: str, course_id: int, status: Optional[EnrollmentStatus] = None) -> bool:
        now = _now()
        updates: Dict[str, Any] = {"last_accessed": now}
        if status:
            updates["status"] = status.value
            if status == EnrollmentStatus.COMPLETED:
                updates["completed_at"] = now
        try:
            self.supabase.table("course_enrollments")\
                .update(updates)\
                .eq("user_id", user_id)\
                .eq("course_id", course_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating enrollment status: {e}")
            return False

    def fetch_completed_course_count(self, user_id: str) -> int:
        try:
            result = self.supabase.table("course_enrollments")\
                .select("id", count="exact")\
                .eq("user_id", user_id)\
                .eq("status", EnrollmentStatus.COMPLETED.value)\
                .execute()
            return result.count or 0
        except Exception as e:
            logger.error(f"Error fetching completed course count: {e}")
            return 0

    # --- learning path enrollments ---

    def fetch_user_path_enrollments(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("learning_path_enrollments")\
                .select("*")\
                .eq("user_id", user_id)\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching path enrollments: {e}")
            return []

    def enroll_in_learning_path(self, user_id: str, path_id: int) -> bool:
        try:
            existing = self.supabase.table("learning_path_enrollments")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("path_id", path_id)\
                .maybe_single()\
                .execute()
            if not existing or not existing.data:
                self.supabase.table("learning_path_enrollments").insert({
                    "user_id": user_id,
                    "path_id": path_id,
                    "status": PathStatus.IN_PROGRESS.value,
                }).execute()
            return True
        except Exception as e:
            logger.error(f"Error enrolling in path {path_id}: {e}")
            return False

    def update_path_enrollment_status(self, user_id: str, path_id: int, status: PathStatus) -> bool:
        updates: Dict[str, Any] = {"status": status.value}
        if status == PathStatus.COMPLETED:
            updates["completed_at"] = _now()
        try:
            self.supabase.table("learning_path_enrollments")\
                .update(updates)\
                .eq("user_id", user_id)\
                .eq("path_id", path_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating path status: {e}")
            return False

    # --- certificates & leaderboard ---

    def fetch_user_certificates(self, user_id: str) -> List[Certificate]:
        try:
            result = self.supabase.table("user_certificates")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("issued_at", desc=True)\
                .execute()
            return [Certificate(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching certificates: {e}")
            return []

    def fetch_leaderboard(self) -> List[LeaderboardEntry]:
        """Top learners from the leaderboard view, or ranked straight from profiles when the view is unavailable"""
        try:
            result = self.supabase.table("leaderboard")\
                .select("*")\
                .order("global_rank")\
                .limit(LEADERBOARD_SIZE)\
                .execute()
            return [
                LeaderboardEntry(
                    rank=row["global_rank"],
                    name=row["username"],
                    xp=row.get("total_xp") or 0,
                    avatar=_avatar(row["username"]),
                )
                for row in result.data or []
            ]
        except Exception as e:
            logger.warning(f"Leaderboard view unavailable, ranking from profiles: {e}")

        try:
            result = self.supabase.table("profiles")\
                .select("username, total_xp")\
                .order("total_xp", desc=True)\
                .limit(LEADERBOARD_SIZE)\
                .execute()
            return [
                LeaderboardEntry(
                    rank=idx + 1,
                    name=row.get("username") or "",
                    xp=row.get("total_xp") or 0,
                    avatar=_avatar(row.get("username")),
                )
                for idx, row in enumerate(result.data or [])
            ]
        except Exception as e:
            logger.error(f"Error fetching leaderboard: {e}")
            return []
