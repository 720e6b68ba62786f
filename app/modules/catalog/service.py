from supabase import Client
from postgrest.exceptions import APIError
from app.modules.catalog.schemas import (
    ChallengeContent, Course, CourseCreate, CourseModuleCreate, CourseModuleUpdate,
    CourseUpdate, LearningPath, LearningPathCreate, LearningPathUpdate, SavedChallenge
)
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Postgres unique_violation
DUPLICATE_KEY_CODE = "23505"

COURSE_WITH_MODULES = "*, modules:course_modules(*)"


def _to_course(row: Dict[str, Any]) -> Course:
    """Course row with its joined modules ordered by sequence_order"""
    data = dict(row)
    modules = data.get("modules") or []
    data["modules"] = sorted(modules, key=lambda m: m.get("sequence_order") or 0)
    return Course(**data)


class CatalogService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # --- courses ---

    def _list_courses(self, published_only: bool) -> List[Course]:
        try:
            query = self.supabase.table("courses").select(COURSE_WITH_MODULES)
            if published_only:
                query = query.eq("status", "published")
            result = query.order("created_at", desc=True).execute()
            return [_to_course(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching courses (published_only={published_only}): {e}")
            return []

    def fetch_courses(self) -> List[Course]:
        return self._list_courses(published_only=False)

    def fetch_published_courses(self) -> List[Course]:
        return self._list_courses(published_only=True)

    def fetch_course_by_id(self, course_id: int) -> Optional[Course]:
        try:
            result = self.supabase.table("courses")\
                .select(COURSE_WITH_MODULES)\
                .eq("id", course_id)\
                .single()\
                .execute()
            return _to_course(result.data) if result.data else None
        except Exception as e:
            logger.error(f"Error fetching course {course_id}: {e}")
            return None

    def create_course_draft(self, course: CourseCreate) -> Optional[Course]:
        try:
            insert_data = course.model_dump()
            insert_data["status"] = "draft"
            result = self.supabase.table("courses").insert(insert_data).execute()
            if not result.data:
                return None
            return _to_course(result.data[0])
        except Exception as e:
            logger.error(f"Error creating course draft: {e}")
            return None

    def create_course_modules(self, course_id: int, modules: List[CourseModuleCreate]) -> bool:
        """Bulk insert modules. A module without sequence_order takes its 1-based list position."""
        try:
            rows = []
            for idx, module in enumerate(modules):
                row = module.model_dump()
                row["course_id"] = course_id
                row["sequence_order"] = module.sequence_order or idx + 1
                rows.append(row)
            self.supabase.table("course_modules").insert(rows).execute()
            return True
        except Exception as e:
            logger.error(f"Error creating modules for course {course_id}: {e}")
            return False

    def update_course_status(self, course_id: int, status: str) -> bool:
        return self._update("courses", course_id, {"status": status})

    def update_course_details(self, course_id: int, updates: CourseUpdate) -> bool:
        return self._update("courses", course_id, updates.model_dump(exclude_none=True))

    def update_course_module(self, module_id: int, updates: CourseModuleUpdate) -> bool:
        return self._update("course_modules", module_id, updates.model_dump(exclude_none=True))

    def delete_course_module(self, module_id: int) -> bool:
        return self._delete("course_modules", module_id)

    def delete_course(self, course_id: int) -> bool:
        return self._delete("courses", course_id)

    # --- saved challenges ---

    def _list_challenges(self, published_only: bool) -> List[SavedChallenge]:
        try:
            query = self.supabase.table("saved_challenges").select("*")
            if published_only:
                query = query.eq("is_published", True)
            result = query.order("created_at", desc=True).execute()
            return [SavedChallenge(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching challenges (published_only={published_only}): {e}")
            return []

    def fetch_saved_challenges(self) -> List[SavedChallenge]:
        return self._list_challenges(published_only=False)

    def fetch_published_challenges(self) -> List[SavedChallenge]:
        return self._list_challenges(published_only=True)

    def fetch_saved_challenge_by_id(self, challenge_id: int) -> Optional[SavedChallenge]:
        try:
            result = self.supabase.table("saved_challenges")\
                .select("*")\
                .eq("id", challenge_id)\
                .single()\
                .execute()
            return SavedChallenge(**result.data) if result.data else None
        except Exception as e:
            logger.error(f"Error fetching challenge {challenge_id}: {e}")
            return None

    def save_admin_challenge(self, challenge: ChallengeContent, industry: str, difficulty: str) -> bool:
        try:
            self.supabase.table("saved_challenges").insert({
                "title": challenge.title,
                "topic": challenge.topic,
                "difficulty": difficulty,
                "industry": industry,
                "challenge_json": challenge.model_dump(),
                "is_published": True,
            }).execute()
            return True
        except Exception as e:
            logger.error(f"Error saving challenge: {e}")
            return False

    def toggle_challenge_publish(self, challenge_id: int, current_status: bool) -> bool:
        return self._update("saved_challenges", challenge_id, {"is_published": not current_status})

    def delete_saved_challenge(self, challenge_id: int) -> bool:
        return self._delete("saved_challenges", challenge_id)

    # --- challenge inventory (cache of generated challenges) ---

    def fetch_challenge_from_inventory(self, topic: str, industry: str, difficulty: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("challenges_inventory")\
                .select("challenge_json")\
                .eq("topic", topic)\
                .eq("industry", industry)\
                .eq("difficulty", difficulty)\
                .limit(1)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching challenge from inventory: {e}")
            return None
        if not result or not result.data:
            return None
        return result.data.get("challenge_json")

    def save_challenge_to_inventory(self, topic: str, industry: str, difficulty: str, challenge: ChallengeContent) -> bool:
        """Store a generated challenge once per (topic, industry, difficulty). An existing entry counts as saved."""
        if self.fetch_challenge_from_inventory(topic, industry, difficulty):
            return True
        try:
            self.supabase.table("challenges_inventory").insert({
                "topic": topic,
                "industry": industry,
                "difficulty": difficulty,
                "challenge_json": challenge.model_dump(),
            }).execute()
            return True
        except APIError as e:
            if e.code == DUPLICATE_KEY_CODE:
                return True
            logger.error(f"Error saving challenge to inventory: {e.message}")
            return False
        except Exception as e:
            logger.error(f"Error saving challenge to inventory: {e}")
            return False

    # --- helpers ---

    def _update(self, table: str, row_id: int, update_data: Dict[str, Any]) -> bool:
        if not update_data:
            return True
        try:
            self.supabase.table(table)\
                .update(update_data)\
                .eq("id", row_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating {table} {row_id}: {e}")
            return False

    def _delete(self, table: str, row_id: int) -> bool:
        try:
            self.supabase.table(table)\
                .delete()\
                .eq("id", row_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting {table} {row_id}: {e}")
            return False


PATH_WITH_COURSES = "*, courses:learning_path_courses(sequence_order, course:courses(*))"
PUBLISHED_PATH_WITH_COURSES = "*, courses:learning_path_courses(sequence_order, course:courses(*, modules:course_modules(id)))"


def _to_path(row: Dict[str, Any]) -> LearningPath:
    """Flatten learning_path_courses links into an ordered course list, skipping dangling links"""
    data = dict(row)
    links = sorted(data.get("courses") or [], key=lambda link: link.get("sequence_order") or 0)
    data["courses"] = [_to_course(link["course"]) for link in links if link.get("course")]
    return LearningPath(**data)


class LearningPathService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def fetch_learning_paths(self) -> List[LearningPath]:
        try:
            result = self.supabase.table("learning_paths")\
                .select(PATH_WITH_COURSES)\
                .order("created_at", desc=True)\
                .execute()
            return [_to_path(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching learning paths: {e}")
            return []

    def fetch_published_learning_paths(self) -> List[LearningPath]:
        try:
            result = self.supabase.table("learning_paths")\
                .select(PUBLISHED_PATH_WITH_COURSES)\
                .eq("is_published", True)\
                .order("created_at", desc=True)\
                .execute()
            return [_to_path(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching published learning paths: {e}")
            return []

    def create_learning_path(self, path: LearningPathCreate) -> Optional[LearningPath]:
        try:
            result = self.supabase.table("learning_paths").insert(path.model_dump()).execute()
            if not result.data:
                return None
            return _to_path(result.data[0])
        except Exception as e:
            logger.error(f"Error creating learning path: {e}")
            return None

    def update_learning_path(self, path_id: int, updates: LearningPathUpdate) -> bool:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            return True
        try:
            self.supabase.table("learning_paths")\
                .update(update_data)\
                .eq("id", path_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating learning path: {e}")
            return False

    def delete_learning_path(self, path_id: int) -> bool:
        try:
            self.supabase.table("learning_paths")\
                .delete()\
                .eq("id", path_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting learning path: {e}")
            return False

    def add_course_to_path(self, path_id: int, course_id: int, sequence_order: int) -> bool:
        try:
            self.supabase.table("learning_path_courses").insert({
                "path_id": path_id,
                "course_id": course_id,
                "sequence_order": sequence_order,
            }).execute()
            return True
        except Exception as e:
            logger.error(f"Error adding course to path: {e}")
            return False

    def remove_course_from_path(self, path_id: int, course_id: int) -> bool:
        try:
            self.supabase.table("learning_path_courses")\
                .delete()\
                .eq("path_id", path_id)\
                .eq("course_id", course_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error removing course from path: {e}")
            return False
