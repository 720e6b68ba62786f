from typing import Optional
from app.config.curriculum_config import CURRICULA
from app.config.plans_config import UNLIMITED_LESSONS
from app.modules.billing.schemas import PlanPermission
from app.modules.catalog.schemas import Course, CourseOverview, TrackOverview, TrackSkill

POINTS_PER_LESSON = 100
SKILLS_SHOWN = 8


def lesson_limit(permission: Optional[PlanPermission]) -> Optional[int]:
    """Lessons a plan may open per course. None means unlimited."""
    if permission is None:
        return 0
    if permission.course_lesson_limit == UNLIMITED_LESSONS:
        return None
    return permission.course_lesson_limit


def is_lesson_locked(index: int, permission: Optional[PlanPermission]) -> bool:
    """A lesson is locked when its 0-based index reaches the plan limit. No permission row locks everything."""
    if permission is None:
        return True
    if permission.course_lesson_limit == UNLIMITED_LESSONS:
        return False
    return index >= permission.course_lesson_limit


def course_overview(course: Course, permission: Optional[PlanPermission] = None) -> CourseOverview:
    modules = course.modules
    return CourseOverview(
        course_id=course.id,
        title=course.title,
        lesson_count=len(modules),
        total_points=len(modules) * POINTS_PER_LESSON,
        skills=modules[:SKILLS_SHOWN],
        more_modules=max(len(modules) - SKILLS_SHOWN, 0),
        lesson_limit=lesson_limit(permission),
    )


def track_overview(difficulty: str) -> Optional[TrackOverview]:
    """Overview of a challenge track. Returns None for an unknown difficulty."""
    key = difficulty.lower()
    curriculum = CURRICULA.get(key)
    if curriculum is None:
        return None
    return TrackOverview(
        difficulty=key,
        challenge_count=len(curriculum),
        total_points=len(curriculum) * POINTS_PER_LESSON,
        skills=[TrackSkill(**item) for item in curriculum[:SKILLS_SHOWN]],
        more_modules=max(len(curriculum) - SKILLS_SHOWN, 0),
    )
