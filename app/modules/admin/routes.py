"""
Admin dashboard endpoints. Every route requires is_admin on the caller's profile.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import (
    get_billing_service, get_catalog_service, get_learning_path_service,
    get_profile_service, require_admin
)
from app.modules.billing.schemas import PlanPermission, PlanPermissionUpdate, PlanSettings
from app.modules.billing.service import BillingService
from app.modules.catalog.schemas import (
    Course, CourseCreate, CourseModuleCreate, CourseModuleUpdate, CourseStatusUpdate,
    CourseUpdate, LearningPath, LearningPathCreate, LearningPathUpdate, PathCourseAdd,
    SavedChallenge, SavedChallengeCreate
)
from app.modules.catalog.service import CatalogService, LearningPathService
from app.modules.profiles.schemas import LearnerPlanUpdate, ProfileResponse
from app.modules.profiles.service import ProfileService
from typing import List

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _ok(success: bool, detail: str) -> None:
    if not success:
        raise HTTPException(status_code=500, detail=detail)


# --- learners ---

@router.get("/learners", response_model=List[ProfileResponse])
async def list_learners(service: ProfileService = Depends(get_profile_service)):
    """All profiles, most recently active first"""
    return [ProfileResponse(**row) for row in service.fetch_all_learners()]


@router.patch("/learners/{user_id}/plan", status_code=status.HTTP_204_NO_CONTENT)
async def change_learner_plan(
    user_id: str,
    update: LearnerPlanUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    _ok(service.update_learner_plan(user_id, update.plan), "Failed to update plan")
    return None


# --- saved challenges ---

@router.get("/challenges", response_model=List[SavedChallenge])
async def list_challenges(service: CatalogService = Depends(get_catalog_service)):
    return service.fetch_saved_challenges()


@router.post("/challenges", status_code=status.HTTP_201_CREATED)
async def create_challenge(
    challenge_data: SavedChallengeCreate,
    service: CatalogService = Depends(get_catalog_service)
):
    _ok(
        service.save_admin_challenge(challenge_data.challenge, challenge_data.industry, challenge_data.difficulty),
        "Failed to save challenge"
    )
    return {"message": "Challenge saved"}


@router.post("/challenges/{challenge_id}/toggle-publish", response_model=SavedChallenge)
async def toggle_challenge_publish(
    challenge_id: int,
    service: CatalogService = Depends(get_catalog_service)
):
    """Flip is_published and return the updated challenge"""
    challenge = service.fetch_saved_challenge_by_id(challenge_id)
    if not challenge:
        raise HTTPException(status_code=404, detail="Challenge not found")
    _ok(service.toggle_challenge_publish(challenge_id, challenge.is_published), "Failed to update challenge")
    challenge.is_published = not challenge.is_published
    return challenge


@router.delete("/challenges/{challenge_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_challenge(challenge_id: int, service: CatalogService = Depends(get_catalog_service)):
    _ok(service.delete_saved_challenge(challenge_id), "Failed to delete challenge")
    return None


# --- courses ---

@router.get("/courses", response_model=List[Course])
async def list_courses(service: CatalogService = Depends(get_catalog_service)):
    """All courses regardless of status"""
    return service.fetch_courses()


@router.post("/courses", response_model=Course, status_code=status.HTTP_201_CREATED)
async def create_course(course_data: CourseCreate, service: CatalogService = Depends(get_catalog_service)):
    course = service.create_course_draft(course_data)
    if not course:
        raise HTTPException(status_code=500, detail="Failed to create course")
    return course


@router.post("/courses/{course_id}/modules", status_code=status.HTTP_201_CREATED)
async def create_modules(
    course_id: int,
    modules: List[CourseModuleCreate],
    service: CatalogService = Depends(get_catalog_service)
):
    _ok(service.create_course_modules(course_id, modules), "Failed to create modules")
    return {"message": f"Created {len(modules)} modules"}


@router.patch("/courses/{course_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def update_course_status(
    course_id: int,
    update: CourseStatusUpdate,
    service: CatalogService = Depends(get_catalog_service)
):
    _ok(service.update_course_status(course_id, update.status), "Failed to update course status")
    return None


@router.patch("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_course(
    course_id: int,
    update: CourseUpdate,
    service: CatalogService = Depends(get_catalog_service)
):
    _ok(service.update_course_details(course_id, update), "Failed to update course")
    return None


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(course_id: int, service: CatalogService = Depends(get_catalog_service)):
    _ok(service.delete_course(course_id), "Failed to delete course")
    return None


@router.patch("/modules/{module_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_module(
    module_id: int,
    update: CourseModuleUpdate,
    service: CatalogService = Depends(get_catalog_service)
):
    _ok(service.update_course_module(module_id, update), "Failed to update module")
    return None


@router.delete("/modules/{module_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_module(module_id: int, service: CatalogService = Depends(get_catalog_service)):
    _ok(service.delete_course_module(module_id), "Failed to delete module")
    return None


# --- learning paths ---

@router.get("/paths", response_model=List[LearningPath])
async def list_paths(service: LearningPathService = Depends(get_learning_path_service)):
    return service.fetch_learning_paths()


@router.post("/paths", response_model=LearningPath, status_code=status.HTTP_201_CREATED)
async def create_path(path_data: LearningPathCreate, service: LearningPathService = Depends(get_learning_path_service)):
    path = service.create_learning_path(path_data)
    if not path:
        raise HTTPException(status_code=500, detail="Failed to create learning path")
    return path


@router.patch("/paths/{path_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_path(
    path_id: int,
    update: LearningPathUpdate,
    service: LearningPathService = Depends(get_learning_path_service)
):
    _ok(service.update_learning_path(path_id, update), "Failed to update learning path")
    return None


@router.delete("/paths/{path_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_path(path_id: int, service: LearningPathService = Depends(get_learning_path_service)):
    _ok(service.delete_learning_path(path_id), "Failed to delete learning path")
    return None


@router.post("/paths/{path_id}/courses", status_code=status.HTTP_204_NO_CONTENT)
async def add_path_course(
    path_id: int,
    link: PathCourseAdd,
    service: LearningPathService = Depends(get_learning_path_service)
):
    _ok(service.add_course_to_path(path_id, link.course_id, link.sequence_order), "Failed to add course to path")
    return None


@router.delete("/paths/{path_id}/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_path_course(
    path_id: int,
    course_id: int,
    service: LearningPathService = Depends(get_learning_path_service)
):
    _ok(service.remove_course_from_path(path_id, course_id), "Failed to remove course from path")
    return None


# --- plans ---

@router.put("/plans", status_code=status.HTTP_204_NO_CONTENT)
async def save_plans(plan_settings: PlanSettings, service: BillingService = Depends(get_billing_service)):
    _ok(service.save_plan_settings(plan_settings), "Failed to save plan settings")
    return None


@router.get("/permissions", response_model=List[PlanPermission])
async def list_permissions(service: BillingService = Depends(get_billing_service)):
    return service.fetch_all_plan_permissions()


@router.patch("/permissions/{tier}", status_code=status.HTTP_204_NO_CONTENT)
async def update_permission(
    tier: str,
    update: PlanPermissionUpdate,
    service: BillingService = Depends(get_billing_service)
):
    _ok(service.update_plan_permission(tier, update), "Failed to update permissions")
    return None
