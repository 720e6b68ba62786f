from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import (
    get_billing_service, get_catalog_service, get_current_auth_user,
    get_learning_path_service, get_profile_service
)
from app.modules.auth.schemas import AuthUser
from app.modules.billing.schemas import Tier
from app.modules.billing.service import BillingService
from app.modules.catalog.menu import CatalogMenu
from app.modules.catalog.overview import course_overview, track_overview
from app.modules.catalog.schemas import (
    CatalogMenuResponse, Course, CourseOverview, InventoryEntry, LearningPath,
    SavedChallenge, TrackOverview
)
from app.modules.catalog.service import CatalogService, LearningPathService
from app.modules.profiles.service import ProfileService
from typing import Any, Dict, List

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/menu", response_model=CatalogMenuResponse)
async def get_menu(service: CatalogService = Depends(get_catalog_service)):
    """Featured and further published courses plus published challenges for the navigation menu"""
    menu = CatalogMenu(service)
    await menu.load()
    return menu.to_response()


@router.get("/courses", response_model=List[Course])
async def list_published_courses(service: CatalogService = Depends(get_catalog_service)):
    return service.fetch_published_courses()


@router.get("/courses/{course_id}", response_model=Course)
async def get_course(course_id: int, service: CatalogService = Depends(get_catalog_service)):
    course = service.fetch_course_by_id(course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.get("/courses/{course_id}/overview", response_model=CourseOverview)
async def get_course_overview(
    course_id: int,
    user: AuthUser = Depends(get_current_auth_user),
    service: CatalogService = Depends(get_catalog_service),
    profiles: ProfileService = Depends(get_profile_service),
    billing: BillingService = Depends(get_billing_service)
):
    """Course landing data, with the lesson limit of the caller's plan"""
    course = service.fetch_course_by_id(course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    stats = profiles.fetch_user_stats(user.id)
    tier = stats.subscription_tier if stats else Tier.FREE
    return course_overview(course, billing.fetch_plan_permissions(tier.value))


@router.get("/challenges", response_model=List[SavedChallenge])
async def list_published_challenges(service: CatalogService = Depends(get_catalog_service)):
    return service.fetch_published_challenges()


@router.get("/challenges/{challenge_id}", response_model=SavedChallenge)
async def get_challenge(challenge_id: int, service: CatalogService = Depends(get_catalog_service)):
    challenge = service.fetch_saved_challenge_by_id(challenge_id)
    if not challenge:
        raise HTTPException(status_code=404, detail="Challenge not found")
    return challenge


@router.get("/paths", response_model=List[LearningPath])
async def list_published_paths(service: LearningPathService = Depends(get_learning_path_service)):
    return service.fetch_published_learning_paths()


@router.get("/tracks/{difficulty}/overview", response_model=TrackOverview)
async def get_track_overview(difficulty: str):
    overview = track_overview(difficulty)
    if overview is None:
        raise HTTPException(status_code=404, detail=f"Unknown difficulty: {difficulty}")
    return overview


@router.get("/inventory", response_model=Dict[str, Any])
async def get_inventory_challenge(
    topic: str,
    industry: str,
    difficulty: str,
    user: AuthUser = Depends(get_current_auth_user),
    service: CatalogService = Depends(get_catalog_service)
):
    """Cached generated challenge for (topic, industry, difficulty)"""
    challenge = service.fetch_challenge_from_inventory(topic, industry, difficulty)
    if challenge is None:
        raise HTTPException(status_code=404, detail="No cached challenge")
    return challenge


@router.post("/inventory", status_code=status.HTTP_204_NO_CONTENT)
async def save_inventory_challenge(
    entry: InventoryEntry,
    user: AuthUser = Depends(get_current_auth_user),
    service: CatalogService = Depends(get_catalog_service)
):
    if not service.save_challenge_to_inventory(entry.topic, entry.industry, entry.difficulty, entry.challenge):
        raise HTTPException(status_code=500, detail="Failed to save challenge")
    return None
