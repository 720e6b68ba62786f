from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_achievement_service, get_current_auth_user, get_profile_service
from app.modules.achievements.schemas import AchievementCheckResponse, UserAchievement
from app.modules.achievements.service import AchievementService
from app.modules.auth.schemas import AuthUser
from app.modules.profiles.service import ProfileService
from typing import List

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=List[UserAchievement])
async def list_my_achievements(
    user: AuthUser = Depends(get_current_auth_user),
    service: AchievementService = Depends(get_achievement_service)
):
    return service.fetch_user_achievements(user.id)


@router.post("/check", response_model=AchievementCheckResponse)
async def check_my_achievements(
    user: AuthUser = Depends(get_current_auth_user),
    service: AchievementService = Depends(get_achievement_service),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Unlock whatever the caller's current stats have reached and return the new unlocks"""
    stats = profiles.fetch_user_stats(user.id)
    if stats is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return AchievementCheckResponse(unlocked=service.check_achievements(stats, user.id))
