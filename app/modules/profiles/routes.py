import asyncio
from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import (
    get_current_auth_user, get_profile_service, get_user_auth_provider
)
from app.modules.auth.provider import SupabaseAuthProvider
from app.modules.auth.schemas import AuthUser
from app.modules.profiles.display import profile_display
from app.modules.profiles.schemas import (
    PasswordChange, ProfileDisplay, ProfileResponse, ProfileUpdate,
    SettingsMessage, SettingsTab, UserStats, UserStatsUpdate
)
from app.modules.profiles.service import ProfileService
from app.modules.profiles.settings_form import SettingsForm

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _settings_result(form: SettingsForm) -> SettingsMessage:
    if form.message is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nothing to update")
    if form.message.type == "error":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=form.message.text)
    return form.message


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile, creating it on first access"""
    profile = await asyncio.to_thread(service.ensure_profile, user)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse(**profile)


@router.get("/me/display", response_model=ProfileDisplay)
async def get_my_display(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Name and badge data for the profile dropdown"""
    stats = service.fetch_user_stats(user.id)
    return profile_display(user.username, stats.subscription_tier if stats else None)


@router.put("/me", response_model=SettingsMessage)
async def update_my_profile(
    update: ProfileUpdate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service),
    provider: SupabaseAuthProvider = Depends(get_user_auth_provider)
):
    """Change the caller's username (profile row and auth metadata)"""
    form = SettingsForm(user, service, provider)
    form.username = update.username or ""
    await form.update_profile()
    return _settings_result(form)


@router.put("/me/password", response_model=SettingsMessage)
async def change_my_password(
    change: PasswordChange,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service),
    provider: SupabaseAuthProvider = Depends(get_user_auth_provider)
):
    """Change the caller's password from the security tab"""
    form = SettingsForm(user, service, provider)
    form.select_tab(SettingsTab.SECURITY)
    form.new_password = change.new_password
    form.confirm_password = change.confirm_password
    await form.update_password()
    return _settings_result(form)


@router.get("/me/stats", response_model=UserStats)
async def get_my_stats(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service)
):
    stats = service.fetch_user_stats(user.id)
    if stats is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return stats


@router.patch("/me/stats", status_code=204)
async def update_my_stats(
    update: UserStatsUpdate,
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service)
):
    if not service.update_user_stats(user.id, update):
        raise HTTPException(status_code=500, detail="Failed to update stats")
    return None


@router.post("/me/activity", status_code=204)
async def log_my_activity(
    user: AuthUser = Depends(get_current_auth_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Record today's visit (streak bookkeeping). Failures are logged, not reported."""
    service.log_daily_activity(user.id)
    return None
