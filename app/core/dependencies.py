"""
Core dependencies for route protection and per-request collaborators
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.auth.provider import SupabaseAuthProvider
from app.modules.auth.schemas import AuthUser
from app.modules.achievements.service import AchievementService
from app.modules.auth.service import AuthService
from app.modules.billing.service import BillingService
from app.modules.catalog.service import CatalogService, LearningPathService
from app.modules.profiles.service import ProfileService
from app.modules.progress.service import ProgressService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin: Optional[Client] = Depends(get_service_supabase),
) -> AuthService:
    return AuthService(supabase, admin)


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


def get_billing_service(supabase: Client = Depends(get_supabase)) -> BillingService:
    return BillingService(supabase)


def get_catalog_service(supabase: Client = Depends(get_supabase)) -> CatalogService:
    return CatalogService(supabase)


def get_learning_path_service(supabase: Client = Depends(get_supabase)) -> LearningPathService:
    return LearningPathService(supabase)


def get_progress_service(supabase: Client = Depends(get_supabase)) -> ProgressService:
    return ProgressService(supabase)


def get_achievement_service(
    supabase: Client = Depends(get_supabase),
    progress: ProgressService = Depends(get_progress_service),
) -> AchievementService:
    return AchievementService(supabase, progress)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_current_auth_user(user_data: dict = Depends(get_current_user_id)) -> AuthUser:
    return AuthUser(
        id=user_data["id"],
        username=user_data.get("username") or "User",
        email=user_data.get("email"),
    )


def get_auth_provider(supabase: Client = Depends(get_supabase)) -> SupabaseAuthProvider:
    """Provider for anonymous flows (sign up, sign in, password reset, OAuth)."""
    return SupabaseAuthProvider(supabase)


def get_user_auth_provider(
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
    admin: Optional[Client] = Depends(get_service_supabase),
) -> SupabaseAuthProvider:
    """Provider acting on behalf of the authenticated caller (password / metadata updates)."""
    return SupabaseAuthProvider(supabase, admin=admin, user_id=user_data["id"])


def require_admin(
    user_data: dict = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
) -> dict:
    """Dependency that allows only callers whose profile has is_admin set"""
    if not profiles.is_admin(user_data["id"]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user_data
