import asyncio
from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import (
    get_auth_provider, get_auth_service, get_current_token, get_current_user_id,
    get_profile_service, get_user_auth_provider
)
from app.modules.auth.flow import AuthFlow, INVALID_CREDENTIALS_DISPLAY
from app.modules.auth.provider import SupabaseAuthProvider
from app.modules.auth.schemas import (
    AuthFlowResponse, AuthMode, CurrentUserResponse, ForgotPasswordRequest,
    LoginRequest, OAuthResponse, RegisterRequest, UpdatePasswordRequest
)
from app.modules.auth.service import AuthService
from app.modules.profiles.service import ProfileService
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def _flow_response(flow: AuthFlow) -> AuthFlowResponse:
    """Translate the flow's feedback slot into an HTTP response"""
    if flow.error:
        status_code = 401 if flow.error == INVALID_CREDENTIALS_DISPLAY else 400
        raise HTTPException(status_code=status_code, detail=flow.error)
    return AuthFlowResponse(
        mode=flow.mode,
        message=flow.success,
        user=flow.user,
        access_token=flow.session.access_token if flow.session else None,
        refresh_token=flow.session.refresh_token if flow.session else None,
    )


@router.post("/register", response_model=AuthFlowResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    provider: SupabaseAuthProvider = Depends(get_auth_provider),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Register a new user. Without an immediate session the response asks for email confirmation."""
    flow = AuthFlow(provider, profiles, mode=AuthMode.SIGN_UP)
    flow.fields.first_name = register_data.first_name
    flow.fields.last_name = register_data.last_name
    flow.fields.sign_up_email = register_data.email
    flow.fields.password = register_data.password
    flow.fields.confirm_password = register_data.confirm_password
    await flow.submit()
    return _flow_response(flow)


@router.post("/login", response_model=AuthFlowResponse)
async def login(
    login_data: LoginRequest,
    provider: SupabaseAuthProvider = Depends(get_auth_provider),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Login and get access token"""
    flow = AuthFlow(provider, profiles, mode=AuthMode.SIGN_IN)
    flow.fields.login_email = login_data.email
    flow.fields.login_password = login_data.password
    await flow.submit()
    response = _flow_response(flow)
    if flow.user and flow.user.id:
        await asyncio.to_thread(profiles.log_daily_activity, flow.user.id)
    return response


@router.post("/forgot-password", response_model=AuthFlowResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    provider: SupabaseAuthProvider = Depends(get_auth_provider),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Send password reset instructions"""
    flow = AuthFlow(provider, profiles, mode=AuthMode.FORGOT_PASSWORD)
    flow.fields.login_email = request.email
    await flow.submit()
    return _flow_response(flow)


@router.post("/update-password", response_model=AuthFlowResponse)
async def update_password(
    request: UpdatePasswordRequest,
    provider: SupabaseAuthProvider = Depends(get_user_auth_provider),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Set a new password for the authenticated user (e.g. after following a reset link)"""
    flow = AuthFlow(provider, profiles, mode=AuthMode.UPDATE_PASSWORD)
    flow.fields.password = request.password
    flow.fields.confirm_password = request.confirm_password
    await flow.submit()
    return _flow_response(flow)


@router.post("/oauth/{provider_name}", response_model=OAuthResponse)
async def oauth_sign_in(
    provider_name: str,
    provider: SupabaseAuthProvider = Depends(get_auth_provider),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Start an OAuth sign-in and return the provider URL"""
    flow = AuthFlow(provider, profiles)
    url = await flow.sign_in_with_oauth(provider_name)
    if not url:
        raise HTTPException(status_code=400, detail=flow.error or "OAuth sign-in failed")
    return OAuthResponse(provider=provider_name, url=url)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Get current authenticated user (for frontend UI)."""
    return CurrentUserResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        username=current_user.get("username"),
        is_admin=profiles.is_admin(current_user["id"]),
    )
