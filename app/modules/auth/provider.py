"""
Async adapter over Supabase Auth.

Every call returns one of three result types instead of raising:
- AuthSuccess: the provider accepted the request (user/session/url when it sent them)
- AuthFailure: the provider rejected it with a readable message
- AuthUnknownError: anything else (network, SDK bug); carries detail for logs only
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, Union

from supabase import AuthError, Client

logger = logging.getLogger(__name__)


@dataclass
class ProviderUser:
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    app_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProviderSession:
    access_token: str
    refresh_token: Optional[str] = None


@dataclass
class AuthSuccess:
    user: Optional[ProviderUser] = None
    session: Optional[ProviderSession] = None
    url: Optional[str] = None


@dataclass
class AuthFailure:
    message: str
    status: Optional[int] = None


@dataclass
class AuthUnknownError:
    detail: str = ""


AuthResult = Union[AuthSuccess, AuthFailure, AuthUnknownError]


class AuthProvider(Protocol):
    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthResult: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult: ...

    async def reset_password_for_email(self, email: str, redirect_to: str) -> AuthResult: ...

    async def update_password(self, password: str) -> AuthResult: ...

    async def update_user_metadata(self, data: Dict[str, Any]) -> AuthResult: ...

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> AuthResult: ...


def _to_user(user) -> Optional[ProviderUser]:
    if user is None:
        return None
    return ProviderUser(
        id=user.id,
        email=user.email,
        user_metadata=user.user_metadata or {},
        app_metadata=user.app_metadata or {},
    )


def _to_session(session) -> Optional[ProviderSession]:
    if session is None:
        return None
    return ProviderSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )


class SupabaseAuthProvider:
    """AuthProvider backed by supabase-py.

    Password and metadata updates need an authenticated user. On the server that
    user is identified by user_id and the change goes through the admin API of
    the service-role client; without one, the session held by `supabase` is used.
    """

    def __init__(self, supabase: Client, admin: Optional[Client] = None, user_id: Optional[str] = None):
        self.supabase = supabase
        self.admin = admin
        self.user_id = user_id

    async def _call(self, action: str, fn: Callable, *args) -> AuthResult:
        try:
            response = await asyncio.to_thread(fn, *args)
        except AuthError as e:
            logger.info(f"Auth provider rejected {action}: {e.message}")
            return AuthFailure(message=e.message or "", status=getattr(e, "status", None))
        except Exception as e:
            logger.error(f"Auth provider error during {action}: {e}")
            return AuthUnknownError(detail=str(e))

        if response is None:
            return AuthSuccess()
        return AuthSuccess(
            user=_to_user(getattr(response, "user", None)),
            session=_to_session(getattr(response, "session", None)),
            url=getattr(response, "url", None),
        )

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthResult:
        return await self._call("sign_up", self.supabase.auth.sign_up, {
            "email": email,
            "password": password,
            "options": {"data": metadata},
        })

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        return await self._call("sign_in", self.supabase.auth.sign_in_with_password, {
            "email": email,
            "password": password,
        })

    async def reset_password_for_email(self, email: str, redirect_to: str) -> AuthResult:
        return await self._call(
            "reset_password",
            self.supabase.auth.reset_password_for_email,
            email,
            {"redirect_to": redirect_to},
        )

    async def _update_user(self, action: str, attributes: Dict[str, Any], admin_attributes: Dict[str, Any]) -> AuthResult:
        if self.user_id:
            if self.admin is None:
                logger.error(f"{action} requires SUPABASE_SERVICE_ROLE_KEY")
                return AuthUnknownError(detail="Service role key not configured")
            return await self._call(action, self.admin.auth.admin.update_user_by_id, self.user_id, admin_attributes)
        return await self._call(action, self.supabase.auth.update_user, attributes)

    async def update_password(self, password: str) -> AuthResult:
        return await self._update_user("update_password", {"password": password}, {"password": password})

    async def update_user_metadata(self, data: Dict[str, Any]) -> AuthResult:
        return await self._update_user("update_user_metadata", {"data": data}, {"user_metadata": data})

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> AuthResult:
        return await self._call("sign_in_with_oauth", self.supabase.auth.sign_in_with_oauth, {
            "provider": provider,
            "options": {"redirect_to": redirect_to},
        })
