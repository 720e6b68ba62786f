import hashlib
import logging
import time
from supabase import Client
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    """Resolves bearer tokens to users. The interactive flows live in flow.AuthFlow."""

    def __init__(self, supabase: Client, admin: Optional[Client] = None):
        self.supabase = supabase
        self.admin = admin

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            metadata = user.user_metadata or {}
            user_data = {
                "id": user.id,
                "email": user.email,
                "username": metadata.get("username") or (user.email or "").split("@")[0] or "User",
                "user_metadata": metadata,
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            logger.info(f"Token rejected: {error_msg}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")

    def logout(self, token: str) -> bool:
        """Revoke the token's refresh tokens and drop it from the cache."""
        _AUTH_USER_CACHE.pop(_cache_key(token), None)
        if self.admin is None:
            # Access tokens are stateless JWTs; without admin rights they simply expire
            return True
        try:
            self.admin.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.error(f"Error signing out: {e}")
            return False
