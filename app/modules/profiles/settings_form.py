"""
Account settings form: a profile tab (username) and a security tab (password).
Both tabs share one message slot and one busy flag.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

from app.core.cancellation import CancellationToken
from app.modules.auth.flow import MIN_PASSWORD_LENGTH
from app.modules.auth.provider import AuthFailure, AuthProvider, AuthSuccess
from app.modules.auth.schemas import AuthUser
from app.modules.profiles.schemas import ProfileUpdate, SettingsMessage, SettingsTab

logger = logging.getLogger(__name__)

PROFILE_UPDATED = "Profile updated successfully."
PROFILE_UPDATE_FAILED = "An error occurred while updating profile."
PASSWORD_UPDATED = "Password updated successfully."
PASSWORD_UPDATE_FAILED = "Failed to update password."
PASSWORDS_INVALID = "Passwords do not match or are empty."


class ProfileStore(Protocol):
    def update_profile(self, user_id: str, updates: ProfileUpdate) -> bool: ...


class SettingsForm:
    def __init__(
        self,
        user: AuthUser,
        profiles: ProfileStore,
        provider: AuthProvider,
        on_user_update: Optional[Callable[[AuthUser], None]] = None,
        token: Optional[CancellationToken] = None,
    ):
        self.user = user
        self.active_tab = SettingsTab.PROFILE
        self.username = user.username
        self.new_password = ""
        self.confirm_password = ""
        self.busy = False
        self.message: Optional[SettingsMessage] = None

        self._profiles = profiles
        self._provider = provider
        self._on_user_update = on_user_update
        self._token = token or CancellationToken()

    def select_tab(self, tab: SettingsTab) -> None:
        self.active_tab = tab
        self.message = None

    def _set_message(self, kind: str, text: str) -> None:
        if not self._token.cancelled:
            self.message = SettingsMessage(type=kind, text=text)

    async def update_profile(self) -> Optional[SettingsMessage]:
        if self.busy or not self.username.strip() or not self.user.id:
            return None
        self.busy = True
        self.message = None
        username = self.username
        try:
            ok = await asyncio.to_thread(self._profiles.update_profile, self.user.id, ProfileUpdate(username=username))
            if not ok:
                self._set_message("error", PROFILE_UPDATE_FAILED)
                return self.message
            result = await self._provider.update_user_metadata({"username": username})
            if not isinstance(result, AuthSuccess):
                # profile row is updated; auth metadata stays stale until the next change
                logger.warning(f"Auth metadata update failed for {self.user.id}")
            if self._token.cancelled:
                return None
            self.user = self.user.model_copy(update={"username": username})
            if self._on_user_update:
                self._on_user_update(self.user)
            self._set_message("success", PROFILE_UPDATED)
            return self.message
        finally:
            self.busy = False

    async def update_password(self) -> Optional[SettingsMessage]:
        if self.busy:
            return None
        if not self.new_password or self.new_password != self.confirm_password:
            self._set_message("error", PASSWORDS_INVALID)
            return self.message
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            self._set_message("error", f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
            return self.message

        self.busy = True
        self.message = None
        try:
            result = await self._provider.update_password(self.new_password)
            if isinstance(result, AuthFailure):
                self._set_message("error", result.message or PASSWORD_UPDATE_FAILED)
            elif not isinstance(result, AuthSuccess):
                self._set_message("error", PASSWORD_UPDATE_FAILED)
            else:
                self._set_message("success", PASSWORD_UPDATED)
                self.new_password = ""
                self.confirm_password = ""
            return self.message
        finally:
            self.busy = False

    def dispose(self) -> None:
        self._token.cancel()
