"""
Authentication flow state machine.

One AuthFlow backs one auth form instance. It owns the active mode, the form
fields, a single feedback slot (error or success) and the busy flag, and it
drives the auth provider and profile bootstrap on submit.

Modes and user-triggered transitions:

    sign_in  -> sign_up            go_to_sign_up()
    sign_in  -> forgot_password    go_to_forgot_password()
    sign_up / forgot_password -> sign_in    back_to_login()

update_password is only entered through the initial mode and is left by the
host closing the flow (on_close fires after a successful update).

Every transition clears feedback and the busy flag and invalidates the submit
in flight, whose result is then discarded when it arrives. dispose() does the
same for the whole lifetime of the flow.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from app.config import settings
from app.core.cancellation import CancellationToken
from app.modules.auth.provider import (
    AuthFailure, AuthProvider, AuthSuccess, ProviderSession, ProviderUser
)
from app.modules.auth.schemas import AuthMode, AuthUser, Feedback, FeedbackKind

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

GENERIC_ERROR = "An unexpected error occurred."
INVALID_CREDENTIALS = "Invalid login credentials"
INVALID_CREDENTIALS_DISPLAY = "Invalid email or password."

SIGN_UP_PENDING_CONFIRMATION = "Account created! Please check your email to confirm your registration."
RESET_EMAIL_SENT = "Password reset instructions have been sent to your email."
PASSWORD_UPDATED = "Password updated successfully! Redirecting..."


class AuthValidationError(Exception):
    """Local form validation failure. Raised before any provider call."""


class InvalidTransitionError(Exception):
    """Mode change not allowed from the current mode."""


class ProfileBootstrap(Protocol):
    def ensure_profile(self, user: AuthUser) -> Optional[dict]: ...


@dataclass
class AuthFields:
    first_name: str = ""
    last_name: str = ""
    sign_up_email: str = ""
    password: str = ""
    confirm_password: str = ""
    login_email: str = ""
    login_password: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name.strip()} {self.last_name.strip()}"


def display_error(error) -> str:
    """Single readable sentence for a validation error or a provider result."""
    if isinstance(error, AuthValidationError):
        message = str(error)
    elif isinstance(error, AuthFailure):
        message = error.message
    else:
        message = ""
    if not message:
        return GENERIC_ERROR
    if INVALID_CREDENTIALS in message:
        return INVALID_CREDENTIALS_DISPLAY
    return message


def validate_new_password(password: str, confirm_password: str, missing_message: str) -> None:
    if not password or not confirm_password:
        raise AuthValidationError(missing_message)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if password != confirm_password:
        raise AuthValidationError("Passwords do not match.")


class AuthFlow:
    def __init__(
        self,
        provider: AuthProvider,
        profiles: ProfileBootstrap,
        mode: AuthMode = AuthMode.SIGN_IN,
        on_login: Optional[Callable[[AuthUser], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
        redirect_to: Optional[str] = None,
        close_delay: Optional[float] = None,
        token: Optional[CancellationToken] = None,
    ):
        self.mode = mode
        self.fields = AuthFields()
        self.feedback: Optional[Feedback] = None
        self.busy = False
        self.user: Optional[AuthUser] = None
        self.session: Optional[ProviderSession] = None

        self._provider = provider
        self._profiles = profiles
        self._on_login = on_login
        self._on_close = on_close
        self._redirect_to = redirect_to or settings.site_url
        self._close_delay = settings.auth_close_delay_seconds if close_delay is None else close_delay
        self._token = token or CancellationToken()
        self._generation = 0

    @property
    def error(self) -> Optional[str]:
        if self.feedback and self.feedback.kind == FeedbackKind.ERROR:
            return self.feedback.message
        return None

    @property
    def success(self) -> Optional[str]:
        if self.feedback and self.feedback.kind == FeedbackKind.SUCCESS:
            return self.feedback.message
        return None

    # --- transitions ---

    def back_to_login(self) -> None:
        if self.mode == AuthMode.UPDATE_PASSWORD:
            raise InvalidTransitionError("update_password can only be left by closing the flow")
        self._switch(AuthMode.SIGN_IN)

    def go_to_sign_up(self) -> None:
        self._require_mode(AuthMode.SIGN_IN, AuthMode.SIGN_UP)
        self._switch(AuthMode.SIGN_UP)

    def go_to_forgot_password(self) -> None:
        self._require_mode(AuthMode.SIGN_IN, AuthMode.FORGOT_PASSWORD)
        self._switch(AuthMode.FORGOT_PASSWORD)

    def _require_mode(self, expected: AuthMode, target: AuthMode) -> None:
        if self.mode != expected:
            raise InvalidTransitionError(f"Cannot go from {self.mode.value} to {target.value}")

    def _switch(self, mode: AuthMode) -> None:
        self.mode = mode
        self.feedback = None
        self.busy = False
        self._generation += 1

    def dispose(self) -> None:
        """Tear the flow down; late provider results are dropped from here on."""
        self._token.cancel()
        self.busy = False

    # --- submit ---

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self._token.cancelled

    def _set_feedback(self, generation: int, kind: FeedbackKind, message: str) -> None:
        if self._is_current(generation):
            self.feedback = Feedback(kind=kind, message=message)

    async def submit(self) -> Optional[Feedback]:
        """Validate and submit the active mode. No-op while a submit is outstanding."""
        if self.busy or self._token.cancelled:
            return None

        handlers = {
            AuthMode.SIGN_UP: self._submit_sign_up,
            AuthMode.SIGN_IN: self._submit_sign_in,
            AuthMode.FORGOT_PASSWORD: self._submit_forgot_password,
            AuthMode.UPDATE_PASSWORD: self._submit_update_password,
        }
        handler = handlers[self.mode]
        generation = self._generation
        self.feedback = None
        self.busy = True
        try:
            await handler(generation)
        except AuthValidationError as e:
            self._set_feedback(generation, FeedbackKind.ERROR, display_error(e))
        finally:
            if self._is_current(generation):
                self.busy = False
        return self.feedback

    async def sign_in_with_oauth(self, provider: str = "google") -> Optional[str]:
        """Start an OAuth sign-in; returns the provider URL to redirect to."""
        if self.busy or self._token.cancelled:
            return None
        generation = self._generation
        self.feedback = None
        self.busy = True
        try:
            result = await self._provider.sign_in_with_oauth(provider, self._redirect_to)
            if not isinstance(result, AuthSuccess):
                self._set_feedback(generation, FeedbackKind.ERROR, display_error(result))
                return None
            return result.url
        finally:
            if self._is_current(generation):
                self.busy = False

    async def _submit_sign_up(self, generation: int) -> None:
        f = self.fields
        if not f.first_name.strip() or not f.last_name.strip() or not f.sign_up_email.strip() \
                or not f.password or not f.confirm_password:
            raise AuthValidationError("All fields are required.")
        validate_new_password(f.password, f.confirm_password, "All fields are required.")

        display_name = f.display_name
        result = await self._provider.sign_up(f.sign_up_email, f.password, {"username": display_name})
        if not self._is_current(generation):
            return
        if not isinstance(result, AuthSuccess):
            self._set_feedback(generation, FeedbackKind.ERROR, display_error(result))
            return

        if result.session is None or result.user is None:
            self._set_feedback(generation, FeedbackKind.SUCCESS, SIGN_UP_PENDING_CONFIRMATION)
            return

        user = AuthUser(
            id=result.user.id,
            username=result.user.user_metadata.get("username") or display_name,
            email=result.user.email or f.sign_up_email,
        )
        await self._complete_login(generation, user, result.session)

    async def _submit_sign_in(self, generation: int) -> None:
        f = self.fields
        if not f.login_email.strip():
            raise AuthValidationError("Email is required.")

        result = await self._provider.sign_in_with_password(f.login_email, f.login_password)
        if not self._is_current(generation):
            return
        if not isinstance(result, AuthSuccess):
            self._set_feedback(generation, FeedbackKind.ERROR, display_error(result))
            return
        if result.session is None or result.user is None:
            logger.warning("Sign-in succeeded without a session")
            self._set_feedback(generation, FeedbackKind.ERROR, GENERIC_ERROR)
            return

        user = AuthUser(
            id=result.user.id,
            username=self._sign_in_username(result.user),
            email=result.user.email or f.login_email,
        )
        await self._complete_login(generation, user, result.session)

    def _sign_in_username(self, user: ProviderUser) -> str:
        username = user.user_metadata.get("username")
        if username:
            return username
        email = user.email or self.fields.login_email
        return email.split("@")[0] or "User"

    async def _complete_login(self, generation: int, user: AuthUser, session: ProviderSession) -> None:
        try:
            await asyncio.to_thread(self._profiles.ensure_profile, user)
        except Exception as e:
            logger.error(f"Profile bootstrap failed for {user.id}, continuing login: {e}")
        if not self._is_current(generation):
            return
        self.user = user
        self.session = session
        if self._on_login:
            self._on_login(user)

    async def _submit_forgot_password(self, generation: int) -> None:
        f = self.fields
        if not f.login_email.strip():
            raise AuthValidationError("Please enter your email address.")

        result = await self._provider.reset_password_for_email(f.login_email, self._redirect_to)
        if not isinstance(result, AuthSuccess):
            self._set_feedback(generation, FeedbackKind.ERROR, display_error(result))
            return
        self._set_feedback(generation, FeedbackKind.SUCCESS, RESET_EMAIL_SENT)

    async def _submit_update_password(self, generation: int) -> None:
        f = self.fields
        validate_new_password(f.password, f.confirm_password, "Please enter your new password.")

        result = await self._provider.update_password(f.password)
        if not self._is_current(generation):
            return
        if not isinstance(result, AuthSuccess):
            self._set_feedback(generation, FeedbackKind.ERROR, display_error(result))
            return

        self._set_feedback(generation, FeedbackKind.SUCCESS, PASSWORD_UPDATED)
        f.password = ""
        f.confirm_password = ""
        asyncio.get_running_loop().call_later(self._close_delay, self._close)

    def _close(self) -> None:
        if self._on_close:
            self._on_close()
