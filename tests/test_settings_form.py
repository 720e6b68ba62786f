import pytest

from app.modules.auth.provider import AuthFailure, AuthUnknownError
from app.modules.auth.schemas import AuthUser
from app.modules.profiles.schemas import SettingsTab
from app.modules.profiles.settings_form import (
    PASSWORD_UPDATE_FAILED, PASSWORD_UPDATED, PASSWORDS_INVALID, PROFILE_UPDATE_FAILED,
    PROFILE_UPDATED, SettingsForm
)
from fakes import FakeAuthProvider


class _Profiles:
    def __init__(self, ok=True):
        self.ok = ok
        self.updates = []

    def update_profile(self, user_id, updates):
        self.updates.append((user_id, updates.username))
        return self.ok


USER = AuthUser(id="u1", username="ada", email="ada@example.com")


@pytest.mark.asyncio
async def test_update_profile_updates_row_metadata_and_host() -> None:
    profiles = _Profiles()
    provider = FakeAuthProvider()
    updated = []
    form = SettingsForm(USER, profiles, provider, on_user_update=updated.append)
    form.username = "countess"

    message = await form.update_profile()

    assert message.type == "success" and message.text == PROFILE_UPDATED
    assert profiles.updates == [("u1", "countess")]
    assert provider.calls == [("update_user_metadata", ({"username": "countess"},))]
    assert updated[0].username == "countess"
    assert form.busy is False


@pytest.mark.asyncio
async def test_update_profile_skipped_for_blank_username() -> None:
    profiles = _Profiles()
    form = SettingsForm(USER, profiles, FakeAuthProvider())
    form.username = "   "

    assert await form.update_profile() is None
    assert profiles.updates == []


@pytest.mark.asyncio
async def test_update_profile_failure_message() -> None:
    form = SettingsForm(USER, _Profiles(ok=False), FakeAuthProvider())
    form.username = "countess"

    message = await form.update_profile()

    assert message.type == "error" and message.text == PROFILE_UPDATE_FAILED


@pytest.mark.asyncio
async def test_password_mismatch_checked_before_length() -> None:
    provider = FakeAuthProvider()
    form = SettingsForm(USER, _Profiles(), provider)
    form.select_tab(SettingsTab.SECURITY)
    form.new_password = "short"
    form.confirm_password = "shorter"

    message = await form.update_password()

    assert message.text == PASSWORDS_INVALID
    assert provider.calls == []


@pytest.mark.asyncio
async def test_password_too_short() -> None:
    form = SettingsForm(USER, _Profiles(), FakeAuthProvider())
    form.new_password = form.confirm_password = "short"

    message = await form.update_password()

    assert message.text == "Password must be at least 8 characters."


@pytest.mark.asyncio
async def test_password_update_success_clears_fields() -> None:
    form = SettingsForm(USER, _Profiles(), FakeAuthProvider())
    form.new_password = form.confirm_password = "newpassword"

    message = await form.update_password()

    assert message.type == "success" and message.text == PASSWORD_UPDATED
    assert form.new_password == "" and form.confirm_password == ""


@pytest.mark.asyncio
async def test_password_update_shows_provider_message() -> None:
    provider = FakeAuthProvider(update_password=AuthFailure("New password should be different from the old password."))
    form = SettingsForm(USER, _Profiles(), provider)
    form.new_password = form.confirm_password = "newpassword"

    message = await form.update_password()

    assert message.text == "New password should be different from the old password."
    assert form.new_password == "newpassword"


@pytest.mark.asyncio
async def test_password_update_unknown_error_is_generic() -> None:
    provider = FakeAuthProvider(update_password=AuthUnknownError("timeout"))
    form = SettingsForm(USER, _Profiles(), provider)
    form.new_password = form.confirm_password = "newpassword"

    message = await form.update_password()

    assert message.text == PASSWORD_UPDATE_FAILED


@pytest.mark.asyncio
async def test_switching_tab_clears_message() -> None:
    form = SettingsForm(USER, _Profiles(), FakeAuthProvider())
    form.select_tab(SettingsTab.SECURITY)
    form.new_password = "a"
    form.confirm_password = "b"
    await form.update_password()
    assert form.message is not None

    form.select_tab(SettingsTab.PROFILE)

    assert form.active_tab == SettingsTab.PROFILE
    assert form.message is None
