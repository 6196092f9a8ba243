"""Tests for the profile view-model."""

import pytest

from modules.auth.exceptions import NotAuthenticatedError
from modules.auth.models import Identity, ProviderKind
from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.viewmodel import ProfileViewModel
from shared.exceptions import BackendError, ValidationError


@pytest.fixture
def vm(identity, fake_db):
    return ProfileViewModel(identity, fake_db)


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_current_user(self, vm, fake_db, test_user_id):
        fake_db.seed("profiles", {"user_id": test_user_id, "email": "test@example.com"})

        profile = await vm.load_current_user()

        assert profile.user_id == test_user_id
        assert vm.profile == profile

    @pytest.mark.asyncio
    async def test_missing_profile(self, vm):
        with pytest.raises(ProfileNotFoundError):
            await vm.load_current_user()

    @pytest.mark.asyncio
    async def test_not_signed_in(self, vm, identity):
        identity.get_current_user.side_effect = NotAuthenticatedError()
        with pytest.raises(NotAuthenticatedError):
            await vm.load_current_user()

    @pytest.mark.asyncio
    async def test_load_auth_providers_sorted(self, vm, identity):
        identity.list_linked_providers.return_value = {ProviderKind.GOOGLE, ProviderKind.EMAIL}
        assert await vm.load_auth_providers() == [ProviderKind.EMAIL, ProviderKind.GOOGLE]


class TestSignUpAndSignIn:
    @pytest.mark.asyncio
    async def test_sign_up_creates_profile(self, vm, identity, fake_db, test_identity):
        identity.create_account.return_value = test_identity

        profile = await vm.sign_up(" test@example.com ", "secret")

        identity.create_account.assert_awaited_once_with("test@example.com", "secret")
        assert profile.email == "test@example.com"
        rows = fake_db.rows("profiles", user_id=test_identity.id)
        assert len(rows) == 1
        assert rows[0]["date_created"] is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [("", "pw"), ("  ", "pw"), ("a@b.co", "")])
    async def test_sign_up_requires_credentials(self, vm, identity, email, password):
        with pytest.raises(ValidationError):
            await vm.sign_up(email, password)
        identity.create_account.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sign_in_does_not_touch_profiles(self, vm, identity, fake_db, test_identity):
        identity.sign_in.return_value = test_identity
        assert await vm.sign_in("test@example.com", "pw") == test_identity
        assert fake_db.writes() == []

    @pytest.mark.asyncio
    async def test_federated_sign_in_creates_profile_once(self, vm, identity, fake_db, test_identity):
        identity.sign_in_with_federated_token.return_value = test_identity

        first = await vm.sign_in_with_federated_token(ProviderKind.GOOGLE, "id-token")
        second = await vm.sign_in_with_federated_token(ProviderKind.GOOGLE, "id-token")

        assert first.user_id == second.user_id
        assert len(fake_db.rows("profiles")) == 1
        assert len(fake_db.writes("profiles")) == 1

    @pytest.mark.asyncio
    async def test_federated_sign_in_requires_token(self, vm):
        with pytest.raises(ValidationError):
            await vm.sign_in_with_federated_token(ProviderKind.APPLE, "")


class TestAccount:
    @pytest.mark.asyncio
    async def test_reset_password_uses_current_email(self, vm, identity):
        await vm.reset_password()
        identity.send_password_reset.assert_awaited_once_with("test@example.com")

    @pytest.mark.asyncio
    async def test_reset_password_without_email(self, vm, identity, test_user_id):
        identity.get_current_user.return_value = Identity(id=test_user_id)
        with pytest.raises(ValidationError) as exc_info:
            await vm.reset_password()
        assert exc_info.value.code == "MISSING_EMAIL"

    @pytest.mark.asyncio
    async def test_update_email(self, vm, identity):
        await vm.update_email(" new@example.com ")
        identity.update_email.assert_awaited_once_with("new@example.com")

    @pytest.mark.asyncio
    async def test_sign_out_clears_state(self, vm, identity, fake_db, test_user_id):
        fake_db.seed("profiles", {"user_id": test_user_id})
        await vm.load_current_user()

        await vm.sign_out()

        identity.sign_out.assert_awaited_once()
        assert vm.profile is None

    @pytest.mark.asyncio
    async def test_delete_account_removes_profile_then_account(self, vm, identity, fake_db, test_user_id):
        fake_db.seed("profiles", {"user_id": test_user_id})

        await vm.delete_account()

        assert fake_db.rows("profiles") == []
        identity.delete_account.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_account_keeps_auth_account_if_profile_delete_fails(self, vm, identity, fake_db):
        fake_db.fail("profiles", "delete")
        with pytest.raises(BackendError):
            await vm.delete_account()
        identity.delete_account.assert_not_awaited()
