"""Unit tests for ProfileService."""

from unittest.mock import AsyncMock

import pytest

from pazireshino.domain.shared.exceptions import ErrorCode, ValidationError
from pazireshino_identity.application.services import ProfileService
from pazireshino_identity.domain.principal import PrincipalAlreadyExistsError

from tests.shared.builders import make_principal


class TestProfileService:
    def setup_method(self):
        self.principal_repo = AsyncMock()
        self.service = ProfileService(self.principal_repo)
        self.principal = make_principal()

    def test_get_me_returns_principal(self):
        assert self.service.get_me(self.principal) is self.principal

    async def test_update_me_keeps_only_allowed_fields(self):
        updated = make_principal(id=self.principal.id, first_name="Sahar")
        self.principal_repo.update_profile.return_value = updated

        result = await self.service.update_me(
            self.principal,
            {"first_name": "Sahar", "profile_image": "x.png", "role": "admin"},
        )

        assert result is updated
        self.principal_repo.update_profile.assert_awaited_once_with(
            self.principal.id,
            {"first_name": "Sahar"},
        )

    @pytest.mark.parametrize("field", ["password", "password_confirm"])
    async def test_update_me_refuses_password_fields(self, field):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_me(self.principal, {field: "abc123"})

        assert exc_info.value.message == (
            "This route is not for password updates. Please use /updateMyPassword."
        )
        self.principal_repo.update_profile.assert_not_awaited()

    async def test_update_me_nothing_to_change(self):
        result = await self.service.update_me(self.principal, {"role": "admin"})

        assert result is self.principal
        self.principal_repo.update_profile.assert_not_awaited()

    async def test_update_me_duplicate_email(self):
        self.principal_repo.update_profile.side_effect = PrincipalAlreadyExistsError("email")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_me(self.principal, {"email": "taken@example.com"})

        assert exc_info.value.code == ErrorCode.DUPLICATE_FIELD
        assert "email" in exc_info.value.message
