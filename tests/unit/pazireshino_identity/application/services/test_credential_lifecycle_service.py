"""Unit tests for CredentialLifecycleService."""

import smtplib
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from pazireshino.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DeliveryError,
    ErrorCode,
    InvalidResetTokenError,
    NotFoundError,
    ValidationError,
)
from pazireshino_auth import JWTService, PasswordHashingService, RecoveryTokenGenerator
from pazireshino_identity.application.services import (
    CredentialLifecycleService,
    SignupData,
)
from pazireshino_identity.domain.principal import PrincipalAlreadyExistsError
from pazireshino_identity.infrastructure.email import EmailService

from tests.shared.builders import make_principal

RESET_URL_BASE = "https://api.example.com/api/v1/users/resetPassword"
NOW = datetime(2025, 3, 1, 12, 0, 0, 250_000, tzinfo=timezone.utc)


def _signup_data(**overrides) -> SignupData:
    fields = {
        "first_name": "Sara",
        "last_name": "Ahmadi",
        "email": "sara@example.com",
        "phone": "09120000000",
        "password": "abc123",
        "password_confirm": "abc123",
    }
    fields.update(overrides)
    return SignupData(**fields)


class CredentialServiceTestBase:
    def setup_method(self):
        self.principal_repo = AsyncMock()
        self.password_service = PasswordHashingService(rounds=4)
        self.jwt_service = JWTService(secret_key="lifecycle-secret")
        self.recovery_tokens = RecoveryTokenGenerator(clock=lambda: NOW)
        self.notifier = Mock(spec=EmailService)

        self.service = CredentialLifecycleService(
            principal_repository=self.principal_repo,
            password_service=self.password_service,
            jwt_service=self.jwt_service,
            recovery_tokens=self.recovery_tokens,
            notifier=self.notifier,
            clock=lambda: NOW,
        )


class TestSignup(CredentialServiceTestBase):
    async def test_signup_stores_hash_and_issues_token(self):
        principal, token = await self.service.signup(_signup_data())

        self.principal_repo.add.assert_awaited_once()
        stored = self.principal_repo.add.call_args[0][0]
        assert stored is principal
        assert stored.password_hash != "abc123"
        assert self.password_service.verify("abc123", stored.password_hash)
        assert stored.password_changed_at is None
        assert self.jwt_service.verify(token).subject_id == principal.id

    async def test_signup_password_mismatch(self):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.signup(_signup_data(password_confirm="abc124"))

        assert exc_info.value.message == "Passwords are not the same!"
        assert exc_info.value.code == ErrorCode.PASSWORD_MISMATCH
        self.principal_repo.add.assert_not_awaited()

    async def test_signup_duplicate_field(self):
        self.principal_repo.add.side_effect = PrincipalAlreadyExistsError("phone")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.signup(_signup_data())

        assert exc_info.value.message == (
            "Duplicate field value: phone. Please use another value!"
        )
        assert exc_info.value.code == ErrorCode.DUPLICATE_FIELD

    async def test_signup_overlong_password(self):
        long_password = "x" * 100

        with pytest.raises(ValidationError, match="72 bytes"):
            await self.service.signup(
                _signup_data(password=long_password, password_confirm=long_password),
            )


class TestLogin(CredentialServiceTestBase):
    async def test_login_success(self):
        stored = make_principal(password_hash=self.password_service.hash("abc123"))
        self.principal_repo.find_by_email.return_value = stored

        principal, token = await self.service.login("sara@example.com", "abc123")

        assert principal == stored
        assert self.jwt_service.verify(token).subject_id == stored.id
        self.principal_repo.find_by_email.assert_awaited_once_with(
            "sara@example.com",
            include_password=True,
        )

    async def test_wrong_password_and_unknown_email_fail_identically(self):
        stored = make_principal(password_hash=self.password_service.hash("abc123"))
        self.principal_repo.find_by_email.return_value = stored
        with pytest.raises(AuthenticationError) as wrong_password:
            await self.service.login("sara@example.com", "wrong")

        self.principal_repo.find_by_email.return_value = None
        with pytest.raises(AuthenticationError) as unknown_email:
            await self.service.login("nobody@example.com", "wrong")

        assert type(wrong_password.value) is type(unknown_email.value)
        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.message == "Incorrect email or password"
        assert wrong_password.value.code == unknown_email.value.code

    async def test_unknown_email_still_spends_a_verification(self):
        self.principal_repo.find_by_email.return_value = None
        password_service = Mock(spec=PasswordHashingService)
        password_service.verify_dummy_async.return_value = False
        service = CredentialLifecycleService(
            principal_repository=self.principal_repo,
            password_service=password_service,
            jwt_service=self.jwt_service,
            recovery_tokens=self.recovery_tokens,
            notifier=self.notifier,
        )

        with pytest.raises(AuthenticationError):
            await service.login("nobody@example.com", "pw")

        password_service.verify_dummy_async.assert_awaited_once_with("pw")
        password_service.verify_async.assert_not_awaited()

    @pytest.mark.parametrize(("email", "password"), [("", "pw"), ("a@b.c", "")])
    async def test_login_requires_both_fields(self, email, password):
        with pytest.raises(ValidationError, match="Please provide email and password!"):
            await self.service.login(email, password)

        self.principal_repo.find_by_email.assert_not_awaited()


class TestChangePassword(CredentialServiceTestBase):
    def setup_method(self):
        super().setup_method()
        self.stored = make_principal(password_hash=self.password_service.hash("old-pw"))
        self.principal_repo.find_by_id_with_password.return_value = self.stored
        self.principal_repo.update_password.return_value = True
        self.principal_repo.find_by_id.return_value = self.stored

    async def test_change_password_updates_atomically_and_issues_token(self):
        principal, token = await self.service.change_password(
            self.stored,
            "old-pw",
            "new-pw",
            "new-pw",
        )

        self.principal_repo.update_password.assert_awaited_once()
        principal_id, new_hash, changed_at = (
            self.principal_repo.update_password.call_args[0]
        )
        assert principal_id == self.stored.id
        assert self.password_service.verify("new-pw", new_hash)
        assert changed_at == NOW
        assert principal == self.stored
        assert self.jwt_service.verify(token).subject_id == self.stored.id

    async def test_wrong_current_password(self):
        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.change_password(self.stored, "nope", "new-pw", "new-pw")

        assert exc_info.value.message == "Your current password is wrong."
        self.principal_repo.update_password.assert_not_awaited()

    async def test_confirmation_mismatch(self):
        with pytest.raises(ValidationError, match="Passwords are not the same!"):
            await self.service.change_password(self.stored, "old-pw", "new-pw", "other")

        self.principal_repo.update_password.assert_not_awaited()

    async def test_principal_vanished(self):
        self.principal_repo.find_by_id_with_password.return_value = None

        with pytest.raises(AuthorizationError):
            await self.service.change_password(self.stored, "old-pw", "new-pw", "new-pw")


class TestForgotPassword(CredentialServiceTestBase):
    def setup_method(self):
        super().setup_method()
        self.stored = make_principal()
        self.principal_repo.find_by_email.return_value = self.stored
        self.principal_repo.set_password_reset.return_value = True

    async def test_stores_fingerprint_and_sends_raw_secret(self):
        await self.service.forgot_password("sara@example.com", RESET_URL_BASE)

        principal_id, fingerprint, expires_at = (
            self.principal_repo.set_password_reset.call_args[0]
        )
        assert principal_id == self.stored.id
        assert expires_at == NOW + timedelta(minutes=10)

        to_email, reset_url = self.notifier.send_password_reset_email.call_args[0]
        assert to_email == "sara@example.com"
        assert reset_url.startswith(RESET_URL_BASE + "/")
        raw = reset_url.rsplit("/", 1)[1]
        assert RecoveryTokenGenerator.fingerprint(raw) == fingerprint
        assert raw != fingerprint

    async def test_unknown_email(self):
        self.principal_repo.find_by_email.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.forgot_password("nobody@example.com", RESET_URL_BASE)

        assert exc_info.value.message == "There is no user with that email address."
        self.principal_repo.set_password_reset.assert_not_awaited()
        self.notifier.send_password_reset_email.assert_not_called()

    async def test_delivery_failure_clears_own_fingerprint(self):
        self.notifier.send_password_reset_email.side_effect = smtplib.SMTPException("down")

        with pytest.raises(DeliveryError) as exc_info:
            await self.service.forgot_password("sara@example.com", RESET_URL_BASE)

        assert exc_info.value.message == (
            "There was an error sending the email. Try again later!"
        )
        _, written_fingerprint, _ = self.principal_repo.set_password_reset.call_args[0]
        self.principal_repo.clear_password_reset.assert_awaited_once_with(
            self.stored.id,
            written_fingerprint,
        )

    async def test_delivery_timeout_is_a_delivery_error(self):
        self.notifier.send_password_reset_email.side_effect = TimeoutError

        with pytest.raises(DeliveryError):
            await self.service.forgot_password("sara@example.com", RESET_URL_BASE)

        self.principal_repo.clear_password_reset.assert_awaited_once()


class TestResetPassword(CredentialServiceTestBase):
    def setup_method(self):
        super().setup_method()
        self.stored = make_principal(
            password_reset_fingerprint=RecoveryTokenGenerator.fingerprint("raw-secret"),
            password_reset_expires_at=NOW + timedelta(minutes=5),
        )
        self.principal_repo.find_by_reset_fingerprint.return_value = self.stored
        self.principal_repo.consume_password_reset.return_value = True
        self.principal_repo.find_by_id.return_value = self.stored

    async def test_reset_consumes_secret_and_issues_token(self):
        principal, token = await self.service.reset_password(
            "raw-secret",
            "new-pw",
            "new-pw",
        )

        fingerprint = RecoveryTokenGenerator.fingerprint("raw-secret")
        self.principal_repo.find_by_reset_fingerprint.assert_awaited_once_with(
            fingerprint,
            NOW,
        )
        call = self.principal_repo.consume_password_reset.call_args[0]
        assert call[0] == self.stored.id
        assert call[1] == fingerprint
        assert call[2] == NOW
        assert self.password_service.verify("new-pw", call[3])
        assert call[4] == NOW
        assert principal == self.stored
        assert self.jwt_service.verify(token).subject_id == self.stored.id

    async def test_unknown_or_expired_secret(self):
        self.principal_repo.find_by_reset_fingerprint.return_value = None

        with pytest.raises(InvalidResetTokenError) as exc_info:
            await self.service.reset_password("whatever", "new-pw", "new-pw")

        assert exc_info.value.message == "Token is invalid or has expired"
        self.principal_repo.consume_password_reset.assert_not_awaited()

    async def test_lost_race_is_invalid_token(self):
        self.principal_repo.consume_password_reset.return_value = False

        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password("raw-secret", "new-pw", "new-pw")

    async def test_confirmation_mismatch(self):
        with pytest.raises(ValidationError, match="Passwords are not the same!"):
            await self.service.reset_password("raw-secret", "new-pw", "other")

        self.principal_repo.consume_password_reset.assert_not_awaited()
