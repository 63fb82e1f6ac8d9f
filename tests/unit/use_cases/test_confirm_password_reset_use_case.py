import hashlib
from datetime import UTC, datetime, timedelta

import bcrypt
import pytest

from src.app.use_cases.auth import ConfirmPasswordResetUseCase
from src.domain.entities import PasswordResetToken

PLAIN_TOKEN = "reset-token-value"


@pytest.fixture
def reset_token(mock_uow, make_user):
    user = make_user()
    mock_uow.users.get_by_email.return_value = user
    token = PasswordResetToken(
        user_id=user.id,
        token_hash=hashlib.sha256(PLAIN_TOKEN.encode()).hexdigest(),
        used=False,
        created_at=datetime.now(UTC),
        expires_at=datetime.now(UTC) + timedelta(minutes=30),
    )
    mock_uow.password_reset_tokens.get_by_user_and_token_hash.return_value = token
    return token


@pytest.mark.asyncio
async def test_password_is_replaced_and_token_consumed(mock_uow, reset_token):
    # Act
    result = await ConfirmPasswordResetUseCase(mock_uow).execute(
        "jane@example.com", PLAIN_TOKEN, "BrandNewPass1"
    )

    # Assert
    assert result.is_ok()
    user = mock_uow.users.update.call_args[0][0]
    assert bcrypt.checkpw(b"BrandNewPass1", user.password_hash.encode())
    assert reset_token.used is True
    mock_uow.password_reset_tokens.update.assert_called_once_with(reset_token)
    mock_uow.access_tokens.delete_all_by_user_id.assert_not_called()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_lookup_uses_token_hash(mock_uow, reset_token):
    await ConfirmPasswordResetUseCase(mock_uow).execute(
        "jane@example.com", PLAIN_TOKEN, "BrandNewPass1"
    )

    _, token_hash = mock_uow.password_reset_tokens.get_by_user_and_token_hash.call_args[0]
    assert token_hash == reset_token.token_hash


@pytest.mark.asyncio
async def test_used_token_is_rejected(mock_uow, reset_token):
    reset_token.used = True

    result = await ConfirmPasswordResetUseCase(mock_uow).execute(
        "jane@example.com", PLAIN_TOKEN, "BrandNewPass1"
    )

    assert result.error.code == "INVALID_RESET_TOKEN"
    assert result.error.message == "Invalid or expired reset token."
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_expired_token_is_rejected(mock_uow, reset_token):
    reset_token.expires_at = datetime.now(UTC) - timedelta(seconds=1)

    result = await ConfirmPasswordResetUseCase(mock_uow).execute(
        "jane@example.com", PLAIN_TOKEN, "BrandNewPass1"
    )

    assert result.error.code == "INVALID_RESET_TOKEN"


@pytest.mark.asyncio
async def test_unknown_email_is_rejected(mock_uow):
    result = await ConfirmPasswordResetUseCase(mock_uow).execute(
        "nobody@example.com", PLAIN_TOKEN, "BrandNewPass1"
    )

    assert result.error.code == "INVALID_RESET_TOKEN"
