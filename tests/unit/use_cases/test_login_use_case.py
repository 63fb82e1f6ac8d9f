import bcrypt
import pytest

from src.app.use_cases.auth import LoginUseCase
from src.domain.entities import RoleName


USER_ROLES = {RoleName.user}
ADMIN_ROLES = {RoleName.admin, RoleName.owner}


@pytest.mark.asyncio
async def test_successful_login_revokes_old_tokens_and_mints_one(
    mock_uow, blob_store, make_user, password
):
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email.return_value = user
    mock_uow.access_tokens.delete_all_by_user_id.return_value = 2

    # Act
    result = await LoginUseCase(mock_uow, blob_store).execute(
        user.email, password, USER_ROLES, "user_auth_token"
    )

    # Assert
    assert result.is_ok()
    assert result.value.user.id == str(user.id)
    assert "|" in result.value.token
    mock_uow.access_tokens.delete_all_by_user_id.assert_called_once_with(user.id)
    mock_uow.access_tokens.create.assert_called_once()
    assert mock_uow.access_tokens.create.call_args[0][0].name == "user_auth_token"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_email_and_wrong_password_share_one_error(
    mock_uow, blob_store, make_user, password
):
    use_case = LoginUseCase(mock_uow, blob_store)

    unknown = await use_case.execute("nobody@example.com", password, USER_ROLES, "user_auth_token")

    mock_uow.users.get_by_email.return_value = make_user()
    wrong = await use_case.execute("jane@example.com", "WrongPass!", USER_ROLES, "user_auth_token")

    assert unknown.is_err() and wrong.is_err()
    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
    assert unknown.error.message == "The provided credentials are incorrect."
    mock_uow.access_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_role_not_allowed_on_panel_looks_like_bad_credentials(
    mock_uow, blob_store, make_user, password
):
    mock_uow.users.get_by_email.return_value = make_user(role=RoleName.user)

    result = await LoginUseCase(mock_uow, blob_store).execute(
        "jane@example.com", password, ADMIN_ROLES, "admin_auth_token"
    )

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_suspended_account_is_refused_after_credentials_check(
    mock_uow, blob_store, make_user, password
):
    mock_uow.users.get_by_email.return_value = make_user(is_active=False)

    result = await LoginUseCase(mock_uow, blob_store).execute(
        "jane@example.com", password, USER_ROLES, "user_auth_token"
    )

    assert result.is_err()
    assert result.error.code == "ACCOUNT_SUSPENDED"
    assert result.error.message == "Your account is suspended. Please contact support."
    mock_uow.access_tokens.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_suspended_account_with_wrong_password_gets_credentials_error(
    mock_uow, blob_store, make_user, password
):
    mock_uow.users.get_by_email.return_value = make_user(is_active=False)

    result = await LoginUseCase(mock_uow, blob_store).execute(
        "jane@example.com", "WrongPass!", USER_ROLES, "user_auth_token"
    )

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_owner_can_sign_in_on_admin_panel(mock_uow, blob_store, make_user, password):
    mock_uow.users.get_by_email.return_value = make_user(role=RoleName.owner)
    mock_uow.permissions.get_names_for_role.return_value = ["VIEW_USERS", "CREATE_ADMINS"]

    result = await LoginUseCase(mock_uow, blob_store).execute(
        "jane@example.com", password, ADMIN_ROLES, "admin_auth_token"
    )

    assert result.is_ok()
    assert result.value.user.role.name == "OWNER"
    assert result.value.user.permissions == ["VIEW_USERS", "CREATE_ADMINS"]


@pytest.mark.asyncio
async def test_password_beyond_hash_limit_is_rejected_not_truncated(
    mock_uow, blob_store, make_user
):
    stored = "p" * 72
    mock_uow.users.get_by_email.return_value = make_user(
        password_hash=bcrypt.hashpw(stored.encode(), bcrypt.gensalt(4)).decode()
    )

    result = await LoginUseCase(mock_uow, blob_store).execute(
        "jane@example.com", stored + "extra", USER_ROLES, "user_auth_token"
    )

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.access_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_multibyte_password_over_limit_for_unknown_email(mock_uow, blob_store):
    # 40 characters, 80 bytes
    result = await LoginUseCase(mock_uow, blob_store).execute(
        "nobody@example.com", "é" * 40, USER_ROLES, "user_auth_token"
    )

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
