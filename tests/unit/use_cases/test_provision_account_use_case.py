import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.accounts import ProvisionAccountCommand, ProvisionAccountUseCase
from src.domain.entities import RoleName


@pytest.mark.asyncio
async def test_provision_verified_admin(mock_uow):
    command = ProvisionAccountCommand(
        email="admin@example.com", password="AdminPass123", role=RoleName.admin, verified=True
    )

    result = await ProvisionAccountUseCase(mock_uow).execute(command)

    assert result.is_ok()
    user = result.value
    assert user.role == RoleName.admin
    assert user.has_verified_email()
    assert user.password_hash != "AdminPass123"
    mock_uow.permissions.ensure_permissions.assert_called_once()
    assert mock_uow.permissions.sync_role.call_count == len(RoleName)
    assert mock_uow.audit_events.create.call_args[0][0].action == "account_provisioned"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_provision_leaves_email_unverified_by_default(mock_uow):
    result = await ProvisionAccountUseCase(mock_uow).execute(
        ProvisionAccountCommand(email="owner@example.com", password="OwnerPass123", role="OWNER")
    )

    assert result.value.role == RoleName.owner
    assert result.value.email_verified_at is None


@pytest.mark.asyncio
async def test_provision_rejects_duplicate_email(mock_uow):
    mock_uow.users.email_taken.return_value = True

    result = await ProvisionAccountUseCase(mock_uow).execute(
        ProvisionAccountCommand(email="admin@example.com", password="AdminPass123")
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.users.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_provision_reports_duplicate_when_insert_races(mock_uow):
    mock_uow.users.create.side_effect = IntegrityError("INSERT INTO users", {}, Exception("UNIQUE"))

    result = await ProvisionAccountUseCase(mock_uow).execute(
        ProvisionAccountCommand(email="admin@example.com", password="AdminPass123")
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.rollback.assert_called_once()
    mock_uow.audit_events.create.assert_not_called()
    mock_uow.commit.assert_not_called()


def test_provision_command_rejects_password_beyond_hash_limit():
    with pytest.raises(ValidationError) as exc_info:
        ProvisionAccountCommand(email="admin@example.com", password="x" * 73)

    assert "72 bytes" in str(exc_info.value)
