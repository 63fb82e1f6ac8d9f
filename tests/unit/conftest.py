from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import bcrypt
import pytest

from src.domain.entities import RoleName, User

PASSWORD = "SecurePass123!"
# Cost 4 keeps unit tests fast; production hashes use 12
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode()


def _returns_argument():
    return AsyncMock(side_effect=lambda entity, *args, **kwargs: entity)


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = _returns_argument()
    uow.users.update = _returns_argument()
    uow.users.email_taken = AsyncMock(return_value=False)

    uow.access_tokens = MagicMock()
    uow.access_tokens.get_by_id = AsyncMock(return_value=None)
    uow.access_tokens.create = _returns_argument()
    uow.access_tokens.touch = _returns_argument()
    uow.access_tokens.delete_by_id = AsyncMock(return_value=True)
    uow.access_tokens.delete_all_by_user_id = AsyncMock(return_value=0)

    uow.permissions = MagicMock()
    uow.permissions.get_names_for_role = AsyncMock(return_value=[])
    uow.permissions.ensure_permissions = AsyncMock(return_value=0)
    uow.permissions.sync_role = AsyncMock()

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = _returns_argument()
    uow.password_reset_tokens.get_latest_by_user_id = AsyncMock(return_value=None)
    uow.password_reset_tokens.get_by_user_and_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.update = _returns_argument()
    uow.password_reset_tokens.delete_by_user_id = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = _returns_argument()

    return uow


@pytest.fixture
def blob_store():
    store = MagicMock()
    store.put = AsyncMock(return_value="avatars/new.png")
    store.delete = AsyncMock(return_value=True)
    store.url = MagicMock(side_effect=lambda path: f"http://files.test/{path}")
    return store


@pytest.fixture
def notifier():
    service = MagicMock()
    service.send_verification_link = AsyncMock(return_value=True)
    service.send_password_reset = AsyncMock(return_value=True)
    return service


@pytest.fixture
def make_user():
    def _make_user(**overrides):
        fields = dict(
            id=uuid4(),
            email="jane@example.com",
            password_hash=PASSWORD_HASH,
            first_name="Jane",
            last_name="Doe",
            role=RoleName.user,
            is_active=True,
            email_verified_at=datetime.now(UTC),
            created_at=datetime.now(UTC),
        )
        fields.update(overrides)
        return User(**fields)

    return _make_user


@pytest.fixture
def password():
    return PASSWORD
