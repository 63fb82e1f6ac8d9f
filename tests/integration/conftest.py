from datetime import UTC, datetime, timedelta
from typing import List, Tuple

import bcrypt
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.local_blob_store import LocalBlobStore
from src.adapter.services.rate_limiter import InMemoryRateLimiter
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notification_service import INotificationService
from src.app.services.role_registry import sync_role_permissions
from src.app.services.verification_link import VerificationLinkSigner
from src.depends import (
    get_blob_store,
    get_link_signer,
    get_notifier,
    get_rate_limiter,
    get_unit_of_work,
)
from src.domain.entities import RoleName, User

PASSWORD = "SecurePass123!"
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode()


class RecordingNotifier(INotificationService):
    """Keeps every outgoing email instead of sending it"""

    def __init__(self):
        self.verification_links: List[Tuple[str, str]] = []
        self.reset_tokens: List[Tuple[str, str]] = []
        self.fail = False

    async def send_verification_link(self, user: User, url: str) -> bool:
        self.verification_links.append((user.email, url))
        return not self.fail

    async def send_password_reset(self, user: User, token: str) -> bool:
        self.reset_tokens.append((user.email, token))
        return not self.fail


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            await sync_role_permissions(uow)
            await uow.commit()
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def link_signer():
    return VerificationLinkSigner(
        "integration-secret", "http://test/api", ttl=timedelta(minutes=60)
    )


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "storage"), "http://test/storage")


@pytest.fixture
def rate_limiter():
    return InMemoryRateLimiter()


@pytest_asyncio.fixture
async def client(db_session, notifier, link_signer, blob_store, rate_limiter):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_link_signer] = lambda: link_signer
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_user(db_session):
    """Insert an account directly; returns the stored User"""

    async def _create_user(
        email: str = "jane@example.com",
        role: RoleName = RoleName.user,
        verified: bool = True,
        active: bool = True,
    ) -> User:
        user = User(
            email=email,
            password_hash=PASSWORD_HASH,
            first_name="Jane",
            last_name="Doe",
            role=role,
            is_active=active,
            email_verified_at=datetime.now(UTC) if verified else None,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create_user


@pytest.fixture
def fetch_user(db_session):
    """Reload an account from the database"""

    async def _fetch_user(email: str) -> User:
        result = await db_session.exec(
            select(User).where(User.email == email).execution_options(populate_existing=True)
        )
        return result.one_or_none()

    return _fetch_user


@pytest.fixture
def login(client):
    """Sign in through the API and return the bearer token"""

    async def _login(email: str = "jane@example.com", panel: str = "user", password: str = PASSWORD):
        response = await client.post(
            f"/api/{panel}/v1/auth/sessions", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.json()
        return response.json()["data"]["token"]

    return _login


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def make_unsaved_user():
    def _make_unsaved_user(email: str = "ghost@example.com") -> User:
        return User(email=email, password_hash=PASSWORD_HASH, role=RoleName.user)

    return _make_unsaved_user
