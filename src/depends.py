from datetime import timedelta
from functools import lru_cache

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.email_notification_service import EmailNotificationService
from src.adapter.services.local_blob_store import LocalBlobStore
from src.adapter.services.rate_limiter import InMemoryRateLimiter
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.blob_store import IBlobStore
from src.app.services.notification_service import INotificationService
from src.app.services.rate_limiter import IRateLimiter
from src.app.services.verification_link import VerificationLinkSigner

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache()
def get_link_signer() -> VerificationLinkSigner:
    return VerificationLinkSigner(
        secret_key=ApplicationConfig.VERIFICATION_SECRET,
        base_url=f"{ApplicationConfig.APP_URL.rstrip('/')}{ApplicationConfig.API_PREFIX}",
        ttl=timedelta(minutes=ApplicationConfig.VERIFICATION_EXPIRE_MINUTES),
    )


@lru_cache()
def get_notifier() -> INotificationService:
    return EmailNotificationService(
        smtp_host=ApplicationConfig.SMTP_HOST or None,
        smtp_port=ApplicationConfig.SMTP_PORT,
        smtp_user=ApplicationConfig.SMTP_USER or None,
        smtp_password=ApplicationConfig.SMTP_PASSWORD or None,
        smtp_use_tls=ApplicationConfig.SMTP_USE_TLS,
        from_email=ApplicationConfig.MAIL_FROM,
        from_name=ApplicationConfig.MAIL_FROM_NAME,
        password_reset_url=ApplicationConfig.PASSWORD_RESET_URL,
        verification_expire_minutes=ApplicationConfig.VERIFICATION_EXPIRE_MINUTES,
        password_reset_expire_minutes=ApplicationConfig.PASSWORD_RESET_EXPIRE_MINUTES,
    )


@lru_cache()
def get_blob_store() -> IBlobStore:
    return LocalBlobStore(ApplicationConfig.STORAGE_PATH, ApplicationConfig.PUBLIC_STORAGE_URL)


@lru_cache()
def get_rate_limiter() -> IRateLimiter:
    return InMemoryRateLimiter()
