from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.access_token_repository import IAccessTokenRepository
from src.domain.clock import utc_now
from src.domain.entities import AccessToken


class AccessTokenRepository(IAccessTokenRepository):
    """AccessToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, token_id: UUID) -> Optional[AccessToken]:
        """Get access token by ID"""
        stmt = select(AccessToken).where(AccessToken.id == token_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, token: AccessToken) -> AccessToken:
        """Persist a newly minted token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def touch(self, token: AccessToken) -> AccessToken:
        """Record that the token was just used"""
        token.last_used_at = utc_now()
        self.session.add(token)
        await self.session.flush()
        return token

    async def delete_by_id(self, token_id: UUID) -> bool:
        """Revoke one token by deleting it"""
        stmt = delete(AccessToken).where(AccessToken.id == token_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Revoke every token of a user"""
        stmt = delete(AccessToken).where(AccessToken.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
