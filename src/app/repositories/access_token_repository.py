from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import AccessToken


class IAccessTokenRepository(ABC):
    """AccessToken repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, token_id: UUID) -> Optional[AccessToken]:
        """Get access token by ID"""
        pass

    @abstractmethod
    async def create(self, token: AccessToken) -> AccessToken:
        """Persist a newly minted token"""
        pass

    @abstractmethod
    async def touch(self, token: AccessToken) -> AccessToken:
        """Record that the token was just used"""
        pass

    @abstractmethod
    async def delete_by_id(self, token_id: UUID) -> bool:
        """Revoke one token. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Revoke every token of a user. Returns count of revoked tokens."""
        pass
