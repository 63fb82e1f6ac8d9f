"""
Bearer token issuance.

Plain-text tokens have the form ``<token id>|<secret>``. The id makes lookup
a primary-key read; the secret is only ever stored as its SHA-256 hash and is
compared in constant time.
"""

import hashlib
import hmac
import secrets
from typing import Optional, Tuple
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AccessToken, User

TOKEN_SEPARATOR = "|"


def hash_secret(secret: str) -> str:
    return hashlib.sha256(secret.encode()).hexdigest()


def parse_plain_text(plain_text: str) -> Optional[Tuple[UUID, str]]:
    """Split a presented token into (id, secret); None if malformed"""
    token_id, sep, secret = plain_text.partition(TOKEN_SEPARATOR)
    if not sep or not secret:
        return None
    try:
        return UUID(token_id), secret
    except ValueError:
        return None


class TokenIssuer:
    """
    Mints, resolves and revokes bearer tokens.

    Works inside the caller's unit of work; never commits on its own.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def mint(self, user: User, name: str) -> str:
        secret = secrets.token_urlsafe(40)
        token = AccessToken(user_id=user.id, name=name, token_hash=hash_secret(secret))
        token = await self.uow.access_tokens.create(token)
        return f"{token.id}{TOKEN_SEPARATOR}{secret}"

    async def resolve(self, plain_text: str) -> Optional[AccessToken]:
        parsed = parse_plain_text(plain_text)
        if parsed is None:
            return None

        token_id, secret = parsed
        token = await self.uow.access_tokens.get_by_id(token_id)
        if token is None:
            return None
        if not hmac.compare_digest(hash_secret(secret), token.token_hash):
            return None
        return token

    async def revoke(self, token_id: UUID) -> bool:
        return await self.uow.access_tokens.delete_by_id(token_id)

    async def revoke_all(self, user_id: UUID) -> int:
        return await self.uow.access_tokens.delete_all_by_user_id(user_id)
