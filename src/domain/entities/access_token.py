"""
AccessToken Entity

Stores bearer tokens issued on login and registration.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.clock import utc_now


class AccessToken(SQLModel, table=True):
    """
    AccessToken entity - one bearer credential of one user.

    Business Rules:
    - Plain token is "<id>|<secret>"; only SHA-256 of the secret is stored
    - Revoking a token deletes the row
    - Login revokes every token of the user before minting a new one
    """

    __tablename__ = "access_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False)
    name: str = Field(max_length=100)  # Device label, e.g. "user_auth_token"
    token_hash: str = Field(max_length=64)  # SHA-256 output

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True))
    )
    last_used_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    __table_args__ = (Index("idx_access_token_user_id", "user_id"),)
