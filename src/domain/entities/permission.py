"""
Permission Entities

Named capabilities and the join table granting them to roles.
"""

from uuid import UUID, uuid4

from sqlmodel import Field, Index, SQLModel

from .enums import RoleName


class Permission(SQLModel, table=True):
    """Named fine-grained capability (e.g. VIEW_USERS)"""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)


class RolePermission(SQLModel, table=True):
    """
    RolePermission entity - grants one permission to one role.

    Business Rules:
    - (role, permission_id) must be unique
    - Bundles are synced at provisioning time, never computed per request
    """

    __tablename__ = "role_permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    role: RoleName = Field(nullable=False, index=True)
    permission_id: UUID = Field(foreign_key="permissions.id", nullable=False)

    __table_args__ = (
        Index("idx_role_permission_unique", "role", "permission_id", unique=True),
    )
