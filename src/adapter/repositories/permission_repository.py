from typing import Iterable, List

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.permission_repository import IPermissionRepository
from src.domain.entities import Permission, RoleName, RolePermission


class PermissionRepository(IPermissionRepository):
    """Permission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_names_for_role(self, role: RoleName) -> List[str]:
        """Get the permission names granted to a role, sorted"""
        stmt = (
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role == role)
            .order_by(Permission.name)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def ensure_permissions(self, names: Iterable[str]) -> int:
        """Create missing permissions"""
        wanted = set(names)
        result = await self.session.exec(select(Permission.name))
        missing = wanted - set(result.all())
        for name in sorted(missing):
            self.session.add(Permission(name=name))
        await self.session.flush()
        return len(missing)

    async def sync_role(self, role: RoleName, names: Iterable[str]) -> None:
        """Replace the role's permission bundle with exactly the given names"""
        await self.session.execute(delete(RolePermission).where(RolePermission.role == role))

        wanted = list(names)
        if wanted:
            result = await self.session.exec(
                select(Permission).where(Permission.name.in_(wanted))
            )
            for permission in result.all():
                self.session.add(RolePermission(role=role, permission_id=permission.id))
        await self.session.flush()
