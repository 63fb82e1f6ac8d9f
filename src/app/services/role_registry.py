"""
Role/Permission registry.

Each role maps to a fixed permission bundle. Bundles are written to the
role_permissions join table at provisioning time and only read afterwards.
"""

from typing import Dict, FrozenSet, List

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PermissionName, RoleName, User

ROLE_PERMISSIONS: Dict[RoleName, List[PermissionName]] = {
    RoleName.owner: list(PermissionName),
    RoleName.admin: [
        PermissionName.view_users,
        PermissionName.update_users,
        PermissionName.delete_users,
        PermissionName.view_admins,
    ],
    RoleName.user: [],
}

ADMIN_PANEL_ROLES: FrozenSet[RoleName] = frozenset({RoleName.admin, RoleName.owner})
USER_PANEL_ROLES: FrozenSet[RoleName] = frozenset({RoleName.user})


async def sync_role_permissions(uow: UnitOfWork) -> None:
    """Create every permission and reset each role to its bundle. Caller commits."""
    await uow.permissions.ensure_permissions(p.value for p in PermissionName)
    for role, bundle in ROLE_PERMISSIONS.items():
        await uow.permissions.sync_role(role, [p.value for p in bundle])


async def permissions_for(uow: UnitOfWork, user: User) -> List[str]:
    return await uow.permissions.get_names_for_role(user.role)
