from abc import ABC, abstractmethod
from typing import Iterable, List

from src.domain.entities import RoleName


class IPermissionRepository(ABC):
    """Permission repository interface - application layer"""

    @abstractmethod
    async def get_names_for_role(self, role: RoleName) -> List[str]:
        """Get the permission names granted to a role, sorted"""
        pass

    @abstractmethod
    async def ensure_permissions(self, names: Iterable[str]) -> int:
        """Create missing permissions. Returns count created."""
        pass

    @abstractmethod
    async def sync_role(self, role: RoleName, names: Iterable[str]) -> None:
        """Replace the role's permission bundle with exactly the given names"""
        pass
