from dataclasses import dataclass
from typing import FrozenSet

from src.app.services.role_registry import ADMIN_PANEL_ROLES, USER_PANEL_ROLES
from src.app.use_cases.auth import USER_TOKEN_NAME
from src.domain.entities import RoleName


@dataclass(frozen=True)
class Panel:
    """One API surface (user or admin) and who may use it"""

    name: str
    roles: FrozenSet[RoleName]
    token_name: str
    self_service: bool

    @property
    def prefix(self) -> str:
        return f"/{self.name}/v1"


USER_PANEL = Panel(
    name="user",
    roles=USER_PANEL_ROLES,
    token_name=USER_TOKEN_NAME,
    self_service=True,
)

ADMIN_PANEL = Panel(
    name="admin",
    roles=ADMIN_PANEL_ROLES,
    token_name="admin_auth_token",
    self_service=False,
)
