"""
Account Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import PermissionName, RoleName

# Export all entities
from .user import User
from .access_token import AccessToken
from .permission import Permission, RolePermission
from .password_reset_token import PasswordResetToken
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "RoleName",
    "PermissionName",
    # Entities
    "User",
    "AccessToken",
    "Permission",
    "RolePermission",
    "PasswordResetToken",
    "AuditEvent",
]
