"""
Account Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class RoleName(str, Enum):
    """Coarse account role; every account holds exactly one"""

    owner = "OWNER"
    admin = "ADMIN"
    user = "USER"


class PermissionName(str, Enum):
    """Fine-grained capabilities, granted to roles in bundles"""

    view_users = "VIEW_USERS"
    update_users = "UPDATE_USERS"
    delete_users = "DELETE_USERS"

    view_admins = "VIEW_ADMINS"
    create_admins = "CREATE_ADMINS"
    update_admins = "UPDATE_ADMINS"
    delete_admins = "DELETE_ADMINS"

    manage_permissions = "MANAGE_PERMISSIONS"
    manage_roles = "MANAGE_ROLES"
