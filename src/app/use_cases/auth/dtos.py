"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth and profile flows.
Provides type safety and clear contracts between layers.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    first_name: str
    last_name: str
    email: str
    password: str


class UpdateProfileCommand(BaseModel):
    """Partial profile update; only fields explicitly set are applied"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    email: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class RoleInfo(BaseModel):
    name: str


class AccountView(BaseModel):
    """Public projection of an account"""

    id: str
    first_name: Optional[str]
    last_name: Optional[str]
    date_of_birth: Optional[str]
    email: str
    phone: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    email_verified_at: Optional[str]
    avatar: Optional[str]
    created_at: Optional[str]
    role: Optional[RoleInfo]
    permissions: List[str]


class AuthResponse(BaseModel):
    """Response for register and login: account view plus bearer token"""

    user: AccountView
    token: str


class ProfileResponse(BaseModel):
    user: AccountView
