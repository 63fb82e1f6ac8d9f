"""
Account Provisioning Use Cases

Out-of-band creation of administrator and owner accounts.
"""

from .provision_account_use_case import ProvisionAccountCommand, ProvisionAccountUseCase

__all__ = [
    "ProvisionAccountCommand",
    "ProvisionAccountUseCase",
]
