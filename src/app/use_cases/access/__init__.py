"""
Access Use Cases

Per-request admission decisions.
"""

from .authorize_request_use_case import AuthContext, AuthorizeRequestUseCase

__all__ = [
    "AuthContext",
    "AuthorizeRequestUseCase",
]
