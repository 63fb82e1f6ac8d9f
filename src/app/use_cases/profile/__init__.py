"""
Profile Use Cases

Read and update the authenticated account.
"""

from .get_profile_use_case import GetProfileUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .upload_avatar_use_case import UploadAvatarUseCase

__all__ = [
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    "UploadAvatarUseCase",
]
