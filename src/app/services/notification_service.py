from abc import ABC, abstractmethod

from src.domain.entities import User


class INotificationService(ABC):
    """Delivers account emails. Returns False when delivery failed."""

    @abstractmethod
    async def send_verification_link(self, user: User, url: str) -> bool:
        """Send the signed email verification link"""
        pass

    @abstractmethod
    async def send_password_reset(self, user: User, token: str) -> bool:
        """Send the password reset token"""
        pass
