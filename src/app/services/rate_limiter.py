from abc import ABC, abstractmethod


class IRateLimiter(ABC):
    """Shared hit counter keyed by rate_limit_key()"""

    @abstractmethod
    async def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Count one attempt. Returns False once the limit is exceeded."""
        pass


def rate_limit_key(operation: str, client_ip: str, subject: str = "") -> str:
    """Key one throttled operation by caller address and, when known, account/email"""
    subject = subject.strip().lower()
    return f"{operation}:{client_ip}:{subject}" if subject else f"{operation}:{client_ip}"
