from abc import ABC, abstractmethod


class IBlobStore(ABC):
    """Binary storage for uploaded files (avatars)"""

    @abstractmethod
    async def put(self, directory: str, data: bytes, extension: str) -> str:
        """Store content under a fresh name in directory, return its path"""
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """Delete content. Returns True if it existed."""
        pass

    @abstractmethod
    def url(self, path: str) -> str:
        """Public URL of stored content"""
        pass
