import uuid
from pathlib import Path

from src.app.services.blob_store import IBlobStore


class LocalBlobStore(IBlobStore):
    """Store uploads on the local filesystem, served under public_url"""

    def __init__(self, base_path: str, public_url: str):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_url = public_url.rstrip("/")

    def _key_to_path(self, key: str) -> Path:
        path = (self.base_path / key).resolve()
        if self.base_path.resolve() not in path.parents:
            raise ValueError(f"Path escapes storage root: {key}")
        return path

    async def put(self, directory: str, data: bytes, extension: str) -> str:
        key = f"{directory.strip('/')}/{uuid.uuid4().hex}.{extension.lstrip('.')}"
        path = self._key_to_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return key

    async def delete(self, path: str) -> bool:
        file_path = self._key_to_path(path)
        if file_path.exists():
            file_path.unlink()
            return True
        return False

    def url(self, path: str) -> str:
        return f"{self.public_url}/{path}"
