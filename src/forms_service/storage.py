from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, Field


class StorageObjectMetadata(BaseModel):
    size: int | None = None
    mimetype: str | None = None


class StorageObject(BaseModel):
    """One entry of a bucket folder listing."""

    name: str
    created_at: datetime | None = None
    metadata: StorageObjectMetadata | None = Field(default=None)


class StorageBackend(Protocol):
    """Abstract interface for bucket object storage with signed URLs."""

    def list_objects(self, folder: str, limit: int = 100, offset: int = 0) -> list[StorageObject]:
        """List the objects directly under ``folder``.

        Raises:
            StorageError: If the backend rejects the request.
        """
        ...

    def create_signed_url(self, path: str, expires_in: int) -> str:
        """Return an absolute URL granting read access to ``path`` for ``expires_in`` seconds."""
        ...

    def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        """Store ``content`` at ``path``.

        With ``upsert=False`` an existing object at ``path`` is a failure.
        """
        ...

    def remove(self, paths: list[str]) -> None:
        """Remove the objects at ``paths``."""
        ...
