from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from src.forms_service.app import create_app
from src.forms_service.domain import ApplicationFormManager
from src.forms_service.storage import StorageBackend, StorageObject, StorageObjectMetadata
from src.shared.exceptions import StorageError


FIXED_NOW = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeStorageBackend(StorageBackend):
    """In-memory bucket that records every call made against it."""

    def __init__(self) -> None:
        self.objects: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.access_tokens: list[str | None] = []
        self.list_error: Exception | None = None
        self.sign_error: Exception | None = None
        self.upload_error: Exception | None = None
        self.remove_error: Exception | None = None
        self.closed = False

    def add(
        self,
        path: str,
        content: bytes = b"data",
        content_type: str = "application/pdf",
        created_at: datetime | None = FIXED_NOW,
    ) -> None:
        self.objects[path] = {
            "content": content,
            "content_type": content_type,
            "created_at": created_at,
        }

    def calls_of(self, kind: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == kind]

    def list_objects(self, folder: str, limit: int = 100, offset: int = 0) -> list[StorageObject]:
        self.calls.append(("list", folder, limit, offset))
        if self.list_error is not None:
            raise self.list_error

        prefix = f"{folder}/"
        entries = [
            StorageObject(
                name=path[len(prefix):],
                created_at=obj["created_at"],
                metadata=StorageObjectMetadata(
                    size=len(obj["content"]),
                    mimetype=obj["content_type"],
                ),
            )
            for path, obj in self.objects.items()
            if path.startswith(prefix)
        ]
        return entries[offset:offset + limit]

    def create_signed_url(self, path: str, expires_in: int) -> str:
        self.calls.append(("sign", path, expires_in))
        if self.sign_error is not None:
            raise self.sign_error
        return f"https://storage.test/sign/{path}?expiresIn={expires_in}"

    def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        self.calls.append(("upload", path, content_type, cache_control, upsert))
        if self.upload_error is not None:
            raise self.upload_error
        if path in self.objects and not upsert:
            raise StorageError("The resource already exists", status_code=409)
        self.add(path, content=content, content_type=content_type, created_at=FIXED_NOW)

    def remove(self, paths: list[str]) -> None:
        self.calls.append(("remove", list(paths)))
        if self.remove_error is not None:
            raise self.remove_error
        for path in paths:
            self.objects.pop(path, None)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_storage() -> FakeStorageBackend:
    return FakeStorageBackend()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def manager(fake_storage: FakeStorageBackend, fixed_clock) -> ApplicationFormManager:
    return ApplicationFormManager("c1", fake_storage, clock=fixed_clock)


@pytest.fixture
def client(fake_storage: FakeStorageBackend, fixed_clock) -> TestClient:
    """FastAPI test client whose storage factory always hands out the fake."""
    def storage_factory(access_token: str | None) -> FakeStorageBackend:
        fake_storage.access_tokens.append(access_token)
        return fake_storage

    app = create_app(storage_factory=storage_factory, clock=fixed_clock)
    return TestClient(app)
