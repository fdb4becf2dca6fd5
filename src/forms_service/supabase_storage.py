import logging

import httpx
from storage3 import SyncStorageClient
from supabase import StorageException

from src.forms_service.storage import StorageObject
from src.shared.config import SupabaseConfig
from src.shared.exceptions import StorageError


logger = logging.getLogger(__name__)


def _to_storage_error(error: Exception) -> StorageError:
    """Flatten SDK and transport failures into a StorageError.

    Newer storage3 releases raise ``StorageApiError`` with ``message`` and
    ``status`` attributes. Older ones raise ``StorageException`` carrying the
    JSON error body as its only argument.
    """
    if isinstance(error, httpx.HTTPError):
        return StorageError(str(error) or type(error).__name__)

    message = getattr(error, "message", None)
    status = getattr(error, "status", None)
    if message is None and error.args and isinstance(error.args[0], dict):
        body = error.args[0]
        message = body.get("message") or body.get("error")
        status = body.get("statusCode")
    if message is None:
        message = str(error)

    status_code = int(status) if str(status).isdigit() else None
    return StorageError(str(message), status_code=status_code)


class SupabaseStorageClient:
    """StorageBackend over one Supabase Storage bucket.

    The anon key goes out as ``apikey`` and the caller's access token (or the
    anon key when there is no session) as the bearer credential, so bucket
    policies are evaluated against the caller.
    """

    def __init__(
        self,
        config: SupabaseConfig,
        bucket: str = "application-forms",
        access_token: str | None = None,
        bucket_api=None,
    ) -> None:
        self._bucket = bucket
        self._storage = None
        if bucket_api is None:
            self._storage = SyncStorageClient(
                f"{config.url.rstrip('/')}/storage/v1/",
                {
                    "apikey": config.anon_key,
                    "Authorization": f"Bearer {access_token or config.anon_key}",
                },
                timeout=int(config.timeout),
            )
            bucket_api = self._storage.from_(bucket)
        self._bucket_api = bucket_api

    def close(self) -> None:
        if self._storage is not None:
            self._storage._client.close()

    def _call(self, operation: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (StorageException, httpx.HTTPError) as e:
            error = _to_storage_error(e)
            logger.error(
                "Storage %s on bucket %s failed with %s: %s",
                operation, self._bucket, error.status_code, error.message,
            )
            raise error from e

    def list_objects(self, folder: str, limit: int = 100, offset: int = 0) -> list[StorageObject]:
        entries = self._call(
            "list",
            self._bucket_api.list,
            folder,
            {
                "limit": limit,
                "offset": offset,
                "sortBy": {"column": "name", "order": "asc"},
            },
        )
        return [StorageObject(**entry) for entry in entries]

    def create_signed_url(self, path: str, expires_in: int) -> str:
        result = self._call("sign", self._bucket_api.create_signed_url, path, expires_in)
        return result.get("signedUrl") or result["signedURL"]

    def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        cache_control: str = "3600",
        upsert: bool = False,
    ) -> None:
        self._call(
            "upload",
            self._bucket_api.upload,
            path,
            content,
            file_options={
                "content-type": content_type,
                "cache-control": cache_control,
                "upsert": "true" if upsert else "false",
            },
        )

    def remove(self, paths: list[str]) -> None:
        self._call("remove", self._bucket_api.remove, paths)
