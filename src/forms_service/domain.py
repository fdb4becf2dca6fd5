import logging
from datetime import datetime, timezone
from typing import Callable

from pydantic import BaseModel

from src.forms_service.storage import StorageBackend
from src.shared.exceptions import StorageError


logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
    "image/jpeg",
    "image/png",
    "image/gif",
)
MAX_FILE_SIZE = 50 * 1024 * 1024
SIGNED_URL_EXPIRES_IN = 3600
LIST_LIMIT = 100
CACHE_CONTROL = "3600"

UNSUPPORTED_TYPE_MESSAGE = (
    "File type not supported. Please upload PDF, Word, Excel, text, or image files."
)
FILE_TOO_LARGE_MESSAGE = "File size must be less than 50MB"
EMPTY_LIST_MESSAGE = "No files uploaded yet"


class UploadedFile(BaseModel):
    name: str
    path: str
    size: int
    uploaded_at: datetime
    url: str | None = None


class FileUpload(BaseModel):
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class DownloadLink(BaseModel):
    url: str
    filename: str


class ManagerView(BaseModel):
    client_id: str
    files: list[UploadedFile]
    loading: bool
    uploading: bool
    error: str | None = None
    success: str | None = None
    empty_message: str | None = None


def validate_upload(upload: FileUpload, max_size: int = MAX_FILE_SIZE) -> None:
    """Check an upload against the MIME allow-list and the size limit.

    Raises:
        ValueError: With the user-facing message when a check fails.
    """
    if upload.content_type not in ALLOWED_MIME_TYPES:
        raise ValueError(UNSUPPORTED_TYPE_MESSAGE)
    if upload.size > max_size:
        raise ValueError(FILE_TOO_LARGE_MESSAGE)


def format_upload_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds, with ``:`` and ``.`` replaced by ``-``.

    ``2025-01-01T00:00:00.000Z`` becomes ``2025-01-01T00-00-00-000Z``.
    """
    moment = moment.astimezone(timezone.utc)
    iso = f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def derive_object_name(filename: str, moment: datetime) -> str:
    """Build ``<base>_<timestamp>.<ext>`` for an upload.

    ``base`` is the filename up to its first dot and ``ext`` the text after
    its last dot; a name without dots uses itself for both.
    """
    parts = filename.split(".")
    return f"{parts[0]}_{format_upload_timestamp(moment)}.{parts[-1]}"


def build_object_path(client_id: str, name: str) -> str:
    return f"{client_id}/{name}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationFormManager:
    """Lists, uploads, downloads and deletes the application forms of one client.

    The manager keeps only transient view state: the current file list, the
    loading/uploading flags and at most one of an error or a success message.
    Every operation reports failures through that state and never raises.
    """

    def __init__(
        self,
        client_id: str,
        storage: StorageBackend,
        clock: Callable[[], datetime] = _utc_now,
        signed_url_expires_in: int = SIGNED_URL_EXPIRES_IN,
        list_limit: int = LIST_LIMIT,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        self.client_id = client_id
        self._storage = storage
        self._clock = clock
        self._signed_url_expires_in = signed_url_expires_in
        self._list_limit = list_limit
        self._max_file_size = max_file_size

        self.files: list[UploadedFile] = []
        self.loading = True
        self.uploading = False
        self.error: str | None = None
        self.success: str | None = None

    def _fail(self, message: str) -> None:
        self.error = message
        self.success = None

    def _succeed(self, message: str) -> None:
        self.success = message
        self.error = None

    def view(self) -> ManagerView:
        return ManagerView(
            client_id=self.client_id,
            files=list(self.files),
            loading=self.loading,
            uploading=self.uploading,
            error=self.error,
            success=self.success,
            empty_message=EMPTY_LIST_MESSAGE if not self.loading and not self.files else None,
        )

    def _to_uploaded_file(self, entry) -> UploadedFile:
        path = build_object_path(self.client_id, entry.name)
        try:
            url = self._storage.create_signed_url(path, self._signed_url_expires_in)
        except StorageError as e:
            logger.warning("Could not sign %s: %s", path, e.message)
            url = None

        size = entry.metadata.size if entry.metadata and entry.metadata.size else 0
        return UploadedFile(
            name=entry.name,
            path=path,
            size=size,
            uploaded_at=entry.created_at or self._clock(),
            url=url,
        )

    def load_files(self) -> None:
        """Replace the file list with the backend listing of the client folder."""
        try:
            self.loading = True
            self.error = None

            entries = self._storage.list_objects(
                self.client_id, limit=self._list_limit, offset=0
            )
            self.files = [self._to_uploaded_file(entry) for entry in entries]
        except StorageError as e:
            logger.error("Error listing files for %s: %s", self.client_id, e.message)
            self._fail(f"Failed to load files: {e.message}")
        except Exception:
            logger.exception("Unexpected error listing files for %s", self.client_id)
            self._fail("Failed to load application forms")
        finally:
            self.loading = False

    def upload_file(self, upload: FileUpload | None) -> None:
        """Validate and store one file under the client folder, then re-list."""
        if upload is None:
            return

        try:
            self.uploading = True
            self.error = None
            self.success = None

            try:
                validate_upload(upload, self._max_file_size)
            except ValueError as e:
                self._fail(str(e))
                return

            name = derive_object_name(upload.filename, self._clock())
            path = build_object_path(self.client_id, name)
            logger.info(
                "Uploading file name=%s path=%s type=%s size=%s",
                name, path, upload.content_type, upload.size,
            )

            try:
                self._storage.upload(
                    path,
                    upload.content,
                    content_type=upload.content_type,
                    cache_control=CACHE_CONTROL,
                    upsert=False,
                )
            except StorageError as e:
                logger.error("Upload of %s failed: %s", path, e.message)
                self._fail(f"Upload failed: {e.message}")
                return

            self._succeed(f'File "{upload.filename}" uploaded successfully!')
            self.load_files()
        except Exception:
            logger.exception("Unexpected error uploading %s", upload.filename)
            self._fail("An unexpected error occurred during upload")
        finally:
            self.uploading = False

    def delete_file(
        self,
        path: str,
        display_name: str,
        confirm: Callable[[str], bool],
    ) -> None:
        """Remove one object after ``confirm`` approves the prompt, then re-list."""
        if not confirm(f'Are you sure you want to delete "{display_name}"?'):
            return

        try:
            self.uploading = True
            self.error = None
            self.success = None

            try:
                self._storage.remove([path])
            except StorageError as e:
                logger.error("Delete of %s failed: %s", path, e.message)
                self._fail(f"Failed to delete file: {e.message}")
                return

            self._succeed(f'File "{display_name}" deleted successfully!')
            self.load_files()
        except Exception:
            logger.exception("Unexpected error deleting %s", path)
            self._fail("Failed to delete file")
        finally:
            self.uploading = False

    def download_file(self, url: str | None, display_name: str) -> DownloadLink | None:
        """Hand back the already-signed URL for ``display_name``, if there is one."""
        try:
            if not url:
                self._fail("Download URL not available")
                return None
            return DownloadLink(url=url, filename=display_name)
        except Exception:
            logger.exception("Unexpected error preparing download of %s", display_name)
            self._fail("Failed to download file")
            return None
