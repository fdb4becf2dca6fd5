from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator

from fastapi import FastAPI, File, Header, HTTPException, Query, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from src.forms_service.config import load_config
from src.forms_service.domain import (
    FILE_TOO_LARGE_MESSAGE,
    MAX_FILE_SIZE,
    UNSUPPORTED_TYPE_MESSAGE,
    ApplicationFormManager,
    FileUpload,
    ManagerView,
    UploadedFile,
    build_object_path,
)
from src.forms_service.formatting import format_date, format_file_size
from src.forms_service.storage import StorageBackend
from src.forms_service.supabase_storage import SupabaseStorageClient
from src.shared.auth import bearer_token
from src.shared.logging_config import setup_logging


StorageFactory = Callable[[str | None], StorageBackend]

VALIDATION_MESSAGES = (UNSUPPORTED_TYPE_MESSAGE, FILE_TOO_LARGE_MESSAGE)


class FileEntry(UploadedFile):
    size_label: str
    uploaded_label: str


class ApplicationFormsResponse(BaseModel):
    client_id: str
    files: list[FileEntry]
    loading: bool
    uploading: bool
    error: str | None = None
    success: str | None = None
    empty_message: str | None = None


def create_production_app() -> FastAPI:
    config = load_config()
    setup_logging(config.log_level)

    def storage_factory(access_token: str | None) -> StorageBackend:
        return SupabaseStorageClient(
            config.supabase,
            bucket=config.bucket,
            access_token=access_token,
        )

    return create_app(
        storage_factory=storage_factory,
        display_timezone=config.display_timezone,
        signed_url_expires_in=config.signed_url_expires_in,
        list_limit=config.list_limit,
    )


def create_app(
    storage_factory: StorageFactory,
    clock: Callable[[], datetime] | None = None,
    display_timezone: str = "UTC",
    signed_url_expires_in: int = 3600,
    list_limit: int = 100,
) -> FastAPI:
    app = FastAPI(title="Application Forms Service")

    @contextmanager
    def mounted_manager(client_id: str, authorization: str | None) -> Iterator[ApplicationFormManager]:
        """Create a manager for one request and load its file list, as on mount."""
        storage = storage_factory(bearer_token(authorization))
        options = {
            "signed_url_expires_in": signed_url_expires_in,
            "list_limit": list_limit,
        }
        if clock is not None:
            options["clock"] = clock
        try:
            manager = ApplicationFormManager(client_id, storage, **options)
            manager.load_files()
            yield manager
        finally:
            close = getattr(storage, "close", None)
            if close is not None:
                close()

    def to_response(view: ManagerView) -> ApplicationFormsResponse:
        return ApplicationFormsResponse(
            client_id=view.client_id,
            files=[
                FileEntry(
                    **f.model_dump(),
                    size_label=format_file_size(f.size),
                    uploaded_label=format_date(f.uploaded_at, display_timezone),
                )
                for f in view.files
            ],
            loading=view.loading,
            uploading=view.uploading,
            error=view.error,
            success=view.success,
            empty_message=view.empty_message,
        )

    def list_forms(client_id: str, authorization: str | None) -> ManagerView:
        with mounted_manager(client_id, authorization) as manager:
            return manager.view()

    def upload_form(client_id: str, authorization: str | None, upload: FileUpload) -> ManagerView:
        with mounted_manager(client_id, authorization) as manager:
            manager.upload_file(upload)
            return manager.view()

    def delete_form(
        client_id: str,
        authorization: str | None,
        filename: str,
        confirm: bool,
    ) -> ManagerView:
        with mounted_manager(client_id, authorization) as manager:
            manager.delete_file(
                build_object_path(client_id, filename),
                filename,
                confirm=lambda prompt: confirm,
            )
            return manager.view()

    def locate_download(client_id: str, authorization: str | None, filename: str):
        with mounted_manager(client_id, authorization) as manager:
            if manager.error:
                raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=manager.error)
            entry = next((f for f in manager.files if f.name == filename), None)
            if entry is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
            link = manager.download_file(entry.url, entry.name)
            if link is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=manager.error)
            return link

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get(
        "/clients/{client_id}/application-forms",
        response_model=ApplicationFormsResponse,
    )
    def get_application_forms(
        client_id: str,
        response: Response,
        authorization: str | None = Header(default=None),
    ) -> ApplicationFormsResponse:
        view = list_forms(client_id, authorization)
        if view.error:
            response.status_code = status.HTTP_502_BAD_GATEWAY
        return to_response(view)

    @app.post(
        "/clients/{client_id}/application-forms",
        status_code=status.HTTP_201_CREATED,
        response_model=ApplicationFormsResponse,
    )
    async def upload_application_form(
        client_id: str,
        response: Response,
        file: UploadFile = File(...),
        authorization: str | None = Header(default=None),
    ) -> ApplicationFormsResponse:
        """Upload one application form for the client and return the refreshed list."""
        # One byte past the limit is enough for the size check to reject it.
        content = await file.read(MAX_FILE_SIZE + 1)
        upload = FileUpload(
            filename=file.filename or "",
            content_type=file.content_type or "",
            content=content,
        )

        view = await run_in_threadpool(upload_form, client_id, authorization, upload)
        if view.error in VALIDATION_MESSAGES:
            response.status_code = status.HTTP_400_BAD_REQUEST
        elif view.error:
            response.status_code = status.HTTP_502_BAD_GATEWAY
        return to_response(view)

    @app.delete(
        "/clients/{client_id}/application-forms/{filename}",
        response_model=ApplicationFormsResponse,
    )
    def delete_application_form(
        client_id: str,
        filename: str,
        response: Response,
        confirm: bool = Query(default=False),
        authorization: str | None = Header(default=None),
    ) -> ApplicationFormsResponse:
        view = delete_form(client_id, authorization, filename, confirm)
        if view.error:
            response.status_code = status.HTTP_502_BAD_GATEWAY
        return to_response(view)

    @app.get("/clients/{client_id}/application-forms/{filename}/download")
    def download_application_form(
        client_id: str,
        filename: str,
        authorization: str | None = Header(default=None),
    ) -> RedirectResponse:
        link = locate_download(client_id, authorization, filename)
        return RedirectResponse(link.url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    return app
