"""File operation routes for filedrop API."""
from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response

from ...config import APIConfig
from ...storage import Storage
from .schemas import RenameRequest
from .service import FileService, content_disposition


def create_file_router(
    config: APIConfig,
    storage: Storage,
    service: FileService | None = None,
) -> APIRouter:
    """Create file operations router.

    Args:
        config: API configuration
        storage: Storage backend
        service: Pre-built service (tests inject one with a fixed clock)

    Returns:
        Configured APIRouter with upload, files, rename and download endpoints
    """
    router = APIRouter(tags=['files'])
    service = service or FileService(config, storage)

    @router.post('/upload')
    async def upload_file(file: UploadFile | None = File(None)):
        """Upload one file from the multipart field ``file``.

        The whole payload is read before anything is written, so an
        aborted upload never leaves a partial file behind.
        """
        if file is None:
            return service.upload_file(None, None)
        try:
            data = await file.read()
        finally:
            await file.close()
        return service.upload_file(file.filename, data)

    @router.get('/files')
    async def list_files():
        """List uploaded files, newest first."""
        return service.list_files()

    @router.post('/rename')
    async def rename_file(body: RenameRequest):
        """Rename file.

        Args:
            body: Request with currentFileName and newName

        Returns:
            dict with old/new storage names and the new display name
        """
        return service.rename_file(body.current_file_name, body.new_name)

    @router.get('/download/{filename}')
    async def download_file(filename: str):
        """Download a stored file under its display name."""
        data, display_name = service.download_file(filename)
        return Response(
            content=data,
            media_type='application/octet-stream',
            headers={'Content-Disposition': content_disposition(display_name)},
        )

    return router
