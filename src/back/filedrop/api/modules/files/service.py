"""File operations service for filedrop API."""
from typing import Callable
from urllib.parse import quote

from ...config import APIConfig
from ...errors import (
    FileNotFound,
    InvalidInputError,
    NameConflictError,
    StorageIOError,
)
from ...naming import (
    client_basename,
    current_time_millis,
    display_name_of,
    make_storage_name,
    renamed_storage_name,
)
from ...storage import Storage
from ....observability.logging import get_logger
from ....observability.metrics import FILE_OPERATIONS_TOTAL, UPLOADED_BYTES_TOTAL
from .schemas import StoredFile

logger = get_logger(__name__)


def content_disposition(display_name: str) -> str:
    """Build an attachment Content-Disposition header for a display name.

    ASCII names produce ``attachment; filename="<name>"``. Other names get
    an ASCII fallback plus an RFC 5987 ``filename*`` parameter, since
    header values must be latin-1 encodable.
    """
    escaped = display_name.replace('\\', '\\\\').replace('"', '\\"')
    if display_name.isascii():
        return f'attachment; filename="{escaped}"'
    fallback = escaped.encode('ascii', 'replace').decode('ascii')
    return f'attachment; filename="{fallback}"; filename*=UTF-8\'\'{quote(display_name)}'


class FileService:
    """Service class for the upload, list, rename and download operations.

    Translates storage exceptions into the FileDropError hierarchy; the
    app's exception handlers turn those into JSON error responses.
    """

    def __init__(
        self,
        config: APIConfig,
        storage: Storage,
        clock: Callable[[], int] = current_time_millis,
    ):
        """Initialize the file service.

        Args:
            config: API configuration (for upload limits)
            storage: Storage backend
            clock: Source of disambiguation timestamps in milliseconds
        """
        self.config = config
        self.storage = storage
        self.clock = clock

    def upload_file(self, original_name: str | None, data: bytes | None) -> dict:
        """Store a fully buffered upload under a timestamped name.

        Args:
            original_name: File name supplied by the client
            data: Complete file content

        Returns:
            dict with fileName, originalName and size

        Raises:
            InvalidInputError: If no file was received or it is too large
            StorageIOError: If the write fails
        """
        display_name = client_basename(original_name) if original_name else ''
        if not display_name or data is None:
            FILE_OPERATIONS_TOTAL.labels(operation='upload', outcome='invalid').inc()
            raise InvalidInputError('No file received', operation='upload')

        limit = self.config.max_upload_bytes
        if limit is not None and len(data) > limit:
            FILE_OPERATIONS_TOTAL.labels(operation='upload', outcome='invalid').inc()
            raise InvalidInputError(
                f'File exceeds the maximum upload size of {limit} bytes',
                operation='upload',
            )

        storage_name = make_storage_name(display_name, self.clock())
        try:
            self.storage.ensure_root_exists()
            self.storage.write(storage_name, data)
        except (OSError, ValueError) as e:
            FILE_OPERATIONS_TOTAL.labels(operation='upload', outcome='error').inc()
            raise StorageIOError(
                'Error uploading file', operation='upload', storage_name=storage_name,
            ) from e

        FILE_OPERATIONS_TOTAL.labels(operation='upload', outcome='ok').inc()
        UPLOADED_BYTES_TOTAL.inc(len(data))
        logger.info(
            'file_uploaded',
            storage_name=storage_name,
            original_name=display_name,
            size=len(data),
        )
        return {
            'success': True,
            'message': 'File uploaded successfully',
            'fileName': storage_name,
            'originalName': display_name,
            'size': len(data),
        }

    def list_files(self) -> dict:
        """List stored files, newest first.

        A missing storage root yields an empty list.
        """
        if not self.storage.root_exists():
            return {'success': True, 'files': []}
        try:
            entries = self.storage.list_entries()
        except OSError as e:
            FILE_OPERATIONS_TOTAL.labels(operation='list', outcome='error').inc()
            raise StorageIOError('Error reading files', operation='list') from e

        files = [
            StoredFile(
                storage_name=entry.name,
                display_name=display_name_of(entry.name),
                size_bytes=entry.size,
                modified_at=entry.modified_at,
            )
            for entry in entries
        ]
        # sorted() is stable, so ties keep enumeration order
        files = sorted(files, key=lambda f: f.modified_at, reverse=True)
        FILE_OPERATIONS_TOTAL.labels(operation='list', outcome='ok').inc()
        return {'success': True, 'files': [f.to_wire() for f in files]}

    def rename_file(self, current_file_name: str | None, new_name: str | None) -> dict:
        """Give a stored file a new display name, keeping its token and extension.

        Args:
            current_file_name: Storage name of the file to rename
            new_name: Requested display base; sanitized before use

        Returns:
            dict with oldFileName, newFileName and newDisplayName

        Raises:
            InvalidInputError: If a field is missing or the name is not a stored file name
            FileNotFound: If the current file does not exist
            NameConflictError: If the new storage name is taken
        """
        if not current_file_name or not new_name:
            FILE_OPERATIONS_TOTAL.labels(operation='rename', outcome='invalid').inc()
            raise InvalidInputError(
                'Current filename and new name are required', operation='rename',
            )
        try:
            found = self.storage.exists(current_file_name)
        except ValueError as e:
            FILE_OPERATIONS_TOTAL.labels(operation='rename', outcome='invalid').inc()
            raise InvalidInputError(
                'Invalid file name', operation='rename', storage_name=current_file_name,
            ) from e
        if not found:
            FILE_OPERATIONS_TOTAL.labels(operation='rename', outcome='not_found').inc()
            raise FileNotFound(
                'File not found', operation='rename', storage_name=current_file_name,
            )

        new_storage_name, new_display_name = renamed_storage_name(current_file_name, new_name)
        if self.storage.exists(new_storage_name):
            FILE_OPERATIONS_TOTAL.labels(operation='rename', outcome='conflict').inc()
            raise NameConflictError(
                'A file with this name already exists',
                operation='rename',
                storage_name=new_storage_name,
            )

        try:
            self.storage.rename(current_file_name, new_storage_name)
        except FileNotFoundError as e:
            raise FileNotFound(
                'File not found', operation='rename', storage_name=current_file_name,
            ) from e
        except FileExistsError as e:
            raise NameConflictError(
                'A file with this name already exists',
                operation='rename',
                storage_name=new_storage_name,
            ) from e
        except OSError as e:
            FILE_OPERATIONS_TOTAL.labels(operation='rename', outcome='error').inc()
            raise StorageIOError(
                'Error renaming file', operation='rename', storage_name=current_file_name,
            ) from e

        FILE_OPERATIONS_TOTAL.labels(operation='rename', outcome='ok').inc()
        logger.info(
            'file_renamed',
            old_storage_name=current_file_name,
            new_storage_name=new_storage_name,
        )
        return {
            'success': True,
            'message': 'File renamed successfully',
            'oldFileName': current_file_name,
            'newFileName': new_storage_name,
            'newDisplayName': new_display_name,
        }

    def download_file(self, storage_name: str) -> tuple[bytes, str]:
        """Read a stored file for download.

        Returns:
            (content, display_name)
        """
        try:
            data = self.storage.read(storage_name)
        except ValueError as e:
            FILE_OPERATIONS_TOTAL.labels(operation='download', outcome='invalid').inc()
            raise InvalidInputError(
                'Invalid file name', operation='download', storage_name=storage_name,
            ) from e
        except (FileNotFoundError, IsADirectoryError) as e:
            FILE_OPERATIONS_TOTAL.labels(operation='download', outcome='not_found').inc()
            raise FileNotFound(
                'File not found', operation='download', storage_name=storage_name,
            ) from e
        except OSError as e:
            FILE_OPERATIONS_TOTAL.labels(operation='download', outcome='error').inc()
            raise StorageIOError(
                'Error downloading file', operation='download', storage_name=storage_name,
            ) from e

        FILE_OPERATIONS_TOTAL.labels(operation='download', outcome='ok').inc()
        logger.info('file_downloaded', storage_name=storage_name, size=len(data))
        return data, display_name_of(storage_name)
