"""Files module for filedrop API.

Provides the upload, list, rename and download operations.
"""
from .router import create_file_router
from .schemas import RenameRequest, StoredFile
from .service import FileService

__all__ = [
    'create_file_router',
    'RenameRequest',
    'StoredFile',
    'FileService',
]
