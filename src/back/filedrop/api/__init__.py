"""FastAPI routers and utilities for the filedrop backend.

Example:
    # Simple usage with create_app()
    from filedrop.api import create_app
    app = create_app()

    # Custom configuration
    from filedrop.api import create_app, APIConfig
    from pathlib import Path
    config = APIConfig(storage_root=Path('/srv/uploads'))
    app = create_app(config)

    # Compose the router manually
    from fastapi import FastAPI
    from filedrop.api import APIConfig, LocalStorage, create_file_router
    config = APIConfig(storage_root=Path('/srv/uploads'))
    storage = LocalStorage(config.storage_root)
    app = FastAPI()
    app.include_router(create_file_router(config, storage), prefix='/api')
"""

# Configuration
from .config import APIConfig

# Errors
from .errors import (
    FileDropError,
    InvalidInputError,
    FileNotFound,
    NameConflictError,
    StorageIOError,
    register_error_handlers,
)

# Storage
from .storage import Storage, LocalStorage, StoredEntry

# Router factories
from .modules.files import FileService, create_file_router

# App factory
from .app import create_app

__all__ = [
    # Configuration
    'APIConfig',
    # Errors
    'FileDropError',
    'InvalidInputError',
    'FileNotFound',
    'NameConflictError',
    'StorageIOError',
    'register_error_handlers',
    # Storage
    'Storage',
    'LocalStorage',
    'StoredEntry',
    # Router factories
    'FileService',
    'create_file_router',
    # App factory
    'create_app',
]
