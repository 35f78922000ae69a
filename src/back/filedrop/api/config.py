"""Configuration for filedrop API."""
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..observability.logging import LOG_FORMATS


def _default_storage_root() -> Path:
    """Storage root from FILEDROP_STORAGE_ROOT, else ./uploads."""
    raw = os.environ.get('FILEDROP_STORAGE_ROOT', '').strip()
    if raw:
        return Path(raw)
    return Path.cwd() / 'uploads'


def _default_cors_origins() -> list[str]:
    """Get default CORS origins, supporting env override."""
    env_origins = os.environ.get('CORS_ORIGINS', '')
    if env_origins:
        return [o.strip() for o in env_origins.split(',') if o.strip()]
    return [
        'http://localhost:3000',
        'http://localhost:8000',
        'http://127.0.0.1:3000',
        'http://127.0.0.1:8000',
    ]


def _default_max_upload_bytes() -> int | None:
    raw = os.environ.get('FILEDROP_MAX_UPLOAD_BYTES', '').strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid FILEDROP_MAX_UPLOAD_BYTES='{raw}'. Must be a positive integer."
        )
    if value <= 0:
        raise ValueError(
            f"Invalid FILEDROP_MAX_UPLOAD_BYTES='{raw}'. Must be a positive integer."
        )
    return value


def _default_log_format() -> str:
    value = os.environ.get('LOG_FORMAT', '').strip().lower() or 'json'
    if value not in LOG_FORMATS:
        raise ValueError(
            f"Invalid LOG_FORMAT='{value}'. Must be one of: {', '.join(LOG_FORMATS)}."
        )
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    return raw in {'1', 'true', 'yes', 'on'}


@dataclass
class APIConfig:
    """Central configuration for all API routers.

    This dataclass is passed to every create_*_router() factory, so the
    storage root is an explicit value instead of the process working
    directory.
    """
    storage_root: Path = field(default_factory=_default_storage_root)
    cors_origins: list[str] = field(default_factory=_default_cors_origins)

    # Uploads above this size are rejected with 400. None means unlimited.
    max_upload_bytes: int | None = field(default_factory=_default_max_upload_bytes)

    # Serve the single-page client at / from the package's static directory
    serve_ui: bool = field(default_factory=lambda: _env_flag('FILEDROP_SERVE_UI', True))

    # Passed to configure_logging() by create_app()
    log_level: str = field(
        default_factory=lambda: os.environ.get('LOG_LEVEL', '').strip() or 'INFO'
    )
    log_format: str = field(default_factory=_default_log_format)

    def __post_init__(self) -> None:
        self.storage_root = Path(self.storage_root)

    def validate_startup(self) -> None:
        """Validate configuration at startup.

        The storage root may be missing (it is created on first upload),
        but it must not be an existing non-directory.

        Raises:
            ValueError: If the storage root cannot be used
        """
        if self.storage_root.exists() and not self.storage_root.is_dir():
            raise ValueError(
                f"Startup validation failed.\n"
                f"Storage root is not a directory: {self.storage_root}\n"
                f"\n"
                f"Set FILEDROP_STORAGE_ROOT to a directory path and retry."
            )
