"""Storage abstraction for uploaded files."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path


@dataclass(frozen=True)
class StoredEntry:
    """One entry of the storage root as reported by the filesystem."""
    name: str
    size: int
    modified_at: datetime


class Storage(ABC):
    """Abstract storage interface.

    Implementations hold files in a single flat namespace.
    All names are plain file names relative to the storage root.
    """

    @abstractmethod
    def ensure_root_exists(self) -> None:
        """Create the storage root (and parents) if missing."""
        ...

    @abstractmethod
    def root_exists(self) -> bool:
        """Check if the storage root exists."""
        ...

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if a stored file exists."""
        ...

    @abstractmethod
    def write(self, name: str, data: bytes) -> None:
        """Create or overwrite a stored file."""
        ...

    @abstractmethod
    def read(self, name: str) -> bytes:
        """Read a stored file. Raises FileNotFoundError if absent."""
        ...

    @abstractmethod
    def list_entries(self) -> list[StoredEntry]:
        """List the storage root. Returns [] if the root does not exist."""
        ...

    @abstractmethod
    def rename(self, old_name: str, new_name: str) -> None:
        """Rename a stored file without overwriting an existing one."""
        ...


class LocalStorage(Storage):
    """Local filesystem storage implementation."""

    def __init__(self, root: Path | str):
        """Initialize with the storage root directory.

        Args:
            root: Directory holding all uploaded files
        """
        self.root = Path(root).resolve()

    def _abs(self, name: str) -> Path:
        """Convert a stored file name to an absolute path directly under root.

        Raises:
            ValueError: If the name is empty or points anywhere but the root
        """
        if not name:
            raise ValueError('Empty file name')
        resolved = (self.root / name).resolve()
        if resolved.parent != self.root:
            raise ValueError(f'Path outside of storage root: {name}')
        return resolved

    def ensure_root_exists(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def root_exists(self) -> bool:
        return self.root.is_dir()

    def exists(self, name: str) -> bool:
        return self._abs(name).exists()

    def write(self, name: str, data: bytes) -> None:
        p = self._abs(name)
        with open(p, 'wb') as f:
            f.write(data)

    def read(self, name: str) -> bytes:
        p = self._abs(name)
        with open(p, 'rb') as f:
            return f.read()

    def list_entries(self) -> list[StoredEntry]:
        entries = []
        try:
            children = list(self.root.iterdir())
        except FileNotFoundError:
            return []
        for child in children:
            try:
                st = child.stat()
            except FileNotFoundError:
                # Renamed away between iterdir() and stat()
                continue
            entries.append(StoredEntry(
                name=child.name,
                size=st.st_size,
                modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            ))
        return entries

    def rename(self, old_name: str, new_name: str) -> None:
        old_p = self._abs(old_name)
        new_p = self._abs(new_name)
        if not old_p.exists():
            raise FileNotFoundError(f'Path not found: {old_name}')
        if new_p.exists():
            raise FileExistsError(f'Path already exists: {new_name}')
        old_p.rename(new_p)
