"""Pydantic schemas for file operations."""
from datetime import datetime

from pydantic import BaseModel, Field


class RenameRequest(BaseModel):
    """Request body for file rename.

    Both fields are optional at the schema level so that a missing field
    gets the same 400 response as an empty one.
    """
    model_config = {"populate_by_name": True}

    current_file_name: str | None = Field(default=None, alias='currentFileName')
    new_name: str | None = Field(default=None, alias='newName')


class StoredFile(BaseModel):
    """One uploaded file as returned by the list endpoint."""
    model_config = {"populate_by_name": True}

    storage_name: str = Field(alias='fileName')
    display_name: str = Field(alias='originalName')
    size_bytes: int = Field(alias='size')
    modified_at: datetime = Field(alias='uploadDate')

    def to_wire(self) -> dict:
        """Serialize with the client's field names and a millisecond UTC timestamp."""
        return {
            'fileName': self.storage_name,
            'originalName': self.display_name,
            'size': self.size_bytes,
            'uploadDate': self.modified_at.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
        }
