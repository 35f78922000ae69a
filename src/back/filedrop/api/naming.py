"""Storage naming scheme for uploaded files.

An uploaded file is stored as ``<base>_<timestamp_millis><ext>``. The
timestamp is the disambiguation token: it keeps two uploads of the same
original name apart and is stripped again before the name is shown.

Only the last underscore-delimited segment is treated as the token, so a
file placed in the storage root by hand as ``version_2.txt`` displays as
``version.txt``.
"""
from __future__ import annotations

import os
import re
import time
from pathlib import PurePosixPath, PureWindowsPath

# Anything outside this set is replaced when a display name is chosen by the user.
_UNSAFE_NAME_CHARS = re.compile(r'[^a-zA-Z0-9\-_]')


def current_time_millis() -> int:
    """Return the current wall-clock time in milliseconds."""
    return time.time_ns() // 1_000_000


def client_basename(original_name: str) -> str:
    # Browsers may send a full client path (old IE sends C:\...\name.ext).
    return PurePosixPath(PureWindowsPath(original_name).name).name


def make_storage_name(original_name: str, timestamp_millis: int) -> str:
    """Derive the on-disk name for an upload.

    Args:
        original_name: File name supplied by the client
        timestamp_millis: Disambiguation token (milliseconds since epoch)

    Returns:
        ``<base>_<timestamp_millis><ext>``
    """
    base, ext = os.path.splitext(client_basename(original_name))
    return f'{base}_{timestamp_millis}{ext}'


def split_storage_name(storage_name: str) -> tuple[str, str]:
    """Return ``(token, ext)`` for a storage name.

    The token is the text after the last underscore up to its first dot.
    The extension is that of the whole name, as ``os.path.splitext`` sees it.
    """
    ext = os.path.splitext(storage_name)[1]
    token = storage_name.rsplit('_', 1)[-1].split('.', 1)[0]
    return token, ext


def display_name_of(storage_name: str) -> str:
    """Recover the user-facing name by removing the disambiguation token.

    Names that do not end in ``_<token><ext>`` are returned unchanged.
    """
    token, ext = split_storage_name(storage_name)
    suffix = f'_{token}{ext}'
    if not storage_name.endswith(suffix):
        return storage_name
    return storage_name[: -len(suffix)] + ext


def sanitize_display_base(requested: str) -> str:
    """Replace every character outside ``[A-Za-z0-9-_]`` with ``_``."""
    return _UNSAFE_NAME_CHARS.sub('_', requested)


def renamed_storage_name(current_storage_name: str, requested: str) -> tuple[str, str]:
    """Build the storage and display names for a rename.

    The disambiguation token and extension of the current name are kept.

    Returns:
        ``(new_storage_name, new_display_name)``
    """
    token, ext = split_storage_name(current_storage_name)
    sanitized = sanitize_display_base(requested)
    return f'{sanitized}_{token}{ext}', f'{sanitized}{ext}'
