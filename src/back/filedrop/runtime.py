"""Production runtime app for filedrop.

Builds the app from environment configuration::

    FILEDROP_STORAGE_ROOT=/srv/uploads uvicorn filedrop.runtime:app
"""

from __future__ import annotations

from .api import APIConfig, create_app


app = create_app(APIConfig())
