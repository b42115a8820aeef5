"""FastAPI REST API package."""

from teamthreads.api.dependencies import get_db, get_settings
from teamthreads.api.app import create_app, lifespan

__all__ = [
    "create_app",
    "lifespan",
    "get_db",
    "get_settings",
]
