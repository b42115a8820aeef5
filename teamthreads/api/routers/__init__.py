"""FastAPI routers for the Team Threads API."""

from teamthreads.api.routers.health import router as health_router
from teamthreads.api.routers.me import router as me_router
from teamthreads.api.routers.messages import router as messages_router
from teamthreads.api.routers.threads import router as threads_router

__all__ = [
    "health_router",
    "me_router",
    "messages_router",
    "threads_router",
]
