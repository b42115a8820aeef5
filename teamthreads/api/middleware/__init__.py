"""API middleware for request/response processing."""

from teamthreads.api.middleware.error_handler import error_handling_middleware
from teamthreads.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "error_handling_middleware",
    "RequestContextMiddleware",
]
