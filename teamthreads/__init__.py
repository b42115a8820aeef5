"""Team-scoped authorization and threaded messaging backend."""

__version__ = "0.1.0"
