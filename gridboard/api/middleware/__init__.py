"""API middleware for gridboard."""

from gridboard.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
]
