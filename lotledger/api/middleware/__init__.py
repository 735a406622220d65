"""API middleware."""

from lotledger.api.middleware.error_handler import ErrorHandlerMiddleware
from lotledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
