"""HTTP Middleware"""
from .error_handler import error_handlers
from .logging import LoggingMiddleware, get_request_id

__all__ = ["error_handlers", "LoggingMiddleware", "get_request_id"]
