"""
API middleware: request logging and slowapi rate limiting.
"""

from .logging import RequestLoggingMiddleware
from .rate_limiting import limiter, rate_limit_exceeded_handler

__all__ = ["RequestLoggingMiddleware", "limiter", "rate_limit_exceeded_handler"]
