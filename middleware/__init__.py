"""HTTP middleware"""
from .request_logging import RequestLoggingMiddleware, SecurityHeadersMiddleware

__all__ = [
    'RequestLoggingMiddleware',
    'SecurityHeadersMiddleware'
]
