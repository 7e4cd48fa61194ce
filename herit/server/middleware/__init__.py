"""
Middleware modules for the Herit API server.

Cross-cutting request handling: timing, request logging and monitoring.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
