"""
Exception handlers for the Herit API server.

Maps domain errors, request validation errors and unhandled exceptions to
JSON responses, and provides a setup function to register them.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
