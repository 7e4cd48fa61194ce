"""
Herit Server Package.

This package contains the web server implementation for the Herit API.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings and application constants.
    exception_handlers: Mapping of errors to JSON responses.
    middleware: Request monitoring.
    services: Business logic and FastAPI dependencies.
"""
