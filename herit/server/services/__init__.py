"""
Service layer for the Herit API.

Business logic bound to a request-scoped database session, plus the FastAPI
dependencies (``deps``) that build it.
"""
