"""Herit.

Backend for an estate-planning and will-creation workflow.

Core subpackages
----------------

- ``herit.core``: logging, monitoring, domain errors, the database layer
  (SQLModel entities and repositories) and Pydantic I/O models.
- ``herit.server``: the FastAPI application, its routers, services,
  middleware and exception handlers.
"""

__version__ = "1.0.0"
