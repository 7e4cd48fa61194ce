"""
Audit Logging Service.

Persists audit events for security and workflow actions. Writing an audit
event must never fail the request that triggered it: events go through a
session of their own, so a failed write is rolled back without touching the
request session or the objects it has loaded, and the error is only logged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database import create_sessionmaker
from herit.core.database.entities.audit_events import AuditEvent
from herit.core.database.repositories import AuditEventRepository
from herit.core.logging_config import get_logger
from herit.core.monitoring import log_error

from .rate_limit import client_ip

logger = get_logger(__name__)


class AuditLogger:
    """
    Writes audit events in short-lived sessions on the request's engine.

    Args:
        session: Request-scoped async database session; only its engine is used.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._sessions = create_sessionmaker(session.bind)

    async def log_event(
        self,
        action: str,
        *,
        user_email: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        request: Optional[Request] = None,
    ) -> Optional[AuditEvent]:
        """
        Record one audit event.

        Args:
            action: What happened, e.g. ``login`` or ``asset_created``
            user_email: Acting user, if known
            entity_type: Kind of the affected record
            entity_id: Identifier of the affected record
            metadata: Free-form JSON-serializable context
            request: Source request, used for IP address and user agent

        Returns:
            The stored event, or None if it could not be written
        """
        event = AuditEvent(
            user_email=user_email,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            event_metadata=metadata or {},
            ip_address=client_ip(request)[:45] if request is not None else None,
            user_agent=request.headers.get("user-agent") if request is not None else None,
        )
        try:
            async with self._sessions() as audit_session:
                return await AuditEventRepository(audit_session).create(event)
        except SQLAlchemyError as e:
            logger.error(f"Failed to write audit event '{action}': {e}", exc_info=True)
            log_error("AuditWriteError", str(e), {"action": action})
            return None
