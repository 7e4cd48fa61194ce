"""
Audit Endpoints.

Lets the web app record client-side events (step views, downloads and the
like) in the audit trail. The session is optional; anonymous events are
stored without a user.
"""

from fastapi import APIRouter, Request

from herit.core.models.io.audit import AuditEventCreate, AuditEventResponse
from herit.server.services.deps import AuditLoggerDep, SessionResultDep

router = APIRouter()


@router.post(
    "/log-event",
    response_model=AuditEventResponse,
    summary="Log Audit Event",
    description="Record a client-side audit event. Always succeeds; write failures are logged server-side.",
    response_description="Success flag and the stored event id.",
)
async def log_event(
    data: AuditEventCreate,
    request: Request,
    session_result: SessionResultDep,
    audit: AuditLoggerDep,
) -> AuditEventResponse:
    """
    Log an event.

    - **action**: Event name.
    - **entity_type** / **entity_id**: Affected record, if any.
    - **metadata**: Free-form context.
    """
    user = session_result.user
    event = await audit.log_event(
        data.action,
        user_email=user.email if user is not None else None,
        entity_type=data.entity_type,
        entity_id=data.entity_id,
        metadata=data.metadata,
        request=request,
    )
    return AuditEventResponse(event_id=event.id if event is not None else None)
