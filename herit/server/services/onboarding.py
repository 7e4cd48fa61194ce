"""
Onboarding Service.

Implements the linear onboarding flow

    personal_info -> signature -> legal_consent -> verification -> completed

Each step sets its own ``*_completed`` flag and timestamp and moves
``onboarding_current_step`` forward. A step can be re-submitted later to edit
its data, but it can never be completed before the steps ahead of it in the
order, and re-submitting never moves the current step backwards.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database.base import utc_now
from herit.core.database.entities.signatures import Signature, SignatureUsage
from herit.core.database.entities.users import User
from herit.core.database.repositories import SignatureRepository, UserRepository
from herit.core.errors import DomainValidationError, ResourceNotFoundError
from herit.core.logging_config import get_logger
from herit.core.models.domain.enums import (
    OnboardingStatus,
    OnboardingStep,
    SignatureType,
    VerificationMethod,
)
from herit.core.models.io.onboarding import (
    CompletionStatus,
    ConsentSignatureRequest,
    OnboardingStatusResponse,
    PersonalInfoRequest,
    SignatureRead,
    SignatureRequest,
    VerificationResponse,
)

from .tokens import sha256_hex

logger = get_logger(__name__)

STEP_ORDER: Tuple[OnboardingStep, ...] = (
    OnboardingStep.personal_info,
    OnboardingStep.signature,
    OnboardingStep.legal_consent,
    OnboardingStep.verification,
)

REQUIRED_CONSENTS: Tuple[str, ...] = (
    "terms_of_service",
    "privacy_policy",
    "legal_disclaimer",
    "data_processing",
    "electronic_signature",
)

DEFAULT_TEMPLATE_FONT = "cursive"
DEFAULT_TEMPLATE_CLASS = "font-cursive"


def _position(step: str) -> int:
    """Index of a step in the flow; ``completed`` sorts after every step."""
    if step == OnboardingStep.completed.value:
        return len(STEP_ORDER)
    return [s.value for s in STEP_ORDER].index(step)


def is_step_completed(user: User, step: OnboardingStep) -> bool:
    return bool(getattr(user, f"{step.value}_completed"))


def completion_status(user: User) -> CompletionStatus:
    return CompletionStatus(**{step.value: is_step_completed(user, step) for step in STEP_ORDER})


def complete_step(user: User, step: OnboardingStep) -> User:
    """
    Mark ``step`` complete on ``user`` (in memory) and advance the flow.

    Raises:
        DomainValidationError: An earlier step is still incomplete.
    """
    index = STEP_ORDER.index(step)
    missing = [s.value for s in STEP_ORDER[:index] if not is_step_completed(user, s)]
    if missing:
        raise DomainValidationError(
            "Complete the previous onboarding steps first", details={"missing_steps": missing}
        )

    now = utc_now()
    setattr(user, f"{step.value}_completed", True)
    setattr(user, f"{step.value}_completed_at", now)

    if user.onboarding_status == OnboardingStatus.not_started.value:
        user.onboarding_status = OnboardingStatus.in_progress.value

    next_step = STEP_ORDER[index + 1] if index + 1 < len(STEP_ORDER) else None
    if next_step is not None and _position(user.onboarding_current_step) < _position(next_step.value):
        user.onboarding_current_step = next_step.value
    return user


def finalize(user: User) -> User:
    """
    Close onboarding once every step is complete. Idempotent.

    Raises:
        DomainValidationError: Some step is incomplete; ``details`` carries
            the completion status.
    """
    status = completion_status(user)
    if status.missing:
        raise DomainValidationError(
            "Not all onboarding steps are completed",
            details={"completion_status": status.model_dump(), "missing_steps": status.missing},
        )
    if user.onboarding_completed_at is None:
        user.onboarding_completed_at = utc_now()
    user.onboarding_status = OnboardingStatus.completed.value
    user.onboarding_current_step = OnboardingStep.completed.value
    return user


def _consent_entry(agreed: bool, ip_address: str, user_agent: str, **extra: Any) -> Dict[str, Any]:
    return {
        "agreed": agreed,
        "timestamp": utc_now().isoformat(),
        "ip_address": ip_address,
        "user_agent": user_agent,
        **extra,
    }


def signature_read(signature: Signature) -> SignatureRead:
    font = signature.font_name
    class_name = signature.font_class_name
    if signature.signature_type == SignatureType.template.value:
        font = font or DEFAULT_TEMPLATE_FONT
        class_name = class_name or DEFAULT_TEMPLATE_CLASS
    return SignatureRead(
        id=signature.id,
        name=signature.name,
        signature_type=signature.signature_type,
        data=signature.data,
        hash=signature.hash,
        font=font,
        class_name=class_name,
        created_at=signature.created_at,
        last_used=signature.last_used,
    )


class OnboardingService:
    """
    Onboarding operations bound to one database session.

    Args:
        session: Request-scoped async database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.users = UserRepository(session)
        self.signatures = SignatureRepository(session)

    def status(self, user: User) -> OnboardingStatusResponse:
        return OnboardingStatusResponse(
            onboarding_status=user.onboarding_status,
            current_step=user.onboarding_current_step,
            is_complete=user.onboarding_status == OnboardingStatus.completed.value,
            completion_status=completion_status(user),
        )

    async def save_personal_info(self, user: User, data: PersonalInfoRequest) -> User:
        for field, value in data.model_dump().items():
            setattr(user, field, value)
        complete_step(user, OnboardingStep.personal_info)
        user = await self.users.update(user)
        logger.info(f"Personal information saved for user {user.id}")
        return user

    async def get_signature(self, user: User) -> Optional[Signature]:
        return await self.signatures.get_latest_for_user(user.id)

    async def save_signature(self, user: User, data: SignatureRequest, user_agent: str) -> Signature:
        """Store a new signature and complete the signature step."""
        complete_step(user, OnboardingStep.signature)
        is_template = data.signature_type == SignatureType.template
        signature = Signature(
            user_id=user.id,
            name=data.name,
            signature_type=data.signature_type.value,
            data=data.signature_data,
            hash=sha256_hex(data.signature_data),
            font_name=data.font if is_template else None,
            font_class_name=data.class_name if is_template else None,
            signature_metadata={"created_at": utc_now().isoformat(), "user_agent": user_agent},
        )
        signature = await self.signatures.create(signature)
        await self.users.update(user)
        logger.info(f"Signature {signature.id} saved for user {user.id}")
        return signature

    async def save_legal_consent(
        self, user: User, consents: Dict[str, bool], ip_address: str, user_agent: str
    ) -> User:
        """
        Record the user's legal consents and complete the consent step.

        Raises:
            DomainValidationError: A required consent is missing or not agreed.
        """
        missing = [key for key in REQUIRED_CONSENTS if not consents.get(key)]
        if missing:
            raise DomainValidationError(f"Required consents missing: {', '.join(missing)}")

        complete_step(user, OnboardingStep.legal_consent)
        existing = dict(user.legal_consents or {})
        for key, agreed in consents.items():
            entry = existing.get(key) if isinstance(existing.get(key), dict) else {}
            existing[key] = {**entry, **_consent_entry(bool(agreed), ip_address, user_agent)}
        user.legal_consents = existing
        user = await self.users.update(user)
        logger.info(f"Legal consents saved for user {user.id}")
        return user

    async def sign_consent(
        self, user: User, data: ConsentSignatureRequest, ip_address: str, user_agent: str
    ) -> SignatureUsage:
        """
        Countersign one consent with a saved signature.

        Raises:
            ResourceNotFoundError: The signature does not exist or belongs to someone else.
        """
        signature = await self.signatures.get_owned(data.signature_id, user.id)
        if signature is None:
            raise ResourceNotFoundError("Signature", data.signature_id)

        usage = await self.signatures.record_usage(
            signature,
            SignatureUsage(
                signature_id=signature.id,
                user_id=user.id,
                document_type="legal_consent",
                document_id=data.consent_id,
                usage_metadata={
                    "consent_type": data.consent_id,
                    "timestamp": utc_now().isoformat(),
                    "ip_address": ip_address,
                    "user_agent": user_agent,
                },
            ),
        )

        consents = dict(user.legal_consents or {})
        consents[data.consent_id] = _consent_entry(
            True,
            ip_address,
            user_agent,
            signature_id=signature.id,
            signature_snapshot=data.signature_data,
        )
        user.legal_consents = consents
        await self.users.update(user)
        return usage

    async def start_verification(self, user: User, method: str) -> VerificationResponse:
        """
        Begin identity verification.

        ``stripe_identity`` opens a simulated session, ``manual`` queues the
        user for review and ``skip`` completes the step straight away (and
        onboarding with it when every other step is done). Unknown methods
        are recorded as ``pending``.
        """
        session_id: Optional[str] = None
        verification_status = "pending"
        if method == VerificationMethod.stripe_identity.value:
            session_id = f"sim_{uuid.uuid4()}"
            verification_status = "requires_input"
        elif method == VerificationMethod.manual.value:
            verification_status = "pending_review"
        elif method == VerificationMethod.skip.value:
            verification_status = "skipped"

        user.verification_session_id = session_id
        user.verification_status = verification_status
        if method == VerificationMethod.skip.value:
            complete_step(user, OnboardingStep.verification)
            if not completion_status(user).missing:
                finalize(user)
        elif user.onboarding_status == OnboardingStatus.not_started.value:
            user.onboarding_status = OnboardingStatus.in_progress.value

        user = await self.users.update(user)
        logger.info(f"Verification started for user {user.id}: method={method} status={verification_status}")
        return VerificationResponse(
            verification_method=method,
            verification_status=verification_status,
            session_id=session_id,
            is_completed=bool(user.verification_completed),
        )

    async def save_step(self, user: User, step: int, data: Dict[str, Any]) -> User:
        """
        Sync a client-side draft for step ``step`` (0-3) and complete it.

        Step 0 applies the personal information in ``data`` and is a no-op
        without it.

        Raises:
            DomainValidationError: Step 0 data fails validation, or an
                earlier step is incomplete.
        """
        target = STEP_ORDER[step]
        if target == OnboardingStep.personal_info:
            if not data:
                return user
            try:
                info = PersonalInfoRequest.model_validate(data)
            except ValidationError as e:
                raise DomainValidationError(
                    "Invalid personal information",
                    details={"errors": e.errors(include_url=False, include_context=False)},
                ) from e
            for field, value in info.model_dump().items():
                setattr(user, field, value)

        complete_step(user, target)
        return await self.users.update(user)

    async def complete(self, user: User) -> User:
        """
        Finalize onboarding.

        Raises:
            DomainValidationError: Some step is incomplete.
        """
        finalize(user)
        user = await self.users.update(user)
        logger.info(f"Onboarding completed for user {user.id}")
        return user