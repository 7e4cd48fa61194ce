"""
Onboarding Endpoints.

The four-step account setup flow for the signed-in user:
personal info, signature, legal consent and identity verification,
followed by an explicit completion call.
"""

from fastapi import APIRouter, Request

from herit.core.logging_config import get_logger
from herit.core.models.domain.enums import VerificationMethod
from herit.core.models.io.auth import SuccessResponse
from herit.core.models.io.onboarding import (
    CompleteResponse,
    ConsentSignatureRequest,
    ConsentSignatureResponse,
    LegalConsentRequest,
    LegalConsentResponse,
    OnboardingStatusResponse,
    PersonalInfoRequest,
    SaveStepRequest,
    SaveStepResponse,
    SignatureRequest,
    SignatureResponse,
    VerificationRequest,
    VerificationResponse,
)
from herit.server.services.deps import AuditLoggerDep, CurrentUserDep, OnboardingServiceDep
from herit.server.services.onboarding import STEP_ORDER, signature_read
from herit.server.services.rate_limit import client_ip

logger = get_logger(__name__)

router = APIRouter()

_AUTH_RESPONSES = {401: {"description": "Not signed in"}}


def _user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "unknown")


@router.get(
    "/status",
    response_model=OnboardingStatusResponse,
    summary="Get Onboarding Status",
    description="Current onboarding status, current step and per-step completion flags.",
    response_description="Onboarding status object.",
    responses=_AUTH_RESPONSES,
)
async def get_status(user: CurrentUserDep, onboarding: OnboardingServiceDep) -> OnboardingStatusResponse:
    return onboarding.status(user)


@router.post(
    "/personal-info",
    response_model=SuccessResponse,
    summary="Save Personal Information",
    description="Store the user's personal details and advance to the signature step.",
    response_description="Success flag.",
    responses={400: {"description": "Invalid personal information"}, **_AUTH_RESPONSES},
)
async def save_personal_info(
    data: PersonalInfoRequest, user: CurrentUserDep, onboarding: OnboardingServiceDep
) -> SuccessResponse:
    """
    Save personal information.

    - **first_name**, **last_name**, **phone_number**, **date_of_birth**: Required.
    - **pps_number**, **eircode**, **county**: Validated when present.
    """
    await onboarding.save_personal_info(user, data)
    return SuccessResponse(message="Personal information saved")


@router.get(
    "/signature",
    response_model=SignatureResponse,
    summary="Get Signature",
    description="The user's most recent signature, or null.",
    response_description="Signature object.",
    responses=_AUTH_RESPONSES,
)
async def get_signature(user: CurrentUserDep, onboarding: OnboardingServiceDep) -> SignatureResponse:
    signature = await onboarding.get_signature(user)
    return SignatureResponse(signature=signature_read(signature) if signature else None)


@router.post(
    "/signature",
    response_model=SignatureResponse,
    summary="Save Signature",
    description="Store a drawn, uploaded or template signature and advance to the legal consent step.",
    response_description="The stored signature.",
    responses={400: {"description": "Invalid signature or earlier step incomplete"}, **_AUTH_RESPONSES},
)
async def save_signature(
    data: SignatureRequest, request: Request, user: CurrentUserDep, onboarding: OnboardingServiceDep
) -> SignatureResponse:
    """
    Save a signature.

    - **name**: Name the signature was made for.
    - **signature_type**: ``drawn``, ``uploaded`` or ``template``.
    - **signature_data**: Image data URL or template text.
    - **font** / **class_name**: Required for template signatures.
    """
    signature = await onboarding.save_signature(user, data, _user_agent(request))
    return SignatureResponse(signature=signature_read(signature))


@router.get(
    "/legal-consent",
    response_model=LegalConsentResponse,
    summary="Get Legal Consents",
    description="Consents recorded for the user.",
    response_description="Consent map and completion flag.",
    responses=_AUTH_RESPONSES,
)
async def get_legal_consent(user: CurrentUserDep) -> LegalConsentResponse:
    return LegalConsentResponse(consents=user.legal_consents or {}, is_completed=bool(user.legal_consent_completed))


@router.post(
    "/legal-consent",
    response_model=LegalConsentResponse,
    summary="Save Legal Consents",
    description="Record every required consent with timestamp, IP address and user agent.",
    response_description="Stored consent map.",
    responses={400: {"description": "Required consent missing or earlier step incomplete"}, **_AUTH_RESPONSES},
)
async def save_legal_consent(
    data: LegalConsentRequest, request: Request, user: CurrentUserDep, onboarding: OnboardingServiceDep
) -> LegalConsentResponse:
    """
    Save legal consents.

    - **consents**: Map of consent id to agreement. Every required consent must be ``true``.
    """
    user = await onboarding.save_legal_consent(user, data.consents, client_ip(request), _user_agent(request))
    return LegalConsentResponse(consents=user.legal_consents or {}, is_completed=True)


@router.post(
    "/consent-signature",
    response_model=ConsentSignatureResponse,
    summary="Sign Consent",
    description="Countersign one consent with a saved signature.",
    response_description="The recorded signature usage.",
    responses={404: {"description": "Signature not found"}, **_AUTH_RESPONSES},
)
async def sign_consent(
    data: ConsentSignatureRequest, request: Request, user: CurrentUserDep, onboarding: OnboardingServiceDep
) -> ConsentSignatureResponse:
    """
    Sign a consent.

    - **consent_id**: Consent being signed.
    - **signature_id**: One of the user's signatures.
    - **signature_data**: Optional client-side snapshot of the rendered signature.
    """
    usage = await onboarding.sign_consent(user, data, client_ip(request), _user_agent(request))
    return ConsentSignatureResponse(consent_id=data.consent_id, usage_id=usage.id, timestamp=usage.created_at)


@router.post(
    "/verification",
    response_model=VerificationResponse,
    summary="Start Identity Verification",
    description="Begin identity verification with the chosen method.",
    response_description="Verification status.",
    responses={400: {"description": "Earlier step incomplete"}, **_AUTH_RESPONSES},
)
async def start_verification(
    data: VerificationRequest, user: CurrentUserDep, onboarding: OnboardingServiceDep
) -> VerificationResponse:
    """
    Start verification.

    - **verification_method**: ``stripe_identity``, ``manual`` or ``skip``.
    """
    method = data.verification_method
    if isinstance(method, VerificationMethod):
        method = method.value
    return await onboarding.start_verification(user, method)


@router.post(
    "/save-step",
    response_model=SaveStepResponse,
    summary="Save Onboarding Step",
    description="Synchronise a client-side onboarding draft and complete the given step.",
    response_description="The saved step and the next one.",
    responses={400: {"description": "Invalid step data or earlier step incomplete"}, **_AUTH_RESPONSES},
)
async def save_step(
    data: SaveStepRequest,
    request: Request,
    user: CurrentUserDep,
    onboarding: OnboardingServiceDep,
    audit: AuditLoggerDep,
) -> SaveStepResponse:
    """
    Save a step.

    - **step**: Zero-based step index (0-3).
    - **data**: Step payload; step 0 expects personal information.
    """
    user = await onboarding.save_step(user, data.step, data.data)
    await audit.log_event(
        "onboarding_step_completed",
        user_email=user.email,
        entity_type="onboarding",
        entity_id=STEP_ORDER[data.step].value,
        metadata={"step": data.step},
        request=request,
    )
    next_step = data.step + 1 if data.step + 1 < len(STEP_ORDER) else "complete"
    return SaveStepResponse(step=data.step, next_step=next_step)


@router.post(
    "/complete",
    response_model=CompleteResponse,
    summary="Complete Onboarding",
    description="Finalize onboarding once all four steps are complete.",
    response_description="Redirect target for the web app.",
    responses={400: {"description": "Some steps are incomplete"}, **_AUTH_RESPONSES},
)
async def complete(user: CurrentUserDep, onboarding: OnboardingServiceDep) -> CompleteResponse:
    user = await onboarding.complete(user)
    return CompleteResponse(completed_at=user.onboarding_completed_at)
