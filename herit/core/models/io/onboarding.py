"""
Onboarding I/O models for API requests and responses.

One request model per onboarding step, plus the draft-sync and status
payloads used by the multi-step client.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from herit.core.models.domain.enums import SignatureType, VerificationMethod
from herit.core.models.domain.validators import (
    blank_to_none,
    validate_county,
    validate_eircode,
    validate_irish_phone,
    validate_pps_number,
)


class PersonalInfoRequest(BaseModel):
    """Schema for the personal information step."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone_number: str = Field(min_length=1, max_length=50)
    date_of_birth: date
    pps_number: Optional[str] = None
    address_line_1: Optional[str] = Field(default=None, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    county: Optional[str] = None
    eircode: Optional[str] = None

    @field_validator("address_line_1", "address_line_2", "city", mode="before")
    @classmethod
    def _blank(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)

    @field_validator("phone_number")
    @classmethod
    def _phone(cls, value: str) -> str:
        return validate_irish_phone(value)

    @field_validator("pps_number", mode="before")
    @classmethod
    def _pps(cls, value: Optional[str]) -> Optional[str]:
        value = blank_to_none(value)
        return validate_pps_number(value) if value else None

    @field_validator("county", mode="before")
    @classmethod
    def _county(cls, value: Optional[str]) -> Optional[str]:
        value = blank_to_none(value)
        return validate_county(value) if value else None

    @field_validator("eircode", mode="before")
    @classmethod
    def _eircode(cls, value: Optional[str]) -> Optional[str]:
        value = blank_to_none(value)
        return validate_eircode(value) if value else None

    @field_validator("date_of_birth")
    @classmethod
    def _not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value


class SignatureRequest(BaseModel):
    """Schema for saving the user's signature.

    Template signatures are typed text rendered in a script font, so the
    font name and its CSS class are mandatory for them.
    """

    name: str = Field(min_length=1, max_length=255)
    signature_type: SignatureType
    signature_data: str = Field(min_length=1)
    font: Optional[str] = Field(default=None, max_length=100)
    class_name: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def _template_needs_font(self) -> "SignatureRequest":
        if self.signature_type == SignatureType.template and not (self.font and self.class_name):
            raise ValueError("Template signatures require font and class_name")
        return self


class SignatureRead(BaseModel):
    """Schema for returning a stored signature."""

    id: str
    name: str
    signature_type: str
    data: str
    hash: str
    font: Optional[str] = None
    class_name: Optional[str] = None
    created_at: datetime
    last_used: Optional[datetime] = None


class SignatureResponse(BaseModel):
    success: bool = True
    signature: Optional[SignatureRead] = None


class LegalConsentRequest(BaseModel):
    """Schema for the legal consent step: consent key -> agreed."""

    consents: Dict[str, bool]


class LegalConsentResponse(BaseModel):
    success: bool = True
    consents: Dict[str, Any] = Field(default_factory=dict)
    is_completed: bool = False


class ConsentSignatureRequest(BaseModel):
    """Schema for countersigning one consent with a saved signature."""

    consent_id: str = Field(min_length=1)
    signature_id: str = Field(min_length=1)
    signature_data: Optional[Dict[str, Any]] = Field(
        default=None, description="Snapshot of the signature as shown to the user"
    )


class ConsentSignatureResponse(BaseModel):
    success: bool = True
    consent_id: str
    usage_id: str
    timestamp: datetime


class VerificationRequest(BaseModel):
    verification_method: Union[VerificationMethod, str]


class VerificationResponse(BaseModel):
    success: bool = True
    verification_method: str
    verification_status: str
    session_id: Optional[str] = None
    is_completed: bool = False


class SaveStepRequest(BaseModel):
    """Schema for syncing a client-side onboarding draft."""

    step: int = Field(ge=0, le=3, description="Zero-based onboarding step index")
    data: Dict[str, Any] = Field(default_factory=dict)


class SaveStepResponse(BaseModel):
    success: bool = True
    step: int
    next_step: Union[int, str]


class CompletionStatus(BaseModel):
    personal_info: bool
    signature: bool
    legal_consent: bool
    verification: bool

    @property
    def missing(self) -> List[str]:
        return [name for name, done in self.model_dump().items() if not done]


class CompleteResponse(BaseModel):
    success: bool = True
    redirect_to: str = "/dashboard"
    completed_at: Optional[datetime] = None


class OnboardingStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    onboarding_status: str
    current_step: str
    is_complete: bool
    completion_status: CompletionStatus
