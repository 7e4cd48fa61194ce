"""
Irish-format field validators.

Plain functions returning the normalized value or raising ``ValueError`` so
they can be used both from Pydantic ``field_validator`` hooks and directly
from service code.
"""

from __future__ import annotations

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EIRCODE_PATTERN = re.compile(r"^[A-Z]\d{2}\s?[A-Z0-9]{4}$", re.IGNORECASE)
PPS_PATTERN = re.compile(r"^\d{7}[A-Z]{1,2}$")
IRISH_PHONE_PATTERN = re.compile(r"^(\+353|0)[1-9]\d{7,9}$")
IRISH_IBAN_PATTERN = re.compile(r"^IE\d{2}[A-Z]{4}\d{14}$")

MIN_PASSWORD_LENGTH = 8
# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

IRISH_COUNTIES = (
    "Antrim",
    "Armagh",
    "Carlow",
    "Cavan",
    "Clare",
    "Cork",
    "Derry",
    "Donegal",
    "Down",
    "Dublin",
    "Fermanagh",
    "Galway",
    "Kerry",
    "Kildare",
    "Kilkenny",
    "Laois",
    "Leitrim",
    "Limerick",
    "Longford",
    "Louth",
    "Mayo",
    "Meath",
    "Monaghan",
    "Offaly",
    "Roscommon",
    "Sligo",
    "Tipperary",
    "Tyrone",
    "Waterford",
    "Westmeath",
    "Wexford",
    "Wicklow",
)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Treat empty and whitespace-only form values as absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email address")
    return value


def validate_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return value


def validate_eircode(value: str) -> str:
    """Validate an Eircode and return it upper-cased, e.g. ``D02 XY56``."""
    value = value.strip().upper()
    if not EIRCODE_PATTERN.match(value):
        raise ValueError("Invalid Eircode format (e.g., D02 XY56)")
    return value


def validate_pps_number(value: str) -> str:
    value = value.strip().upper()
    if not PPS_PATTERN.match(value):
        raise ValueError("Invalid PPS number format (e.g., 1234567A)")
    return value


def validate_irish_phone(value: str) -> str:
    """Validate an Irish phone number; spaces and dashes are ignored."""
    value = re.sub(r"[\s-]", "", value)
    if not IRISH_PHONE_PATTERN.match(value):
        raise ValueError("Invalid Irish phone number")
    return value


def validate_irish_iban(value: str) -> str:
    value = value.replace(" ", "").upper()
    if not IRISH_IBAN_PATTERN.match(value):
        raise ValueError("Invalid Irish IBAN (e.g., IE29 AIBK 9311 5212 3456 78)")
    return value


def validate_county(value: str) -> str:
    for county in IRISH_COUNTIES:
        if county.lower() == value.strip().lower():
            return county
    raise ValueError("Invalid Irish county")
