"""
Kenya Phone Number Validation & Normalization

Normalizes Kenyan phone numbers to E.164: +254XXXXXXXXX (9 digits after the
country code).

Accepted input formats:
- 0712345678 (local with leading 0)
- 712345678 (local without leading 0)
- +254712345678 (international with +)
- 254712345678 (international without +)
- 0112345678 (Safaricom 011x format)
"""

from dataclasses import dataclass
from typing import Any, Optional
import re

from hurecore.coreutils.errors import (
    InvalidLength,
    InvalidPrefix,
    PhoneRequired,
    PhoneValidationError,
)

COUNTRY_CODE = "254"
CANONICAL_PREFIX = f"+{COUNTRY_CODE}"
LOCAL_LENGTH = 9

_NON_DIGIT_OR_PLUS = re.compile(r"[^\d+]")
_VALID_LEADING_DIGIT = re.compile(r"^[712]")

PHONE_VALIDATION_MESSAGES = {
    "required": "Phone number is required",
    "invalid": "Please enter a valid Kenyan phone number",
    "format": "Phone must be a valid Kenyan number (e.g., 0712345678)",
    "length": "Phone number must be 9 digits after +254",
}

PHONE_PLACEHOLDER = "712 345 678"


@dataclass(frozen=True)
class PhoneValidationResult:
    normalized: Optional[str] = None
    error: Optional[PhoneValidationError] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.normalized is not None

    def unwrap(self) -> str:
        """Return the canonical number or raise the validation error"""
        if self.error is not None:
            raise self.error
        return self.normalized


def _local_part(cleaned: str) -> str:
    if cleaned.startswith("0" + COUNTRY_CODE):
        cleaned = cleaned[1:]

    if cleaned.startswith(COUNTRY_CODE):
        return cleaned[len(COUNTRY_CODE):]
    if cleaned.startswith("0"):
        return cleaned[1:]
    return cleaned


def normalize_kenyan_phone(value: Any) -> PhoneValidationResult:
    """
    Normalize a Kenyan phone number to +254XXXXXXXXX

    Never raises: empty, None or non-string input comes back as a
    PhoneRequired error in the result.
    """
    if not value or not isinstance(value, str):
        return PhoneValidationResult(error=PhoneRequired())

    cleaned = _NON_DIGIT_OR_PLUS.sub("", value.strip())
    if cleaned.startswith("+"):
        cleaned = cleaned[1:]

    if not cleaned:
        return PhoneValidationResult(error=PhoneRequired())

    local = _local_part(cleaned)

    if len(local) != LOCAL_LENGTH or not local.isdigit():
        return PhoneValidationResult(error=InvalidLength(len(local)))

    if not _VALID_LEADING_DIGIT.match(local):
        return PhoneValidationResult(error=InvalidPrefix())

    return PhoneValidationResult(normalized=f"{CANONICAL_PREFIX}{local}")


def is_valid_kenyan_phone(value: Any) -> bool:
    return normalize_kenyan_phone(value).is_valid


def require_kenyan_phone(value: Any) -> str:
    """Canonical number, raising the typed PhoneValidationError on failure"""
    return normalize_kenyan_phone(value).unwrap()


def format_phone_for_display(normalized: Optional[str]) -> str:
    """+254712345678 -> +254 712 345 678; anything else is returned unchanged"""
    if (
        not normalized
        or not normalized.startswith(CANONICAL_PREFIX)
        or len(normalized) != len(CANONICAL_PREFIX) + LOCAL_LENGTH
    ):
        return normalized or ""

    local = normalized[len(CANONICAL_PREFIX):]
    return f"{CANONICAL_PREFIX} {local[:3]} {local[3:6]} {local[6:]}"
