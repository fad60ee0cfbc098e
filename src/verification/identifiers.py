"""Contact identifiers a verification code can be bound to.

Emails are compared case-insensitively, so they are lower-cased. Phone
numbers are reduced to digits, ten-digit local numbers get the Indian
country code, and the result is written in E.164 form (``+919876543210``).
"""

import re
from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_E164_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
_DEFAULT_COUNTRY_CODE = "91"


class IdentifierType(Enum):
    EMAIL = "email"
    PHONE = "phone"


@dataclass(frozen=True)
class ContactIdentifier:
    type: IdentifierType
    value: str

    def __str__(self):
        return self.value


def format_phone_number(phone_number: str) -> str:
    cleaned = re.sub(r"\D", "", phone_number)
    if len(cleaned) == 10 and not cleaned.startswith(_DEFAULT_COUNTRY_CODE):
        cleaned = _DEFAULT_COUNTRY_CODE + cleaned
    return f"+{cleaned}"


def normalize_identifier(raw) -> ContactIdentifier:
    """Parse ``raw`` into a normalised email or phone identifier.

    Raises:
        ValidationError: if ``raw`` is neither a valid email nor a valid phone number.
    """
    value = raw.strip() if isinstance(raw, str) else ""
    if not value:
        raise ValidationError({"identifier": ["Email or phone number is required"]})

    if "@" in value:
        email = value.lower()
        if not _EMAIL_PATTERN.match(email):
            raise ValidationError({"identifier": [f"Invalid email address: {value}"]})
        return ContactIdentifier(IdentifierType.EMAIL, email)

    phone = format_phone_number(value)
    if not _E164_PATTERN.match(phone):
        raise ValidationError({"identifier": [f"Invalid phone number: {value}"]})
    return ContactIdentifier(IdentifierType.PHONE, phone)
