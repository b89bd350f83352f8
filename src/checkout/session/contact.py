"""Buyer contact validation."""

import re

from protean.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_INDIAN_MOBILE_RE = re.compile(r"^[6-9]\d{9}$")


def is_valid_email(email: str | None) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


def normalize_phone(phone: str | None) -> str:
    """Digits only, with a leading 91 country code dropped from 12-digit numbers."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    return digits


def validate_contact(email: str | None, phone: str | None, *, require_phone: bool = True) -> dict:
    """Validate buyer email and Indian mobile number.

    Returns the cleaned values. Raises ValidationError listing every
    offending field.
    """
    errors: dict[str, list[str]] = {}
    if not is_valid_email(email):
        errors["email"] = ["Valid email required"]

    digits = normalize_phone(phone)
    if phone or require_phone:
        if not _INDIAN_MOBILE_RE.match(digits):
            errors["phone"] = ["Valid 10-digit phone required"]

    if errors:
        raise ValidationError(errors)
    return {"email": email.strip(), "phone": digits}
