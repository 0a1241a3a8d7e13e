"""Create/edit form validation.

Validation runs before any gateway call; a failing form never touches the
collection. Each function returns the cleaned payload to send to the API or
raises ``ValidationError`` with one message per offending field.
"""

import re
from typing import Any, Optional

from tourdesk.data.errors import ValidationError

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
MIN_PASSWORD_LENGTH = 8


def _text(fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    return str(value).strip() if value is not None else ""


def validate_agency_create(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate the add-agency form.

    Args:
        fields: name, email, phone_number, role, password, password_confirmation

    Returns:
        Cleaned payload

    Raises:
        ValidationError: If any required field is missing or malformed
    """
    errors: dict[str, str] = {}

    name = _text(fields, "name")
    email = _text(fields, "email")
    phone = _text(fields, "phone_number")
    password = fields.get("password") or ""
    confirmation = fields.get("password_confirmation") or ""

    if not name:
        errors["name"] = "Name is required"
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.fullmatch(email):
        errors["email"] = "Invalid email format"
    if not phone:
        errors["phone_number"] = "Phone number is required"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not confirmation:
        errors["password_confirmation"] = "Please confirm your password"
    elif password != confirmation:
        errors["password_confirmation"] = "Passwords do not match"

    if errors:
        raise ValidationError(errors)

    return {
        "name": name,
        "email": email,
        "phone_number": phone,
        "role": _text(fields, "role") or "agency",
        "password": password,
        "password_confirmation": confirmation,
    }


def validate_agency_update(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate the edit-agency form.

    All fields are optional on edit; only the ones provided are sent.
    """
    payload = {k: _text(fields, k) for k in ("name", "email", "phone_number") if _text(fields, k)}
    if "email" in payload and not EMAIL_PATTERN.fullmatch(payload["email"]):
        raise ValidationError({"email": "Invalid email format"})
    return payload


def validate_category(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate the category form (create and edit share it)."""
    name = _text(fields, "name")
    if not name:
        raise ValidationError({"name": "Name is required"})
    comment: Optional[str] = _text(fields, "comment") or None
    return {"name": name, "comment": comment}
