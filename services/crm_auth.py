from __future__ import annotations

import hashlib
import re
import secrets
from typing import Any, Dict, Iterable, Optional

from services.crm_errors import ValidationError
from services.crm_rbac import normalize_role

MIN_PASSWORD_LENGTH = 6
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    hashed = hashlib.sha256((salt + password).encode("utf-8")).hexdigest()
    return f"{salt}${hashed}"


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored or "$" not in stored:
        return False
    salt, hashed = stored.split("$", 1)
    check = hashlib.sha256((salt + password).encode("utf-8")).hexdigest()
    return secrets.compare_digest(check, hashed)


def normalize_email(value: Any) -> str:
    return str(value or "").strip().lower()


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """User record without credentials, as kept for the logged-in session."""
    return {key: value for key, value in user.items() if key != "passwordHash"}


def validate_login(email: str, password: str) -> None:
    errors: Dict[str, str] = {}
    if not normalize_email(email):
        errors["email"] = "auth_page.email_required"
    if not password:
        errors["password"] = "auth_page.password_required"
    if errors:
        raise ValidationError(errors)


def validate_registration(
    users: Iterable[Dict[str, Any]],
    *,
    username: str,
    email: str,
    password: str,
    confirm_password: str,
    role: Any,
) -> str:
    """Check a registration form; returns the normalized role."""
    errors: Dict[str, str] = {}
    if not str(username or "").strip():
        errors["username"] = "auth_page.username_required"

    normalized = normalize_email(email)
    if not normalized:
        errors["email"] = "auth_page.email_required"
    elif not _EMAIL_RE.match(normalized):
        errors["email"] = "auth_page.email_invalid"
    elif any(normalize_email(user.get("email")) == normalized for user in users):
        errors["email"] = "auth_page.email_already_registered"

    if not password:
        errors["password"] = "auth_page.password_required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = "auth_page.password_length"

    if not confirm_password:
        errors["confirmPassword"] = "auth_page.confirm_password_required"
    elif password != confirm_password:
        errors["confirmPassword"] = "auth_page.passwords_not_match"

    try:
        normalized_role = normalize_role(role)
    except ValueError:
        errors["role"] = "auth_page.role_invalid"
        normalized_role = ""

    if errors:
        raise ValidationError(errors)
    return normalized_role
