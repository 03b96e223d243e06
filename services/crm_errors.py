from __future__ import annotations

from typing import Any, Dict, Optional


class CRMError(Exception):
    """
    Base error for CRM operations.

    Carries a translation key plus interpolation args so callers render the
    message through the translator instead of showing a hard-coded string.
    """

    default_key = "common.error"

    def __init__(self, description: Optional[str] = None, *, message_key: Optional[str] = None, **message_args: Any):
        self.message_key = message_key or self.default_key
        self.message_args: Dict[str, Any] = message_args
        super().__init__(description or self.message_key)

    def render(self, translator) -> str:
        return translator.translate(self.message_key, **self.message_args)


class PermissionDeniedError(CRMError):
    default_key = "common.permission_denied"


class NotFoundError(CRMError):
    default_key = "common.not_found"


class FormatError(CRMError):
    default_key = "common.import_format_invalid"


class GenerationError(CRMError):
    """AI collaborator failure; the message is shown to the user as-is."""

    default_key = "common.error_message"

    def __init__(self, message: str):
        super().__init__(message)

    def render(self, translator) -> str:
        return translator.translate(self.message_key, message=str(self))


class AuthenticationError(CRMError):
    default_key = "auth_page.invalid_credentials"


class ValidationError(CRMError):
    default_key = "common.validation_failed"

    def __init__(self, field_errors: Dict[str, str], message: Optional[str] = None):
        self.field_errors = dict(field_errors)
        super().__init__(message or ", ".join(f"{k}:{v}" for k, v in sorted(self.field_errors.items())))
