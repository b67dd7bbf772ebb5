# backend/app/core/exceptions.py

"""
Application exceptions.

Every error the services raise on purpose derives from AppError and carries
the HTTP status it maps to; the handlers in app.core.responses turn them into
the {status: 0, data, message} envelope.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data or {}


class ValidationError(AppError):
    """Invalid input. `errors` lists every violated field, not just the first."""

    status_code = 400

    def __init__(self, errors: List[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(", ".join(self.errors), data={"errors": self.errors})


class NotFoundError(AppError):
    status_code = 404


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class StoreError(AppError):
    """A primary write failed inside the database."""

    status_code = 500


class AuditWriteError(AppError):
    """A best-effort activity append failed after its mutation committed. Logged, never raised."""

    def __init__(self, action_type: str, cause: BaseException):
        super().__init__(f"Failed to log {action_type} activity: {cause!r}")
        self.action_type = action_type
        self.cause = cause


def format_validation_errors(errors) -> List[str]:
    """Flatten pydantic error dicts into "field: message" strings."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = error.get("msg", "invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def validate_or_raise(model, data):
    """model.model_validate(data), with pydantic errors re-raised as one ValidationError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors())) from None
