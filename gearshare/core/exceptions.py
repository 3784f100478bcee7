# File: gearshare/core/exceptions.py

"""
Application error taxonomy.

Every error the API reports on purpose is a GearShareError subclass carrying
an HTTP status, a stable machine-readable ``code`` and a human message.
The handlers in gearshare/api/errors.py render them as JSON.

Auth failures are deliberately kept distinct (not found / unsupported
method / invalid credentials). Wording lives here only.
"""

from typing import Any, Optional


class GearShareError(Exception):
    status_code: int = 400
    code: str = "error"
    message: str = "Request failed."

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.extra}


# ---------- Validation ----------

class FieldValidationError(GearShareError):
    """Field-level validation failure raised outside of request parsing."""

    status_code = 422
    code = "validation_error"
    message = "Invalid input."

    def __init__(self, field_errors: list[dict[str, str]], message: Optional[str] = None):
        super().__init__(message, field_errors=field_errors)
        self.field_errors = field_errors


# ---------- Authentication ----------

class AuthenticationError(GearShareError):
    status_code = 401
    code = "authentication_failed"


class AccountNotFound(AuthenticationError):
    code = "account_not_found"
    message = "No account found for this email."


class UnsupportedLoginMethod(AuthenticationError):
    code = "unsupported_login_method"
    message = "This account uses a different sign-in method."


class InvalidCredentials(AuthenticationError):
    code = "invalid_credentials"
    message = "Invalid email or password."


# ---------- Authorization ----------

class NotAuthenticated(GearShareError):
    status_code = 401
    code = "not_authenticated"
    message = "Not authenticated."


class ProfileIncomplete(GearShareError):
    status_code = 403
    code = "profile_incomplete"
    message = "Please complete your profile to continue."

    def __init__(self, missing_fields: list[str], message: Optional[str] = None):
        super().__init__(message, missing_fields=missing_fields, redirect_to="/onboarding")


# ---------- Conflicts ----------

class ConflictError(GearShareError):
    status_code = 409
    code = "conflict"


class DuplicateAccount(ConflictError):
    code = "duplicate_account"
    message = "User with this email already exists."


class DuplicatePhoneNumber(ConflictError):
    code = "duplicate_phone_number"
    message = "This phone number is already in use."


class OAuthAccountNotLinked(ConflictError):
    code = "oauth_account_not_linked"
    message = "This email is already registered with a different sign-in method."


# ---------- OAuth provider ----------

class OAuthNotConfigured(GearShareError):
    status_code = 503
    code = "oauth_not_configured"
    message = "This sign-in provider is not configured."


class OAuthProviderError(GearShareError):
    status_code = 502
    code = "oauth_provider_error"
    message = "The sign-in provider rejected the request."
