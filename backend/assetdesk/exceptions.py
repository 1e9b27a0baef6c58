# =============================================================================
# ASSETDESK - EXCEPTIONS
# =============================================================================
# Error taxonomy shared by services, routers and the database layer.
# Handlers in main.py render every subclass as {"message": ...}.
# =============================================================================

from typing import Optional, Dict, Any


class AssetDeskException(Exception):
    """
    Base exception for AssetDesk.

    Every custom error extends this class and carries the HTTP status
    it maps to.
    """
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None, extra: Dict[str, Any] = None):
        self.detail = detail or self.__class__.detail
        self.extra = extra or {}
        super().__init__(self.detail)

    def to_response_body(self) -> Dict[str, Any]:
        """Body returned to API clients."""
        return {"message": self.detail, **self.extra}

    def to_dict(self) -> Dict[str, Any]:
        """Dict form used for logging."""
        return {
            "code": self.code,
            "status_code": self.status_code,
            "message": self.detail,
            **self.extra
        }


# =============================================================================
# HTTP-LEVEL ERRORS
# =============================================================================

class ValidationError(AssetDeskException):
    """Missing or malformed required field (400)."""
    status_code = 400
    code = "VALIDATION_ERROR"
    detail = "Invalid request"


class UnauthorizedError(AssetDeskException):
    """No credential supplied (401)."""
    status_code = 401
    code = "UNAUTHORIZED"
    detail = "Authentication required"


class ForbiddenError(AssetDeskException):
    """Invalid credential or insufficient role (403)."""
    status_code = 403
    code = "FORBIDDEN"
    detail = "Forbidden"


class NotFoundError(AssetDeskException):
    """Referenced entity does not exist (404)."""
    status_code = 404
    code = "NOT_FOUND"
    detail = "Resource not found"


class ConflictError(AssetDeskException):
    """Uniqueness violation (409)."""
    status_code = 409
    code = "CONFLICT"
    detail = "Resource already exists"


class PersistenceError(AssetDeskException):
    """Unexpected store failure (500)."""
    status_code = 500
    code = "PERSISTENCE_ERROR"
    detail = "Database operation failed"


# =============================================================================
# DOMAIN ERRORS - AUTH
# =============================================================================

class InvalidCredentialsError(UnauthorizedError):
    code = "INVALID_CREDENTIALS"
    detail = "Invalid credentials"


class TokenInvalidError(ForbiddenError):
    """Bad signature, malformed payload or expired token."""
    code = "TOKEN_INVALID"
    detail = "Invalid or expired token"


class InsufficientRoleError(ForbiddenError):
    code = "INSUFFICIENT_ROLE"
    detail = "Admin access required"


# =============================================================================
# DOMAIN ERRORS - NOT FOUND
# =============================================================================

class TicketNotFoundError(NotFoundError):
    code = "TICKET_NOT_FOUND"
    detail = "Ticket not found"


class AssetNotFoundError(NotFoundError):
    code = "ASSET_NOT_FOUND"
    detail = "Asset not found"


class CompanyNotFoundError(NotFoundError):
    code = "COMPANY_NOT_FOUND"
    detail = "Company not found"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    detail = "User not found"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def require_fields(data: Dict[str, Any], fields, message: Optional[str] = None) -> None:
    """
    Raise ValidationError unless every field in `fields` is present and non-empty.

    Args:
        data: Incoming payload
        fields: Names of required keys
        message: Message to use instead of the generated one
    """
    missing = [f for f in fields if data.get(f) in (None, "") or
               (isinstance(data.get(f), str) and not data.get(f).strip())]
    if missing:
        raise ValidationError(message or f"Required field(s) missing: {', '.join(missing)}")
