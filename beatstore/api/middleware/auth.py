"""JWT verification for admin endpoints."""

from enum import Enum
from typing import Any

import jwt

from beatstore.core.config import get_settings
from beatstore.schemas.admin import AdminContext

ADMIN_ROLE = "admin"


class AuthErrorCode(str, Enum):
    """Authentication error codes."""

    NOT_CONFIGURED = "NOT_CONFIGURED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Authentication error with specific error code.

    Raised when JWT validation fails for any reason.
    The error code indicates the specific failure reason.
    """

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        """Initialize authentication error.

        Args:
            message: Human-readable error description.
            code: Specific error code for programmatic handling.
        """
        self.message = message
        self.code = code
        super().__init__(message)


def decode_admin_token(token: str) -> AdminContext:
    """Decode and validate an admin JWT.

    Tokens are signed HS256 with ADMIN_JWT_SECRET and must carry
    exp, iat and sub claims. The role claim is returned, not checked;
    capability checks happen in the route dependency.

    Args:
        token: The JWT token string to decode.

    Returns:
        AdminContext: Subject and role from the token.

    Raises:
        AuthError: If admin auth is not configured or the token is invalid.
    """
    secret = get_settings().admin_jwt_secret
    if not secret:
        raise AuthError("Admin authentication is not configured", AuthErrorCode.NOT_CONFIGURED)

    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_iat": True,
                "require": ["exp", "iat", "sub"],
            },
        )

    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", AuthErrorCode.TOKEN_EXPIRED) from e

    except jwt.InvalidSignatureError as e:
        raise AuthError("Invalid token signature", AuthErrorCode.INVALID_SIGNATURE) from e

    except jwt.MissingRequiredClaimError as e:
        raise AuthError(f"Token missing required claim: {e}", AuthErrorCode.INVALID_TOKEN) from e

    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {e}", AuthErrorCode.INVALID_TOKEN) from e

    return AdminContext(subject=str(payload["sub"]), role=payload.get("role"))
