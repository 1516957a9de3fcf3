"""Typed error hierarchy and the FastAPI exception handler."""

from fastapi import Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Programmer / setup errors (500) ---


class ConfigurationError(AppException):
    """Invalid token configuration passed to init."""

    def __init__(self, message: str = "Invalid token configuration") -> None:
        super().__init__(message=message, code="CONFIGURATION_ERROR", status_code=500)


class TokenSigningError(AppException):
    """The signing library failed to produce a token."""

    def __init__(self, message: str = "Failed to sign token") -> None:
        super().__init__(message=message, code="TOKEN_SIGNING_ERROR", status_code=500)


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """Base authentication error."""

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "AUTHENTICATION_ERROR",
    ) -> None:
        super().__init__(message=message, code=code, status_code=401)


class InvalidTokenError(AuthenticationError):
    """Token failed verification."""

    def __init__(
        self, message: str = "Invalid token", code: str = "INVALID_TOKEN"
    ) -> None:
        super().__init__(message=message, code=code)


class EmptyTokenError(InvalidTokenError):
    """An empty token string was passed explicitly."""

    def __init__(self) -> None:
        super().__init__(message="Token is empty", code="EMPTY_TOKEN")


class MalformedTokenError(InvalidTokenError):
    """Token is not a well-formed compact JWS."""

    def __init__(self, message: str = "Token is malformed") -> None:
        super().__init__(message=message, code="MALFORMED_TOKEN")


class SignatureMismatchError(InvalidTokenError):
    """Token signature does not verify against the key."""

    def __init__(self) -> None:
        super().__init__(
            message="Token signature is invalid", code="INVALID_SIGNATURE"
        )


class TokenExpiredError(InvalidTokenError):
    """Token has expired."""

    def __init__(self) -> None:
        super().__init__(message="Token has expired", code="TOKEN_EXPIRED")


class TokenNotYetValidError(InvalidTokenError):
    """Token is used before its not-before time."""

    def __init__(self) -> None:
        super().__init__(message="Token is not valid yet", code="TOKEN_NOT_YET_VALID")


class InvalidRefreshTokenError(InvalidTokenError):
    """Refresh token cannot be exchanged for a new pair."""

    def __init__(
        self,
        message: str = "Invalid refresh token",
        code: str = "INVALID_REFRESH_TOKEN",
    ) -> None:
        super().__init__(message=message, code=code)


class InvalidTokenTypeError(InvalidRefreshTokenError):
    """Token was presented in the wrong role."""

    def __init__(self, expected: str = "refresh") -> None:
        super().__init__(
            message=f"Token type must be '{expected}'", code="INVALID_TOKEN_TYPE"
        )


class RefreshTokenRevokedError(InvalidRefreshTokenError):
    """Refresh token was revoked or already rotated."""

    def __init__(self) -> None:
        super().__init__(message="Token has been revoked", code="TOKEN_REVOKED")


class EmptyAuthHeaderError(AuthenticationError):
    """No Authorization header on the request."""

    def __init__(self) -> None:
        super().__init__(
            message="Authorization header required", code="MISSING_TOKEN"
        )


# --- Bad request (400) ---


class MalformedAuthHeaderError(AppException):
    """Authorization header is not 'Bearer <token>'."""

    def __init__(self) -> None:
        super().__init__(
            message="Authorization header must be 'Bearer <token>'",
            code="MALFORMED_AUTH_HEADER",
            status_code=400,
        )


# --- Refresh token store ---


class RefreshTokenStoreError(AppException):
    """Base refresh token store error."""


class RefreshTokenNotFoundError(RefreshTokenStoreError):
    """No stored entry for the token identifier."""

    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        super().__init__(
            message="Refresh token not found",
            code="REFRESH_TOKEN_NOT_FOUND",
            status_code=404,
        )


class RefreshTokenExpiredError(RefreshTokenStoreError):
    """Stored entry is past its expiry."""

    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        super().__init__(
            message="Refresh token has expired",
            code="REFRESH_TOKEN_EXPIRED",
            status_code=401,
        )


# --- Exception Handler ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": exc.status_code,
            "message": exc.message,
            "code": exc.code,
        },
    )
