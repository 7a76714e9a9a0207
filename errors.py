"""Error taxonomy shared by the auth and publish components

Every error raised by the core derives from XPublisherError and carries a
kind, a human readable message and an optional machine code so the calling
layer can branch without parsing strings.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Machine readable error kinds"""
    CONFIGURATION = "configuration"
    STATE_MISMATCH = "state_mismatch"
    TOKEN_EXCHANGE = "token_exchange"
    IDENTITY_LOOKUP = "identity_lookup"
    MISSING_REFRESH_TOKEN = "missing_refresh_token"
    REFRESH_FAILED = "refresh_failed"
    VALIDATION = "validation"
    MEDIA_FETCH = "media_fetch"
    MEDIA_PERMISSION = "media_permission"
    MEDIA_UPLOAD_EXHAUSTED = "media_upload_exhausted"
    AUTH_EXPIRED = "auth_expired"
    PERMISSION = "permission"
    RATE_LIMITED = "rate_limited"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    UPSTREAM_REJECTED = "upstream_rejected"
    UNKNOWN = "unknown"


class XPublisherError(Exception):
    """Base class for all errors raised by the core"""

    kind: ErrorKind = ErrorKind.UNKNOWN
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize the error for API responses and logs"""
        data = {"kind": self.kind.value, "message": self.message}
        if self.code is not None:
            data["code"] = self.code
        return data


# Auth errors

class ConfigurationError(XPublisherError):
    kind = ErrorKind.CONFIGURATION
    default_message = "X API credentials not configured"


class StateMismatchError(XPublisherError):
    """Returned state does not match the one issued by initiate (possible CSRF)"""
    kind = ErrorKind.STATE_MISMATCH
    default_message = "Authentication failed"


class TokenExchangeError(XPublisherError):
    kind = ErrorKind.TOKEN_EXCHANGE
    default_message = "Token exchange failed"


class IdentityLookupError(XPublisherError):
    kind = ErrorKind.IDENTITY_LOOKUP
    default_message = "Failed to get user info"


class MissingRefreshTokenError(XPublisherError):
    kind = ErrorKind.MISSING_REFRESH_TOKEN
    default_message = "refreshToken is required"


class RefreshFailedError(XPublisherError):
    kind = ErrorKind.REFRESH_FAILED
    default_message = "Token refresh failed. Please log in again"


# Publish errors

class ValidationError(XPublisherError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class MalformedInlineMediaError(ValidationError):
    default_message = "Image must be in format: data:image/[type];base64,[data]"


class UnsupportedMediaTypeError(ValidationError):
    default_message = "Image must be JPEG, PNG, GIF, or WebP"


class MediaTooLargeError(ValidationError):
    default_message = "Image size exceeds 5MB limit"


class MediaFetchError(XPublisherError):
    kind = ErrorKind.MEDIA_FETCH
    default_message = "Failed to download image"


class MediaPermissionError(XPublisherError):
    """Token lacks the media write scope; retrying cannot help"""
    kind = ErrorKind.MEDIA_PERMISSION
    default_message = "You do not have permission to upload media. Log in again to grant media access."


class MediaUploadExhaustedError(XPublisherError):
    kind = ErrorKind.MEDIA_UPLOAD_EXHAUSTED
    default_message = "Media upload failed after retrying"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None, attempts: int = 0):
        super().__init__(message, code)
        self.attempts = attempts


class AuthExpiredError(XPublisherError):
    """Access token is invalid or expired; refresh and retry once"""
    kind = ErrorKind.AUTH_EXPIRED
    default_message = "Invalid or expired access token. Please log in again."


class PublishPermissionError(XPublisherError):
    kind = ErrorKind.PERMISSION
    default_message = "You do not have permission to post. Check app permissions."


class RateLimitedError(XPublisherError):
    kind = ErrorKind.RATE_LIMITED
    default_message = "Rate limit exceeded. Please try again later."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None,
                 retry_after: Optional[int] = None):
        super().__init__(message, code)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.retry_after is not None:
            data["retry_after"] = self.retry_after
        return data


class PayloadTooLargeError(XPublisherError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE
    default_message = "Image exceeds size limit. Please use a smaller image."


class UpstreamRejectedError(XPublisherError):
    kind = ErrorKind.UPSTREAM_REJECTED
    default_message = "X rejected the post"


class UnknownPublishError(XPublisherError):
    kind = ErrorKind.UNKNOWN
    default_message = "Failed to post"
