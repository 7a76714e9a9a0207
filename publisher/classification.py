"""Closed classification of upstream X API responses

classify_response maps any upstream HTTP response to exactly one
FailureKind. The *_error_from_failure helpers turn a classified failure into
the exception for the stage that saw it (media upload or post submission).
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

import httpx

from errors import (
    AuthExpiredError,
    MediaPermissionError,
    MediaUploadExhaustedError,
    PayloadTooLargeError,
    PublishPermissionError,
    RateLimitedError,
    UnknownPublishError,
    UpstreamRejectedError,
    XPublisherError,
)
from x_oauth.utils import parse_json

TRANSIENT_STATUSES = frozenset({500, 502, 503, 504})
REJECTED_STATUSES = frozenset({400, 409, 422})

# Legacy v1.1 error code for "Status is a duplicate"
DUPLICATE_CONTENT_CODE = 187


class FailureKind(str, Enum):
    AUTH_EXPIRED = "auth_expired"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMITED = "rate_limited"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    TRANSIENT = "transient"
    REJECTED = "rejected"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UpstreamFailure:
    """A classified upstream failure

    Attributes:
        status_code: HTTP status from X
        kind: Classification
        message: Provider message, or None if X gave none
        code: Provider error code if any, otherwise the status code
        retry_after: Seconds to wait before retrying (rate limits only)
    """
    status_code: int
    kind: FailureKind
    message: Optional[str] = None
    code: Optional[str] = None
    retry_after: Optional[int] = None


def _first_error(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], Mapping):
        return errors[0]
    return None


def extract_error_message(payload: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Pull a human readable message out of the shapes X uses for errors"""
    if not payload:
        return None

    for key in ("detail", "error_description"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value

    first = _first_error(payload)
    if first:
        for key in ("message", "detail"):
            value = first.get(key)
            if isinstance(value, str) and value:
                return value

    for key in ("title", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def extract_error_code(payload: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Get the provider's error code from ``errors[0].code``, if any"""
    if not payload:
        return None
    first = _first_error(payload)
    if first and first.get("code") is not None:
        return str(first["code"])
    return None


def parse_retry_after(headers: Optional[Mapping[str, str]], now: Optional[float] = None) -> Optional[int]:
    """Seconds until a rate limit resets

    Uses ``retry-after`` (seconds) when present, otherwise
    ``x-rate-limit-reset`` (epoch seconds).
    """
    if not headers:
        return None
    lowered = {key.lower(): value for key, value in headers.items()}

    retry_after = lowered.get("retry-after")
    if retry_after and retry_after.strip().isdigit():
        return int(retry_after.strip())

    reset = lowered.get("x-rate-limit-reset")
    if reset and reset.strip().isdigit():
        current = time.time() if now is None else now
        return max(0, int(reset.strip()) - int(current))
    return None


def _is_duplicate(message: Optional[str], code: Optional[str]) -> bool:
    if code == str(DUPLICATE_CONTENT_CODE):
        return True
    return bool(message) and "duplicate" in message.lower()


def classify_response(
    status_code: int,
    payload: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None
) -> UpstreamFailure:
    """Classify an upstream response that was not a success

    Total: every status code maps to exactly one FailureKind.
    """
    message = extract_error_message(payload)
    code = extract_error_code(payload) or str(status_code)

    if status_code == 401:
        kind = FailureKind.AUTH_EXPIRED
    elif status_code == 403:
        # X answers duplicate posts with 403
        kind = FailureKind.REJECTED if _is_duplicate(message, code) else FailureKind.PERMISSION_DENIED
    elif status_code == 429:
        kind = FailureKind.RATE_LIMITED
    elif status_code == 413:
        kind = FailureKind.PAYLOAD_TOO_LARGE
    elif status_code in TRANSIENT_STATUSES:
        kind = FailureKind.TRANSIENT
    elif status_code in REJECTED_STATUSES:
        kind = FailureKind.REJECTED
    elif payload and (_first_error(payload) or payload.get("detail")):
        # Provider explained the problem (e.g. a 200 carrying only errors)
        kind = FailureKind.REJECTED
    else:
        kind = FailureKind.UNKNOWN

    retry_after = parse_retry_after(headers) if kind is FailureKind.RATE_LIMITED else None
    return UpstreamFailure(
        status_code=status_code,
        kind=kind,
        message=message,
        code=code,
        retry_after=retry_after,
    )


def classify_httpx_response(response: httpx.Response) -> UpstreamFailure:
    """classify_response for an httpx response"""
    return classify_response(response.status_code, parse_json(response), response.headers)


def _common_error(failure: UpstreamFailure) -> Optional[XPublisherError]:
    """Errors that mean the same thing at every stage"""
    if failure.kind is FailureKind.AUTH_EXPIRED:
        return AuthExpiredError(code=failure.code)
    if failure.kind is FailureKind.RATE_LIMITED:
        return RateLimitedError(failure.message, code=failure.code, retry_after=failure.retry_after)
    if failure.kind is FailureKind.PAYLOAD_TOO_LARGE:
        return PayloadTooLargeError(failure.message, code=failure.code)
    if failure.kind is FailureKind.REJECTED:
        return UpstreamRejectedError(failure.message, code=failure.code)
    return None


def submission_error_from_failure(failure: UpstreamFailure) -> XPublisherError:
    """Map a failed post submission to a publish error"""
    error = _common_error(failure)
    if error is not None:
        return error
    if failure.kind is FailureKind.PERMISSION_DENIED:
        return PublishPermissionError(code=failure.code)
    return UnknownPublishError(
        failure.message or f"Failed to post (HTTP {failure.status_code})",
        code=failure.code,
    )


def upload_error_from_failure(failure: UpstreamFailure, attempts: int = 1) -> XPublisherError:
    """Map a failed media upload to a publish error"""
    error = _common_error(failure)
    if error is not None:
        return error
    if failure.kind is FailureKind.PERMISSION_DENIED:
        return MediaPermissionError(code=failure.code)
    if failure.kind is FailureKind.TRANSIENT:
        return MediaUploadExhaustedError(
            f"Media upload failed after {attempts} attempt(s): {failure.message or f'HTTP {failure.status_code}'}",
            code=failure.code,
            attempts=attempts,
        )
    return UnknownPublishError(
        failure.message or f"Media upload failed (HTTP {failure.status_code})",
        code=failure.code,
    )
