"""
Maps core errors to HTTP responses.
"""
import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from errors import ErrorKind, MediaTooLargeError, XPublisherError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.STATE_MISMATCH: 401,
    ErrorKind.TOKEN_EXCHANGE: 401,
    ErrorKind.IDENTITY_LOOKUP: 502,
    ErrorKind.MISSING_REFRESH_TOKEN: 400,
    ErrorKind.REFRESH_FAILED: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.MEDIA_FETCH: 400,
    ErrorKind.MEDIA_PERMISSION: 403,
    ErrorKind.MEDIA_UPLOAD_EXHAUSTED: 502,
    ErrorKind.AUTH_EXPIRED: 401,
    ErrorKind.PERMISSION: 403,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.PAYLOAD_TOO_LARGE: 413,
    ErrorKind.UPSTREAM_REJECTED: 400,
    ErrorKind.UNKNOWN: 500,
}

ERROR_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    413: "Payload Too Large",
    429: "Rate Limit Exceeded",
    500: "Internal Server Error",
    502: "Bad Gateway",
}

# Login failures never say whether the state or the code was wrong
AUTHENTICATION_FAILED = ("authentication_failed", "Authentication failed")

GENERIC_RESPONSES = {
    ErrorKind.STATE_MISMATCH: AUTHENTICATION_FAILED,
    ErrorKind.TOKEN_EXCHANGE: AUTHENTICATION_FAILED,
    ErrorKind.REFRESH_FAILED: ("refresh_failed", "Please log in again"),
}


def status_for(error: XPublisherError) -> int:
    if isinstance(error, MediaTooLargeError):
        return 413
    return STATUS_BY_KIND.get(error.kind, 500)


async def publisher_error_handler(request: Request, exc: XPublisherError) -> JSONResponse:
    status_code = status_for(exc)
    body = exc.to_dict()
    if exc.kind in GENERIC_RESPONSES:
        kind, message = GENERIC_RESPONSES[exc.kind]
        body = {"kind": kind, "message": message}
    body["error"] = ERROR_TITLES.get(status_code, "Error")

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind.value}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.kind.value}: {exc.message}")

    headers = None
    retry_after = getattr(exc, "retry_after", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}
    return JSONResponse(status_code=status_code, content=body, headers=headers)
