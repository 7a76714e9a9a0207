"""
Logging utilities for request debugging without leaking secrets.
"""
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = frozenset({'authorization', 'cookie', 'x-api-key'})
SENSITIVE_FIELDS = frozenset({
    'code',
    'codeVerifier',
    'refreshToken',
    'accessToken',
    'token',
    'imageBase64',
})

REDACTED = "[REDACTED]"


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of headers with credentials replaced"""
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def redact_fields(data: Mapping[str, Any], fields: Iterable[str] = SENSITIVE_FIELDS) -> Dict[str, Any]:
    """Copy of a request body with secret values replaced"""
    fields = set(fields)
    return {
        key: (REDACTED if value and key in fields else value)
        for key, value in data.items()
    }


def log_request(request_id: str, endpoint: str, body: Optional[Mapping[str, Any]] = None,
                headers: Optional[Mapping[str, str]] = None):
    """Log incoming request details at debug level"""
    logger.debug(f"[{request_id}] Endpoint: {endpoint}")

    if headers:
        for header_name, header_value in redact_headers(headers).items():
            logger.debug(f"[{request_id}] {header_name}: {header_value}")

    if body:
        logger.debug(f"[{request_id}] Body: {redact_fields(body)}")
