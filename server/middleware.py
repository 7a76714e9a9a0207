"""
Request tagging and access logging for the /api/ routes.
"""
import logging
import re
import time
import uuid

from fastapi import Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9-]{1,64}")


async def log_requests_middleware(request: Request, call_next):
    """Tag each API call with a request id and log its outcome

    Health checks and the root page are not logged. Credentials never reach
    the log because only the method, path and status are written.
    """
    if not request.url.path.startswith("/api/"):
        return await call_next(request)

    request_id = request.headers.get(REQUEST_ID_HEADER, "")
    if not REQUEST_ID_PATTERN.fullmatch(request_id):
        request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    start_time = time.time()

    response = await call_next(request)

    elapsed = time.time() - start_time
    response.headers[REQUEST_ID_HEADER] = request_id
    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(level, f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} ({elapsed:.3f}s)")
    return response
