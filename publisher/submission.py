"""Post submission (never retried)"""

import logging
from typing import List, Optional

import httpx

from errors import UnknownPublishError
from x_oauth.config import XConfig
from x_oauth.utils import http_client, parse_json
from .classification import classify_httpx_response, submission_error_from_failure
from .models import PublishResult

logger = logging.getLogger(__name__)


async def submit_post(
    config: XConfig,
    text: str,
    access_token: str,
    media_ids: Optional[List[str]] = None,
    client: Optional[httpx.AsyncClient] = None
) -> PublishResult:
    """Create a post on X

    Attempted exactly once: a blind retry could publish the same post twice.

    Raises:
        AuthExpiredError: Token invalid or expired (caller refreshes and retries once)
        PublishPermissionError, RateLimitedError, PayloadTooLargeError,
        UpstreamRejectedError, UnknownPublishError: Other failures
    """
    body = {"text": text}
    if media_ids:
        body["media"] = {"media_ids": list(media_ids)}

    logger.info(f"Posting to X: {text[:50]}...")
    try:
        async with http_client(client, config.request_timeout) as http:
            response = await http.post(
                config.tweets_url,
                json=body,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=config.request_timeout,
            )
    except httpx.RequestError as e:
        logger.error(f"Post request failed: {e}")
        # The post may or may not exist now; surface it rather than retry
        raise UnknownPublishError("Post request failed before X responded", code="network_error") from e

    payload = parse_json(response)
    data = payload.get("data") if payload else None

    if response.status_code in (200, 201) and isinstance(data, dict) and data.get("id"):
        post_id = str(data["id"])
        logger.info(f"Post published successfully: {post_id}")
        return PublishResult(
            post_id=post_id,
            post_url=config.post_url(post_id),
            text=data.get("text", text),
            media_id=media_ids[0] if media_ids else None,
        )

    failure = classify_httpx_response(response)
    logger.error(f"Post failed with status {response.status_code} ({failure.kind.value}): {failure.message}")
    raise submission_error_from_failure(failure)
