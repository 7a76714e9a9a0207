"""OAuth token refresh functionality"""

import logging
from typing import Optional

import httpx

from errors import MissingRefreshTokenError, RefreshFailedError
from .config import XConfig
from .models import TokenPair
from .utils import FORM_HEADERS, client_auth, extract_oauth_error, http_client, parse_json

logger = logging.getLogger(__name__)


async def refresh_tokens(
    config: XConfig,
    refresh_token: str,
    client: Optional[httpx.AsyncClient] = None
) -> TokenPair:
    """Exchange a refresh token for a new token pair

    Never retried: a failed refresh usually means the refresh token was
    revoked, so the caller has to start a new login.

    Args:
        config: X application configuration
        refresh_token: Refresh token from a previous exchange
        client: Optional shared HTTP client

    Returns:
        New TokenPair. If X omits a new refresh token the old one is kept.

    Raises:
        MissingRefreshTokenError: If refresh_token is empty
        RefreshFailedError: On any network, HTTP or parse failure
    """
    if not refresh_token:
        logger.warning("No refresh token available for refresh")
        raise MissingRefreshTokenError()

    data, auth = client_auth(config, {
        "refresh_token": refresh_token,
        "grant_type": "refresh_token",
    })

    logger.info("Attempting to refresh OAuth tokens...")
    try:
        async with http_client(client, config.request_timeout) as http:
            response = await http.post(
                config.token_url,
                data=data,
                auth=auth,
                headers=FORM_HEADERS,
                timeout=config.request_timeout,
            )
    except httpx.RequestError as e:
        logger.error(f"Token refresh request failed: {e}")
        raise RefreshFailedError(code="network_error") from e

    if response.status_code != 200:
        logger.error(f"Token refresh failed with status {response.status_code}: {extract_oauth_error(response)}")
        raise RefreshFailedError(code=str(response.status_code))

    payload = parse_json(response)
    if not payload or not payload.get("access_token"):
        logger.error("Token refresh response missing access_token")
        raise RefreshFailedError(code="invalid_response")

    tokens = TokenPair.from_token_response(payload, previous_refresh_token=refresh_token)
    logger.info("Successfully refreshed OAuth tokens")
    return tokens
