"""OAuth token exchange functionality"""

import logging
from typing import Optional

import httpx

from errors import TokenExchangeError
from .config import XConfig
from .models import TokenPair
from .utils import FORM_HEADERS, client_auth, extract_oauth_error, http_client, parse_json

logger = logging.getLogger(__name__)


async def exchange_code(
    config: XConfig,
    code: str,
    code_verifier: str,
    redirect_uri: str,
    client: Optional[httpx.AsyncClient] = None
) -> TokenPair:
    """Exchange an authorization code for tokens

    Makes exactly one request. Authorization codes are single use, so a
    failure here is terminal and must not be retried.

    Args:
        config: X application configuration
        code: Authorization code from the redirect
        code_verifier: PKCE verifier issued by initiate
        redirect_uri: Redirect URI used in the authorization request
        client: Optional shared HTTP client

    Returns:
        TokenPair issued by X

    Raises:
        TokenExchangeError: If the provider rejects the code or is unreachable
    """
    if not code or not code_verifier or not redirect_uri:
        raise TokenExchangeError(
            "code, codeVerifier, and redirectUri are required",
            code="missing_parameters",
        )

    data, auth = client_auth(config, {
        "code": code,
        "grant_type": "authorization_code",
        "redirect_uri": redirect_uri,
        "code_verifier": code_verifier,
    })

    logger.info(f"Exchanging authorization code for tokens at {config.token_url}")

    try:
        async with http_client(client, config.request_timeout) as http:
            response = await http.post(
                config.token_url,
                data=data,
                auth=auth,
                headers=FORM_HEADERS,
                timeout=config.request_timeout,
            )
    except httpx.TimeoutException as e:
        logger.error(f"Token exchange timed out: {e}")
        raise TokenExchangeError("Token exchange timed out", code="timeout") from e
    except httpx.RequestError as e:
        logger.error(f"Token exchange request failed: {e}")
        raise TokenExchangeError("Token exchange request failed", code="network_error") from e

    logger.debug(f"Token exchange response status: {response.status_code}")

    if response.status_code != 200:
        reason = extract_oauth_error(response)
        logger.error(f"Token exchange failed with status {response.status_code}: {reason}")
        raise TokenExchangeError(reason, code=str(response.status_code))

    payload = parse_json(response)
    if not payload or not payload.get("access_token"):
        logger.error("Token exchange response missing access_token")
        raise TokenExchangeError("Token exchange response missing access_token", code="invalid_response")

    tokens = TokenPair.from_token_response(payload)
    logger.info("Successfully exchanged authorization code for tokens")
    if not tokens.refresh_token:
        logger.warning("Provider issued no refresh token (offline.access not granted?)")
    return tokens
