"""OAuth token revocation (best effort)"""

import logging
from typing import Optional

import httpx

from .config import XConfig
from .utils import FORM_HEADERS, client_auth, extract_oauth_error, http_client

logger = logging.getLogger(__name__)


async def revoke_token(
    config: XConfig,
    access_token: str,
    client: Optional[httpx.AsyncClient] = None
) -> bool:
    """Revoke an access token at X

    Failures are logged and swallowed so that an unreachable revoke endpoint
    never blocks logout.

    Returns:
        True if X confirmed the revocation, False otherwise
    """
    if not access_token:
        logger.debug("No access token to revoke")
        return False

    if not config.client_id:
        logger.warning("Skipping token revocation: client_id not configured")
        return False

    data, auth = client_auth(config, {
        "token": access_token,
        "token_type_hint": "access_token",
    })

    try:
        async with http_client(client, config.request_timeout) as http:
            response = await http.post(
                config.revoke_url,
                data=data,
                auth=auth,
                headers=FORM_HEADERS,
                timeout=config.request_timeout,
            )
    except httpx.RequestError as e:
        logger.warning(f"Token revocation request failed (ignored): {e}")
        return False

    if response.status_code != 200:
        logger.warning(
            f"Token revocation failed with status {response.status_code} (ignored): "
            f"{extract_oauth_error(response)}"
        )
        return False

    logger.info("Access token revoked")
    return True
