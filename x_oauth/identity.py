"""Identity ("who am I") lookup"""

import logging
from typing import Optional

import httpx

from errors import AuthExpiredError, IdentityLookupError
from .config import XConfig
from .constants import USER_FIELDS
from .models import Identity
from .utils import http_client, parse_json

logger = logging.getLogger(__name__)


async def fetch_identity(
    config: XConfig,
    access_token: str,
    client: Optional[httpx.AsyncClient] = None
) -> Identity:
    """Fetch the account that owns an access token

    Raises:
        AuthExpiredError: If X reports the token as invalid or expired
        IdentityLookupError: On any other failure
    """
    if not access_token:
        raise IdentityLookupError("Access token is required", code="missing_token")

    try:
        async with http_client(client, config.request_timeout) as http:
            response = await http.get(
                config.user_me_url,
                params={"user.fields": USER_FIELDS},
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=config.request_timeout,
            )
    except httpx.RequestError as e:
        logger.error(f"User info request failed: {e}")
        raise IdentityLookupError(code="network_error") from e

    if response.status_code == 401:
        raise AuthExpiredError(code="401")

    if response.status_code != 200:
        logger.error(f"User info retrieval failed with status {response.status_code}")
        raise IdentityLookupError(code=str(response.status_code))

    payload = parse_json(response) or {}
    user = payload.get("data")
    if not isinstance(user, dict) or not user.get("id") or not user.get("username"):
        logger.error("User info response missing id or username")
        raise IdentityLookupError("User info response missing id or username", code="invalid_response")

    identity = Identity.from_user_payload(user)
    logger.info(f"User info retrieved: {identity.handle}")
    return identity
