"""OAuth authorization URL construction"""

from urllib.parse import urlencode

from errors import ConfigurationError
from .config import XConfig
from .models import AuthorizationRequest
from .pkce import generate_pkce, generate_state


def require_client_config(config: XConfig, require_redirect: bool = True) -> None:
    """Fail fast when the X app is not configured

    Raises:
        ConfigurationError: If client_id (or redirect_uri) is missing
    """
    missing = []
    if not config.client_id:
        missing.append("client_id")
    if require_redirect and not config.redirect_uri:
        missing.append("redirect_uri")
    if missing:
        raise ConfigurationError(
            f"X API credentials not configured: missing {', '.join(missing)}",
            code="missing_client_config",
        )


def build_authorize_url(config: XConfig, state: str, code_challenge: str) -> str:
    """Construct the X authorize URL with PKCE

    Args:
        config: X application configuration
        state: CSRF state token
        code_challenge: PKCE S256 challenge

    Returns:
        Full authorization URL
    """
    params = {
        "response_type": "code",
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "scope": config.scope,
        "state": state,
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
    }
    return f"{config.authorize_url}?{urlencode(params)}"


def create_authorization_request(config: XConfig) -> AuthorizationRequest:
    """Generate PKCE values and state and build the authorization URL

    No network call is made.

    Raises:
        ConfigurationError: If client_id or redirect_uri is missing
    """
    require_client_config(config)

    pkce = generate_pkce()
    state = generate_state()

    return AuthorizationRequest(
        authorization_url=build_authorize_url(config, state, pkce.challenge),
        state=state,
        verifier=pkce.verifier,
    )
