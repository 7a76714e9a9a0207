"""X OAuth 2.0 (Authorization Code with PKCE) package"""

import logging
from typing import Optional

import httpx

from errors import (
    AuthExpiredError,
    IdentityLookupError,
    MissingRefreshTokenError,
    StateMismatchError,
)
from .authorization import build_authorize_url, create_authorization_request, require_client_config
from .config import XConfig
from .identity import fetch_identity
from .models import (
    AuthPhase,
    AuthorizationRequest,
    ExchangeResult,
    Identity,
    PkceChallenge,
    TokenPair,
)
from .pkce import compute_challenge, generate_pkce, generate_state, states_match
from .revocation import revoke_token
from .token_exchange import exchange_code
from .token_refresh import refresh_tokens

logger = logging.getLogger(__name__)


class AuthSession:
    """OAuth PKCE flow for X

    Orchestrates the login flow:
    - PKCE and state generation and authorization URL construction
    - Authorization code exchange followed by an identity lookup
    - Refresh token rotation
    - Best effort revocation

    Holds no token state: every token goes back to the caller, who owns
    its storage.
    """

    def __init__(self, config: XConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            config: X application configuration
            client: Optional shared HTTP client (a short-lived one is used per call otherwise)
        """
        self.config = config
        self.client = client

    def initiate(self) -> AuthorizationRequest:
        """Start a login attempt

        Returns:
            Authorization URL plus the state and verifier the caller must
            hold until the redirect comes back

        Raises:
            ConfigurationError: If client_id or redirect_uri is missing
        """
        request = create_authorization_request(self.config)
        logger.debug(f"Login attempt {AuthPhase.INITIATED.value}")
        return request

    async def exchange(
        self,
        code: str,
        verifier: str,
        redirect_uri: str,
        received_state: str,
        expected_state: str
    ) -> ExchangeResult:
        """Finish a login attempt

        Args:
            code: Authorization code from the redirect
            verifier: PKCE verifier returned by initiate
            redirect_uri: Redirect URI used for the authorization request
            received_state: State from the redirect query string
            expected_state: State returned by initiate

        Returns:
            ExchangeResult with the tokens and, if the lookup succeeded, the identity

        Raises:
            StateMismatchError: If the states differ (checked before any network call)
            ConfigurationError: If client_id is missing
            TokenExchangeError: If the code exchange fails
        """
        if not states_match(received_state, expected_state):
            logger.warning(f"Login attempt {AuthPhase.FAILED.value}: state mismatch")
            raise StateMismatchError(code="state_mismatch")

        require_client_config(self.config, require_redirect=False)

        logger.debug(f"Login attempt {AuthPhase.EXCHANGING.value}")
        try:
            tokens = await exchange_code(self.config, code, verifier, redirect_uri, client=self.client)
        except Exception:
            logger.debug(f"Login attempt {AuthPhase.FAILED.value}")
            raise

        identity = None
        identity_error = None
        try:
            identity = await fetch_identity(self.config, tokens.access_token, client=self.client)
        except (IdentityLookupError, AuthExpiredError) as e:
            logger.warning(f"Identity lookup after exchange failed: {e.message}")
            identity_error = e if isinstance(e, IdentityLookupError) else IdentityLookupError(e.message, code=e.code)

        logger.debug(f"Login attempt {AuthPhase.AUTHENTICATED.value}")
        return ExchangeResult(tokens=tokens, identity=identity, identity_error=identity_error)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate tokens using a refresh token

        Raises:
            MissingRefreshTokenError: If refresh_token is empty
            RefreshFailedError: On any failure; the caller must log in again
        """
        if not refresh_token:
            raise MissingRefreshTokenError()
        require_client_config(self.config, require_redirect=False)

        logger.debug(f"Refresh {AuthPhase.REFRESH_PENDING.value}")
        return await refresh_tokens(self.config, refresh_token, client=self.client)

    async def revoke(self, access_token: str) -> None:
        """Revoke an access token; always succeeds from the caller's view"""
        await revoke_token(self.config, access_token, client=self.client)

    async def whoami(self, access_token: str) -> Identity:
        """Look up the account that owns an access token

        Raises:
            AuthExpiredError: If the token is invalid or expired
            IdentityLookupError: On any other failure
        """
        return await fetch_identity(self.config, access_token, client=self.client)


__all__ = [
    "AuthSession",
    "XConfig",
    "AuthPhase",
    "AuthorizationRequest",
    "ExchangeResult",
    "Identity",
    "PkceChallenge",
    "TokenPair",
    "build_authorize_url",
    "compute_challenge",
    "generate_pkce",
    "generate_state",
    "states_match",
    "exchange_code",
    "refresh_tokens",
    "revoke_token",
    "fetch_identity",
]
