"""
OAuth endpoints: configuration, login initiation, code exchange, refresh, revoke.

The server never stores tokens. The browser holds the state and verifier
between initiate and token, and holds the resulting tokens afterwards.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from errors import ConfigurationError
from x_oauth import AuthSession, XConfig
from ..dependencies import get_auth_session, get_x_config
from ..logging_utils import log_request
from ..models import (
    RefreshRequest,
    RevokeRequest,
    TokenExchangeRequest,
    identity_response,
    token_pair_response,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/x/auth")


@router.get("/config")
async def auth_config(config: XConfig = Depends(get_x_config)):
    """Public OAuth configuration (no secrets)"""
    if not config.client_id:
        raise ConfigurationError(code="missing_client_config")
    return {
        "clientId": config.client_id,
        "redirectUri": config.redirect_uri,
        "scope": config.scope,
    }


@router.post("/initiate")
async def initiate(session: AuthSession = Depends(get_auth_session)):
    """Start a login: authorization URL plus the state and verifier to hold"""
    request = session.initiate()
    logger.info("Authorization URL generated")
    return {
        "authorizationUrl": request.authorization_url,
        "state": request.state,
        "codeVerifier": request.verifier,
    }


@router.post("/token")
async def exchange_token(
    body: TokenExchangeRequest,
    http_request: Request,
    session: AuthSession = Depends(get_auth_session)
):
    """Exchange an authorization code for tokens and look up the account"""
    request_id = http_request.state.request_id
    log_request(request_id, "/api/x/auth/token", body.model_dump(by_alias=True))

    result = await session.exchange(
        code=body.code,
        verifier=body.code_verifier,
        redirect_uri=body.redirect_uri,
        received_state=body.state,
        expected_state=body.expected_state,
    )

    response = token_pair_response(result.tokens)
    response["user"] = identity_response(result.identity) if result.identity else None
    if result.identity_error is not None:
        response["userError"] = result.identity_error.message
    logger.info(f"[{request_id}] Token exchange successful")
    return response


@router.post("/refresh")
async def refresh(body: RefreshRequest, session: AuthSession = Depends(get_auth_session)):
    """Rotate tokens; any failure means the user must log in again"""
    tokens = await session.refresh(body.refresh_token)
    logger.info("Token refreshed successfully")
    return token_pair_response(tokens)


@router.post("/revoke")
async def revoke(
    body: Optional[RevokeRequest] = None,
    authorization: Optional[str] = Header(default=None),
    session: AuthSession = Depends(get_auth_session)
):
    """Best effort revocation; always reports success"""
    token = body.token if body and body.token else None
    if not token and authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()

    if token:
        await session.revoke(token)
    return {"success": True}
