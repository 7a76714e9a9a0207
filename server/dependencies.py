"""
FastAPI dependencies: configuration, core components and bearer tokens.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

import settings
from publisher import PublishPipeline
from x_oauth import AuthSession, XConfig

logger = logging.getLogger(__name__)


def get_x_config() -> XConfig:
    """XConfig built from settings (overridden in tests)"""
    return settings.get_x_config()


def get_auth_session(config: XConfig = Depends(get_x_config)) -> AuthSession:
    return AuthSession(config)


def get_publish_pipeline(config: XConfig = Depends(get_x_config)) -> PublishPipeline:
    return PublishPipeline(config)


def get_access_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Extract the caller's X access token from ``Authorization: Bearer <token>``"""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header is required")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Authorization header must use Bearer scheme")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Access token is missing")
    return token
