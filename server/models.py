"""
Pydantic request models for the X publisher API.

Field names on the wire are camelCase to match the browser client.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Accepts camelCase aliases as well as snake_case names"""
    model_config = ConfigDict(populate_by_name=True)


class TokenExchangeRequest(CamelModel):
    """Authorization code returned to the redirect URI"""
    code: str
    code_verifier: str = Field(alias="codeVerifier")
    redirect_uri: str = Field(alias="redirectUri")
    state: str
    expected_state: str = Field(alias="expectedState")


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")


class RevokeRequest(CamelModel):
    token: Optional[str] = None


class PostRequest(CamelModel):
    """Post text with an optional image (remote URL or data URL)"""
    text: str = ""
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    image_base64: Optional[str] = Field(default=None, alias="imageBase64", repr=False)


def token_pair_response(tokens) -> dict:
    """camelCase JSON for a TokenPair"""
    return {
        "accessToken": tokens.access_token,
        "refreshToken": tokens.refresh_token,
        "expiresIn": tokens.expires_in,
        "scope": tokens.scope,
    }


def identity_response(identity) -> dict:
    """camelCase JSON for an Identity"""
    return {
        "id": identity.id,
        "username": identity.handle,
        "name": identity.display_name,
        "avatar": identity.avatar_url,
        "verified": identity.verified,
    }
