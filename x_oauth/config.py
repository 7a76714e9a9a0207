"""Explicit configuration object injected into AuthSession and PublishPipeline"""

from dataclasses import dataclass
from typing import Optional, Tuple

from . import constants


@dataclass(frozen=True)
class XConfig:
    """X application credentials and endpoints

    Attributes:
        client_id: OAuth 2.0 client identifier of the X app
        redirect_uri: Registered callback URL
        client_secret: Set for confidential clients, None for public clients
        scopes: Scopes requested at authorization time
        request_timeout: Timeout for token, identity, upload and post calls
        media_download_timeout: Timeout for fetching remote images
        max_media_bytes: Size cap for images, inline or downloaded
    """
    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None
    client_secret: Optional[str] = None
    scopes: Tuple[str, ...] = constants.SCOPES
    authorize_url: str = constants.AUTHORIZE_URL
    token_url: str = constants.TOKEN_URL
    revoke_url: str = constants.REVOKE_URL
    user_me_url: str = constants.USER_ME_URL
    media_upload_url: str = constants.MEDIA_UPLOAD_URL
    tweets_url: str = constants.TWEETS_URL
    post_url_template: str = constants.POST_URL_TEMPLATE
    request_timeout: float = constants.DEFAULT_REQUEST_TIMEOUT
    media_download_timeout: float = constants.MEDIA_DOWNLOAD_TIMEOUT
    max_media_bytes: int = constants.MAX_MEDIA_BYTES

    @property
    def scope(self) -> str:
        """Space separated scope string for the authorization URL"""
        return " ".join(self.scopes)

    @property
    def is_confidential(self) -> bool:
        return bool(self.client_secret)

    def post_url(self, post_id: str) -> str:
        return self.post_url_template.format(post_id=post_id)
