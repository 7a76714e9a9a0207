"""Post publishing handlers for CLI"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from errors import AuthExpiredError, ValidationError, XPublisherError
from publisher import PublishPipeline, PublishRequest, PublishResult
from utils.storage import TokenStorage
from x_oauth import AuthSession

logger = logging.getLogger(__name__)


class NotLoggedInError(XPublisherError):
    default_message = "Not logged in - run 'login' first"


def image_file_to_data_url(path: str) -> str:
    """Read a local image and encode it as a data URL

    Raises:
        ValidationError: If the file cannot be read
    """
    file_path = Path(path).expanduser()
    try:
        content = file_path.read_bytes()
    except OSError as e:
        raise ValidationError(f"Cannot read image file: {e}", code="unreadable_file") from e

    mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def build_request(text: str, image_url: Optional[str] = None,
                  image_file: Optional[str] = None) -> PublishRequest:
    if image_url:
        return PublishRequest.with_remote_image(text, image_url)
    if image_file:
        return PublishRequest.with_inline_image(text, image_file_to_data_url(image_file))
    return PublishRequest.text_only(text)


async def publish_with_refresh(
    pipeline: PublishPipeline,
    session: AuthSession,
    storage: TokenStorage,
    request: PublishRequest
) -> PublishResult:
    """
    Publish with the stored token, refreshing and retrying exactly once on AuthExpiredError

    Rotated tokens are saved before the retry so they survive a second failure.

    Raises:
        NotLoggedInError: If no tokens are stored
        AuthExpiredError: If there is no refresh token, or the retry is also rejected
        RefreshFailedError: If the refresh itself fails
    """
    tokens = storage.get_token_pair()
    if tokens is None:
        raise NotLoggedInError(code="not_logged_in")

    try:
        return await pipeline.publish(tokens.access_token, request)
    except AuthExpiredError:
        if not tokens.refresh_token:
            raise
        logger.info("Access token rejected, refreshing and retrying once")

    refreshed = await session.refresh(tokens.refresh_token)
    storage.save_tokens(refreshed)
    return await pipeline.publish(refreshed.access_token, request)


async def post(
    pipeline: PublishPipeline,
    session: AuthSession,
    storage: TokenStorage,
    console,
    text: str,
    image_url: Optional[str] = None,
    image_file: Optional[str] = None
) -> bool:
    """
    Publish a post and report the outcome

    Returns:
        True if the post was published
    """
    try:
        request = build_request(text, image_url=image_url, image_file=image_file)
        with console.status("Publishing..."):
            result = await publish_with_refresh(pipeline, session, storage, request)
    except XPublisherError as e:
        console.print(f"[red][ERROR][/red] {e.message}")
        retry_after = getattr(e, "retry_after", None)
        if retry_after is not None:
            console.print(f"[dim]Retry after {retry_after} seconds[/dim]")
        if isinstance(e, AuthExpiredError):
            console.print("Please log in again")
        return False

    console.print("[green][OK][/green] Post published!")
    console.print(result.post_url)
    return True
