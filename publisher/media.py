"""Image resolution: inline data URLs and size-capped remote downloads"""

import asyncio
import base64
import binascii
import logging
import re
from typing import Optional

import httpx

from errors import (
    MalformedInlineMediaError,
    MediaFetchError,
    MediaTooLargeError,
    UnsupportedMediaTypeError,
)
from x_oauth.utils import http_client
from .models import ResolvedMedia

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}

DATA_URL_PATTERN = re.compile(r"data:([A-Za-z0-9.+/-]+);base64,(.+)", re.DOTALL)


def normalize_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """Lower-case a content type, drop parameters and resolve aliases"""
    if not mime_type:
        return None
    base = mime_type.split(";", 1)[0].strip().lower()
    return MIME_ALIASES.get(base, base) or None


def sniff_mime_type(content: bytes) -> Optional[str]:
    """Detect the image type from its magic bytes

    Returns:
        One of the allowed MIME types, or None if unrecognised
    """
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


def ensure_supported(declared: Optional[str], content: Optional[bytes] = None) -> str:
    """Check a declared MIME type, and the bytes when available

    Args:
        declared: MIME type from the data URL or Content-Type header
        content: Image bytes to sniff

    Returns:
        Normalised MIME type

    Raises:
        UnsupportedMediaTypeError: If the type is not allowed, or the bytes
            are a different image type than declared
    """
    mime_type = normalize_mime_type(declared)
    sniffed = sniff_mime_type(content) if content else None

    if mime_type is None:
        mime_type = sniffed

    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedMediaTypeError(
            f"Image must be JPEG, PNG, GIF, or WebP. Got: {declared or 'unknown'}",
            code="unsupported_media_type",
        )

    if sniffed and sniffed != mime_type:
        raise UnsupportedMediaTypeError(
            f"Image content is {sniffed} but was declared as {mime_type}",
            code="mismatched_media_type",
        )
    return mime_type


def ensure_size(size: int, max_bytes: int) -> None:
    """Raise MediaTooLargeError if size exceeds max_bytes"""
    if size > max_bytes:
        raise MediaTooLargeError(
            f"Image size exceeds {max_bytes // (1024 * 1024)}MB limit ({size / 1024 / 1024:.1f}MB)",
            code="media_too_large",
        )


def parse_data_url(data_url: str) -> ResolvedMedia:
    """Decode a ``data:<mime>;base64,<payload>`` image

    Raises:
        MalformedInlineMediaError: If the string is not exactly that shape
        UnsupportedMediaTypeError: If the MIME type is not an allowed image type
    """
    match = DATA_URL_PATTERN.fullmatch(data_url.strip()) if data_url else None
    if not match:
        raise MalformedInlineMediaError(code="malformed_data_url")

    declared, payload = match.group(1), match.group(2)
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInlineMediaError("Image payload is not valid base64", code="malformed_base64") from e

    if not content:
        raise MalformedInlineMediaError("Image payload is empty", code="empty_media")

    return ResolvedMedia(content=content, mime_type=ensure_supported(declared, content))


async def _download(
    http: httpx.AsyncClient,
    url: str,
    max_bytes: int,
    timeout: float
) -> ResolvedMedia:
    """Stream a remote image, aborting as soon as it exceeds max_bytes"""
    async with http.stream("GET", url, timeout=timeout, follow_redirects=True) as response:
        if response.status_code != 200:
            raise MediaFetchError(
                f"Image download failed with status {response.status_code}",
                code=str(response.status_code),
            )

        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit():
            ensure_size(int(content_length), max_bytes)

        declared = response.headers.get("content-type")
        if declared:
            # Reject before reading the body when the header already rules it out
            ensure_supported(declared)

        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
            ensure_size(len(buffer), max_bytes)

    content = bytes(buffer)
    if not content:
        raise MediaFetchError("Downloaded image is empty", code="empty_media")
    return ResolvedMedia(content=content, mime_type=ensure_supported(declared, content))


async def fetch_remote_media(
    url: str,
    max_bytes: int,
    timeout: float,
    client: Optional[httpx.AsyncClient] = None
) -> ResolvedMedia:
    """Download an image with a size cap and a total transfer timeout

    Not retried: the source is assumed stable.

    Raises:
        MediaTooLargeError: If the image exceeds max_bytes
        UnsupportedMediaTypeError: If the content type is not allowed or mismatched
        MediaFetchError: On network errors, timeouts or non-200 responses
    """
    logger.info(f"Downloading image from URL: {url}")
    try:
        async with http_client(client, timeout) as http:
            media = await asyncio.wait_for(_download(http, url, max_bytes, timeout), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise MediaFetchError(f"Image download timed out after {timeout:.0f} seconds", code="timeout") from e
    except httpx.TimeoutException as e:
        raise MediaFetchError(f"Image download timed out after {timeout:.0f} seconds", code="timeout") from e
    except httpx.InvalidURL as e:
        raise MediaFetchError(f"Invalid image URL: {url}", code="invalid_url") from e
    except httpx.HTTPError as e:
        raise MediaFetchError(f"Failed to download image: {e}", code="network_error") from e

    logger.info(f"Image downloaded, size: {media.size} bytes, type: {media.mime_type}")
    return media
