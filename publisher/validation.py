"""Validation of publish requests before any network call"""

import logging

from errors import ValidationError
from .media import parse_data_url, ensure_size
from .models import PublishRequest

logger = logging.getLogger(__name__)

MAX_POST_LENGTH = 280


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units (how X counts characters)"""
    return len(text.encode("utf-16-le")) // 2


def validate_text(text: str) -> str:
    """Check post text and return it trimmed

    Raises:
        ValidationError: If the text is empty after trimming or too long
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise ValidationError("Text is required and cannot be empty", code="empty_text")

    length = utf16_length(trimmed)
    if length > MAX_POST_LENGTH:
        raise ValidationError(
            f"Text exceeds {MAX_POST_LENGTH} characters ({length})",
            code="text_too_long",
        )
    return trimmed


def validate_request(request: PublishRequest, max_media_bytes: int) -> None:
    """Validate a publish request

    Inline images are decoded here so that type and size problems surface
    before anything is sent to X. Remote images can only be checked while
    they are downloaded.

    Raises:
        ValidationError: Or one of its subclasses
    """
    validate_text(request.text)

    if request.image_url and request.image_data:
        raise ValidationError(
            "Provide either imageUrl or imageBase64, not both",
            code="conflicting_media",
        )

    if request.media_required and not (request.image_url or request.image_data):
        raise ValidationError(
            "Either imageUrl or imageBase64 is required",
            code="missing_media",
        )

    if request.image_data:
        media = parse_data_url(request.image_data)
        ensure_size(media.size, max_media_bytes)
        logger.debug(f"Inline image validated: {media.size} bytes, type: {media.mime_type}")
