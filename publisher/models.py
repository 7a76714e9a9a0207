"""Data models for the publish pipeline"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    """Which media variant a PublishRequest carries"""
    NONE = "none"
    REMOTE = "remote"
    INLINE = "inline"


@dataclass(frozen=True)
class PublishRequest:
    """A post to publish

    Attributes:
        text: Post text (1-280 UTF-16 code units after trimming)
        image_url: Remote image to attach
        image_data: Inline image as a ``data:<mime>;base64,<payload>`` URL
        media_required: True when the caller meant to attach an image
    """
    text: str
    image_url: Optional[str] = None
    image_data: Optional[str] = field(default=None, repr=False)
    media_required: bool = False

    @classmethod
    def text_only(cls, text: str) -> "PublishRequest":
        return cls(text=text)

    @classmethod
    def with_remote_image(cls, text: str, url: str) -> "PublishRequest":
        return cls(text=text, image_url=url, media_required=True)

    @classmethod
    def with_inline_image(cls, text: str, data_url: str) -> "PublishRequest":
        return cls(text=text, image_data=data_url, media_required=True)

    @property
    def media_kind(self) -> MediaKind:
        """Media variant; only meaningful once validate() has passed"""
        if self.image_url:
            return MediaKind.REMOTE
        if self.image_data:
            return MediaKind.INLINE
        return MediaKind.NONE


@dataclass(frozen=True)
class ResolvedMedia:
    """Image bytes ready for upload"""
    content: bytes = field(repr=False)
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PublishResult:
    """A published post"""
    post_id: str
    post_url: str
    text: str
    media_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "post_id": self.post_id,
            "post_url": self.post_url,
            "text": self.text,
            "media_id": self.media_id,
        }
