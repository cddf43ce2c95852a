"""Thumbnail rendering capability and the media types that get thumbnails."""

import asyncio
import io
from typing import Optional, Protocol

from PIL import Image, UnidentifiedImageError

from common.constants import THUMBNAIL_MEDIA_TYPES, THUMBNAIL_SIZE, VIDEO_RENDER_TIMEOUT_SECONDS
from common.exceptions import RenderError
from common.logging_config import get_logger
from common.types import FileHandle

logger = get_logger(__name__)


class ThumbnailRenderer(Protocol):
    """Renders a small PNG for a file, or raises RenderError."""

    async def render(self, file: FileHandle) -> bytes:
        ...


def is_thumbnail_eligible(media_type: str) -> bool:
    """Images, mp4 video and PDF documents get thumbnails."""
    return media_type.startswith("image/") or media_type in THUMBNAIL_MEDIA_TYPES


class PillowImageRenderer:
    """Scales an image to a fixed square PNG with Pillow."""

    def __init__(self, size: int = THUMBNAIL_SIZE):
        self.size = size

    async def render(self, file: FileHandle) -> bytes:
        data = file.read_range(0, file.size)
        return await asyncio.to_thread(self._render, data, file.name)

    def _render(self, data: bytes, name: str) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                thumbnail = image.convert("RGBA").resize((self.size, self.size))
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise RenderError(f"Cannot decode image {name}: {e}") from e

        buffer = io.BytesIO()
        thumbnail.save(buffer, format="PNG")
        return buffer.getvalue()


class MediaTypeRenderer:
    """
    Routes a file to the renderer for its media type.

    Video and document renderers depend on host facilities and are injected;
    a missing renderer is a RenderError. Video rendering is bounded by a fixed
    timeout, no other path is.
    """

    def __init__(
        self,
        image: Optional[ThumbnailRenderer] = None,
        video: Optional[ThumbnailRenderer] = None,
        document: Optional[ThumbnailRenderer] = None,
        video_timeout: float = VIDEO_RENDER_TIMEOUT_SECONDS,
    ):
        self.image = image if image is not None else PillowImageRenderer()
        self.video = video
        self.document = document
        self.video_timeout = video_timeout

    async def render(self, file: FileHandle) -> bytes:
        media_type = file.media_type
        if media_type.startswith("image/"):
            return await self.image.render(file)

        if media_type == "video/mp4":
            if self.video is None:
                raise RenderError(f"No thumbnail renderer for {media_type}")
            try:
                return await asyncio.wait_for(self.video.render(file), self.video_timeout)
            except asyncio.TimeoutError as e:
                raise RenderError(f"Video load timeout for {file.name}") from e

        if media_type == "application/pdf":
            if self.document is None:
                raise RenderError(f"No thumbnail renderer for {media_type}")
            return await self.document.render(file)

        raise RenderError(f"Media type {media_type} has no thumbnail")
