"""Thumbnail preparation for imported photos.

Thumbnails are produced on the caller side of extraction: the shared image is
decoded with Pillow, scaled to a fixed size and re-encoded as a small JPEG
that is stored next to the decoded EXIF fields.
"""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, ImageOps
from loguru import logger

DEFAULT_THUMB_WIDTH = 512
DEFAULT_THUMB_HEIGHT = 384
DEFAULT_THUMB_QUALITY = 50


class ImageService:
    """Builds fixed-size JPEG thumbnails with Pillow."""

    def __init__(self, settings: object | None = None) -> None:
        """Read thumbnail width/height/quality from settings when given."""
        self._width = DEFAULT_THUMB_WIDTH
        self._height = DEFAULT_THUMB_HEIGHT
        self._quality = DEFAULT_THUMB_QUALITY
        if settings is not None:
            self._width = settings.get_int("thumbnail.width", DEFAULT_THUMB_WIDTH)
            self._height = settings.get_int("thumbnail.height", DEFAULT_THUMB_HEIGHT)
            self._quality = settings.get_int("thumbnail.quality", DEFAULT_THUMB_QUALITY)

    @property
    def size(self) -> tuple[int, int]:
        """Thumbnail (width, height) in pixels."""
        return (self._width, self._height)

    def make_thumbnail(self, data: bytes) -> bytes:
        """Return a JPEG thumbnail of the image in `data`.

        The image is stretched to the configured size without preserving the
        aspect ratio, so every marker popup has the same footprint.

        Raises:
            OSError: `data` cannot be decoded by Pillow, or is too large to
                decode safely.
        """
        try:
            im = Image.open(io.BytesIO(data))
        except (Image.DecompressionBombError, Image.DecompressionBombWarning) as ex:
            raise OSError(f"Image too large for a thumbnail: {ex}") from ex
        with im:
            # JPEG only: decode at a reduced scale close to the target size
            im.draft("RGB", self.size)
            try:
                im = ImageOps.exif_transpose(im)
            except (OSError, ValueError, AttributeError):
                pass
            if im.mode != "RGB":
                im = im.convert("RGB")
            thumb = im.resize(self.size, Image.Resampling.NEAREST)
            out = io.BytesIO()
            thumb.save(out, "JPEG", quality=self._quality)
        return out.getvalue()

    def make_thumbnail_file(self, path: str | Path) -> bytes | None:
        """Best-effort thumbnail for the file at `path`; None on failure."""
        try:
            return self.make_thumbnail(Path(path).read_bytes())
        except (OSError, ValueError) as ex:
            logger.error("couldn't get thumbnail of {}: {}", path, ex)
            return None
