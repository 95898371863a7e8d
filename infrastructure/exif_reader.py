"""EXIF tag lookup backed by Pillow.

Pillow locates the EXIF segment (JPEG APP1, PNG eXIf, WebP EXIF chunk or the
TIFF structure itself), detects the II/MM byte order from the TIFF header and
decodes IFD0 and the GPS IFD. This module narrows that down to the handful of
tags the extractor needs and converts Pillow's value types into core models.
"""

from __future__ import annotations

import io
import struct
import threading
from typing import Any

from PIL import ExifTags, Image, UnidentifiedImageError
from loguru import logger

from core.errors import NoExifSegmentError, NotAnImageError
from core.models import Rational, RationalTriple
from core.services.interfaces import (
    TAG_DATETIME,
    TAG_GPS_LATITUDE,
    TAG_GPS_LATITUDE_REF,
    TAG_GPS_LONGITUDE,
    TAG_GPS_LONGITUDE_REF,
    TAG_MAKE,
    TAG_MODEL,
    ITagReader,
)

# tag name -> (sub-IFD pointer tag or None for IFD0, tag id)
_TAG_LOCATIONS: dict[str, tuple[int | None, int]] = {
    TAG_GPS_LATITUDE_REF: (ExifTags.IFD.GPSInfo, ExifTags.GPS.GPSLatitudeRef),
    TAG_GPS_LATITUDE: (ExifTags.IFD.GPSInfo, ExifTags.GPS.GPSLatitude),
    TAG_GPS_LONGITUDE_REF: (ExifTags.IFD.GPSInfo, ExifTags.GPS.GPSLongitudeRef),
    TAG_GPS_LONGITUDE: (ExifTags.IFD.GPSInfo, ExifTags.GPS.GPSLongitude),
    TAG_DATETIME: (None, ExifTags.Base.DateTime),
    TAG_MAKE: (None, ExifTags.Base.Make),
    TAG_MODEL: (None, ExifTags.Base.Model),
}

_BYTE_ORDERS = {"<": "little", ">": "big"}

_REF_TAGS = (TAG_GPS_LATITUDE_REF, TAG_GPS_LONGITUDE_REF)

# Errors Pillow raises on truncated or inconsistent TIFF structures
_EXIF_DECODE_ERRORS = (OSError, SyntaxError, struct.error, ValueError, KeyError)

# Image.MAX_IMAGE_PIXELS is process-wide; lifted under this lock only
_PIXEL_LIMIT_LOCK = threading.Lock()


def _to_rational(value: Any) -> Rational | None:
    """Convert a Pillow IFDRational or legacy (num, den) pair."""
    if isinstance(value, tuple) and len(value) == 2:
        numerator, denominator = value
    elif hasattr(value, "numerator") and hasattr(value, "denominator"):
        numerator, denominator = value.numerator, value.denominator
    else:
        return None
    try:
        return Rational(int(numerator), int(denominator))
    except (TypeError, ValueError):
        return None


def _open_image(data: bytes) -> Image.Image:
    """Open `data` for header access, even past Pillow's pixel-count limit.

    Only the headers are parsed, pixels are never decoded, so a very large
    photo is reopened with the limit lifted rather than rejected.
    """
    try:
        return Image.open(io.BytesIO(data))
    except (Image.DecompressionBombError, Image.DecompressionBombWarning) as ex:
        logger.debug("Reopening large image for EXIF only: {}", ex)
    with _PIXEL_LIMIT_LOCK:
        limit = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = None
        try:
            return Image.open(io.BytesIO(data))
        finally:
            Image.MAX_IMAGE_PIXELS = limit


class ExifTagReader(ITagReader):
    """Named-tag access over one image's IFD0 and GPS IFD."""

    def __init__(
        self,
        ifd0: dict[int, Any],
        gps_ifd: dict[int, Any],
        byte_order: str | None = None,
    ) -> None:
        self._ifds: dict[int | None, dict[int, Any]] = {
            None: ifd0,
            ExifTags.IFD.GPSInfo: gps_ifd,
        }
        self.byte_order = byte_order

    @classmethod
    def open(cls, data: bytes) -> ExifTagReader:
        """Decode `data` and return a reader over its EXIF tags.

        Raises:
            NotAnImageError: `data` is not an image Pillow can identify.
            NoExifSegmentError: the image has no readable EXIF segment.
        """
        try:
            with _open_image(data) as im:
                image_format = im.format
                exif = im.getexif()
                if exif.endian is None:
                    raise NoExifSegmentError(f"{image_format} image has no EXIF segment")
                ifd0 = dict(exif.items())
                gps_ifd = cls._load_gps_ifd(exif)
        except UnidentifiedImageError as ex:
            raise NotAnImageError("Data is not a recognizable image") from ex
        except _EXIF_DECODE_ERRORS as ex:
            raise NoExifSegmentError(f"EXIF segment could not be decoded: {ex}") from ex

        byte_order = _BYTE_ORDERS.get(exif.endian)
        logger.debug(
            "EXIF found in {} image ({} endian, {} IFD0 tags, {} GPS tags)",
            image_format,
            byte_order,
            len(ifd0),
            len(gps_ifd),
        )
        return cls(ifd0, gps_ifd, byte_order)

    @staticmethod
    def _load_gps_ifd(exif: Image.Exif) -> dict[int, Any]:
        """Return the GPS IFD, or an empty dict when missing or unreadable."""
        try:
            return dict(exif.get_ifd(ExifTags.IFD.GPSInfo))
        except _EXIF_DECODE_ERRORS as ex:
            logger.warning("GPS IFD unreadable, ignoring it: {}", ex)
            return {}

    def _lookup(self, tag_name: str) -> Any:
        location = _TAG_LOCATIONS.get(tag_name)
        if location is None:
            return None
        ifd, tag = location
        return self._ifds[ifd].get(tag)

    def get_rational3(self, tag_name: str) -> RationalTriple | None:
        """Return the rational triple stored under `tag_name`, if any."""
        value = self._lookup(tag_name)
        if not isinstance(value, (tuple, list)) or len(value) != 3:
            return None
        parts = [_to_rational(v) for v in value]
        if any(p is None for p in parts):
            return None
        return (parts[0], parts[1], parts[2])  # type: ignore[return-value]

    def get_string(self, tag_name: str) -> str | None:
        """Return the text stored under `tag_name`, if any."""
        value = self._lookup(tag_name)
        if isinstance(value, bytes):
            value = value.decode("latin-1", "replace")
        if not isinstance(value, str):
            return None
        text = value.rstrip("\x00")
        if tag_name in _REF_TAGS:
            text = text.strip()
        return text
