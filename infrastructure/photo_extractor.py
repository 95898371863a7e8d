"""Top-level entry points: image bytes in, `PhotoRecord` or `NoGPSData` out."""

from __future__ import annotations

from pathlib import Path

from core.models import NoGPSData, PhotoRecord
from core.services.extract_service import extract_record
from infrastructure.exif_reader import ExifTagReader


def extract(
    data: bytes, identifier: str, thumbnail: bytes | None = None
) -> PhotoRecord | NoGPSData:
    """Extract a photo record from raw image `data`.

    Raises:
        NotAnImageError, NoExifSegmentError: no EXIF data could be located.
        MalformedDateTimeError: DateTime is missing or malformed.
        DivisionByZeroError: a GPS rational is corrupt.
    """
    reader = ExifTagReader.open(data)
    return extract_record(reader, identifier, thumbnail)


def extract_file(
    path: str | Path, identifier: str | None = None, thumbnail: bytes | None = None
) -> PhotoRecord | NoGPSData:
    """Read `path` and extract it; the path doubles as identifier by default."""
    data = Path(path).read_bytes()
    return extract(data, identifier if identifier is not None else str(path), thumbnail)
