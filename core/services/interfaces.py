"""Core service interfaces and shared data structures.

This module defines the seams between the extraction core and its
collaborators: the EXIF tag source, the photo store, and the outcome of a
share/import request reported back to the UI layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from core.models import PhotoRecord, RationalTriple

# Tag names understood by tag readers. Anything else is reported absent.
TAG_GPS_LATITUDE = "GPSLatitude"
TAG_GPS_LATITUDE_REF = "GPSLatitudeRef"
TAG_GPS_LONGITUDE = "GPSLongitude"
TAG_GPS_LONGITUDE_REF = "GPSLongitudeRef"
TAG_DATETIME = "DateTime"
TAG_MAKE = "Make"
TAG_MODEL = "Model"


class ITagReader:
    """Read access to a fixed set of named EXIF tags."""

    def get_rational3(self, tag_name: str) -> RationalTriple | None:
        """Return a (deg, min, sec) rational triple, or None when absent."""
        raise NotImplementedError

    def get_string(self, tag_name: str) -> str | None:
        """Return an ASCII tag value, or None when absent."""
        raise NotImplementedError


class IPhotoRepository:
    """Record store keyed by image identifier."""

    def insert(self, record: PhotoRecord) -> int:
        """Store `record` and return its row id."""
        raise NotImplementedError

    def load_all(self) -> list[PhotoRecord]:
        """Return every stored record in insertion order."""
        raise NotImplementedError

    def delete_all(self) -> int:
        """Remove every stored record and return how many were removed."""
        raise NotImplementedError

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register `callback` to run after the stored data changes."""
        raise NotImplementedError


class ImportStatus(Enum):
    """How a share/import request ended."""

    STORED = "stored"
    NO_GPS = "no_gps"
    NO_EXIF = "no_exif"
    UNREADABLE = "unreadable"
    CORRUPT = "corrupt"


@dataclass
class ImportResult:
    """Outcome of importing one shared image.

    Attributes:
        path: Path of the image that was imported.
        status: Final status of the import.
        record: Stored record when `status` is STORED.
        message: Human readable reason for non-stored outcomes.
    """

    path: str
    status: ImportStatus
    record: PhotoRecord | None = None
    message: str = ""

    @property
    def stored(self) -> bool:
        """True when the photo was added to the store."""
        return self.status is ImportStatus.STORED
