"""Lightweight view model wrapper around `PhotoRecord`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

from core.models import PhotoRecord


@dataclass
class PhotoVM:
    """Expose display strings for a marker's info panel."""

    record: PhotoRecord

    @property
    def identifier(self) -> str:
        """Identifier the marker is keyed by."""
        return self.record.identifier

    @property
    def file_name(self) -> str:
        """Base name of the identifier when it is a path."""
        return PurePath(self.record.identifier).name or self.record.identifier

    @property
    def date_text(self) -> str:
        return f"Date: {self.record.date}"

    @property
    def time_text(self) -> str:
        return f"Time: {self.record.time}"

    @property
    def make_text(self) -> str:
        return f"Make: {self.record.make}"

    @property
    def model_text(self) -> str:
        return f"Model: {self.record.model}"

    @property
    def position_text(self) -> str:
        """Signed coordinates with six decimals."""
        return f"{self.record.latitude:.6f}, {self.record.longitude:.6f}"

    @property
    def thumbnail(self) -> bytes | None:
        """Raw JPEG thumbnail bytes, if one was stored."""
        return self.record.thumbnail
