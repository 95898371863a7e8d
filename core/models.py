"""Core domain models for EXIF rationals and decoded photo records."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Rational:
    """A fraction as stored in EXIF RATIONAL fields."""

    numerator: int
    denominator: int

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


RationalTriple = tuple[Rational, Rational, Rational]


@dataclass(frozen=True)
class PhotoRecord:
    """A photo whose GPS position was fully resolved from its EXIF header."""

    identifier: str
    latitude: float
    latitude_ref: str
    longitude: float
    longitude_ref: str
    date: str
    time: str
    make: str = ""
    model: str = ""
    thumbnail: bytes | None = None

    def with_thumbnail(self, thumbnail: bytes | None) -> PhotoRecord:
        """Return a copy of this record carrying `thumbnail`."""
        return replace(self, thumbnail=thumbnail)

    @property
    def position(self) -> tuple[float, float]:
        """(latitude, longitude) pair."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class NoGPSData:
    """Extraction outcome for an image whose EXIF lacks usable GPS tags."""

    identifier: str
    reason: str = ""
