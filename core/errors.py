"""Exception hierarchy for EXIF extraction and coordinate resolution.

Every failure the core can report is a distinct type so callers can tell a
photo without location data apart from a corrupt or unreadable file.
"""

from __future__ import annotations


class PhotoMapperError(Exception):
    """Base class for all photo mapper errors."""


class ExifReadError(PhotoMapperError):
    """No EXIF data could be located in the supplied bytes."""


class NotAnImageError(ExifReadError):
    """The byte stream is not a decodable image."""


class NoExifSegmentError(ExifReadError):
    """The image decodes but carries no (readable) EXIF segment."""


class MissingGPSDataError(PhotoMapperError):
    """A GPS coordinate or its hemisphere reference is absent."""


class MalformedDateTimeError(PhotoMapperError):
    """The EXIF DateTime value is missing or lacks the date/time separator."""


class DivisionByZeroError(PhotoMapperError, ZeroDivisionError):
    """A rational has a zero denominator and a nonzero numerator."""
