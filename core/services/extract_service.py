"""Assemble a `PhotoRecord` from the tags exposed by a tag reader.

The pass over the tags is linear: GPS first, then the capture timestamp, then
the camera fields. Missing GPS data is an ordinary outcome reported as
`NoGPSData`; any other failure propagates to the caller.
"""

from __future__ import annotations

from loguru import logger

from core.errors import MalformedDateTimeError, MissingGPSDataError
from core.models import NoGPSData, PhotoRecord
from core.services.coordinate_service import resolve_latitude, resolve_longitude
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


def split_datetime(value: str | None) -> tuple[str, str]:
    """Split an EXIF "YYYY:MM:DD HH:MM:SS" value into (date, time).

    Raises:
        MalformedDateTimeError: value is absent or has no space separator.
    """
    if value is None:
        raise MalformedDateTimeError("DateTime tag is absent")
    date, sep, time = value.partition(" ")
    if not sep:
        raise MalformedDateTimeError(f"DateTime {value!r} has no date/time separator")
    return date, time


def extract_record(
    reader: ITagReader, identifier: str, thumbnail: bytes | None = None
) -> PhotoRecord | NoGPSData:
    """Build a record from `reader`, or `NoGPSData` when GPS tags are missing."""
    latitude_ref = reader.get_string(TAG_GPS_LATITUDE_REF)
    longitude_ref = reader.get_string(TAG_GPS_LONGITUDE_REF)
    try:
        latitude = resolve_latitude(reader.get_rational3(TAG_GPS_LATITUDE), latitude_ref)
        longitude = resolve_longitude(reader.get_rational3(TAG_GPS_LONGITUDE), longitude_ref)
    except MissingGPSDataError as ex:
        logger.info("Photo {} didn't have GPS data: {}", identifier, ex)
        return NoGPSData(identifier=identifier, reason=str(ex))

    date, time = split_datetime(reader.get_string(TAG_DATETIME))

    return PhotoRecord(
        identifier=identifier,
        thumbnail=thumbnail,
        latitude=latitude,
        latitude_ref=latitude_ref or "",
        longitude=longitude,
        longitude_ref=longitude_ref or "",
        date=date,
        time=time,
        make=reader.get_string(TAG_MAKE) or "",
        model=reader.get_string(TAG_MODEL) or "",
    )
