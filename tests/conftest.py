"""Shared fixtures: synthetic EXIF segments wrapped in real JPEG files."""

from __future__ import annotations

import io
import struct

from PIL import Image
from loguru import logger
import pytest

from infrastructure.sqlite_repository import SqlitePhotoRepository

ASCII = 2
LONG = 4
RATIONAL = 5

TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_DATETIME = 0x0132
TAG_GPS_IFD = 0x8825

GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4

# 40°26'46" N, 79°58'56" W
PITTSBURGH_LAT = ((40, 1), (26, 1), (46, 1))
PITTSBURGH_LON = ((79, 1), (58, 1), (56, 1))


def ascii_entry(tag, text):
    data = text.encode("latin-1") + b"\x00"
    return (tag, ASCII, len(data), data)


def rational_entry(tag, pairs, byte_order="<"):
    data = b"".join(struct.pack(byte_order + "II", n, d) for n, d in pairs)
    return (tag, RATIONAL, len(pairs), data)


def build_exif(ifd0_entries, gps_entries=None, byte_order="<"):
    """Pack an APP1 EXIF payload: TIFF header, IFD0, optional GPS IFD."""
    bo = byte_order
    header = (b"II*\x00" if bo == "<" else b"MM\x00*") + struct.pack(bo + "I", 8)

    ifd0 = list(ifd0_entries)
    if gps_entries is not None:
        ifd0.append((TAG_GPS_IFD, LONG, 1, None))
    ifd0.sort(key=lambda e: e[0])
    gps = sorted(gps_entries or [], key=lambda e: e[0])

    gps_offset = 8 + 2 + 12 * len(ifd0) + 4
    gps_size = 2 + 12 * len(gps) + 4 if gps_entries is not None else 0
    data_offset = gps_offset + gps_size
    data_area = bytearray()

    def pack_ifd(entries):
        out = struct.pack(bo + "H", len(entries))
        for tag, typ, count, payload in entries:
            if payload is None:
                payload = struct.pack(bo + "I", gps_offset)
            if len(payload) <= 4:
                value = payload.ljust(4, b"\x00")
            else:
                value = struct.pack(bo + "I", data_offset + len(data_area))
                data_area.extend(payload)
                if len(data_area) % 2:
                    data_area.append(0)
            out += struct.pack(bo + "HHI", tag, typ, count) + value
        return out + struct.pack(bo + "I", 0)

    body = pack_ifd(ifd0)
    if gps_entries is not None:
        body += pack_ifd(gps)
    return b"Exif\x00\x00" + header + body + bytes(data_area)


def make_jpeg(exif=None, size=(32, 24), color=(200, 30, 30)):
    im = Image.new("RGB", size, color)
    buf = io.BytesIO()
    if exif:
        im.save(buf, "JPEG", exif=exif)
    else:
        im.save(buf, "JPEG")
    return buf.getvalue()


def set_jpeg_size(data, width, height):
    """Rewrite the frame header dimensions of JPEG `data`; scan data is kept."""
    out = bytearray(data)
    pos = 2
    while pos < len(out):
        marker = out[pos + 1]
        length = struct.unpack(">H", out[pos + 2 : pos + 4])[0]
        if 0xC0 <= marker <= 0xCF and marker not in (0xC4, 0xC8, 0xCC):
            out[pos + 5 : pos + 9] = struct.pack(">HH", height, width)
            return bytes(out)
        pos += 2 + length
    raise ValueError("no SOF marker in JPEG data")


def make_photo(
    latitude=PITTSBURGH_LAT,
    latitude_ref="N",
    longitude=PITTSBURGH_LON,
    longitude_ref="W",
    datetime="2015:06:01 12:30:45",
    make="LGE",
    model="Nexus 5",
    byte_order="<",
    with_gps=True,
):
    """JPEG bytes with the given EXIF fields; pass None to omit a tag."""
    ifd0 = []
    if datetime is not None:
        ifd0.append(ascii_entry(TAG_DATETIME, datetime))
    if make is not None:
        ifd0.append(ascii_entry(TAG_MAKE, make))
    if model is not None:
        ifd0.append(ascii_entry(TAG_MODEL, model))

    gps = None
    if with_gps:
        gps = []
        if latitude_ref is not None:
            gps.append(ascii_entry(GPS_LATITUDE_REF, latitude_ref))
        if latitude is not None:
            gps.append(rational_entry(GPS_LATITUDE, latitude, byte_order))
        if longitude_ref is not None:
            gps.append(ascii_entry(GPS_LONGITUDE_REF, longitude_ref))
        if longitude is not None:
            gps.append(rational_entry(GPS_LONGITUDE, longitude, byte_order))
    return make_jpeg(build_exif(ifd0, gps, byte_order))


@pytest.fixture
def photo_factory():
    return make_photo


@pytest.fixture
def jpeg_resizer():
    return set_jpeg_size


@pytest.fixture
def plain_jpeg():
    return make_jpeg()


@pytest.fixture
def repo():
    repository = SqlitePhotoRepository(":memory:")
    yield repository
    repository.close()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
