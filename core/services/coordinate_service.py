"""Conversion of EXIF rational GPS values into signed decimal degrees.

EXIF stores a coordinate as three RATIONAL values (degrees, minutes, seconds)
plus a one-letter hemisphere reference held in a separate tag. The functions
here fold the triple into a single float and apply the hemisphere sign.

Sign convention:
    Latitude is negated only for "S"; every other reference is positive.
    Longitude is positive only for exactly "E"; every other reference
    (including "W") is negated. References outside N/S and E/W are logged
    as warnings because the two rules disagree on them.
"""

from __future__ import annotations

from loguru import logger

from core.errors import DivisionByZeroError, MissingGPSDataError
from core.models import Rational, RationalTriple

LATITUDE_REFS = frozenset({"N", "S"})
LONGITUDE_REFS = frozenset({"E", "W"})


def to_float(value: Rational) -> float:
    """Return `value` as a float.

    A 0/0 rational is treated as an absent component and yields 0.0.

    Raises:
        DivisionByZeroError: denominator is 0 and numerator is not.
    """
    if value.denominator == 0:
        if value.numerator == 0:
            return 0.0
        raise DivisionByZeroError(f"Rational {value} has a zero denominator")
    return value.numerator / value.denominator


def to_decimal_degrees(degrees: Rational, minutes: Rational, seconds: Rational) -> float:
    """Fold degrees, minutes and seconds into one decimal-degree value."""
    return to_float(degrees) + to_float(minutes) / 60 + to_float(seconds) / 3600


def _require(raw: RationalTriple | None, ref: str | None, axis: str) -> RationalTriple:
    if raw is None:
        raise MissingGPSDataError(f"GPS {axis} is absent")
    if not ref:
        raise MissingGPSDataError(f"GPS {axis} reference is absent")
    return raw


def resolve_latitude(raw: RationalTriple | None, ref: str | None) -> float:
    """Return signed latitude; negative only for the "S" hemisphere.

    Raises:
        MissingGPSDataError: `raw` or `ref` is absent/empty.
    """
    triple = _require(raw, ref, "latitude")
    if ref not in LATITUDE_REFS:
        logger.warning("Unrecognized latitude reference {!r}, treating as north", ref)
    value = to_decimal_degrees(*triple)
    return -value if ref == "S" else value


def resolve_longitude(raw: RationalTriple | None, ref: str | None) -> float:
    """Return signed longitude; positive only for the "E" hemisphere.

    Raises:
        MissingGPSDataError: `raw` or `ref` is absent/empty.
    """
    triple = _require(raw, ref, "longitude")
    if ref not in LONGITUDE_REFS:
        logger.warning("Unrecognized longitude reference {!r}, treating as west", ref)
    value = to_decimal_degrees(*triple)
    return value if ref == "E" else -value
