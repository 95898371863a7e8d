from __future__ import annotations

import pytest

from core.errors import DivisionByZeroError, MissingGPSDataError
from core.models import Rational
from core.services.coordinate_service import (
    resolve_latitude,
    resolve_longitude,
    to_decimal_degrees,
    to_float,
)


def r(n: int, d: int = 1) -> Rational:
    return Rational(n, d)


PITTSBURGH_LAT = (r(40), r(26), r(46))
PITTSBURGH_LON = (r(79), r(58), r(56))


@pytest.mark.parametrize(
    ("numerator", "denominator", "expected"),
    [(1, 2, 0.5), (46, 1, 46.0), (4646, 100, 46.46), (0, 7, 0.0), (-3, 4, -0.75)],
)
def test_to_float_divides(numerator, denominator, expected):
    assert to_float(Rational(numerator, denominator)) == pytest.approx(expected)


def test_to_float_zero_over_zero_is_absent_component():
    assert to_float(Rational(0, 0)) == 0.0


def test_to_float_zero_denominator_fails():
    with pytest.raises(DivisionByZeroError):
        to_float(Rational(5, 0))
    # still catchable as the builtin
    with pytest.raises(ZeroDivisionError):
        to_float(Rational(1, 0))


def test_to_decimal_degrees_folds_components():
    assert to_decimal_degrees(r(0), r(0), r(0)) == 0.0
    assert to_decimal_degrees(r(1), r(30), r(0)) == 1.5
    assert to_decimal_degrees(r(10), r(0), r(36)) == pytest.approx(10.01)
    assert to_decimal_degrees(r(51), r(3045, 100), r(0, 0)) == pytest.approx(51.5075)


def test_to_decimal_degrees_does_not_clamp():
    assert to_decimal_degrees(r(200), r(0), r(0)) == 200.0


def test_to_decimal_degrees_propagates_division_by_zero():
    with pytest.raises(DivisionByZeroError):
        to_decimal_degrees(r(10), r(3, 0), r(0))


def test_latitude_north_is_positive():
    assert resolve_latitude(PITTSBURGH_LAT, "N") == pytest.approx(40.4461, abs=1e-3)


def test_latitude_south_is_negated():
    north = resolve_latitude(PITTSBURGH_LAT, "N")
    assert resolve_latitude(PITTSBURGH_LAT, "S") == -north


@pytest.mark.parametrize("ref", ["", None])
def test_latitude_without_ref_is_missing(ref):
    with pytest.raises(MissingGPSDataError):
        resolve_latitude(PITTSBURGH_LAT, ref)


def test_latitude_without_value_is_missing():
    with pytest.raises(MissingGPSDataError):
        resolve_latitude(None, "N")


def test_latitude_unknown_ref_defaults_positive_and_warns(log_messages):
    assert resolve_latitude(PITTSBURGH_LAT, "X") > 0
    assert any("latitude reference" in m for m in log_messages)


def test_longitude_east_is_positive():
    assert resolve_longitude(PITTSBURGH_LON, "E") == pytest.approx(79.9822, abs=1e-3)


def test_longitude_west_is_negated():
    assert resolve_longitude(PITTSBURGH_LON, "W") == pytest.approx(-79.9822, abs=1e-3)


@pytest.mark.parametrize("ref", ["Q", "e", "East"])
def test_longitude_any_non_east_ref_is_negated(ref, log_messages):
    # Asymmetric with latitude: only an exact "E" is positive.
    assert resolve_longitude(PITTSBURGH_LON, ref) < 0
    assert any("longitude reference" in m for m in log_messages)


@pytest.mark.parametrize(
    ("raw", "ref"), [(None, "E"), (PITTSBURGH_LON, ""), (PITTSBURGH_LON, None)]
)
def test_longitude_missing_parts(raw, ref):
    with pytest.raises(MissingGPSDataError):
        resolve_longitude(raw, ref)


def test_resolver_passes_out_of_range_values_through():
    assert resolve_latitude((r(200), r(0), r(0)), "N") == 200.0
