from datetime import date

import pytest

from resonance_engine.errors import CoordinateRangeError, EngineValidationError, UnknownElementError, UnknownPlanetError
from resonance_engine.services.constants import (
    fmt_deg,
    normalize_element,
    normalize_planet,
    normalize_weekday,
    round_half_up,
    sign_degree_from_lon,
    sign_index_from_lon,
    validate_longitude,
    validate_sign_degree,
    validate_sign_index,
)


def test_sign_and_degree_derive_from_longitude():
    for tenth in range(0, 3600, 7):
        lon = tenth / 10.0
        sign = sign_index_from_lon(lon)
        degree = sign_degree_from_lon(lon)
        assert sign == int(lon // 30)
        assert 0.0 <= degree < 30.0
        assert degree == pytest.approx(lon - 30 * sign)


def test_sign_boundaries():
    assert sign_index_from_lon(0.0) == 0
    assert sign_index_from_lon(29.999) == 0
    assert sign_index_from_lon(30.0) == 1
    assert sign_index_from_lon(359.999) == 11
    assert sign_index_from_lon(275.0) == 9


def test_fmt_deg():
    assert fmt_deg(45.5) == "Taurus 15°30′00″"
    assert fmt_deg(0.0) == "Aries 00°00′00″"
    assert fmt_deg(359.75) == "Pisces 29°45′00″"


def test_normalize_planet_is_case_insensitive():
    assert normalize_planet("mars") == "Mars"
    assert normalize_planet(" SUN ") == "Sun"
    with pytest.raises(UnknownPlanetError):
        normalize_planet("Pluto")
    with pytest.raises(EngineValidationError):
        normalize_planet(3)


def test_normalize_element():
    assert normalize_element("Fire") == "fire"
    with pytest.raises(UnknownElementError):
        normalize_element("aether")


def test_normalize_weekday_accepts_names_indices_and_dates():
    assert normalize_weekday("sunday") == "Sunday"
    assert normalize_weekday(0) == "Monday"
    assert normalize_weekday(date(2024, 3, 10)) == "Sunday"
    with pytest.raises(CoordinateRangeError):
        normalize_weekday(7)
    with pytest.raises(CoordinateRangeError):
        normalize_weekday("Funday")


@pytest.mark.parametrize("value", [-0.1, 360.0, float("nan"), float("inf"), "10"])
def test_validate_longitude_rejects(value):
    with pytest.raises(CoordinateRangeError):
        validate_longitude(value)


def test_validate_ranges():
    assert validate_longitude(0) == 0.0
    assert validate_sign_index(11) == 11
    assert validate_sign_degree(29.99) == 29.99
    with pytest.raises(CoordinateRangeError):
        validate_sign_index(12)
    with pytest.raises(CoordinateRangeError):
        validate_sign_index(True)
    with pytest.raises(CoordinateRangeError):
        validate_sign_degree(30.0)
    with pytest.raises(CoordinateRangeError):
        validate_sign_degree(-1)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        validate_sign_degree(31)


def test_round_half_up():
    assert round_half_up(62.5) == 63
    assert round_half_up(61.5) == 62
    assert round_half_up(61.49) == 61
