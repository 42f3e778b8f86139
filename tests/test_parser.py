import pytest

from disaster_info.core.errors import InvalidInputError
from disaster_info.core.models import CoordinateSource, Coordinates
from disaster_info.core.parser import coordinate_parser, normalize_address


def test_parse_valid():
    c = coordinate_parser.parse("35.6762", " 139.6503 ")
    assert (c.latitude, c.longitude) == (35.6762, 139.6503)
    assert c.source == CoordinateSource.COORDINATES


def test_parse_fullwidth_digits():
    c = coordinate_parser.parse("３５．６７６２", "１３９．６５０３")
    assert (c.latitude, c.longitude) == (35.6762, 139.6503)


@pytest.mark.parametrize("lat,lng,field", [
    ("", "139.6", "latitude"),
    ("abc", "139.6", "latitude"),
    ("35.6", "east", "longitude"),
    ("91", "139.6", "latitude"),
    ("35.6", "181", "longitude"),
    ("nan", "139.6", "latitude"),
    ("40.7128", "-74.0060", "coordinates"),
])
def test_parse_rejects(lat, lng, field):
    with pytest.raises(InvalidInputError) as exc:
        coordinate_parser.parse(lat, lng)
    assert exc.value.field == field
    assert exc.value.http_status == 400


def test_parse_pair():
    assert coordinate_parser.parse_pair("34.6937, 135.5023") == Coordinates(34.6937, 135.5023)
    assert coordinate_parser.parse_pair("34.6937 135.5023").longitude == 135.5023


def test_parse_pair_rejects_garbage():
    with pytest.raises(InvalidInputError):
        coordinate_parser.parse_pair("Osaka")


def test_normalize_address():
    assert normalize_address("  東京都渋谷区１－２   3 ") == "東京都渋谷区1-2 3"
    assert normalize_address(None) == ""


def test_parse_normalizes_address():
    c = coordinate_parser.parse("35.6762", "139.6503", CoordinateSource.ADDRESS, "  東京都新宿区西新宿２－８－１ ")
    assert c.address == "東京都新宿区西新宿2-8-1"
    assert c.source == CoordinateSource.ADDRESS
    assert c.to_dict()["address"] == "東京都新宿区西新宿2-8-1"

    assert coordinate_parser.parse("35.6762", "139.6503", address="   ").address is None


def test_coordinates_are_immutable_and_validated():
    c = Coordinates(35.0, 139.0, source="geolocation")
    assert c.source == CoordinateSource.GEOLOCATION
    with pytest.raises(Exception):
        c.latitude = 10.0
    with pytest.raises(ValueError):
        Coordinates(95.0, 139.0)
