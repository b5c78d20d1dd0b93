"""Radius resolution tests."""

import pytest

from programhub.commons.exceptions import GeocodingNoMatchError, GeocodingUnavailableError, ValidationError
from programhub.commons.vocabulary import Collections
from programhub.geo.radius import GeoPoint, GeospatialResolver, RadiusQuery, radius_in_radians


def test_radius_in_radians_per_unit():
    assert radius_in_radians(100, "km") == pytest.approx(0.01568, abs=1e-5)
    assert radius_in_radians(100, "mi") == pytest.approx(100 / 3963.0)
    assert radius_in_radians("0") == 0.0


@pytest.mark.parametrize("distance", ["-1", "abc", "nan", "inf", None])
def test_invalid_distance(distance):
    with pytest.raises(ValidationError):
        radius_in_radians(distance)


def test_unknown_unit():
    with pytest.raises(ValidationError):
        radius_in_radians(10, "furlong")
    with pytest.raises(ValidationError):
        GeospatialResolver(object(), distance_unit="ly")


def test_point_ranges():
    GeoPoint(180, -90)
    with pytest.raises(ValidationError):
        GeoPoint(-181, 0)
    with pytest.raises(ValidationError):
        GeoPoint(0, 91)


def test_filter_shape():
    query = RadiusQuery(GeoPoint(-71.07, 42.34), 0.5)
    assert query.to_filter() == {"location": {"$geoWithin": {"$centerSphere": [[-71.07, 42.34], 0.5]}}}


def test_resolved_query_selects_programs_within_radius(seeded_dao, geocoder):
    resolver = GeospatialResolver(geocoder, distance_unit="km")

    near = resolver.resolve_radius("02118", 30)
    wide = resolver.resolve_radius("02118", "100")
    miles = resolver.resolve_radius("02118", 50, distance_unit="mi")

    def names(query):
        return sorted(doc["name"] for doc in seeded_dao.find(Collections.PROGRAMS, query.to_filter("location")))

    assert near.center == GeoPoint(-71.07, 42.34)
    assert names(near) == ["Devworks Bootcamp"]
    assert names(wide) == ["Devworks Bootcamp", "ModernTech Bootcamp"]
    assert names(miles) == ["Devworks Bootcamp", "ModernTech Bootcamp"]


def test_geocoding_errors_propagate(geocoder):
    resolver = GeospatialResolver(geocoder)
    with pytest.raises(GeocodingNoMatchError):
        resolver.resolve_radius("00000", 10)
    geocoder.unavailable = True
    with pytest.raises(GeocodingUnavailableError):
        resolver.resolve_radius("02118", 10)
    assert geocoder.lookups == ["00000", "02118"]


def test_bad_distance_fails_before_geocoding(geocoder):
    with pytest.raises(ValidationError):
        GeospatialResolver(geocoder).resolve_radius("02118", "far")
    assert geocoder.lookups == []
