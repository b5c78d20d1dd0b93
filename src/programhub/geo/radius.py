"""Radius queries around a geocoded point."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

from programhub.commons.exceptions import ValidationError

# Equatorial earth radius per distance unit.
EARTH_RADIUS = {
    "km": 6378.0,
    "mi": 3963.0,
}


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate pair."""

    longitude: float
    latitude: float

    def __post_init__(self):
        if not -180.0 <= self.longitude <= 180.0:
            raise ValidationError(f"Longitude out of range: {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValidationError(f"Latitude out of range: {self.latitude}")


@dataclass(frozen=True)
class RadiusQuery:
    """All points within ``radius_radians`` (angular distance) of ``center``."""

    center: GeoPoint
    radius_radians: float

    def to_filter(self, field: str = "location") -> Dict[str, Any]:
        """Compile to a ``$geoWithin``/``$centerSphere`` filter on ``field``."""
        center = [self.center.longitude, self.center.latitude]
        return {field: {"$geoWithin": {"$centerSphere": [center, self.radius_radians]}}}


def earth_radius(unit: str) -> float:
    """Earth radius expressed in ``unit``."""
    try:
        return EARTH_RADIUS[unit]
    except KeyError:
        raise ValidationError(f"Unsupported distance unit '{unit}'. Use one of: {', '.join(EARTH_RADIUS)}") from None


def parse_distance(distance) -> float:
    """Parse a linear distance, which must be a finite, non-negative number."""
    try:
        value = float(distance)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid distance '{distance}'") from None
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise ValidationError(f"Invalid distance '{distance}'")
    return value


def radius_in_radians(distance: float, unit: str = "km") -> float:
    """Convert a linear distance into an angular radius on the earth's surface."""
    return parse_distance(distance) / earth_radius(unit)


class GeospatialResolver:
    """Turns ``(address or postal code, distance)`` into a :class:`RadiusQuery`.

    Parameters
    ----------
    geocoder : object
        Anything with ``geocode(address) -> GeocodedLocation``; see
        :class:`programhub.geo.geocoder.Geocoder`.
    distance_unit : str, optional
        Unit of incoming distances, ``"km"`` (default) or ``"mi"``.
    """

    def __init__(self, geocoder, distance_unit: str = "km"):
        earth_radius(distance_unit)
        self.geocoder = geocoder
        self.distance_unit = distance_unit

    def resolve_radius(self, address: str, linear_distance, distance_unit: str | None = None) -> RadiusQuery:
        """Geocode ``address`` and build the radius query.

        Geocoding errors propagate unchanged and are not retried.
        """
        radius = radius_in_radians(linear_distance, distance_unit or self.distance_unit)
        location = self.geocoder.geocode(address)
        return RadiusQuery(center=location.point, radius_radians=radius)
