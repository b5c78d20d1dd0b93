"""Geocoding through geopy.

Only the first result of a lookup is used. Lookups are never retried here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from geopy.exc import GeocoderNotFound, GeopyError
from geopy.geocoders import get_geocoder_for_service

from programhub.commons.exceptions import ConfigurationError, GeocodingNoMatchError, GeocodingUnavailableError
from programhub.commons.programhub_logger import ProgramHubLogger
from programhub.geo.radius import GeoPoint

# Extra arguments some providers need to return locality details.
_PROVIDER_OPTIONS = {
    "nominatim": {"addressdetails": True},
}


@dataclass(frozen=True)
class GeocodedLocation:
    """First geocoding match for an address."""

    longitude: float
    latitude: float
    formatted_address: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.longitude, self.latitude)

    def to_location_doc(self) -> Dict[str, Any]:
        """GeoJSON point plus the locality fields, as stored on programs."""
        return {
            "type": "Point",
            "coordinates": [self.longitude, self.latitude],
            "formattedAddress": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }


def _locality_from_raw(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Extract street/city/state/zipcode/country from a provider's raw answer."""
    if "adminArea5" in raw or "postalCode" in raw:
        # MapQuest
        return {
            "street": raw.get("street") or None,
            "city": raw.get("adminArea5") or None,
            "state": raw.get("adminArea3") or None,
            "zipcode": raw.get("postalCode") or None,
            "country": raw.get("adminArea1") or None,
        }
    address = raw.get("address")
    if isinstance(address, dict):
        # Nominatim
        street = " ".join(part for part in (address.get("house_number"), address.get("road")) if part)
        return {
            "street": street or None,
            "city": address.get("city") or address.get("town") or address.get("village"),
            "state": address.get("state"),
            "zipcode": address.get("postcode"),
            "country": (address.get("country_code") or "").upper() or None,
        }
    return {}


class Geocoder:
    """Thin wrapper around a geopy geocoder chosen by provider name."""

    def __init__(self, provider: str, api_key: str | None = None, user_agent: str = "programhub", timeout: float = 10):
        self.logger = ProgramHubLogger()
        self.provider = provider
        try:
            geocoder_cls = get_geocoder_for_service(provider)
        except GeocoderNotFound as exc:
            raise ConfigurationError(f"Unknown geocoding provider '{provider}'") from exc
        kwargs: Dict[str, Any] = {"user_agent": user_agent, "timeout": timeout}
        if api_key:
            kwargs["api_key"] = api_key
        self._geocoder = geocoder_cls(**kwargs)
        self._options = _PROVIDER_OPTIONS.get(provider, {})

    def geocode(self, address: str) -> GeocodedLocation:
        """Resolve ``address`` to its first match.

        Raises
        ------
        GeocodingNoMatchError
            When the provider has no match for ``address``.
        GeocodingUnavailableError
            When the provider cannot be reached or answers with an error.
        """
        try:
            location = self._geocoder.geocode(address, exactly_one=True, **self._options)
        except GeopyError as exc:
            self.logger.error(f"Geocoding provider '{self.provider}' failed for '{address}': {exc}")
            raise GeocodingUnavailableError(f"Geocoding service unavailable: {exc}") from exc
        if location is None:
            raise GeocodingNoMatchError(address)
        raw = location.raw if isinstance(location.raw, dict) else {}
        return GeocodedLocation(
            longitude=location.longitude,
            latitude=location.latitude,
            formatted_address=location.address,
            **_locality_from_raw(raw),
        )
