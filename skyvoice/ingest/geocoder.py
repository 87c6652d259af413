"""Geocoding and device-location capabilities.

The resolver depends only on the Geocoder and DeviceLocator protocols;
NominatimGeocoder and StaticDeviceLocator are the concrete adapters used
by the CLI.
"""

import logging
from enum import StrEnum
from typing import Any, Protocol

import httpx

from skyvoice.models.location import Address, Coordinates

logger = logging.getLogger(__name__)

NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "skyvoice/0.1.0"


class Accuracy(StrEnum):
    LOW = "low"
    BALANCED = "balanced"
    HIGH = "high"


class GeocoderError(Exception):
    """Raised when a geocoding lookup fails."""


class PositionUnavailableError(Exception):
    """Raised when the device cannot produce a position fix."""


class Geocoder(Protocol):
    async def resolve_text(self, query: str) -> list[Coordinates]: ...

    async def resolve_coordinates(self, latitude: float, longitude: float) -> Address: ...


class DeviceLocator(Protocol):
    async def services_enabled(self) -> bool: ...

    async def request_permission(self) -> bool: ...

    async def current_position(
        self, accuracy: Accuracy, max_age_seconds: float
    ) -> Coordinates: ...


class NominatimGeocoder:
    """OpenStreetMap Nominatim search/reverse lookups."""

    def __init__(
        self,
        base_url: str = NOMINATIM_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15.0,
        limit: int = 5,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.limit = limit

    async def _get(self, endpoint: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            raise GeocoderError(f"Request failed: {e}") from e
        if resp.status_code >= 400:
            raise GeocoderError(f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise GeocoderError("Malformed geocoder response") from e

    async def resolve_text(self, query: str) -> list[Coordinates]:
        data = await self._get(
            "/search", {"q": query, "format": "json", "limit": self.limit}
        )
        if not isinstance(data, list):
            raise GeocoderError("Unexpected search response")
        results = []
        for item in data:
            try:
                results.append(Coordinates(float(item["lat"]), float(item["lon"])))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed search hit: %s", item)
        return results

    async def resolve_coordinates(self, latitude: float, longitude: float) -> Address:
        data = await self._get(
            "/reverse",
            {"lat": latitude, "lon": longitude, "format": "json", "addressdetails": 1},
        )
        if not isinstance(data, dict) or "error" in data:
            raise GeocoderError(f"No address for {latitude},{longitude}")
        addr = data.get("address") or {}
        return Address(
            city=addr.get("city") or addr.get("town") or addr.get("village"),
            region=addr.get("state"),
            postal_code=addr.get("postcode"),
            street=addr.get("road"),
            name=data.get("name") or None,
        )


class StaticDeviceLocator:
    """Device locator backed by configured coordinates."""

    def __init__(
        self,
        latitude: float | None,
        longitude: float | None,
        services_enabled: bool = True,
        permission_granted: bool = True,
    ):
        self.latitude = latitude
        self.longitude = longitude
        self._services_enabled = services_enabled
        self._permission_granted = permission_granted

    async def services_enabled(self) -> bool:
        return self._services_enabled

    async def request_permission(self) -> bool:
        return self._permission_granted

    async def current_position(
        self, accuracy: Accuracy, max_age_seconds: float
    ) -> Coordinates:
        if self.latitude is None or self.longitude is None:
            raise PositionUnavailableError("No device coordinates configured")
        return Coordinates(self.latitude, self.longitude)
