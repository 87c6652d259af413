"""Location models: saved/current locations and geocoding results."""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

CURRENT_LOCATION_ID = "current"
CURRENT_LOCATION_NAME = "Current Location"


class LocationType(StrEnum):
    CURRENT = "current"
    ZIPCODE = "zipcode"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Address:
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    street: str | None = None
    name: str | None = None

    def display_name(self) -> str | None:
        """Return "City, Region" when both are known, else the place name."""
        if self.city and self.region:
            return f"{self.city}, {self.region}"
        return self.name or None


@dataclass(frozen=True)
class Location:
    id: str
    type: LocationType
    name: str
    latitude: float
    longitude: float
    zipcode: str | None = None

    @property
    def is_current(self) -> bool:
        return self.type == LocationType.CURRENT

    @property
    def fetch_key(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        """Build a Location from its stored JSON form.

        Raises KeyError/ValueError/TypeError on malformed input.
        """
        zipcode = data.get("zipcode")
        return cls(
            id=str(data["id"]),
            type=LocationType(data["type"]),
            name=str(data["name"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            zipcode=str(zipcode) if zipcode is not None else None,
        )


@dataclass(frozen=True)
class SearchResult:
    id: str
    name: str
    zipcode: str
    latitude: float
    longitude: float
    full_address: str = ""
