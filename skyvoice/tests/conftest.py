"""Shared test fixtures."""

import asyncio
import sqlite3
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import yaml

from skyvoice.config.schema import AppConfig
from skyvoice.ingest.geocoder import Accuracy, PositionUnavailableError
from skyvoice.models.location import Address, Coordinates, Location, LocationType
from skyvoice.models.summary import SummaryKey
from skyvoice.storage.database import open_database
from skyvoice.storage.preferences import PreferencesStore
from skyvoice.summary.prompts import SummaryContext

# Wednesday afternoon, UTC.
NOW = datetime(2026, 6, 10, 14, 0, tzinfo=UTC)

WEEK_HIGHS = [70, 72, 68, 75, 71, 69, 73, 74]

BOSTON = Location(
    id="1700000000001",
    type=LocationType.ZIPCODE,
    name="Boston, MA",
    latitude=42.36,
    longitude=-71.06,
    zipcode="02108",
)

DENVER = Location(
    id="1700000000002",
    type=LocationType.ZIPCODE,
    name="Denver, CO",
    latitude=39.74,
    longitude=-104.99,
    zipcode="80202",
)

BOSTON_COORDS = Coordinates(42.36, -71.06)
BOSTON_ADDRESS = Address(
    city="Boston", region="MA", postal_code="02108", street="Tremont St", name="Boston"
)


class FakeGeocoder:
    def __init__(
        self,
        candidates: list[Coordinates] | None = None,
        address: Address = BOSTON_ADDRESS,
        search_error: Exception | None = None,
        reverse_error: Exception | None = None,
    ):
        self.candidates = [BOSTON_COORDS] if candidates is None else candidates
        self.address = address
        self.search_error = search_error
        self.reverse_error = reverse_error
        self.text_calls: list[str] = []
        self.coord_calls: list[tuple[float, float]] = []

    async def resolve_text(self, query: str) -> list[Coordinates]:
        self.text_calls.append(query)
        if self.search_error is not None:
            raise self.search_error
        return list(self.candidates)

    async def resolve_coordinates(self, latitude: float, longitude: float) -> Address:
        self.coord_calls.append((latitude, longitude))
        if self.reverse_error is not None:
            raise self.reverse_error
        return self.address


class FakeDevice:
    def __init__(
        self,
        coords: Coordinates | None = BOSTON_COORDS,
        enabled: bool = True,
        granted: bool = True,
        delay: float = 0.0,
    ):
        self.coords = coords
        self.enabled = enabled
        self.granted = granted
        self.delay = delay
        self.requests: list[tuple[Accuracy, float]] = []

    async def services_enabled(self) -> bool:
        return self.enabled

    async def request_permission(self) -> bool:
        return self.granted

    async def current_position(self, accuracy: Accuracy, max_age_seconds: float) -> Coordinates:
        self.requests.append((accuracy, max_age_seconds))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.coords is None:
            raise PositionUnavailableError("no fix")
        return self.coords


class FakeGenerate:
    """Records requested keys; blocks on a per-key gate, else the shared one."""

    def __init__(self, text: str = "Sunny and mild.", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[SummaryKey] = []
        self.location_names: list[str] = []
        self.gate: asyncio.Event | None = None
        self.gates: dict[SummaryKey, asyncio.Event] = {}

    async def __call__(self, key: SummaryKey, context: SummaryContext) -> str:
        self.calls.append(key)
        self.location_names.append(context.location_name)
        gate = self.gates.get(key, self.gate)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return self.text


def build_payload(
    now: datetime = NOW,
    hours: int = 48,
    highs: list[float] | None = None,
    current: dict | None = None,
    timezone: str | None = None,
) -> dict:
    """Forecast payload shaped like the provider's JSON.

    Hourly records start at the top of now's hour; daily records start at
    now's midnight. Lows are 15 degrees under each high.
    """
    highs = WEEK_HIGHS if highs is None else highs
    top_of_hour = now.replace(minute=0, second=0, microsecond=0)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    hourly = []
    for i in range(hours):
        t = top_of_hour + timedelta(hours=i)
        hourly.append({
            "time": int(t.timestamp()),
            "summary": "Clear",
            "temperature": 60 + i % 10,
            "apparentTemperature": 58 + i % 10,
            "humidity": 0.5,
            "precipProbability": 0.1,
            "windSpeed": 5.0,
            "uvIndex": 3,
            "visibility": 10.0,
        })

    daily = []
    for i, high in enumerate(highs):
        day = midnight + timedelta(days=i)
        daily.append({
            "time": int(day.timestamp()),
            "summary": f"Day {i} summary",
            "temperatureHigh": high,
            "temperatureLow": high - 15,
            "apparentTemperatureHigh": high - 1,
            "apparentTemperatureLow": high - 16,
            "sunriseTime": int((day + timedelta(hours=6, minutes=42)).timestamp()),
            "sunsetTime": int((day + timedelta(hours=20, minutes=15)).timestamp()),
            "humidity": 0.55,
            "precipProbability": 0.2,
            "windSpeed": 7.0,
            "uvIndex": 7,
            "visibility": 9.5,
        })

    payload = {
        "latitude": 42.36,
        "longitude": -71.06,
        "currently": current if current is not None else {
            "summary": "Partly Cloudy",
            "temperature": 70.4,
            "apparentTemperature": 69.6,
            "humidity": 0.62,
            "windSpeed": 8.4,
            "uvIndex": 5,
            "visibility": 10.0,
        },
        "hourly": {"data": hourly},
        "daily": {"summary": "Mild all week.", "data": daily},
    }
    if timezone is not None:
        payload["timezone"] = timezone
    return payload


@pytest.fixture
def payload() -> dict:
    return build_payload()


@pytest.fixture
def tmp_db(tmp_path: Path) -> sqlite3.Connection:
    """Migrated temporary SQLite database."""
    conn = open_database(tmp_path / "test.db")
    yield conn
    conn.close()


@pytest.fixture
def store(tmp_db: sqlite3.Connection) -> PreferencesStore:
    return PreferencesStore(tmp_db)


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "llm": {"model": "gpt-4o-mini", "max_tokens": 80},
        "timing": {"search_debounce_ms": 300},
        "device": {"latitude": 42.36, "longitude": -71.06},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
