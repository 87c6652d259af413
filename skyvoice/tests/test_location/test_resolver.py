"""Tests for location search, manual add and current-location resolution."""

import asyncio

import pytest

from skyvoice.ingest.geocoder import Accuracy, GeocoderError
from skyvoice.location.errors import (
    GeocodeNotFound,
    InvalidLocationInput,
    LocationPermissionDenied,
    LocationServicesDisabled,
    LocationTimeout,
    LocationUnavailable,
)
from skyvoice.location.resolver import LocationIdFactory, LocationResolver
from skyvoice.models.location import Address, Coordinates, LocationType, SearchResult
from skyvoice.scheduling.scheduler import TaskScheduler
from skyvoice.tests.conftest import FakeDevice, FakeGeocoder


def _resolver(geocoder=None, device=None, **kwargs) -> LocationResolver:
    return LocationResolver(
        geocoder or FakeGeocoder(),
        device or FakeDevice(),
        TaskScheduler(),
        **kwargs,
    )


class TestSearch:
    def test_short_query_skips_geocoder(self):
        geocoder = FakeGeocoder()
        results = asyncio.run(_resolver(geocoder).search("  Bo  "))
        assert results == []
        assert geocoder.text_calls == []

    def test_results_named_from_address(self):
        geocoder = FakeGeocoder()
        results = asyncio.run(_resolver(geocoder).search(" Boston "))
        assert geocoder.text_calls == ["Boston"]
        assert results == [
            SearchResult(
                id="search-0",
                name="Boston, MA",
                zipcode="02108",
                latitude=42.36,
                longitude=-71.06,
                full_address="Tremont St Boston MA 02108",
            )
        ]

    def test_caps_candidates(self):
        candidates = [Coordinates(40.0 + i, -70.0) for i in range(7)]
        geocoder = FakeGeocoder(candidates=candidates)
        results = asyncio.run(_resolver(geocoder).search("Springfield"))
        assert [r.id for r in results] == [f"search-{i}" for i in range(5)]
        assert len(geocoder.coord_calls) == 5

    def test_reverse_failure_falls_back_to_query(self):
        geocoder = FakeGeocoder(reverse_error=GeocoderError("HTTP 500"))
        results = asyncio.run(_resolver(geocoder).search("Boston"))
        assert results[0].name == "Boston"
        assert results[0].zipcode == "N/A"
        assert results[0].latitude == 42.36

    def test_missing_postal_code(self):
        geocoder = FakeGeocoder(address=Address(city="Boston", region="MA"))
        results = asyncio.run(_resolver(geocoder).search("Boston"))
        assert results[0].zipcode == "N/A"

    def test_search_error_returns_empty(self):
        geocoder = FakeGeocoder(search_error=GeocoderError("HTTP 503"))
        assert asyncio.run(_resolver(geocoder).search("Boston")) == []


class TestDebouncedSearch:
    def test_rapid_keystrokes_geocode_once(self):
        geocoder = FakeGeocoder()

        async def run():
            resolver = _resolver(geocoder, debounce_seconds=0.02)
            for text in ("Bos", "Bost", "Bosto", "Boston"):
                resolver.on_input_change(text)
            await resolver.scheduler.wait_idle()
            return resolver

        resolver = asyncio.run(run())
        assert geocoder.text_calls == ["Boston"]
        assert len(resolver.search_results) == 1
        assert not resolver.searching

    def test_short_input_clears_results(self):
        geocoder = FakeGeocoder()

        async def run():
            resolver = _resolver(geocoder, debounce_seconds=0.01)
            resolver.search_results = [object()]
            resolver.on_input_change("Bo")
            await resolver.scheduler.wait_idle()
            return resolver

        resolver = asyncio.run(run())
        assert geocoder.text_calls == []
        assert resolver.search_results == []

    def test_select_result_clears_search(self):
        async def run():
            resolver = _resolver(debounce_seconds=0.01)
            resolver.on_input_change("Boston")
            await resolver.scheduler.wait_idle()
            location = resolver.select_search_result(resolver.search_results[0])
            return resolver, location

        resolver, location = asyncio.run(run())
        assert location.type == LocationType.ZIPCODE
        assert location.name == "Boston, MA"
        assert location.zipcode == "02108"
        assert location.id != "current"
        assert resolver.search_results == []
        assert resolver.input_text == ""


class TestAddManual:
    def test_success(self):
        location = asyncio.run(_resolver().add_manual("02108"))
        assert location.type == LocationType.ZIPCODE
        assert location.name == "Boston, MA"
        assert location.zipcode == "02108"
        assert (location.latitude, location.longitude) == (42.36, -71.06)

    def test_uses_input_text(self):
        resolver = _resolver()
        resolver.input_text = "Boston"
        location = asyncio.run(resolver.add_manual())
        assert location.name == "Boston, MA"

    def test_empty_input(self):
        with pytest.raises(InvalidLocationInput) as exc:
            asyncio.run(_resolver().add_manual("   "))
        assert exc.value.user_message == "Please enter a location (zipcode, city, or city, state)"

    def test_no_results(self):
        with pytest.raises(GeocodeNotFound) as exc:
            asyncio.run(_resolver(FakeGeocoder(candidates=[])).add_manual("Atlantis"))
        assert "different search term" in exc.value.user_message

    def test_geocoder_error(self):
        geocoder = FakeGeocoder(search_error=GeocoderError("HTTP 500"))
        with pytest.raises(GeocodeNotFound):
            asyncio.run(_resolver(geocoder).add_manual("Boston"))

    def test_reverse_failure_uses_query(self):
        geocoder = FakeGeocoder(reverse_error=GeocoderError("HTTP 500"))
        location = asyncio.run(_resolver(geocoder).add_manual("Springfield"))
        assert location.name == "Springfield"
        assert location.zipcode == "Springfield"

    def test_partial_address_uses_query_name(self):
        geocoder = FakeGeocoder(address=Address(city="Boston", postal_code="02108"))
        location = asyncio.run(_resolver(geocoder).add_manual("boston"))
        assert location.name == "boston"
        assert location.zipcode == "02108"


class TestFetchCurrent:
    def test_success(self):
        device = FakeDevice()
        resolver = _resolver(device=device, location_max_age=60.0)
        location = asyncio.run(resolver.fetch_current())
        assert location.id == "current"
        assert location.type == LocationType.CURRENT
        assert location.name == "Boston, MA"
        assert device.requests == [(Accuracy.BALANCED, 60.0)]

    def test_services_disabled(self):
        with pytest.raises(LocationServicesDisabled):
            asyncio.run(_resolver(device=FakeDevice(enabled=False)).fetch_current())

    def test_permission_denied(self):
        with pytest.raises(LocationPermissionDenied):
            asyncio.run(_resolver(device=FakeDevice(granted=False)).fetch_current())

    def test_timeout(self):
        resolver = _resolver(device=FakeDevice(delay=1.0), location_timeout=0.01)
        with pytest.raises(LocationTimeout):
            asyncio.run(resolver.fetch_current())

    def test_unavailable(self):
        with pytest.raises(LocationUnavailable):
            asyncio.run(_resolver(device=FakeDevice(coords=None)).fetch_current())

    def test_naming_failure_keeps_coordinates(self):
        geocoder = FakeGeocoder(reverse_error=GeocoderError("HTTP 500"))
        location = asyncio.run(_resolver(geocoder).fetch_current())
        assert location.name == "Current Location"
        assert location.id == "current"
        assert (location.latitude, location.longitude) == (42.36, -71.06)

    def test_errors_carry_distinct_messages(self):
        errors = [
            LocationServicesDisabled(), LocationPermissionDenied(),
            LocationTimeout(), LocationUnavailable(),
        ]
        assert len({e.user_message for e in errors}) == 4


class TestLocationIdFactory:
    def test_strictly_increasing(self):
        new_id = LocationIdFactory()
        ids = [int(new_id()) for _ in range(50)]
        assert ids == sorted(set(ids))
        assert all(str(i) != "current" for i in ids)
