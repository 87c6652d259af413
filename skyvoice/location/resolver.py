"""Location search, manual add and current-location resolution."""

import asyncio
import logging
import time

from skyvoice.ingest.geocoder import (
    Accuracy,
    DeviceLocator,
    Geocoder,
    GeocoderError,
    PositionUnavailableError,
)
from skyvoice.location.errors import (
    GeocodeNotFound,
    InvalidLocationInput,
    LocationPermissionDenied,
    LocationServicesDisabled,
    LocationTimeout,
    LocationUnavailable,
)
from skyvoice.models.location import (
    CURRENT_LOCATION_ID,
    CURRENT_LOCATION_NAME,
    Address,
    Location,
    LocationType,
    SearchResult,
)
from skyvoice.scheduling.scheduler import TaskScheduler

logger = logging.getLogger(__name__)

SEARCH_TASK_KEY = "location-search"
NO_ZIPCODE = "N/A"


class LocationIdFactory:
    """Millisecond-timestamp ids, strictly increasing within the process."""

    def __init__(self) -> None:
        self._last = 0

    def __call__(self) -> str:
        candidate = int(time.time() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)


class LocationResolver:
    def __init__(
        self,
        geocoder: Geocoder,
        device: DeviceLocator,
        scheduler: TaskScheduler,
        debounce_seconds: float = 0.5,
        min_query_length: int = 3,
        max_candidates: int = 5,
        location_timeout: float = 20.0,
        location_max_age: float = 60.0,
        new_id: LocationIdFactory | None = None,
    ):
        self.geocoder = geocoder
        self.device = device
        self.scheduler = scheduler
        self.debounce_seconds = debounce_seconds
        self.min_query_length = min_query_length
        self.max_candidates = max_candidates
        self.location_timeout = location_timeout
        self.location_max_age = location_max_age
        self._new_id = new_id or LocationIdFactory()

        self.input_text = ""
        self.search_results: list[SearchResult] = []
        self.searching = False
        self._search_seq = 0

    # --- Free-text search ---

    def on_input_change(self, text: str) -> None:
        """Record a keystroke and restart the search debounce timer."""
        self.input_text = text
        self._search_seq += 1
        self.scheduler.schedule(
            SEARCH_TASK_KEY, self.debounce_seconds, self._run_search, text, self._search_seq
        )

    async def _run_search(self, query: str, seq: int) -> None:
        self.searching = True
        try:
            results = await self.search(query)
        finally:
            if seq == self._search_seq:
                self.searching = False
        if seq != self._search_seq:
            logger.debug("Discarding results for superseded query %r", query)
            return
        self.search_results = results

    async def search(self, query: str) -> list[SearchResult]:
        """Geocode query into up to max_candidates named results.

        Queries shorter than min_query_length (after trimming) return []
        without calling the geocoder.
        """
        trimmed = query.strip()
        if len(trimmed) < self.min_query_length:
            return []

        try:
            candidates = await self.geocoder.resolve_text(trimmed)
        except GeocoderError as e:
            logger.warning("Search failed for %r: %s", trimmed, e)
            return []

        results = []
        for i, coords in enumerate(candidates[: self.max_candidates]):
            try:
                address = await self.geocoder.resolve_coordinates(
                    coords.latitude, coords.longitude
                )
            except GeocoderError as e:
                logger.debug("Reverse geocode failed for candidate %d: %s", i, e)
                results.append(
                    SearchResult(
                        id=f"search-{i}",
                        name=trimmed,
                        zipcode=NO_ZIPCODE,
                        latitude=coords.latitude,
                        longitude=coords.longitude,
                        full_address=trimmed,
                    )
                )
                continue
            results.append(
                SearchResult(
                    id=f"search-{i}",
                    name=address.display_name() or trimmed,
                    zipcode=address.postal_code or NO_ZIPCODE,
                    latitude=coords.latitude,
                    longitude=coords.longitude,
                    full_address=_full_address(address),
                )
            )
        return results

    def clear_search(self) -> None:
        self.scheduler.cancel(SEARCH_TASK_KEY)
        self._search_seq += 1
        self.input_text = ""
        self.search_results = []
        self.searching = False

    def select_search_result(self, result: SearchResult) -> Location:
        location = Location(
            id=self._new_id(),
            type=LocationType.ZIPCODE,
            name=result.name,
            latitude=result.latitude,
            longitude=result.longitude,
            zipcode=result.zipcode,
        )
        self.clear_search()
        return location

    # --- Manual add ---

    async def add_manual(self, text: str | None = None) -> Location:
        """Geocode the full input into a new saved-location candidate.

        Raises InvalidLocationInput for empty input and GeocodeNotFound
        when the geocoder has no match.
        """
        query = (self.input_text if text is None else text).strip()
        if not query:
            raise InvalidLocationInput()

        try:
            candidates = await self.geocoder.resolve_text(query)
        except GeocoderError as e:
            logger.error("Geocoding error for %r: %s", query, e)
            raise GeocodeNotFound(str(e)) from e
        if not candidates:
            raise GeocodeNotFound(f"No results for {query!r}")

        coords = candidates[0]
        try:
            address = await self.geocoder.resolve_coordinates(
                coords.latitude, coords.longitude
            )
            name = (
                f"{address.city}, {address.region}"
                if address.city and address.region else query
            )
            zipcode = address.postal_code or query
        except GeocoderError as e:
            logger.debug("Reverse geocode failed for %r: %s", query, e)
            name, zipcode = query, query

        location = Location(
            id=self._new_id(),
            type=LocationType.ZIPCODE,
            name=name,
            latitude=coords.latitude,
            longitude=coords.longitude,
            zipcode=zipcode,
        )
        self.clear_search()
        return location

    # --- Current location ---

    async def fetch_current(self) -> Location:
        """Resolve the device position into the singular current location.

        Coordinates are kept even when naming them fails.
        """
        if not await self.device.services_enabled():
            raise LocationServicesDisabled()
        if not await self.device.request_permission():
            raise LocationPermissionDenied()

        try:
            coords = await asyncio.wait_for(
                self.device.current_position(Accuracy.BALANCED, self.location_max_age),
                timeout=self.location_timeout,
            )
        except TimeoutError as e:
            raise LocationTimeout() from e
        except PositionUnavailableError as e:
            raise LocationUnavailable(str(e)) from e

        name = CURRENT_LOCATION_NAME
        zipcode = None
        try:
            address = await self.geocoder.resolve_coordinates(
                coords.latitude, coords.longitude
            )
            name = address.display_name() or CURRENT_LOCATION_NAME
            zipcode = address.postal_code
        except GeocoderError as e:
            logger.warning("Could not name current location: %s", e)

        return Location(
            id=CURRENT_LOCATION_ID,
            type=LocationType.CURRENT,
            name=name,
            latitude=coords.latitude,
            longitude=coords.longitude,
            zipcode=zipcode,
        )


def _full_address(address: Address) -> str:
    parts = [address.street, address.city, address.region, address.postal_code]
    return " ".join(p for p in parts if p)
