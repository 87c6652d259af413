"""Persisted user preferences: saved locations, personality, last selection.

Every read and write is best-effort. Failures are logged and swallowed so
that missing or corrupt data never blocks startup; loads fall back to
defaults.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass

from skyvoice.config.defaults import DEFAULT_PERSONALITY
from skyvoice.models.location import CURRENT_LOCATION_ID, Location, LocationType
from skyvoice.storage import kv_repo

logger = logging.getLogger(__name__)

SAVED_LOCATIONS_KEY = "saved_locations"
SELECTED_PERSONALITY_KEY = "selected_personality"
LAST_SELECTED_LOCATION_KEY = "last_selected_location"

ALL_KEYS = (SAVED_LOCATIONS_KEY, SELECTED_PERSONALITY_KEY, LAST_SELECTED_LOCATION_KEY)

_LOAD_ERRORS = (sqlite3.Error, ValueError, KeyError, TypeError)


@dataclass(frozen=True)
class StorageInfo:
    saved_locations: list[Location]
    selected_personality: str
    last_selected_location: Location | None

    @property
    def total_locations(self) -> int:
        return len(self.saved_locations)


def normalize_saved_locations(locations: list[Location]) -> list[Location]:
    """Keep insertion order, drop duplicates by id and any current-location entry."""
    seen: set[str] = set()
    result = []
    for loc in locations:
        if loc.type != LocationType.ZIPCODE or loc.id == CURRENT_LOCATION_ID:
            continue
        if loc.id in seen:
            continue
        seen.add(loc.id)
        result.append(loc)
    return result


class PreferencesStore:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Saved locations ---

    def save_locations(self, locations: list[Location]) -> None:
        locations = normalize_saved_locations(locations)
        try:
            payload = json.dumps([loc.to_dict() for loc in locations])
            kv_repo.set_value(self.conn, SAVED_LOCATIONS_KEY, payload)
            logger.info("Saved %d locations", len(locations))
        except sqlite3.Error:
            logger.exception("Error saving locations")

    def load_locations(self) -> list[Location]:
        try:
            raw = kv_repo.get_value(self.conn, SAVED_LOCATIONS_KEY)
            if raw is None:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("saved locations is not a list")
            locations = []
            for item in data:
                try:
                    locations.append(Location.from_dict(item))
                except _LOAD_ERRORS:
                    logger.warning("Skipping malformed saved location: %r", item)
            locations = normalize_saved_locations(locations)
            logger.info("Loaded %d saved locations", len(locations))
            return locations
        except _LOAD_ERRORS:
            logger.exception("Error loading locations")
            return []

    # --- Personality ---

    def save_personality(self, personality: str) -> None:
        try:
            kv_repo.set_value(self.conn, SELECTED_PERSONALITY_KEY, personality)
            logger.info("Saved personality: %s", personality)
        except sqlite3.Error:
            logger.exception("Error saving personality")

    def load_personality(self) -> str:
        try:
            value = kv_repo.get_value(self.conn, SELECTED_PERSONALITY_KEY)
        except sqlite3.Error:
            logger.exception("Error loading personality")
            return DEFAULT_PERSONALITY
        return value if value else DEFAULT_PERSONALITY

    # --- Last selected location ---

    def save_last_selected(self, location: Location | None) -> None:
        """Persist the selection pointer; None clears it."""
        try:
            if location is None:
                kv_repo.delete_values(self.conn, LAST_SELECTED_LOCATION_KEY)
                logger.info("Cleared last selected location")
            else:
                kv_repo.set_value(
                    self.conn, LAST_SELECTED_LOCATION_KEY, json.dumps(location.to_dict())
                )
                logger.info("Saved last selected location: %s", location.name)
        except sqlite3.Error:
            logger.exception("Error saving last selected location")

    def load_last_selected(self) -> Location | None:
        try:
            raw = kv_repo.get_value(self.conn, LAST_SELECTED_LOCATION_KEY)
            if raw is None:
                return None
            data = json.loads(raw)
            if data is None:
                return None
            return Location.from_dict(data)
        except _LOAD_ERRORS:
            logger.exception("Error loading last selected location")
            return None

    # --- Maintenance ---

    def clear_all(self) -> None:
        try:
            kv_repo.delete_values(self.conn, *ALL_KEYS)
            logger.info("All stored preferences cleared")
        except sqlite3.Error:
            logger.exception("Error clearing stored preferences")

    def storage_info(self) -> StorageInfo:
        return StorageInfo(
            saved_locations=self.load_locations(),
            selected_personality=self.load_personality(),
            last_selected_location=self.load_last_selected(),
        )
