"""WeatherSession: owns the user's selections and composes the view-model.

Coordinates the forecast client, window derivation, summary cache, location
resolver and persisted preferences. Runs on a single asyncio loop; results of
superseded fetches and summaries are discarded rather than cancelled.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from skyvoice.config.defaults import DEFAULT_PERSONALITY
from skyvoice.derive import payload as fp
from skyvoice.derive.metrics import available_metrics, get_metric
from skyvoice.derive.timeline import build_timeline
from skyvoice.derive.windows import derive_windows
from skyvoice.ingest.forecast_client import ForecastClient, ForecastClientError
from skyvoice.location.errors import LocationError
from skyvoice.location.resolver import LocationResolver
from skyvoice.models.common import MetricId, PersonalityMode, Timeframe, local_now
from skyvoice.models.forecast import ForecastPayload, MetricPoint, TimeWindow
from skyvoice.models.location import Location, LocationType
from skyvoice.models.summary import SummaryCacheEntry, SummaryKey
from skyvoice.scheduling.scheduler import TaskScheduler
from skyvoice.session.memo import Memo
from skyvoice.storage.preferences import PreferencesStore
from skyvoice.summary.cache import GenerateFn, SummaryCache
from skyvoice.summary.prompts import SummaryContext

logger = logging.getLogger(__name__)

SUMMARY_TASK_KEY = "summary-trigger"
TRANSITION_TASK_KEY = "personality-transition"
FORECAST_ERROR_MESSAGE = "Failed to fetch weather data. Please try again."


class ForecastStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class SessionAlert:
    title: str
    message: str


@dataclass(frozen=True)
class SessionView:
    status: ForecastStatus
    selected_location: Location | None
    saved_locations: list[Location]
    timeframe: Timeframe
    personality: PersonalityMode
    metric: MetricId
    window: TimeWindow | None
    summary: SummaryCacheEntry
    timeline: list[MetricPoint]
    metrics: list[MetricId]
    transition_active: bool = False
    error: str | None = None
    alert: SessionAlert | None = None
    windows: dict[Timeframe, TimeWindow] = field(default_factory=dict)


class WeatherSession:
    def __init__(
        self,
        forecast_client: ForecastClient,
        resolver: LocationResolver,
        preferences: PreferencesStore,
        generate_summary: GenerateFn,
        scheduler: TaskScheduler,
        clock: Callable[[], datetime] = local_now,
        summary_debounce: float = 0.05,
        transition_seconds: float = 2.0,
        default_timeframe: Timeframe = Timeframe.NOW,
        default_metric: MetricId = MetricId.TEMPERATURE,
    ):
        self.forecast_client = forecast_client
        self.resolver = resolver
        self.preferences = preferences
        self.scheduler = scheduler
        self.clock = clock
        self.summary_debounce = summary_debounce
        self.transition_seconds = transition_seconds

        self.summary_cache = SummaryCache(generate_summary, on_change=self._on_summary_change)

        self.saved_locations: list[Location] = []
        self.current_location: Location | None = None
        self.selected_location: Location | None = None
        self.timeframe = default_timeframe
        self.metric = default_metric
        self.personality: PersonalityMode = DEFAULT_PERSONALITY

        self.status = ForecastStatus.IDLE
        self.error: str | None = None
        self.alert: SessionAlert | None = None
        self.forecast: ForecastPayload | None = None
        self.windows: dict[Timeframe, TimeWindow] = {}
        self.transition_active = False

        self._forecast_now: datetime | None = None
        self._forecast_version = 0
        self._last_fetch_key: tuple[float, float] | None = None
        self._fetch_seq = 0
        self._timeline = Memo(self._compute_timeline)

    # --- Startup ---

    async def start(self) -> None:
        """Seed state from preferences and pick the initial location."""
        last = self.load_preferences()
        await self.select_initial_location(last)

    def load_preferences(self) -> Location | None:
        """Load personality and saved locations; returns the last selection."""
        self.personality = self.preferences.load_personality()
        self.saved_locations = self.preferences.load_locations()
        return self.preferences.load_last_selected()

    async def select_initial_location(self, last: Location | None) -> None:
        """Prefer the last saved selection, else the device location."""
        if last is not None and last.type == LocationType.ZIPCODE:
            logger.info("Restoring last selected location: %s", last.name)
            await self.select_location(last)
            return

        if await self.refresh_current_location() is None:
            logger.info("No location selected")

    # --- Locations ---

    async def refresh_current_location(self) -> Location | None:
        """Resolve the device location into the current slot and select it."""
        try:
            location = await self.resolver.fetch_current()
        except LocationError as e:
            logger.warning("Current location unavailable: %s", e)
            self.alert = SessionAlert(e.title, e.user_message)
            return None
        self.current_location = location
        await self.select_location(location)
        return location

    async def add_location(self, text: str) -> Location:
        """Geocode free text into a new saved location and select it.

        GeocodeNotFound / InvalidLocationInput propagate to the caller.
        """
        location = await self.resolver.add_manual(text)
        await self.select_location(location)
        return location

    async def select_location(self, location: Location) -> None:
        previous = self.selected_location
        self.selected_location = location
        self.alert = None
        if location.is_current:
            self.current_location = location
        self.preferences.save_last_selected(location)

        if location.type == LocationType.ZIPCODE and all(
            saved.id != location.id for saved in self.saved_locations
        ):
            self.saved_locations = [*self.saved_locations, location]
            self.preferences.save_locations(self.saved_locations)

        if previous is None or previous.fetch_key != location.fetch_key:
            self._clear_forecast()
        elif previous.id != location.id:
            # Same coordinates, so the forecast stands; prompts carry the name.
            self.summary_cache.invalidate_all()
            self._schedule_summary()
        await self.refresh_forecast()

    def delete_location(self, location_id: str) -> bool:
        """Remove a saved location; deleting the selected one clears the selection."""
        remaining = [loc for loc in self.saved_locations if loc.id != location_id]
        if len(remaining) == len(self.saved_locations):
            return False
        self.saved_locations = remaining
        self.preferences.save_locations(remaining)

        if self.selected_location is not None and self.selected_location.id == location_id:
            self.selected_location = None
            self._clear_forecast()
            self._fetch_seq += 1
            self.status = ForecastStatus.IDLE
            self.error = None
            self.preferences.save_last_selected(None)
        return True

    # --- Forecast ---

    async def refresh_forecast(self, force: bool = False) -> None:
        """Fetch the forecast for the selected location.

        Skipped when the coordinates match the last successful fetch unless
        force is set (the retry action).
        """
        location = self.selected_location
        if location is None:
            return
        key = location.fetch_key
        if not force and self.status == ForecastStatus.READY and key == self._last_fetch_key:
            logger.debug("Forecast for %s already current, skipping fetch", key)
            return

        self._fetch_seq += 1
        seq = self._fetch_seq
        self.status = ForecastStatus.LOADING
        self.error = None
        try:
            payload = await self.forecast_client.get_forecast(*key)
        except ForecastClientError as e:
            if seq != self._fetch_seq:
                return
            logger.error("Forecast fetch failed for %s: %s", location.name, e)
            self.status = ForecastStatus.ERROR
            self.error = FORECAST_ERROR_MESSAGE
            return

        if seq != self._fetch_seq:
            logger.debug("Discarding forecast for superseded request %s", key)
            return
        self._commit_forecast(payload, key)

    def _commit_forecast(self, payload: ForecastPayload, key: tuple[float, float]) -> None:
        self.forecast = payload
        self._forecast_now = self.clock()
        self._forecast_version += 1
        self._last_fetch_key = key
        self.windows = derive_windows(payload, self._forecast_now)
        self.summary_cache.invalidate_all()
        self.status = ForecastStatus.READY
        logger.info("Forecast ready for %s", key)
        self._schedule_summary()

    def _clear_forecast(self) -> None:
        self.forecast = None
        self.windows = {}
        self._forecast_now = None
        self._last_fetch_key = None
        self._forecast_version += 1
        self.summary_cache.invalidate_all()
        self.scheduler.cancel(SUMMARY_TASK_KEY)

    # --- Selections ---

    def set_timeframe(self, timeframe: Timeframe) -> None:
        self.timeframe = Timeframe(timeframe)
        if self.transition_active and self.summary.is_settled:
            self._end_transition()
        self._schedule_summary()

    def set_metric(self, metric: MetricId) -> None:
        self.metric = MetricId(metric)

    def set_personality(self, mode: PersonalityMode) -> None:
        """Switch tone: persist, drop every cached summary, start the transition."""
        if mode == self.personality:
            return
        self.personality = mode
        self.preferences.save_personality(mode)
        self.summary_cache.invalidate_all()
        self.transition_active = True
        self.scheduler.schedule(
            TRANSITION_TASK_KEY, self.transition_seconds, self._end_transition
        )
        self._schedule_summary()

    def _end_transition(self) -> None:
        self.transition_active = False
        self.scheduler.cancel(TRANSITION_TASK_KEY)

    # --- Summaries ---

    def _schedule_summary(self) -> None:
        if self.status != ForecastStatus.READY:
            return
        self.scheduler.schedule(SUMMARY_TASK_KEY, self.summary_debounce, self._trigger_summary)

    def _trigger_summary(self) -> None:
        if self.status != ForecastStatus.READY or self.forecast is None:
            return
        context = SummaryContext(
            location_name=self.selected_location.name if self.selected_location else "",
            payload=self.forecast,
            now=self._forecast_now or self.clock(),
        )
        self.summary_cache.request(self.timeframe, self.personality, context)

    def _on_summary_change(self, key: SummaryKey, entry: SummaryCacheEntry) -> None:
        active = SummaryKey(self.timeframe, self.personality)
        if self.transition_active and key == active and entry.is_settled:
            self._end_transition()

    @property
    def summary(self) -> SummaryCacheEntry:
        return self.summary_cache.get(self.timeframe, self.personality)

    # --- Derived values ---

    def _compute_timeline(
        self, version: int, timeframe: Timeframe, metric: MetricId
    ) -> list[MetricPoint]:
        if self.forecast is None or self._forecast_now is None:
            return []
        return build_timeline(self.forecast, timeframe, get_metric(metric), self._forecast_now)

    @property
    def timeline(self) -> list[MetricPoint]:
        """Recomputed only when forecast, timeframe or metric change."""
        return self._timeline.get(self._forecast_version, self.timeframe, self.metric)

    @property
    def timeline_compute_count(self) -> int:
        return self._timeline.compute_count

    @property
    def available_metrics(self) -> list[MetricId]:
        now = self._forecast_now or self.clock()
        if self.forecast is None:
            temperature = float("inf")
        else:
            temperature = fp.num(fp.currently(self.forecast), "temperature")
        return [spec.id for spec in available_metrics(now, temperature)]

    @property
    def active_window(self) -> TimeWindow | None:
        return self.windows.get(self.timeframe)

    def view(self) -> SessionView:
        return SessionView(
            status=self.status,
            selected_location=self.selected_location,
            saved_locations=list(self.saved_locations),
            timeframe=self.timeframe,
            personality=self.personality,
            metric=self.metric,
            window=self.active_window,
            summary=self.summary,
            timeline=self.timeline,
            metrics=self.available_metrics,
            transition_active=self.transition_active,
            error=self.error,
            alert=self.alert,
            windows=dict(self.windows),
        )

    # --- Lifecycle ---

    async def wait_until_idle(self) -> None:
        """Wait for debounce timers and in-flight summaries to settle."""
        while True:
            await self.scheduler.wait_idle()
            await self.summary_cache.drain()
            if self.summary_cache.in_flight == 0 and not self.scheduler.is_pending(SUMMARY_TASK_KEY):
                return

    def close(self) -> None:
        self.scheduler.close()
