"""Wire configured adapters into a WeatherSession."""

import sqlite3

from skyvoice.config.schema import AppConfig
from skyvoice.ingest.forecast_client import ForecastClient
from skyvoice.ingest.geocoder import NominatimGeocoder, StaticDeviceLocator
from skyvoice.ingest.llm_client import LlmClient
from skyvoice.location.resolver import LocationResolver
from skyvoice.scheduling.scheduler import TaskScheduler
from skyvoice.session.weather_session import WeatherSession
from skyvoice.storage.preferences import PreferencesStore
from skyvoice.summary.generator import SummaryGenerator


def build_resolver(config: AppConfig, scheduler: TaskScheduler) -> LocationResolver:
    geocoder = NominatimGeocoder(
        base_url=config.geocoder.base_url,
        user_agent=config.geocoder.user_agent,
        timeout=config.geocoder.timeout_seconds,
        limit=config.search.max_candidates,
    )
    device = StaticDeviceLocator(
        latitude=config.device.latitude,
        longitude=config.device.longitude,
        services_enabled=config.device.services_enabled,
        permission_granted=config.device.permission_granted,
    )
    return LocationResolver(
        geocoder,
        device,
        scheduler,
        debounce_seconds=config.timing.search_debounce_ms / 1000,
        min_query_length=config.search.min_query_length,
        max_candidates=config.search.max_candidates,
        location_timeout=config.timing.location_timeout_seconds,
        location_max_age=config.timing.location_max_age_seconds,
    )


def build_session(config: AppConfig, conn: sqlite3.Connection) -> WeatherSession:
    """Must be called with a running event loop available for the scheduler."""
    scheduler = TaskScheduler()
    forecast = ForecastClient(
        base_url=config.forecast.base_url,
        exclude=config.forecast.exclude,
        timeout=config.forecast.timeout_seconds,
        max_retries=config.forecast.max_retries,
        retry_base_delay=config.forecast.retry_base_delay,
    )
    llm = LlmClient(
        base_url=config.llm.base_url,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    return WeatherSession(
        forecast_client=forecast,
        resolver=build_resolver(config, scheduler),
        preferences=PreferencesStore(conn),
        generate_summary=SummaryGenerator(llm),
        scheduler=scheduler,
        summary_debounce=config.timing.summary_debounce_ms / 1000,
        transition_seconds=config.timing.personality_transition_ms / 1000,
        default_timeframe=config.display.default_timeframe,
        default_metric=config.display.default_metric,
    )
