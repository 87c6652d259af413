"""Common types and helpers shared across models."""

from datetime import datetime
from enum import StrEnum
from typing import TypeAlias

PersonalityMode: TypeAlias = str

class Timeframe(StrEnum):
    NOW = "now"
    TODAY = "today"
    TOMORROW = "tomorrow"
    WEEK = "week"
    WEEKEND = "weekend"

class MetricId(StrEnum):
    TEMPERATURE = "temperature"
    FEELS_LIKE = "feels_like"
    HUMIDITY = "humidity"
    RAIN_PROBABILITY = "rain_probability"
    WIND = "wind"
    UV_INDEX = "uv_index"
    VISIBILITY = "visibility"
    SNOW = "snow"


def local_now() -> datetime:
    """Wall-clock time with the host's local offset attached."""
    return datetime.now().astimezone()
