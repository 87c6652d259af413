"""Metric catalog: how each selectable quantity is read, scaled and banded."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from skyvoice.derive import payload as fp
from skyvoice.derive.formatting import format_number, round_half_up
from skyvoice.models.common import MetricId

WINTER_MONTHS = (12, 1, 2)
SNOW_TEMPERATURE_F = 35.0

Record = dict[str, Any]


@dataclass(frozen=True)
class MetricSpec:
    id: MetricId
    label: str
    extract_hourly: Callable[[Record], float]
    extract_daily: Callable[[Record], tuple[float, float | None]]
    normalize: Callable[[float], float]
    thresholds: tuple[float, float, float]  # ascending band boundaries
    colors: tuple[str, str, str, str]
    display: Callable[[float], str]

    def intensity(self, value: float) -> float:
        return _clamp(self.normalize(value))

    def band(self, intensity: float) -> int:
        return sum(1 for t in self.thresholds if intensity >= t)

    def color(self, intensity: float) -> str:
        return self.colors[self.band(intensity)]


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _scaled(maximum: float, minimum: float = 0.0) -> Callable[[float], float]:
    span = maximum - minimum
    return lambda v: (v - minimum) / span


def _field(key: str, scale: float = 1.0) -> Callable[[Record], float]:
    return lambda r: fp.num(r, key) * scale


def _high_low(high: str, low: str) -> Callable[[Record], tuple[float, float | None]]:
    return lambda r: (fp.num(r, high), fp.num(r, low))


def _single(key: str, scale: float = 1.0) -> Callable[[Record], tuple[float, float | None]]:
    return lambda r: (fp.num(r, key) * scale, None)


def _snow(record: Record) -> float:
    if record.get("snowAccumulation") is not None:
        return fp.num(record, "snowAccumulation")
    if record.get("precipType") == "snow":
        return fp.num(record, "precipAccumulation")
    return 0.0


COOL_TO_HOT = ("#4A90E2", "#7ED321", "#F5A623", "#D0021B")
LIGHT_TO_DEEP = ("#D6EAF8", "#85C1E9", "#3498DB", "#1B4F72")

METRICS: dict[MetricId, MetricSpec] = {
    MetricId.TEMPERATURE: MetricSpec(
        id=MetricId.TEMPERATURE,
        label="Temperature",
        extract_hourly=_field("temperature"),
        extract_daily=_high_low("temperatureHigh", "temperatureLow"),
        normalize=_scaled(100.0),
        thresholds=(0.3, 0.6, 0.8),
        colors=COOL_TO_HOT,
        display=lambda v: f"{round_half_up(v)}°",
    ),
    MetricId.FEELS_LIKE: MetricSpec(
        id=MetricId.FEELS_LIKE,
        label="Feels Like",
        extract_hourly=_field("apparentTemperature"),
        extract_daily=_high_low("apparentTemperatureHigh", "apparentTemperatureLow"),
        normalize=_scaled(100.0),
        thresholds=(0.3, 0.6, 0.8),
        colors=COOL_TO_HOT,
        display=lambda v: f"{round_half_up(v)}°",
    ),
    MetricId.HUMIDITY: MetricSpec(
        id=MetricId.HUMIDITY,
        label="Humidity",
        extract_hourly=_field("humidity", 100.0),
        extract_daily=_single("humidity", 100.0),
        normalize=_scaled(100.0),
        thresholds=(0.3, 0.6, 0.8),
        colors=LIGHT_TO_DEEP,
        display=lambda v: f"{round_half_up(v)}%",
    ),
    MetricId.RAIN_PROBABILITY: MetricSpec(
        id=MetricId.RAIN_PROBABILITY,
        label="Rain Chance",
        extract_hourly=_field("precipProbability", 100.0),
        extract_daily=_single("precipProbability", 100.0),
        normalize=_scaled(100.0),
        thresholds=(0.2, 0.5, 0.7),
        colors=LIGHT_TO_DEEP,
        display=lambda v: f"{round_half_up(v)}%",
    ),
    MetricId.WIND: MetricSpec(
        id=MetricId.WIND,
        label="Wind",
        extract_hourly=_field("windSpeed"),
        extract_daily=_single("windSpeed"),
        normalize=_scaled(40.0),
        thresholds=(0.25, 0.5, 0.75),
        colors=("#A9DFBF", "#52BE80", "#F4D03F", "#E67E22"),
        display=lambda v: f"{round_half_up(v)} mph",
    ),
    MetricId.UV_INDEX: MetricSpec(
        id=MetricId.UV_INDEX,
        label="UV Index",
        extract_hourly=_field("uvIndex"),
        extract_daily=_single("uvIndex"),
        normalize=_scaled(11.0),
        thresholds=(0.27, 0.55, 0.73),
        colors=("#2ECC71", "#F1C40F", "#E67E22", "#C0392B"),
        display=lambda v: format_number(v, 0),
    ),
    MetricId.VISIBILITY: MetricSpec(
        id=MetricId.VISIBILITY,
        label="Visibility",
        extract_hourly=_field("visibility"),
        extract_daily=_single("visibility"),
        normalize=_scaled(10.0),
        thresholds=(0.3, 0.6, 0.9),
        colors=("#7F8C8D", "#95A5A6", "#AED6F1", "#5DADE2"),
        display=lambda v: f"{format_number(v)} mi",
    ),
    MetricId.SNOW: MetricSpec(
        id=MetricId.SNOW,
        label="Snow",
        extract_hourly=_snow,
        extract_daily=lambda r: (_snow(r), None),
        normalize=_scaled(6.0),
        thresholds=(0.1, 0.3, 0.6),
        colors=("#F8F9F9", "#D6EAF8", "#AED6F1", "#5DADE2"),
        display=lambda v: f'{format_number(v)}"',
    ),
}

BASE_METRICS = (
    MetricId.TEMPERATURE,
    MetricId.FEELS_LIKE,
    MetricId.HUMIDITY,
    MetricId.RAIN_PROBABILITY,
    MetricId.WIND,
    MetricId.UV_INDEX,
    MetricId.VISIBILITY,
)


def snow_relevant(now: datetime, current_temperature: float) -> bool:
    return now.month in WINTER_MONTHS or current_temperature < SNOW_TEMPERATURE_F


def available_metrics(now: datetime, current_temperature: float) -> list[MetricSpec]:
    """Metric catalog for the picker; snow joins only in winter or cold weather."""
    specs = [METRICS[m] for m in BASE_METRICS]
    if snow_relevant(now, current_temperature):
        specs.append(METRICS[MetricId.SNOW])
    return specs


def get_metric(metric_id: MetricId | str) -> MetricSpec:
    return METRICS[MetricId(metric_id)]
