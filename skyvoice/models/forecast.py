"""Derived forecast view models: time windows and metric timeline points."""

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from skyvoice.models.common import Timeframe

# Decoded provider JSON; treated as opaque outside the derive package.
ForecastPayload: TypeAlias = dict[str, Any]


@dataclass(frozen=True)
class DetailItem:
    label: str
    value: str


@dataclass(frozen=True)
class TimeWindow:
    id: Timeframe
    title: str
    summary_text: str
    headline_value: str
    secondary_value: str
    details: tuple[DetailItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MetricPoint:
    id: str
    time_label: str
    value: float
    display_value: str
    intensity: float  # normalized to [0, 1]
    band: int  # 0..3, ascending colour band
    color: str
    is_highlighted: bool = False
    low_value: float | None = None
