"""Metric-driven timeline series for the selected timeframe."""

from dataclasses import replace
from datetime import datetime, tzinfo

from skyvoice.derive import payload as fp
from skyvoice.derive.formatting import format_hour, sunday_weekday, weekday_name
from skyvoice.derive.metrics import MetricSpec
from skyvoice.models.common import Timeframe
from skyvoice.models.forecast import ForecastPayload, MetricPoint

HOURS_PER_DAY = 24
WEEK_DAYS = 7
WEEKEND_SPAN_DAYS = 4  # Friday through Monday

# Days from today to the next Friday, keyed by weekday (Sunday=0).
# Saturday jumps to next week's Friday rather than yesterday's.
_WEEKEND_OFFSETS = {5: 0, 6: 6, 0: 5}


def weekend_start_offset(weekday: int) -> int:
    return _WEEKEND_OFFSETS.get(weekday, 5 - weekday)


def hours_until_midnight(hour: int) -> int:
    return HOURS_PER_DAY - hour


def timeline_records(
    payload: ForecastPayload, timeframe: Timeframe, now: datetime
) -> tuple[list[dict], int, bool]:
    """Select the records backing a timeframe.

    Returns (records, start_index, is_daily).
    """
    local = fp.localize(payload, now)
    if timeframe in (Timeframe.NOW, Timeframe.TODAY, Timeframe.TOMORROW):
        hours = fp.hourly(payload)
        if timeframe == Timeframe.NOW:
            return hours[: min(HOURS_PER_DAY, len(hours))], 0, False
        remaining = hours_until_midnight(local.hour)
        if timeframe == Timeframe.TODAY:
            return hours[: min(remaining, len(hours))], 0, False
        return hours[remaining: remaining + HOURS_PER_DAY], remaining, False

    days = fp.daily(payload)
    if timeframe == Timeframe.WEEK:
        return days[:WEEK_DAYS], 0, True
    start = weekend_start_offset(sunday_weekday(local))
    return days[start: start + WEEKEND_SPAN_DAYS], start, True


def build_timeline(
    payload: ForecastPayload,
    timeframe: Timeframe,
    metric: MetricSpec,
    now: datetime,
) -> list[MetricPoint]:
    records, start, is_daily = timeline_records(payload, timeframe, now)
    tz = fp.payload_tz(payload, now)

    points: list[MetricPoint] = []
    for offset, record in enumerate(records):
        index = start + offset
        if is_daily:
            value, low = metric.extract_daily(record)
        else:
            value, low = metric.extract_hourly(record), None
        intensity = metric.intensity(value)
        points.append(
            MetricPoint(
                id=f"{timeframe.value}-{index}",
                time_label=_label(record, timeframe, offset, index, is_daily, tz),
                value=value,
                display_value=metric.display(value),
                intensity=intensity,
                band=metric.band(intensity),
                color=metric.color(intensity),
                low_value=low,
            )
        )
    return _highlight_peak(points)


def _label(
    record: dict,
    timeframe: Timeframe,
    offset: int,
    index: int,
    is_daily: bool,
    tz: tzinfo | None,
) -> str:
    if timeframe == Timeframe.NOW and offset == 0:
        return "Now"
    if timeframe == Timeframe.WEEK and index == 0:
        return "Today"
    dt = fp.record_time(record, tz)
    if dt is None:
        return f"+{index}d" if is_daily else f"+{index}h"
    return weekday_name(dt, short=True) if is_daily else format_hour(dt)


def _highlight_peak(points: list[MetricPoint]) -> list[MetricPoint]:
    if not points:
        return points
    peak = max(range(len(points)), key=lambda i: points[i].value)
    points[peak] = replace(points[peak], is_highlighted=True)
    return points
