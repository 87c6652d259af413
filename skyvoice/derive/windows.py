"""Derive the five display windows (now/today/tomorrow/week/weekend).

All functions are pure given (payload, now). Short or missing arrays
produce windows with placeholder values instead of raising.
"""

from dataclasses import dataclass
from datetime import datetime

from skyvoice.derive import payload as fp
from skyvoice.derive.formatting import (
    MISSING,
    format_clock,
    format_number,
    format_percent,
    format_temp,
    round_half_up,
    sunday_weekday,
    weekday_name,
)
from skyvoice.models.common import Timeframe
from skyvoice.models.forecast import DetailItem, ForecastPayload, TimeWindow

WEEK_DAYS = 7

WINDOW_TITLES: dict[Timeframe, str] = {
    Timeframe.NOW: "Now",
    Timeframe.TODAY: "Today",
    Timeframe.TOMORROW: "Tomorrow",
    Timeframe.WEEK: "This Week",
    Timeframe.WEEKEND: "This Weekend",
}


@dataclass(frozen=True)
class WeekStats:
    avg_high: int
    avg_low: int
    max_high: int
    min_high: int
    days: int

    @property
    def spread(self) -> int:
        return self.max_high - self.min_high


def weekend_indices(weekday: int) -> tuple[int, int]:
    """Daily indices of the upcoming Saturday and Sunday.

    weekday is numbered Sunday=0 .. Saturday=6. On a Saturday this looks
    at next week's Saturday (7) and tomorrow's Sunday (1).
    """
    days_until_saturday = 7 if weekday == 6 else (6 - weekday) % 7
    return days_until_saturday, (days_until_saturday + 1) % 7


def week_stats(payload: ForecastPayload) -> WeekStats | None:
    days = fp.daily(payload)[:WEEK_DAYS]
    if not days:
        return None
    highs = [fp.num(d, "temperatureHigh") for d in days]
    lows = [fp.num(d, "temperatureLow") for d in days]
    return WeekStats(
        avg_high=round_half_up(sum(highs) / len(highs)),
        avg_low=round_half_up(sum(lows) / len(lows)),
        max_high=round_half_up(max(highs)),
        min_high=round_half_up(min(highs)),
        days=len(days),
    )


def derive_windows(
    payload: ForecastPayload, now: datetime
) -> dict[Timeframe, TimeWindow]:
    return {tf: derive_window(payload, tf, now) for tf in Timeframe}


def derive_window(
    payload: ForecastPayload, timeframe: Timeframe, now: datetime
) -> TimeWindow:
    if timeframe == Timeframe.NOW:
        return _now_window(payload)
    if timeframe == Timeframe.TODAY:
        return _day_window(payload, Timeframe.TODAY, 0, now)
    if timeframe == Timeframe.TOMORROW:
        return _day_window(payload, Timeframe.TOMORROW, 1, now)
    if timeframe == Timeframe.WEEK:
        return _week_window(payload, now)
    return _weekend_window(payload, now)


def _now_window(payload: ForecastPayload) -> TimeWindow:
    current = fp.currently(payload)
    if not current:
        return _empty_window(Timeframe.NOW)
    return TimeWindow(
        id=Timeframe.NOW,
        title=WINDOW_TITLES[Timeframe.NOW],
        summary_text=fp.text(current),
        headline_value=format_temp(fp.num(current, "temperature")),
        secondary_value=fp.text(current),
        details=(
            DetailItem("Feels like", format_temp(fp.num(current, "apparentTemperature"))),
            DetailItem("Humidity", format_percent(fp.num(current, "humidity"))),
            DetailItem("Wind", f"{round_half_up(fp.num(current, 'windSpeed'))} mph"),
            DetailItem("UV Index", format_number(fp.num(current, "uvIndex"))),
            DetailItem("Visibility", f"{format_number(fp.num(current, 'visibility'))} miles"),
        ),
    )


def _day_window(
    payload: ForecastPayload, timeframe: Timeframe, index: int, now: datetime
) -> TimeWindow:
    day = fp.record_at(fp.daily(payload), index)
    if day is None:
        return _empty_window(timeframe)
    tz = fp.payload_tz(payload, now)
    return TimeWindow(
        id=timeframe,
        title=WINDOW_TITLES[timeframe],
        summary_text=fp.text(day),
        headline_value=f"High: {format_temp(fp.num(day, 'temperatureHigh'))}",
        secondary_value=f"Low: {format_temp(fp.num(day, 'temperatureLow'))}",
        details=(
            DetailItem("Sunrise", format_clock(fp.record_time(day, tz, "sunriseTime"))),
            DetailItem("Sunset", format_clock(fp.record_time(day, tz, "sunsetTime"))),
            DetailItem("Humidity", format_percent(fp.num(day, "humidity"))),
            DetailItem("UV Index", format_number(fp.num(day, "uvIndex"))),
        ),
    )


def _week_window(payload: ForecastPayload, now: datetime) -> TimeWindow:
    stats = week_stats(payload)
    if stats is None:
        return _empty_window(Timeframe.WEEK, fp.daily_summary(payload))
    tz = fp.payload_tz(payload, now)
    details = [
        DetailItem("Average high", f"{stats.avg_high}°F"),
        DetailItem("Average low", f"{stats.avg_low}°F"),
        DetailItem("Spread", f"{stats.spread}°F"),
    ]
    for day in fp.daily(payload)[:WEEK_DAYS]:
        details.append(DetailItem(_day_label(day, tz), _day_line(day)))
    return TimeWindow(
        id=Timeframe.WEEK,
        title=WINDOW_TITLES[Timeframe.WEEK],
        summary_text=fp.daily_summary(payload),
        headline_value=f"Avg High: {stats.avg_high}°F",
        secondary_value=f"Avg Low: {stats.avg_low}°F",
        details=tuple(details),
    )


def _weekend_window(payload: ForecastPayload, now: datetime) -> TimeWindow:
    local = fp.localize(payload, now)
    sat_index, sun_index = weekend_indices(sunday_weekday(local))
    days = fp.daily(payload)
    saturday = fp.record_at(days, sat_index)
    sunday = fp.record_at(days, sun_index)
    if saturday is None and sunday is None:
        return _empty_window(Timeframe.WEEKEND)

    details = []
    if saturday is not None:
        details.append(DetailItem("Saturday", _day_line(saturday)))
    if sunday is not None:
        details.append(DetailItem("Sunday", _day_line(sunday)))
    lead = saturday if saturday is not None else sunday
    return TimeWindow(
        id=Timeframe.WEEKEND,
        title=WINDOW_TITLES[Timeframe.WEEKEND],
        summary_text=f"Weekend forecast: {fp.text(lead)}",
        headline_value=(
            f"Sat {format_temp(fp.num(saturday, 'temperatureHigh'))}"
            if saturday is not None else MISSING
        ),
        secondary_value=(
            f"Sun {format_temp(fp.num(sunday, 'temperatureHigh'))}"
            if sunday is not None else MISSING
        ),
        details=tuple(details),
    )


def _day_line(day: dict) -> str:
    return (
        f"{fp.text(day)}, High: {format_temp(fp.num(day, 'temperatureHigh'))}, "
        f"Low: {format_temp(fp.num(day, 'temperatureLow'))}"
    )


def _day_label(day: dict, tz) -> str:
    dt = fp.record_time(day, tz)
    return weekday_name(dt) if dt is not None else MISSING


def _empty_window(timeframe: Timeframe, summary: str = "") -> TimeWindow:
    return TimeWindow(
        id=timeframe,
        title=WINDOW_TITLES[timeframe],
        summary_text=summary,
        headline_value=MISSING,
        secondary_value=MISSING,
    )
