"""Prompt construction for per-timeframe weather summaries."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from skyvoice.derive import payload as fp
from skyvoice.derive.formatting import round_half_up, sunday_weekday
from skyvoice.derive.windows import week_stats, weekend_indices
from skyvoice.models.common import PersonalityMode, Timeframe
from skyvoice.models.forecast import ForecastPayload
from skyvoice.personality.catalog import get_personality_prompt

MAX_WORDS = 30
SYSTEM_PREAMBLE = "You are an AI assistant."


@dataclass(frozen=True)
class SummaryContext:
    """Everything a prompt or fallback needs, captured when the request is made."""

    location_name: str
    payload: ForecastPayload
    now: datetime


def _day_facts(day: dict | None) -> dict[str, Any] | None:
    if day is None:
        return None
    return {
        "summary": fp.text(day),
        "high": round_half_up(fp.num(day, "temperatureHigh")),
        "low": round_half_up(fp.num(day, "temperatureLow")),
        "rain": round_half_up(fp.num(day, "precipProbability") * 100),
        "uv": round_half_up(fp.num(day, "uvIndex")),
    }


def timeframe_facts(
    payload: ForecastPayload, timeframe: Timeframe, now: datetime
) -> dict[str, Any]:
    """Numbers embedded in the prompt (and reused by the fallback text)."""
    days = fp.daily(payload)
    if timeframe == Timeframe.NOW:
        current = fp.currently(payload)
        return {
            "summary": fp.text(current),
            "temperature": round_half_up(fp.num(current, "temperature")),
            "feels_like": round_half_up(fp.num(current, "apparentTemperature")),
            "humidity": round_half_up(fp.num(current, "humidity") * 100),
            "wind": round_half_up(fp.num(current, "windSpeed")),
            "uv": round_half_up(fp.num(current, "uvIndex")),
        }
    if timeframe == Timeframe.TODAY:
        return {"day": _day_facts(fp.record_at(days, 0))}
    if timeframe == Timeframe.TOMORROW:
        return {"day": _day_facts(fp.record_at(days, 1))}
    if timeframe == Timeframe.WEEK:
        return {"summary": fp.daily_summary(payload), "stats": week_stats(payload)}
    sat, sun = weekend_indices(sunday_weekday(fp.localize(payload, now)))
    return {
        "saturday": _day_facts(fp.record_at(days, sat)),
        "sunday": _day_facts(fp.record_at(days, sun)),
    }


def _describe_day(label: str, day: dict[str, Any] | None) -> str:
    if day is None:
        return f"{label}: no data."
    return (
        f"{label}: {day['summary'] or 'no summary'}, high {day['high']}°F, "
        f"low {day['low']}°F, {day['rain']}% chance of rain, UV index {day['uv']}."
    )


def build_prompt(timeframe: Timeframe, context: SummaryContext) -> str:
    facts = timeframe_facts(context.payload, timeframe, context.now)
    place = context.location_name or "this location"
    limit = f"Reply in one or two sentences, no more than {MAX_WORDS} words."

    if timeframe == Timeframe.NOW:
        return (
            f"Describe the weather right now in {place}. "
            f"Conditions: {facts['summary'] or 'unknown'}, {facts['temperature']}°F, "
            f"feels like {facts['feels_like']}°F, humidity {facts['humidity']}%, "
            f"wind {facts['wind']} mph, UV index {facts['uv']}. {limit}"
        )
    if timeframe in (Timeframe.TODAY, Timeframe.TOMORROW):
        label = "Today" if timeframe == Timeframe.TODAY else "Tomorrow"
        return (
            f"Summarize {label.lower()}'s weather in {place}. "
            f"{_describe_day(label, facts['day'])} {limit}"
        )
    if timeframe == Timeframe.WEEK:
        stats = facts["stats"]
        numbers = (
            f"Average high {stats.avg_high}°F, average low {stats.avg_low}°F, "
            f"highs ranging from {stats.min_high}°F to {stats.max_high}°F."
            if stats is not None else "No daily numbers available."
        )
        return (
            f"Summarize the week ahead in {place}. "
            f"Outlook: {facts['summary'] or 'none provided'}. {numbers} {limit}"
        )
    return (
        f"Summarize the upcoming weekend in {place}. "
        f"{_describe_day('Saturday', facts['saturday'])} "
        f"{_describe_day('Sunday', facts['sunday'])} {limit}"
    )


def build_messages(prompt: str, personality: PersonalityMode) -> list[dict[str, str]]:
    system = f"{SYSTEM_PREAMBLE} {get_personality_prompt(personality)}".rstrip()
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]


def clean_summary(text: str) -> str:
    """Trim whitespace and wrapping quotes from model output."""
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned
