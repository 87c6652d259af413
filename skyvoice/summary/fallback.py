"""Deterministic local summaries used when generation fails."""

from skyvoice.models.common import Timeframe
from skyvoice.summary.prompts import SummaryContext, timeframe_facts


def fallback_text(timeframe: Timeframe, context: SummaryContext) -> str:
    facts = timeframe_facts(context.payload, timeframe, context.now)

    if timeframe == Timeframe.NOW:
        reading = (
            f"{facts['temperature']}°F right now, feeling like {facts['feels_like']}°F."
        )
        return f"{facts['summary']}, {reading}" if facts["summary"] else reading

    if timeframe in (Timeframe.TODAY, Timeframe.TOMORROW):
        label = "Today" if timeframe == Timeframe.TODAY else "Tomorrow"
        day = facts["day"]
        if day is None:
            return f"{label}'s forecast is unavailable."
        numbers = f"High of {day['high']}°F, low of {day['low']}°F."
        if day["summary"]:
            return f"{label}: {day['summary'].rstrip('.')}. {numbers}"
        return f"{label}: {numbers}"

    if timeframe == Timeframe.WEEK:
        stats = facts["stats"]
        if stats is None:
            return facts["summary"] or "This week's forecast is unavailable."
        return (
            f"This week: highs around {stats.avg_high}°F and lows around "
            f"{stats.avg_low}°F, ranging {stats.min_high}-{stats.max_high}°F."
        )

    sat, sun = facts["saturday"], facts["sunday"]
    if sat is None and sun is None:
        return "The weekend forecast is unavailable."
    parts = []
    if sat is not None:
        parts.append(f"Saturday {sat['high']}°F")
    if sun is not None:
        parts.append(f"Sunday {sun['high']}°F")
    return f"This weekend: {', '.join(parts)}."
