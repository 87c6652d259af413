"""Output formatters for the session view-model."""

import json
from dataclasses import asdict
from typing import Any

from skyvoice.models.location import Location, SearchResult
from skyvoice.session.weather_session import ForecastStatus, SessionView

BAR_WIDTH = 20


def _bar(intensity: float) -> str:
    filled = round(intensity * BAR_WIDTH)
    return "#" * filled + "." * (BAR_WIDTH - filled)


def format_view_text(v: SessionView) -> str:
    """Plain text rendering of the active window, summary and timeline."""
    if v.alert is not None and v.selected_location is None:
        return f"{v.alert.title}: {v.alert.message}"
    if v.selected_location is None:
        return "No location selected. Add a location to see the weather."
    header = f"=== {v.selected_location.name} | {v.timeframe.value} | {v.personality} ==="
    if v.status == ForecastStatus.ERROR:
        return f"{header}\n{v.error} (retry with --refresh)"
    if v.status != ForecastStatus.READY or v.window is None:
        return f"{header}\nLoading weather information..."

    w = v.window
    lines = [header, f"{w.title}: {w.headline_value} | {w.secondary_value}"]
    if v.summary.text:
        lines.append(f"Summary: {v.summary.text}")
    elif w.summary_text:
        lines.append(f"Summary: {w.summary_text}")
    for item in w.details:
        lines.append(f"  {item.label}: {item.value}")
    if v.timeline:
        lines.append(f"--- {v.metric.value} ---")
        for p in v.timeline:
            marker = "*" if p.is_highlighted else " "
            lines.append(f"{marker}{p.time_label:>6} {_bar(p.intensity)} {p.display_value}")
    return "\n".join(lines)


def view_to_dict(v: SessionView) -> dict[str, Any]:
    return {
        "status": v.status.value,
        "selected_location": v.selected_location.to_dict() if v.selected_location else None,
        "timeframe": v.timeframe.value,
        "personality": v.personality,
        "metric": v.metric.value,
        "window": asdict(v.window) if v.window else None,
        "summary": {"state": v.summary.state.value, "text": v.summary.text},
        "timeline": [asdict(p) for p in v.timeline],
        "metrics": [m.value for m in v.metrics],
        "transition_active": v.transition_active,
        "error": v.error,
        "alert": asdict(v.alert) if v.alert else None,
    }


def format_view_json(v: SessionView) -> str:
    return json.dumps(view_to_dict(v), indent=2, default=str)


def format_locations(locations: list[Location], selected_id: str | None = None) -> str:
    if not locations:
        return "No saved locations"
    lines = []
    for loc in locations:
        marker = "*" if loc.id == selected_id else " "
        zipcode = f" ({loc.zipcode})" if loc.zipcode else ""
        lines.append(f"{marker} {loc.id}  {loc.name}{zipcode}  {loc.latitude:.4f},{loc.longitude:.4f}")
    return "\n".join(lines)


def format_search_results(results: list[SearchResult]) -> str:
    if not results:
        return "No matches"
    lines = []
    for r in results:
        zipcode = f"Zipcode: {r.zipcode}" if r.zipcode != "N/A" else "No zipcode available"
        lines.append(f"{r.id}  {r.name}  [{zipcode}]  {r.latitude:.4f},{r.longitude:.4f}")
    return "\n".join(lines)
