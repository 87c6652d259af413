"""Tests for view formatters."""

import json

from skyvoice.derive.metrics import get_metric
from skyvoice.derive.timeline import build_timeline
from skyvoice.derive.windows import derive_windows
from skyvoice.models.common import MetricId, Timeframe
from skyvoice.models.location import SearchResult
from skyvoice.models.summary import SummaryCacheEntry, SummaryState
from skyvoice.reporting.formatters import (
    format_locations,
    format_search_results,
    format_view_json,
    format_view_text,
)
from skyvoice.session.weather_session import ForecastStatus, SessionAlert, SessionView
from skyvoice.tests.conftest import BOSTON, NOW, build_payload


def _view(**overrides) -> SessionView:
    payload = build_payload()
    windows = derive_windows(payload, NOW)
    fields = dict(
        status=ForecastStatus.READY,
        selected_location=BOSTON,
        saved_locations=[BOSTON],
        timeframe=Timeframe.NOW,
        personality="default",
        metric=MetricId.TEMPERATURE,
        window=windows[Timeframe.NOW],
        summary=SummaryCacheEntry(SummaryState.READY, "Pleasant afternoon."),
        timeline=build_timeline(payload, Timeframe.NOW, get_metric(MetricId.TEMPERATURE), NOW),
        metrics=[MetricId.TEMPERATURE],
        windows=windows,
    )
    fields.update(overrides)
    return SessionView(**fields)


class TestFormatViewText:
    def test_ready(self):
        text = format_view_text(_view())
        lines = text.splitlines()
        assert lines[0] == "=== Boston, MA | now | default ==="
        assert lines[1] == "Now: 70°F | Partly Cloudy"
        assert "Summary: Pleasant afternoon." in text
        assert "  Feels like: 70°F" in text
        assert "--- temperature ---" in text
        timeline_lines = lines[-24:]
        assert timeline_lines[9].startswith("*")
        assert timeline_lines[0].startswith("    Now")

    def test_error(self):
        text = format_view_text(_view(status=ForecastStatus.ERROR, error="Failed."))
        assert text.endswith("Failed. (retry with --refresh)")

    def test_alert_without_location(self):
        view = _view(
            selected_location=None,
            alert=SessionAlert("Permission Denied", "Location permission is required."),
        )
        assert format_view_text(view) == "Permission Denied: Location permission is required."

    def test_no_location(self):
        assert "No location selected" in format_view_text(_view(selected_location=None))


class TestFormatViewJson:
    def test_serializable(self):
        data = json.loads(format_view_json(_view()))
        assert data["status"] == "ready"
        assert data["selected_location"]["id"] == BOSTON.id
        assert data["summary"] == {"state": "ready", "text": "Pleasant afternoon."}
        assert len(data["timeline"]) == 24
        assert data["window"]["headline_value"] == "70°F"
        assert data["timeline"][0]["color"] == get_metric(MetricId.TEMPERATURE).colors[2]


class TestListings:
    def test_locations(self):
        out = format_locations([BOSTON], BOSTON.id)
        assert out.startswith(f"* {BOSTON.id}  Boston, MA (02108)")

    def test_search_results(self):
        results = [
            SearchResult("search-0", "Boston, MA", "02108", 42.36, -71.06),
            SearchResult("search-1", "Boston", "N/A", 42.0, -71.0),
        ]
        out = format_search_results(results).splitlines()
        assert "Zipcode: 02108" in out[0]
        assert "No zipcode available" in out[1]
        assert format_search_results([]) == "No matches"
