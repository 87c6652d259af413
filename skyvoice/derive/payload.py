"""Tolerant accessors over a raw forecast payload.

Missing sections, short arrays and absent fields never raise: records
come back as None and numeric fields as 0.0.
"""

import logging
from datetime import datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from skyvoice.models.forecast import ForecastPayload

logger = logging.getLogger(__name__)


def currently(payload: ForecastPayload) -> dict[str, Any]:
    value = payload.get("currently")
    return value if isinstance(value, dict) else {}


def _series(payload: ForecastPayload, section: str) -> list[dict[str, Any]]:
    block = payload.get(section)
    if not isinstance(block, dict):
        return []
    data = block.get("data")
    if not isinstance(data, list):
        return []
    return [r if isinstance(r, dict) else {} for r in data]


def hourly(payload: ForecastPayload) -> list[dict[str, Any]]:
    return _series(payload, "hourly")


def daily(payload: ForecastPayload) -> list[dict[str, Any]]:
    return _series(payload, "daily")


def daily_summary(payload: ForecastPayload) -> str:
    block = payload.get("daily")
    if isinstance(block, dict):
        return str(block.get("summary") or "")
    return ""


def record_at(records: list[dict[str, Any]], index: int) -> dict[str, Any] | None:
    if 0 <= index < len(records):
        return records[index]
    return None


def num(record: dict[str, Any] | None, key: str) -> float:
    """Numeric field, 0.0 when absent or malformed."""
    if not record:
        return 0.0
    value = record.get(key)
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def text(record: dict[str, Any] | None, key: str = "summary") -> str:
    if not record:
        return ""
    value = record.get(key)
    return str(value) if value is not None else ""


def payload_tz(payload: ForecastPayload, now: datetime) -> tzinfo | None:
    """The forecast location's timezone, falling back to now's tzinfo."""
    name = payload.get("timezone")
    if isinstance(name, str) and name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown forecast timezone %r", name)
    return now.tzinfo


def localize(payload: ForecastPayload, now: datetime) -> datetime:
    """Express now in the forecast location's wall-clock time.

    Naive datetimes are already wall-clock and are returned unchanged.
    """
    if now.tzinfo is None:
        return now
    tz = payload_tz(payload, now)
    return now.astimezone(tz) if tz is not None else now


def record_time(
    record: dict[str, Any] | None, tz: tzinfo | None, key: str = "time"
) -> datetime | None:
    if not record or record.get(key) is None:
        return None
    try:
        return datetime.fromtimestamp(float(record[key]), tz)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
