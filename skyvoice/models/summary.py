"""Summary cache models."""

from dataclasses import dataclass
from enum import StrEnum

from skyvoice.models.common import PersonalityMode, Timeframe


class SummaryState(StrEnum):
    ABSENT = "absent"
    PENDING = "pending"
    READY = "ready"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SummaryKey:
    timeframe: Timeframe
    personality: PersonalityMode


@dataclass(frozen=True)
class SummaryCacheEntry:
    state: SummaryState = SummaryState.ABSENT
    text: str | None = None

    @property
    def is_settled(self) -> bool:
        return self.state in (SummaryState.READY, SummaryState.FALLBACK)


ABSENT_ENTRY = SummaryCacheEntry()
