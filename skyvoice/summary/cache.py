"""Per-(timeframe, personality) cache of generated summaries.

The cache holds summaries for a single forecast. Callers invalidate it
whenever the forecast or personality changes; results that arrive after
an invalidation are dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from skyvoice.models.common import PersonalityMode, Timeframe
from skyvoice.models.summary import (
    ABSENT_ENTRY,
    SummaryCacheEntry,
    SummaryKey,
    SummaryState,
)
from skyvoice.summary.fallback import fallback_text
from skyvoice.summary.prompts import SummaryContext

logger = logging.getLogger(__name__)

GenerateFn = Callable[[SummaryKey, SummaryContext], Awaitable[str]]
ChangeListener = Callable[[SummaryKey, SummaryCacheEntry], None]

PENDING_ENTRY = SummaryCacheEntry(state=SummaryState.PENDING)


class SummaryCache:
    def __init__(self, generate: GenerateFn, on_change: ChangeListener | None = None):
        self._generate = generate
        self._on_change = on_change
        self._entries: dict[SummaryKey, SummaryCacheEntry] = {}
        self._tasks: set[asyncio.Task] = set()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def get(self, timeframe: Timeframe, personality: PersonalityMode) -> SummaryCacheEntry:
        return self._entries.get(SummaryKey(timeframe, personality), ABSENT_ENTRY)

    def entries(self) -> dict[SummaryKey, SummaryCacheEntry]:
        return dict(self._entries)

    def request(
        self,
        timeframe: Timeframe,
        personality: PersonalityMode,
        context: SummaryContext,
    ) -> bool:
        """Start generation for an absent entry. Returns True if a call was started.

        The state check and the transition to pending happen without an
        intervening await, so coinciding triggers start one call.
        """
        key = SummaryKey(timeframe, personality)
        if self._entries.get(key, ABSENT_ENTRY).state != SummaryState.ABSENT:
            return False
        self._entries[key] = PENDING_ENTRY
        self._notify(key, PENDING_ENTRY)
        task = asyncio.get_running_loop().create_task(
            self._run(key, context, self._generation)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _run(self, key: SummaryKey, context: SummaryContext, generation: int) -> None:
        try:
            text = (await self._generate(key, context)).strip()
        except Exception as e:
            logger.warning(
                "Summary generation failed for %s/%s, using fallback: %s",
                key.timeframe, key.personality, e,
            )
            text = ""

        if text:
            entry = SummaryCacheEntry(SummaryState.READY, text)
        else:
            entry = SummaryCacheEntry(
                SummaryState.FALLBACK, fallback_text(key.timeframe, context)
            )

        if generation != self._generation:
            logger.debug("Dropping stale %s summary", key.timeframe)
            return
        self._entries[key] = entry
        self._notify(key, entry)

    def _notify(self, key: SummaryKey, entry: SummaryCacheEntry) -> None:
        if self._on_change is not None:
            self._on_change(key, entry)

    def invalidate_all(self) -> None:
        """Reset every entry to absent; in-flight results will be discarded."""
        if self._entries:
            logger.debug("Invalidating %d summary entries", len(self._entries))
        self._entries.clear()
        self._generation += 1

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
