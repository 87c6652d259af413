"""Turns a (timeframe, personality) request into an LLM completion."""

import logging

from skyvoice.ingest.llm_client import LlmClient
from skyvoice.models.summary import SummaryKey
from skyvoice.summary.prompts import (
    SummaryContext,
    build_messages,
    build_prompt,
    clean_summary,
)

logger = logging.getLogger(__name__)


class SummaryGenerator:
    def __init__(self, llm: LlmClient):
        self.llm = llm

    async def __call__(self, key: SummaryKey, context: SummaryContext) -> str:
        prompt = build_prompt(key.timeframe, context)
        messages = build_messages(prompt, key.personality)
        logger.debug(
            "Requesting %s summary (personality=%s)", key.timeframe, key.personality
        )
        return clean_summary(await self.llm.complete(messages))
