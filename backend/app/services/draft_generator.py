"""Sequential, paced tweet draft generation over content chunks."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Protocol

from app.config import Settings
from app.exceptions import CompletionFailed
from app.prompts import TWEET_GENERATION_PROMPT, TWEET_SYSTEM_PROMPT
from app.services.draft_parser import DRAFT_MARKER, parse_drafts

logger = logging.getLogger(__name__)


class Completer(Protocol):
    async def complete(
        self, system_prompt: str, user_prompt: str, max_tokens: int, n: int = 1
    ) -> str | None: ...


@dataclass(frozen=True)
class ChunkSuccess:
    """A chunk that produced at least one draft."""
    index: int
    drafts: tuple[str, ...]


@dataclass(frozen=True)
class ChunkFailure:
    """A chunk that produced nothing usable, and why."""
    index: int
    reason: str


ChunkOutcome = ChunkSuccess | ChunkFailure


@dataclass
class GenerationReport:
    """Drafts collected so far plus one outcome per processed chunk."""
    drafts: list[str] = field(default_factory=list)
    outcomes: list[ChunkOutcome] = field(default_factory=list)

    @property
    def failures(self) -> list[ChunkFailure]:
        return [o for o in self.outcomes if isinstance(o, ChunkFailure)]

    def failure_summary(self) -> str:
        """Render per-chunk failures as ``chunk N: reason`` joined by semicolons."""
        return "; ".join(f"chunk {f.index + 1}: {f.reason}" for f in self.failures)


class DraftGenerator:
    """Ask the LLM for a few drafts per chunk until enough are collected.

    Chunks are processed strictly in order with one completion call each.
    Every chunk after the first waits ``chunk_delay_seconds`` first to stay
    under provider rate limits. A chunk that fails is recorded and skipped.
    """

    def __init__(
        self,
        client: Completer,
        settings: Settings,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.drafts_per_chunk = settings.drafts_per_chunk
        self.delay_seconds = settings.chunk_delay_seconds
        self.max_tokens = settings.llm_max_tokens
        self._sleep = sleep

    def build_prompt(self, chunk: str) -> str:
        return TWEET_GENERATION_PROMPT.format(
            count=self.drafts_per_chunk,
            content=chunk,
            marker=DRAFT_MARKER,
        )

    async def _process_chunk(self, index: int, chunk: str) -> ChunkOutcome:
        try:
            response = await self.client.complete(
                TWEET_SYSTEM_PROMPT,
                self.build_prompt(chunk),
                max_tokens=self.max_tokens,
                n=1,
            )
        except CompletionFailed as e:
            return ChunkFailure(index=index, reason=e.message)

        if not response:
            return ChunkFailure(index=index, reason="empty completion")

        drafts = parse_drafts(response)
        if not drafts:
            return ChunkFailure(index=index, reason=f"no '{DRAFT_MARKER}' lines in completion")

        # Extra marker lines beyond the requested count are dropped
        return ChunkSuccess(index=index, drafts=tuple(drafts[: self.drafts_per_chunk]))

    async def generate(self, chunks: list[str], target: int = 15) -> GenerationReport:
        """Generate drafts from chunks until ``target`` drafts are collected.

        Args:
            chunks: Content chunks in document order
            target: Stop issuing completion calls once this many drafts exist

        Returns:
            GenerationReport with the untruncated drafts and per-chunk outcomes
        """
        report = GenerationReport()

        for index, chunk in enumerate(chunks):
            if len(report.drafts) >= target:
                break
            if index > 0:
                await self._sleep(self.delay_seconds)

            outcome = await self._process_chunk(index, chunk)
            report.outcomes.append(outcome)

            if isinstance(outcome, ChunkSuccess):
                report.drafts.extend(outcome.drafts)
                logger.info(
                    f"Chunk {index + 1}/{len(chunks)}: {len(outcome.drafts)} drafts "
                    f"({len(report.drafts)} total)"
                )
            else:
                logger.warning(f"Chunk {index + 1}/{len(chunks)} produced no drafts: {outcome.reason}")

        return report
