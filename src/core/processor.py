"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for issue
lookup and notifications, enabling other chat platforms or trackers without
changes here.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from core.config import RenderOptions
from core.errors import DispatchError, ResolutionError
from core.matcher import ReferenceMatcher
from core.models import IssueReference
from core.ports import NotifierPort
from core.rendering import render_card
from core.resolver import IssueResolver

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingContext:
    """Read-only collaborators shared by every unit of work."""

    matcher: ReferenceMatcher
    resolver: IssueResolver
    notifier: NotifierPort
    render_options: RenderOptions


@dataclass(frozen=True)
class ProcessResult:
    """Outcome counters for one processed message."""

    references: int
    dispatched: int

    @property
    def failed(self) -> int:
        return self.references - self.dispatched


class MessageProcessor:
    """Orchestrates extraction, resolution, rendering, and dispatch."""

    def __init__(self, context: ProcessingContext) -> None:
        self._context = context

    @property
    def context(self) -> ProcessingContext:
        return self._context

    async def handle(self, text: str, channel: str) -> ProcessResult:
        """Process one message; each reference succeeds or fails on its own."""

        references = self._context.matcher.find_all(text)
        if not references:
            return ProcessResult(references=0, dispatched=0)

        # Repeated mentions each get their own lookup and card.
        outcomes = await asyncio.gather(
            *(self._handle_reference(reference, channel) for reference in references),
            return_exceptions=True,
        )
        dispatched = 0
        for reference, outcome in zip(references, outcomes):
            if isinstance(outcome, BaseException):
                LOGGER.error("Unexpected failure for %s", reference.key, exc_info=outcome)
            elif outcome:
                dispatched += 1
        return ProcessResult(references=len(references), dispatched=dispatched)

    async def _handle_reference(self, reference: IssueReference, channel: str) -> bool:
        try:
            issue = await self._context.resolver.resolve(reference)
        except ResolutionError as exc:
            LOGGER.warning("Could not resolve %s: %s", reference.key, exc)
            return False

        card = render_card(issue, self._context.render_options)
        try:
            await self._context.notifier.post_card(channel, card)
        except DispatchError as exc:
            LOGGER.error("Could not post %s to %s: %s", issue.key, channel, exc)
            return False

        LOGGER.info("Posted %s to %s (%s)", issue.key, channel, issue.status or "no status")
        return True
