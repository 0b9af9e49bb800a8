"""Chat event loop.

Consumes typed chat events, fans qualifying messages out to the message
processor, and stops on credential invalidation or on the shutdown token.
In-flight units are always drained before `run()` returns.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import AsyncIterable, AsyncIterator, Optional

from core.models import ChatEvent, InvalidAuthEvent, MessageEvent
from core.processor import MessageProcessor
from core.work import WorkTracker

LOGGER = logging.getLogger(__name__)

# Message subtypes that still carry text typed by a human.
USER_MESSAGE_SUBTYPES = frozenset({"thread_broadcast", "file_share", "me_message"})


class LoopExit(enum.Enum):
    AUTH_INVALIDATED = "auth_invalidated"
    STREAM_CLOSED = "stream_closed"
    SHUTDOWN = "shutdown"


def is_user_message(event: MessageEvent) -> bool:
    """True for plain user messages; bot posts and system messages are skipped."""

    if event.bot_id or event.subtype == "bot_message":
        return False
    if event.subtype is not None and event.subtype not in USER_MESSAGE_SUBTYPES:
        return False
    return bool(event.text and event.text.strip())


class EventLoop:
    """Long-lived consumer of the chat event stream."""

    def __init__(
        self,
        processor: MessageProcessor,
        events: AsyncIterable[ChatEvent],
        shutdown: Optional[asyncio.Event] = None,
    ) -> None:
        self._processor = processor
        self._events = events
        self._shutdown = shutdown or asyncio.Event()
        self._work = WorkTracker()

    @property
    def shutdown(self) -> asyncio.Event:
        return self._shutdown

    @property
    def in_flight(self) -> int:
        return len(self._work)

    async def run(self) -> LoopExit:
        iterator = self._events.__aiter__()
        try:
            while True:
                event = await self._next_event(iterator)
                if event is None:
                    return LoopExit.SHUTDOWN if self._shutdown.is_set() else LoopExit.STREAM_CLOSED

                if isinstance(event, MessageEvent):
                    if is_user_message(event):
                        self._work.spawn(
                            self._process(event),
                            name=f"message:{event.channel}:{event.ts or ''}",
                        )
                elif isinstance(event, InvalidAuthEvent):
                    LOGGER.error("Invalid credentials (%s); stopping", event.reason)
                    return LoopExit.AUTH_INVALIDATED
                # Other event kinds are ignored.
        finally:
            if len(self._work):
                LOGGER.info("Waiting for %s in-flight messages", len(self._work))
            await self._work.wait()

    async def _next_event(self, iterator: AsyncIterator[ChatEvent]) -> Optional[ChatEvent]:
        if self._shutdown.is_set():
            return None
        next_event = asyncio.ensure_future(iterator.__anext__())
        stop = asyncio.ensure_future(self._shutdown.wait())
        try:
            done, _ = await asyncio.wait({next_event, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop.cancel()
        if next_event not in done:
            next_event.cancel()
            return None
        try:
            return next_event.result()
        except StopAsyncIteration:
            return None

    async def _process(self, event: MessageEvent) -> None:
        try:
            await self._processor.handle(event.text, event.channel)
        except Exception:
            LOGGER.exception("Error while processing message in %s", event.channel)
