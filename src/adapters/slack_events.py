"""Slack Socket Mode event source.

Acknowledges every envelope, maps Events API payloads to core events, and
feeds them into an `EventStream` consumed by the core event loop. Connection
management and reconnection are left to `slack_sdk`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse

from adapters.slack_mapper import auth_error_code, event_from_payload
from core.errors import StartupFatalError
from core.models import ChatEvent, InvalidAuthEvent

LOGGER = logging.getLogger(__name__)

_CLOSED = object()


class EventStream:
    """Async iterator over chat events backed by an unbounded queue."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def put(self, event: ChatEvent) -> None:
        if not self._closed:
            self._queue.put_nowait(event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> ChatEvent:
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the sentinel so later readers also stop.
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return item


class SlackEventSource:
    """Bridge between a Socket Mode client and an EventStream."""

    def __init__(self, client: SocketModeClient, stream: Optional[EventStream] = None) -> None:
        self._client = client
        self._stream = stream or EventStream()

    @property
    def stream(self) -> EventStream:
        return self._stream

    async def start(self) -> None:
        """Validate the bot token and open the socket.

        Rejected credentials are reported as an `InvalidAuthEvent` on the
        stream; network failures at this stage are fatal.
        """

        try:
            identity = await self._client.web_client.auth_test()
            LOGGER.info("Authenticated to Slack as %s", identity.get("user") or "unknown")
            self._client.socket_mode_request_listeners.append(self._on_request)
            await self._client.connect()
        except SlackApiError as exc:
            code = auth_error_code(exc)
            if code is None:
                raise StartupFatalError(f"Slack connection failed: {exc}") from exc
            self._stream.put(InvalidAuthEvent(reason=code))
        except aiohttp.ClientError as exc:
            raise StartupFatalError(f"Slack connection failed: {exc!r}") from exc

    async def close(self) -> None:
        self._stream.close()
        await self._client.close()

    async def _on_request(self, client: SocketModeClient, request: SocketModeRequest) -> None:
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=request.envelope_id))
        if request.type != "events_api":
            LOGGER.debug("Ignoring Socket Mode request of type %s", request.type)
            return
        self._stream.put(event_from_payload(request.payload))
