"""Slack notification adapter.

Posts rendered cards to the channel the mention came from.
"""

from __future__ import annotations

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from adapters.notification_formatting import card_to_message
from core.errors import DispatchError
from core.models import NotificationCard


class SlackNotifier:
    """Notifier adapter that posts cards via `chat.postMessage`."""

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def post_card(self, channel: str, card: NotificationCard) -> None:
        """Send one card; any Slack or network failure becomes a DispatchError."""

        try:
            await self._client.chat_postMessage(**card_to_message(channel, card))
        except SlackApiError as exc:
            error = exc.response.get("error") if exc.response is not None else None
            raise DispatchError(f"Slack API error: {error or exc}") from exc
        except aiohttp.ClientError as exc:
            raise DispatchError(f"Slack request failed: {exc!r}") from exc
