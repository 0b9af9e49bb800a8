"""Slack formatting for rendered notification cards.

Keeping the attachment layout here keeps the notifier free of payload
details and makes the shape easy to test.
"""

from __future__ import annotations

from typing import Any

from core.models import NotificationCard


def card_to_attachment(card: NotificationCard) -> dict[str, Any]:
    """Return the legacy-attachment dict for one card."""

    return {
        "fallback": card.fallback,
        "title": card.title,
        "title_link": card.title_link,
        "text": card.text,
        "color": card.color,
        "mrkdwn_in": ["text", "pretext"],
    }


def card_to_message(channel: str, card: NotificationCard) -> dict[str, Any]:
    """Return the `chat.postMessage` arguments for one card."""

    return {
        "channel": channel,
        "attachments": [card_to_attachment(card)],
        "username": card.sender_name,
        "icon_url": card.icon_url,
    }
