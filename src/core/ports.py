"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the tracker and notification adapters
so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.models import NotificationCard


class TrackerPort(Protocol):
    """Tracker operations required by the core pipeline.

    Implementations raise `TransportError` when the tracker is unreachable and
    `IssueLookupError` on a non-success status.
    """

    async def list_projects(self) -> list[dict[str, Any]]:
        ...

    async def get_issue(self, issue_key: str) -> dict[str, Any]:
        ...


class NotifierPort(Protocol):
    """Notification operations required by the core pipeline.

    Implementations raise `DispatchError` when the chat platform rejects a post.
    """

    async def post_card(self, channel: str, card: NotificationCard) -> None:
        ...
