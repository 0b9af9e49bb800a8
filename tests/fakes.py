from __future__ import annotations

import asyncio
from typing import Any, Optional

from slack_sdk.errors import SlackApiError
from slack_sdk.socket_mode.request import SocketModeRequest

from core.config import RenderOptions
from core.errors import DispatchError, IssueLookupError
from core.matcher import build_matcher
from core.models import NotificationCard
from core.processor import MessageProcessor, ProcessingContext
from core.resolver import IssueResolver

BASE_URL = "https://jira.example.com"


def issue_payload(
    key: str,
    *,
    status: str = "Open",
    assignee: Optional[str] = "Alice",
    summary: str = "Fix the thing",
    priority: str = "Major",
) -> dict[str, Any]:
    return {
        "key": key,
        "fields": {
            "issuetype": {"name": "Bug"},
            "summary": summary,
            "creator": {"displayName": "Reporter"},
            "assignee": {"displayName": assignee} if assignee else None,
            "priority": {"name": priority},
            "status": {"name": status},
        },
    }


class FakeTracker:
    def __init__(
        self,
        issues: Optional[dict[str, dict[str, Any]]] = None,
        projects: Optional[list[dict[str, Any]]] = None,
        delay: float = 0.0,
    ) -> None:
        self.issues = issues or {}
        self.projects = projects or []
        self.delay = delay
        self.requested: list[str] = []

    async def list_projects(self) -> list[dict[str, Any]]:
        return self.projects

    async def get_issue(self, issue_key: str) -> dict[str, Any]:
        self.requested.append(issue_key)
        if self.delay:
            await asyncio.sleep(self.delay)
        else:
            await asyncio.sleep(0)
        if issue_key not in self.issues:
            raise IssueLookupError(404)
        return self.issues[issue_key]


class FakeNotifier:
    def __init__(self, fail_for: tuple[str, ...] = ()) -> None:
        self.sent: list[tuple[str, NotificationCard]] = []
        self._fail_for = fail_for

    async def post_card(self, channel: str, card: NotificationCard) -> None:
        await asyncio.sleep(0)
        if card.title in self._fail_for:
            raise DispatchError("channel_not_found")
        self.sent.append((channel, card))


def make_processor(
    tracker: FakeTracker, notifier: FakeNotifier, keys: tuple[str, ...] = ("PROJ",)
) -> MessageProcessor:
    return MessageProcessor(
        ProcessingContext(
            matcher=build_matcher(keys),
            resolver=IssueResolver(tracker),
            notifier=notifier,
            render_options=RenderOptions(tracker_base_url=BASE_URL),
        )
    )


class FakeWebClient:
    def __init__(self, error: Optional[str] = None) -> None:
        self.posted: list[dict] = []
        self._error = error

    async def chat_postMessage(self, **kwargs):
        if self._error:
            raise SlackApiError("failed", {"ok": False, "error": self._error})
        self.posted.append(kwargs)
        return {"ok": True}

    async def auth_test(self):
        if self._error:
            raise SlackApiError("failed", {"ok": False, "error": self._error})
        return {"ok": True, "user": "ticketscope"}


class FakeSocketClient:
    """Socket Mode stand-in; `connect()` replays `requests` to the listeners."""

    def __init__(self, web_client: FakeWebClient, requests: tuple[SocketModeRequest, ...] = ()) -> None:
        self.web_client = web_client
        self.socket_mode_request_listeners: list = []
        self.responses: list = []
        self.connected = False
        self.closed = False
        self._requests = requests

    async def connect(self) -> None:
        self.connected = True
        for request in self._requests:
            for listener in self.socket_mode_request_listeners:
                await listener(self, request)

    async def close(self) -> None:
        self.closed = True

    async def send_socket_mode_response(self, response) -> None:
        self.responses.append(response)
