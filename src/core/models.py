"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to Slack or Jira specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

UNASSIGNED = "Unassigned"


@dataclass(frozen=True)
class IssueReference:
    """A `KEY-NUMBER` token extracted from message text.

    `number` is the matched digit string, kept verbatim (leading zeros
    included).
    """

    project_key: str
    number: str

    @property
    def key(self) -> str:
        return f"{self.project_key}-{self.number}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class Issue:
    """Resolved tracker issue, normalized for rendering."""

    key: str
    summary: str
    issue_type: str
    creator: str
    assignee: str
    priority: str
    status: str


@dataclass(frozen=True)
class NotificationCard:
    """Platform-neutral card rendered for one resolved issue."""

    title: str
    title_link: str
    text: str
    color: str
    icon_url: str
    sender_name: str
    fallback: str


@dataclass(frozen=True)
class MessageEvent:
    """A chat message as seen by the event loop."""

    channel: str
    text: str
    user: Optional[str] = None
    subtype: Optional[str] = None
    bot_id: Optional[str] = None
    ts: Optional[str] = None


@dataclass(frozen=True)
class InvalidAuthEvent:
    """The chat platform invalidated our credentials."""

    reason: str


@dataclass(frozen=True)
class OtherEvent:
    """Any event kind the loop does not act on."""

    kind: str


ChatEvent = Union[MessageEvent, InvalidAuthEvent, OtherEvent]
