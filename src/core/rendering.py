"""Notification rendering (core domain).

Maps issue status to a severity color and builds the card posted back to
the channel. Text uses Slack-style mrkdwn since that is the only surface.
"""

from __future__ import annotations

from core.config import RenderOptions
from core.models import Issue, NotificationCard

BLUE = "#496686"
GREEN = "#048A25"
YELLOW = "#FFD442"

IN_PROGRESS_COLOR = BLUE
COMPLETE_COLOR = GREEN
ATTENTION_COLOR = YELLOW

_STATUS_COLORS = {
    "Open": IN_PROGRESS_COLOR,
    "Reopened": IN_PROGRESS_COLOR,
    "To Do": IN_PROGRESS_COLOR,
    "Resolved": COMPLETE_COLOR,
    "Closed": COMPLETE_COLOR,
    "Done": COMPLETE_COLOR,
}


def status_color(status: str) -> str:
    """Return the card color for a status name (case-sensitive)."""

    return _STATUS_COLORS.get(status, ATTENTION_COLOR)


def escape_mrkdwn(value: str) -> str:
    """Escape the three control characters Slack mrkdwn reserves."""

    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def issue_link(base_url: str, issue_key: str) -> str:
    return f"{base_url.rstrip('/')}/browse/{issue_key}"


def render_card(issue: Issue, options: RenderOptions) -> NotificationCard:
    """Render one resolved issue as a notification card."""

    summary = escape_mrkdwn(issue.summary)
    lines = [
        f"*{summary}*" if summary else "",
        f"*Assignee* {escape_mrkdwn(issue.assignee)}",
        f"*Priority* {escape_mrkdwn(issue.priority)}",
    ]
    fallback = f"{issue.key}: {issue.summary}" if issue.summary else issue.key

    return NotificationCard(
        title=issue.key,
        title_link=issue_link(options.tracker_base_url, issue.key),
        text="\n".join(line for line in lines if line),
        color=status_color(issue.status),
        icon_url=options.icon_url,
        sender_name=options.sender_name,
        fallback=fallback,
    )
