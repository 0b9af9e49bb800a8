"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

JIRA_ICON_URL = "https://globus.atlassian.net/images/64jira.png"
DEFAULT_SENDER_NAME = "Jira"


@dataclass(frozen=True)
class RenderOptions:
    """Settings consumed by the notification renderer."""

    tracker_base_url: str
    sender_name: str = DEFAULT_SENDER_NAME
    icon_url: str = JIRA_ICON_URL
