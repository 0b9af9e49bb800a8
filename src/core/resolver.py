"""Issue resolution: fetch one issue and normalize its payload."""

from __future__ import annotations

from typing import Any

from core.errors import IssueNotFoundError
from core.models import UNASSIGNED, Issue, IssueReference
from core.ports import TrackerPort


def _name(value: Any, field: str = "name") -> str:
    if isinstance(value, dict):
        return str(value.get(field) or "")
    return ""


def parse_issue(payload: Any) -> Issue:
    """Build an `Issue` from a Jira issue payload.

    Raises `IssueNotFoundError` when the payload carries no issue key. A
    missing assignee is reported as "Unassigned".
    """

    if not isinstance(payload, dict) or not payload.get("key"):
        raise IssueNotFoundError("no issue found")

    fields = payload.get("fields")
    if not isinstance(fields, dict):
        fields = {}
    assignee = _name(fields.get("assignee"), "displayName") or UNASSIGNED

    return Issue(
        key=str(payload["key"]),
        summary=str(fields.get("summary") or ""),
        issue_type=_name(fields.get("issuetype")),
        creator=_name(fields.get("creator"), "displayName"),
        assignee=assignee,
        priority=_name(fields.get("priority")),
        status=_name(fields.get("status")),
    )


class IssueResolver:
    """Resolve references through the tracker, one round trip each."""

    def __init__(self, tracker: TrackerPort) -> None:
        self._tracker = tracker

    async def resolve(self, reference: IssueReference) -> Issue:
        payload = await self._tracker.get_issue(reference.key)
        return parse_issue(payload)
