from __future__ import annotations

import pytest

from core.config import JIRA_ICON_URL, RenderOptions
from core.models import Issue
from core.rendering import (
    ATTENTION_COLOR,
    COMPLETE_COLOR,
    IN_PROGRESS_COLOR,
    render_card,
    status_color,
)


def _issue(**overrides) -> Issue:
    values = dict(
        key="PROJ-7",
        summary="Login <fails> & crashes",
        issue_type="Bug",
        creator="Reporter",
        assignee="Unassigned",
        priority="High",
        status="Done",
    )
    values.update(overrides)
    return Issue(**values)


@pytest.mark.parametrize("status", ["Open", "Reopened", "To Do"])
def test_in_progress_statuses(status: str) -> None:
    assert status_color(status) == IN_PROGRESS_COLOR


@pytest.mark.parametrize("status", ["Resolved", "Closed", "Done"])
def test_complete_statuses(status: str) -> None:
    assert status_color(status) == COMPLETE_COLOR


@pytest.mark.parametrize("status", ["Backlog", "done", "", "In Review", "Erledigt"])
def test_unknown_statuses_fall_back(status: str) -> None:
    assert status_color(status) == ATTENTION_COLOR


def test_render_card_fields() -> None:
    options = RenderOptions(tracker_base_url="https://jira.example.com/")
    card = render_card(_issue(), options)

    assert card.title == "PROJ-7"
    assert card.title_link == "https://jira.example.com/browse/PROJ-7"
    assert card.color == COMPLETE_COLOR
    assert card.icon_url == JIRA_ICON_URL
    assert card.sender_name == "Jira"
    assert card.text.splitlines() == [
        "*Login &lt;fails&gt; &amp; crashes*",
        "*Assignee* Unassigned",
        "*Priority* High",
    ]
    assert card.fallback == "PROJ-7: Login <fails> & crashes"


def test_render_card_uses_configured_branding() -> None:
    options = RenderOptions(
        tracker_base_url="https://jira.example.com",
        sender_name="Tracker",
        icon_url="https://example.com/icon.png",
    )
    card = render_card(_issue(status="Backlog"), options)
    assert card.sender_name == "Tracker"
    assert card.icon_url == "https://example.com/icon.png"
    assert card.color == ATTENTION_COLOR
