from __future__ import annotations

import json

import httpx
import pytest
from slack_sdk.socket_mode.request import SocketModeRequest

import app
from adapters.jira_client import JiraClient
from tests.fakes import FakeSocketClient, FakeWebClient, issue_payload

ENV = {
    "JIRA_URL": "https://jira.example.com",
    "JIRA_USER": "bot",
    "JIRA_PASSWORD": "hunter2",
    "SLACK_BOT_TOKEN": "xoxb-123",
    "SLACK_APP_TOKEN": "xapp-456",
}


def _jira_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/rest/api/2/project":
        return httpx.Response(200, json=[{"key": "PROJ"}, {"key": "OPS"}])
    if request.url.path == "/rest/api/2/issue/PROJ-1":
        return httpx.Response(200, json=issue_payload("PROJ-1"))
    return httpx.Response(404, json={"errorMessages": ["Issue does not exist"]})


def _failing_jira_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500, text="boom")


def _events_request(envelope_id: str, event: dict) -> SocketModeRequest:
    return SocketModeRequest(
        type="events_api",
        envelope_id=envelope_id,
        payload={"type": "event_callback", "event": event},
    )


class _Cli:
    """Patches the app's client factories and holds the `--config` argv."""

    def __init__(self, monkeypatch, config_path) -> None:
        self._monkeypatch = monkeypatch
        self.argv = ["--config", str(config_path)]

    def use_jira(self, handler) -> None:
        self._monkeypatch.setattr(
            app,
            "build_jira_client",
            lambda settings: JiraClient(
                base_url=settings.jira_url,
                username=settings.jira_user,
                password=settings.jira_password,
                transport=httpx.MockTransport(handler),
            ),
        )

    def use_slack(self, socket_client: FakeSocketClient) -> None:
        self._monkeypatch.setattr(app, "build_slack_client", lambda settings: socket_client)


@pytest.fixture
def cli(monkeypatch, tmp_path) -> _Cli:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TICKETSCOPE_CONFIG", raising=False)
    monkeypatch.delenv("SLACK_TOKEN", raising=False)
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setattr(app, "tprint", lambda *args, **kwargs: None)

    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"logging": {"enabled": False}}), encoding="utf-8")

    harness = _Cli(monkeypatch, config_path)
    harness.use_jira(_jira_handler)
    return harness


def test_projects_prints_keys_and_pattern(cli, monkeypatch, capsys) -> None:
    monkeypatch.delenv("SLACK_BOT_TOKEN")
    monkeypatch.delenv("SLACK_APP_TOKEN")

    app.main([*cli.argv, "projects"])

    lines = capsys.readouterr().out.splitlines()
    assert "1. PROJ" in lines
    assert "2. OPS" in lines
    assert r"Pattern: (?<!\w)(?P<key>PROJ|OPS)-(?P<number>[0-9]+)" in lines


def test_projects_exits_with_status_one_when_listing_fails(cli) -> None:
    cli.use_jira(_failing_jira_handler)
    with pytest.raises(SystemExit) as info:
        app.main([*cli.argv, "projects"])
    assert info.value.code == 1


def test_run_exits_with_status_one_when_listing_fails(cli) -> None:
    cli.use_jira(_failing_jira_handler)
    socket_client = FakeSocketClient(FakeWebClient())
    cli.use_slack(socket_client)

    with pytest.raises(SystemExit) as info:
        app.main([*cli.argv, "run"])

    assert info.value.code == 1
    assert socket_client.connected is False


def test_run_exits_with_status_one_on_missing_env(cli, monkeypatch) -> None:
    monkeypatch.delenv("JIRA_URL")
    with pytest.raises(SystemExit) as info:
        app.main([*cli.argv, "run"])
    assert info.value.code == 1


def test_run_exits_with_status_one_when_slack_rejects_token(cli) -> None:
    socket_client = FakeSocketClient(FakeWebClient(error="invalid_auth"))
    cli.use_slack(socket_client)

    with pytest.raises(SystemExit) as info:
        app.main([*cli.argv, "run"])

    assert info.value.code == 1
    assert socket_client.connected is False
    assert socket_client.closed is True


def test_run_posts_cards_then_stops_when_app_is_uninstalled(cli) -> None:
    web_client = FakeWebClient()
    socket_client = FakeSocketClient(
        web_client,
        requests=(
            _events_request(
                "env-1",
                {"type": "message", "channel": "C1", "user": "U1", "text": "see PROJ-1 and PROJ-404"},
            ),
            _events_request("env-2", {"type": "app_uninstalled"}),
        ),
    )
    cli.use_slack(socket_client)

    with pytest.raises(SystemExit) as info:
        app.main([*cli.argv, "run"])

    assert info.value.code == 1
    assert [message["channel"] for message in web_client.posted] == ["C1"]
    assert web_client.posted[0]["attachments"][0]["title"] == "PROJ-1"
    assert [response.envelope_id for response in socket_client.responses] == ["env-1", "env-2"]
    assert socket_client.closed is True
