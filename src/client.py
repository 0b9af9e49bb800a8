"""Client factories for ticketscope.

We explicitly construct the Jira and Slack clients from Settings so it is
obvious which credentials each one uses and when sessions are opened.
The Slack clients must be built inside a running event loop.
"""

from __future__ import annotations

import logging

from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.web.async_client import AsyncWebClient

from adapters.jira_client import JiraClient
from settings import Settings

LOGGER = logging.getLogger(__name__)


def build_jira_client(settings: Settings) -> JiraClient:
    """Create the tracker client with basic auth."""

    LOGGER.info("Initializing Jira client for %s", settings.jira_url)
    return JiraClient(
        base_url=settings.jira_url,
        username=settings.jira_user,
        password=settings.jira_password,
        timeout_seconds=settings.jira_timeout_seconds,
    )


def build_slack_client(settings: Settings) -> SocketModeClient:
    """Create a Socket Mode client wrapping the bot's Web API client.

    The app-level token opens the socket; the bot token posts messages.
    """

    LOGGER.info("Initializing Slack client")
    web_client = AsyncWebClient(token=settings.slack_bot_token)
    return SocketModeClient(app_token=settings.slack_app_token, web_client=web_client)
