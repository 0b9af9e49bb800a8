"""Configuration for ticketscope.

Secrets (tracker credentials, Slack tokens) come from the environment, with
`.env` support via python-dotenv. Non-secret tunables (timeouts, card
branding, logging) live in an optional JSON file so they can be edited
without touching Python.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import DEFAULT_SENDER_NAME, JIRA_ICON_URL, RenderOptions
from core.errors import ConfigError

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Default location of the optional JSON config; override with TICKETSCOPE_CONFIG.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

# Environment variables whose values are masked in log output by default.
DEFAULT_REDACTED_ENV = ("JIRA_PASSWORD", "SLACK_BOT_TOKEN", "SLACK_APP_TOKEN", "SLACK_TOKEN")


@dataclass(frozen=True)
class Settings:
    jira_url: str
    jira_user: str
    jira_password: str
    slack_bot_token: str
    slack_app_token: str
    jira_timeout_seconds: float = 10.0
    sender_name: str = DEFAULT_SENDER_NAME
    icon_url: str = JIRA_ICON_URL
    logging: dict[str, Any] = field(default_factory=dict)

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            tracker_base_url=self.jira_url,
            sender_name=self.sender_name,
            icon_url=self.icon_url,
        )


def _load_json_config(path: Optional[str]) -> dict:
    """Load the JSON config.

    An explicitly requested file must exist; the default file is optional.
    """

    explicit = path is not None
    path = path or CONFIG_PATH
    if not os.path.exists(path):
        if explicit:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must hold a JSON object: {path}")
    return data


def _section(config: dict, name: str) -> dict:
    # An absent or null section means defaults.
    value = config.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{name}' must be a JSON object")
    return value


def load_settings(config_path: Optional[str] = None, require_slack: bool = True) -> Settings:
    """Build Settings from the environment and the optional JSON config.

    `require_slack=False` allows tracker-only commands to run without Slack
    tokens.
    """

    load_dotenv()
    config = _load_json_config(config_path or os.getenv("TICKETSCOPE_CONFIG"))

    env = {
        "JIRA_URL": os.getenv("JIRA_URL", ""),
        "JIRA_USER": os.getenv("JIRA_USER", ""),
        "JIRA_PASSWORD": os.getenv("JIRA_PASSWORD", ""),
        # SLACK_TOKEN is the legacy name for the bot token.
        "SLACK_BOT_TOKEN": os.getenv("SLACK_BOT_TOKEN") or os.getenv("SLACK_TOKEN", ""),
        "SLACK_APP_TOKEN": os.getenv("SLACK_APP_TOKEN", ""),
    }
    required = ["JIRA_URL", "JIRA_USER", "JIRA_PASSWORD"]
    if require_slack:
        required += ["SLACK_BOT_TOKEN", "SLACK_APP_TOKEN"]
    missing = [name for name in required if not env[name]]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    jira_cfg = _section(config, "jira")
    notifications = _section(config, "notifications")
    try:
        timeout = float(jira_cfg.get("timeout_seconds", 10))
    except (TypeError, ValueError) as exc:
        raise ConfigError("jira.timeout_seconds must be a number") from exc

    return Settings(
        jira_url=env["JIRA_URL"].rstrip("/"),
        jira_user=env["JIRA_USER"],
        jira_password=env["JIRA_PASSWORD"],
        slack_bot_token=env["SLACK_BOT_TOKEN"],
        slack_app_token=env["SLACK_APP_TOKEN"],
        jira_timeout_seconds=timeout,
        sender_name=notifications.get("sender_name", DEFAULT_SENDER_NAME),
        icon_url=notifications.get("icon_url", JIRA_ICON_URL),
        logging=_section(config, "logging"),
    )
