"""Slack-to-core event mapping adapter.

This keeps Slack payload details out of the core event loop.
"""

from __future__ import annotations

from typing import Any, Optional

from slack_sdk.errors import SlackApiError

from core.models import ChatEvent, InvalidAuthEvent, MessageEvent, OtherEvent

# Web API error codes that mean our tokens are no longer usable.
AUTH_ERROR_CODES = frozenset(
    {"invalid_auth", "not_authed", "account_inactive", "token_revoked", "token_expired"}
)


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def auth_error_code(exc: SlackApiError) -> Optional[str]:
    """Return the Slack error code if `exc` is an authentication failure."""

    code = exc.response.get("error") if exc.response is not None else None
    return code if code in AUTH_ERROR_CODES else None


def event_from_payload(payload: dict[str, Any]) -> ChatEvent:
    """Map one Events API envelope payload to a core chat event."""

    event = payload.get("event") if isinstance(payload, dict) else None
    if not isinstance(event, dict):
        return OtherEvent(kind=str((payload or {}).get("type") or "unknown"))

    kind = str(event.get("type") or "unknown")
    if kind == "message":
        return MessageEvent(
            channel=str(event.get("channel") or ""),
            text=event.get("text") if isinstance(event.get("text"), str) else "",
            user=_optional_str(event.get("user")),
            subtype=_optional_str(event.get("subtype")),
            bot_id=_optional_str(event.get("bot_id")),
            ts=_optional_str(event.get("ts")),
        )
    if kind == "app_uninstalled":
        return InvalidAuthEvent(reason=kind)
    if kind == "tokens_revoked":
        # Only a revoked bot token concerns us; user tokens come and go.
        tokens = event.get("tokens") or {}
        if isinstance(tokens, dict) and tokens.get("bot"):
            return InvalidAuthEvent(reason=kind)
    return OtherEvent(kind=kind)
