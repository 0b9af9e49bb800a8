"""Error taxonomy shared by the core and its adapters.

Resolution and dispatch errors are contained per unit of work; only the
startup and authentication errors are allowed to stop the process.
"""

from __future__ import annotations

from typing import Optional


class TicketscopeError(Exception):
    """Base exception for ticketscope errors."""


class ConfigError(TicketscopeError):
    """Required configuration is missing or malformed."""


class StartupFatalError(TicketscopeError):
    """The watcher cannot start serving (e.g. project listing failed)."""


class PatternBuildError(TicketscopeError):
    """A project key cannot be turned into a safe reference pattern."""


class ResolutionError(TicketscopeError):
    """Base class for failures while resolving one issue reference."""


class TransportError(ResolutionError):
    """The tracker could not be reached or returned an unreadable body."""


class IssueLookupError(ResolutionError):
    """The tracker answered with a non-success status code."""

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"tracker returned status {status_code}")


class IssueNotFoundError(ResolutionError):
    """The tracker answered successfully but the payload holds no issue."""


class DispatchError(TicketscopeError):
    """Posting a notification to the chat platform failed."""


class AuthInvalidatedError(TicketscopeError):
    """The chat platform rejected our credentials."""
