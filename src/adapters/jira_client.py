"""Jira REST API (v2) adapter.

Implements the core TrackerPort with an `httpx.AsyncClient` using basic
auth. Each call is a single round trip: no retries, no caching.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from core.errors import IssueLookupError, TransportError

LOGGER = logging.getLogger(__name__)

PROJECTS_PATH = "/rest/api/2/project"
ISSUE_PATH = "/rest/api/2/issue/"
DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = "ticketscope/0.1"


class JiraClient:
    """Thin async Jira client that satisfies the TrackerPort contract."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            auth=httpx.BasicAuth(username, password),
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self._http.get(path)
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {path} failed: {exc!r}") from exc

        if response.status_code != httpx.codes.OK:
            LOGGER.debug("GET %s returned %s", path, response.status_code)
            raise IssueLookupError(response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"GET {path} returned invalid JSON") from exc

    async def list_projects(self) -> list[dict[str, Any]]:
        """Return the raw project listing (`[{id, key, ...}]`)."""

        data = await self._get_json(PROJECTS_PATH)
        if not isinstance(data, list):
            raise TransportError("Project listing is not a JSON array")
        return data

    async def get_issue(self, issue_key: str) -> dict[str, Any]:
        """Return the raw issue payload for `issue_key`."""

        data = await self._get_json(ISSUE_PATH + quote(issue_key, safe=""))
        return data if isinstance(data, dict) else {}
