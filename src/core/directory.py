"""Project directory: the set of project keys known at startup."""

from __future__ import annotations

import logging
from typing import List

from core.errors import ResolutionError, StartupFatalError
from core.ports import TrackerPort

LOGGER = logging.getLogger(__name__)


async def load_projects(tracker: TrackerPort) -> List[str]:
    """Fetch all project keys once, preserving the tracker's order.

    Any failure is fatal: serving with a partial key list would silently
    ignore mentions.
    """

    try:
        projects = await tracker.list_projects()
    except ResolutionError as exc:
        raise StartupFatalError(f"Cannot load tracker projects: {exc}") from exc

    if not isinstance(projects, list):
        raise StartupFatalError("Tracker project listing is not a list")

    keys: List[str] = []
    for project in projects:
        key = project.get("key") if isinstance(project, dict) else None
        if not key or key in keys:
            continue
        keys.append(str(key))

    if not keys:
        LOGGER.warning("Tracker returned no projects; no references will match")
    else:
        LOGGER.info("%s projects are loaded", len(keys))
    return keys
