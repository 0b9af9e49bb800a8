"""Reference pattern construction and matching (core domain)."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from core.errors import PatternBuildError
from core.models import IssueReference

_KEY_RE = re.compile(r"[A-Za-z0-9_]+")


class ReferenceMatcher:
    """Compiled matcher for `KEY-NUMBER` tokens.

    Instances are immutable after construction and can be shared between
    concurrent tasks.
    """

    __slots__ = ("_keys", "_pattern")

    def __init__(self, keys: tuple[str, ...], pattern: Optional[re.Pattern]) -> None:
        self._keys = keys
        self._pattern = pattern

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    @property
    def pattern(self) -> Optional[str]:
        return self._pattern.pattern if self._pattern is not None else None

    def find_all(self, text: str) -> List[IssueReference]:
        """Return every reference in `text`, in order, including repeats."""

        if self._pattern is None or not text:
            return []
        return [
            IssueReference(project_key=m.group("key"), number=m.group("number"))
            for m in self._pattern.finditer(text)
        ]


def build_matcher(keys: Iterable[str]) -> ReferenceMatcher:
    """Compile a matcher from project keys.

    Keys are validated against the tracker's key alphabet and escaped before
    they are joined. An empty key list yields a matcher that matches nothing.
    """

    unique: List[str] = []
    for key in keys:
        if not isinstance(key, str) or not _KEY_RE.fullmatch(key):
            raise PatternBuildError(f"Invalid project key: {key!r}")
        if key not in unique:
            unique.append(key)

    if not unique:
        return ReferenceMatcher((), None)

    alternation = "|".join(re.escape(key) for key in unique)
    # The lookbehind rejects keys embedded in a longer word (XPROJ-1).
    source = rf"(?<!\w)(?P<key>{alternation})-(?P<number>[0-9]+)"
    try:
        compiled = re.compile(source)
    except re.error as exc:
        raise PatternBuildError(f"Cannot compile reference pattern: {exc}") from exc
    return ReferenceMatcher(tuple(unique), compiled)
