from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class TrackerVersion:
    """A Jira project version ("fix version")."""

    id: str
    name: str
    released: bool = False
    release_date: date | None = None
    project_id: str | None = None
    # REST link of the version; Jira's move API positions versions "after" it.
    self_link: str | None = None


@dataclass(frozen=True, slots=True)
class TrackerIssue:
    id: str
    key: str
    summary: str = ""
    fix_version_ids: tuple[str, ...] = ()
