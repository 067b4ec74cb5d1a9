from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from rpa.core.result import Result
from rpa.tracker.errors import TrackerError
from rpa.tracker.model import TrackerIssue, TrackerVersion

__all__ = ["Tracker"]


class Tracker(Protocol):
    """Version and issue operations of the issue tracker.

    ``get_versions`` returns versions in the tracker's own (manually ordered)
    sequence. ``project`` may be a project key or a project id.
    """

    def create_version(self, project: str, name: str) -> Result[TrackerVersion, TrackerError]: ...

    def get_versions(self, project: str) -> Result[tuple[TrackerVersion, ...], TrackerError]: ...

    def get_version(self, version_id: str) -> Result[TrackerVersion, TrackerError]: ...

    def move_version(self, version_id: str, after_self_link: str) -> Result[None, TrackerError]: ...

    def move_version_first(self, version_id: str) -> Result[None, TrackerError]: ...

    def release_version(self, version_id: str, release_date: date) -> Result[None, TrackerError]: ...

    def delete_version(self, version_id: str) -> Result[None, TrackerError]: ...

    def find_all_non_closed_issues(self, version_id: str) -> Result[tuple[TrackerIssue, ...], TrackerError]: ...

    def find_all_closed_issues(self, version_id: str) -> Result[tuple[TrackerIssue, ...], TrackerError]: ...

    def move_issues_to_version(
        self, issues: Sequence[TrackerIssue], from_version_id: str, to_version_id: str
    ) -> Result[None, TrackerError]:
        """Replace ``from_version_id`` by ``to_version_id`` in each issue's fix versions."""
        ...
