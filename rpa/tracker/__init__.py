"""Jira version synchronisation."""

from rpa.tracker.client import Tracker
from rpa.tracker.errors import (
    SquashBlockedClosedIssues,
    SquashBlockedReleased,
    TrackerError,
    TrackerHttpError,
    TrackerVersionNotFound,
    UnsupportedVersionScheme,
    VersionAlreadyReleased,
)
from rpa.tracker.jira import JiraTracker
from rpa.tracker.model import TrackerIssue, TrackerVersion
from rpa.tracker.sync import (
    create_version_if_absent,
    release_version,
    release_version_and_squash_unreleased,
    repair_version_position,
)

__all__ = [
    "JiraTracker",
    "Tracker",
    "TrackerIssue",
    "TrackerVersion",
    # errors
    "SquashBlockedClosedIssues",
    "SquashBlockedReleased",
    "TrackerError",
    "TrackerHttpError",
    "TrackerVersionNotFound",
    "UnsupportedVersionScheme",
    "VersionAlreadyReleased",
    # sync
    "create_version_if_absent",
    "release_version",
    "release_version_and_squash_unreleased",
    "repair_version_position",
]
