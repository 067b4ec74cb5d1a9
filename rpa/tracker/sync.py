"""Keep Jira's project versions in step with the release history.

Four operations are offered:
- ``create_version_if_absent``: reuse an unreleased version or create it
- ``repair_version_position``: move a version so Jira's manual order matches
  version order
- ``release_version``: move open issues forward and mark a version released
- ``release_version_and_squash_unreleased``: additionally fold the unreleased
  versions between the released one and the next one into the next one

Nothing here retries. The squash checks both of its safety conditions before
the first write; once deleting has begun, a failure leaves Jira half-way and
the operator has to finish by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rpa.core.result import Err, Ok, Result
from rpa.output.console import ConsoleProtocol, Style
from rpa.semver import SemanticVersion, try_parse
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
from rpa.tracker.model import TrackerVersion
from rpa.tracker.ordering import KeyFunction, scheme_for

__all__ = [
    "PositionMove",
    "create_version_if_absent",
    "plan_position_repair",
    "release_version",
    "release_version_and_squash_unreleased",
    "repair_version_position",
]


def create_version_if_absent(
    tracker: Tracker,
    project: str,
    name: str,
    *,
    console: ConsoleProtocol,
) -> Result[str, TrackerError]:
    """Return the id of the unreleased version ``name``, creating it if needed."""
    versions = tracker.get_versions(project)
    if isinstance(versions, Err):
        return versions

    existing = next((v for v in versions.value if v.name == name), None)
    if existing is not None:
        if existing.released:
            return Err(VersionAlreadyReleased(name=name))
        console.print(f"Jira version '{name}' already exists", Style.DIM)
        return Ok(existing.id)

    console.print(f"Creating Jira version '{name}'", Style.DIM)
    created = tracker.create_version(project, name)
    if isinstance(created, Err):
        return created

    repaired = repair_version_position(tracker, created.value.id, project=project, console=console)
    if isinstance(repaired, Err):
        return repaired
    return Ok(created.value.id)


@dataclass(frozen=True, slots=True)
class PositionMove:
    """Where a version has to go; ``after`` None means the first position."""

    after: TrackerVersion | None


def plan_position_repair(
    versions: tuple[TrackerVersion, ...],
    target: TrackerVersion,
    key: KeyFunction,
) -> PositionMove | None:
    """Decide how to move ``target`` within Jira's order; None when it is in place.

    The target belongs right after the greatest version that sorts strictly
    before it. Versions without a key under ``key`` are skipped but stay in
    the sequence.
    """
    target_key = key(target.name)
    if target_key is None:
        raise ValueError(f"'{target.name}' has no ordering key under the chosen scheme")

    below: list[tuple[tuple[int, ...], int, TrackerVersion]] = []
    for index, version in enumerate(versions):
        if version.id == target.id:
            continue
        version_key = key(version.name)
        if version_key is not None and version_key < target_key:
            below.append((version_key, index, version))
    predecessor = max(below, key=lambda item: (item[0], item[1]))[2] if below else None

    position = next((i for i, v in enumerate(versions) if v.id == target.id), None)
    if position is None:
        current_before = versions[-1] if versions else None
    else:
        current_before = versions[position - 1] if position > 0 else None

    if predecessor is None:
        return None if current_before is None else PositionMove(after=None)
    if current_before is not None and current_before.id == predecessor.id:
        return None
    return PositionMove(after=predecessor)


def repair_version_position(
    tracker: Tracker,
    version_id: str,
    *,
    project: str | None = None,
    console: ConsoleProtocol,
) -> Result[bool, TrackerError]:
    """Move ``version_id`` to its place in version order.

    The version's own project is used; ``project`` is the fallback when Jira
    does not report one. Returns whether a move was made, so a second call
    on an unchanged project returns ``Ok(False)``.
    """
    fetched = tracker.get_version(version_id)
    if isinstance(fetched, Err):
        return fetched
    target = fetched.value

    key = scheme_for(target.name)
    if key is None:
        return Err(UnsupportedVersionScheme(name=target.name))

    owner = target.project_id or project
    if owner is None:
        return Err(TrackerVersionNotFound(version=f"{target.name} (no project)"))

    versions = tracker.get_versions(owner)
    if isinstance(versions, Err):
        return versions

    move = plan_position_repair(versions.value, target, key)
    if move is None:
        return Ok(False)

    if move.after is None:
        console.print(f"Moving Jira version '{target.name}' to the first position", Style.DIM)
        moved = tracker.move_version_first(target.id)
    else:
        if move.after.self_link is None:
            return Err(
                TrackerHttpError(status=0, url="", message=f"version '{move.after.name}' has no self link")
            )
        console.print(f"Moving Jira version '{target.name}' after '{move.after.name}'", Style.DIM)
        moved = tracker.move_version(target.id, move.after.self_link)

    if isinstance(moved, Err):
        return moved
    return Ok(True)


def release_version(
    tracker: Tracker,
    version_id: str,
    next_version_id: str | None,
    *,
    today: date | None = None,
    console: ConsoleProtocol,
) -> Result[None, TrackerError]:
    """Move open issues of ``version_id`` to ``next_version_id``, then release it.

    Closed issues stay. ``next_version_id`` None (or equal to ``version_id``)
    releases without moving anything.
    """
    if next_version_id is not None and next_version_id != version_id:
        open_issues = tracker.find_all_non_closed_issues(version_id)
        if isinstance(open_issues, Err):
            return open_issues
        if open_issues.value:
            console.print(f"Moving {len(open_issues.value)} open issue(s) to the next version", Style.DIM)
            moved = tracker.move_issues_to_version(open_issues.value, version_id, next_version_id)
            if isinstance(moved, Err):
                return moved

    return tracker.release_version(version_id, today or date.today())


def release_version_and_squash_unreleased(
    tracker: Tracker,
    version_id: str,
    next_version_id: str,
    project: str,
    *,
    today: date | None = None,
    move_open_issues: bool = True,
    console: ConsoleProtocol,
) -> Result[None, TrackerError]:
    """Release ``version_id`` and fold the unreleased versions up to ``next_version_id``.

    Versions whose names are not semantic versions are left out of the
    ordering, so they are neither squashed nor checked.
    """
    final_next = next_version_id if move_open_issues else None
    if version_id == next_version_id:
        return release_version(tracker, version_id, final_next, today=today, console=console)

    versions = tracker.get_versions(project)
    if isinstance(versions, Err):
        return versions

    parsed: list[tuple[SemanticVersion, TrackerVersion]] = []
    for version in versions.value:
        semantic = try_parse(version.name)
        if semantic is not None:
            parsed.append((semantic, version))
    ordered = [version for _, version in sorted(parsed, key=lambda item: item[0])]

    current_index = next((i for i, v in enumerate(ordered) if v.id == version_id), None)
    next_index = next((i for i, v in enumerate(ordered) if v.id == next_version_id), None)
    if current_index is None:
        return Err(TrackerVersionNotFound(version=version_id))
    if next_index is None:
        return Err(TrackerVersionNotFound(version=next_version_id))

    current = ordered[current_index]
    upcoming = ordered[next_index]
    squash_set = ordered[current_index + 1 : next_index]

    released = tuple(v.name for v in squash_set if v.released)
    if released:
        return Err(SquashBlockedReleased(version=current.name, next_version=upcoming.name, released=released))

    closed_keys: list[str] = []
    for version in squash_set:
        closed = tracker.find_all_closed_issues(version.id)
        if isinstance(closed, Err):
            return closed
        closed_keys.extend(issue.key for issue in closed.value)
    if closed_keys:
        return Err(SquashBlockedClosedIssues(version=current.name, issue_keys=tuple(closed_keys)))

    for version in squash_set:
        squashed = _squash_into(tracker, version, next_version_id, console=console)
        if isinstance(squashed, Err):
            console.warning(
                f"Squashing stopped at Jira version '{version.name}'; "
                "already squashed versions are gone and must be checked manually"
            )
            return squashed

    return release_version(tracker, version_id, final_next, today=today, console=console)


def _squash_into(
    tracker: Tracker,
    version: TrackerVersion,
    next_version_id: str,
    *,
    console: ConsoleProtocol,
) -> Result[None, TrackerError]:
    open_issues = tracker.find_all_non_closed_issues(version.id)
    if isinstance(open_issues, Err):
        return open_issues
    moved = tracker.move_issues_to_version(open_issues.value, version.id, next_version_id)
    if isinstance(moved, Err):
        return moved
    console.print(f"Deleting squashed Jira version '{version.name}'", Style.DIM)
    return tracker.delete_version(version.id)
