"""Tests for tracker/sync.py."""

from __future__ import annotations

from datetime import date

import pytest

from rpa.core.result import Err, Ok
from rpa.output.console import MockConsole
from rpa.test.fakes import FakeTracker
from rpa.tracker.errors import (
    SquashBlockedClosedIssues,
    SquashBlockedReleased,
    TrackerHttpError,
    UnsupportedVersionScheme,
    VersionAlreadyReleased,
)
from rpa.tracker.model import TrackerVersion
from rpa.tracker.ordering import semantic_key
from rpa.tracker.sync import (
    PositionMove,
    create_version_if_absent,
    plan_position_repair,
    release_version,
    release_version_and_squash_unreleased,
    repair_version_position,
)

TODAY = date(2024, 6, 1)


def _versions(*names: str) -> tuple[TrackerVersion, ...]:
    return tuple(TrackerVersion(id=str(i), name=n, self_link=f"link/{i}") for i, n in enumerate(names))


# =============================================================================
# Position repair
# =============================================================================


class TestPlanPositionRepair:
    """Tests for plan_position_repair()."""

    def test_move_after_greatest_smaller(self) -> None:
        versions = _versions("1.0.0", "1.1.0", "2.0.0", "1.2.0")

        move = plan_position_repair(versions, versions[3], semantic_key)

        assert move == PositionMove(after=versions[1])

    def test_in_place(self) -> None:
        versions = _versions("1.0.0", "1.1.0", "1.2.0", "2.0.0")

        assert plan_position_repair(versions, versions[2], semantic_key) is None

    def test_smallest_moves_first(self) -> None:
        versions = _versions("1.0.0", "2.0.0", "0.9.0")

        assert plan_position_repair(versions, versions[2], semantic_key) == PositionMove(after=None)

    def test_smallest_already_first(self) -> None:
        versions = _versions("0.9.0", "2.0.0", "1.0.0")

        assert plan_position_repair(versions, versions[0], semantic_key) is None

    def test_tie_picks_the_later_version(self) -> None:
        versions = _versions("1.1.0", "1.5.0", "2.0.0", "1.1.0")

        assert plan_position_repair(versions, versions[1], semantic_key) == PositionMove(after=versions[3])

    def test_unparsable_versions_are_skipped(self) -> None:
        versions = _versions("1.0.0", "Backlog", "1.1.0")

        assert plan_position_repair(versions, versions[2], semantic_key) == PositionMove(after=versions[0])

    def test_prerelease_goes_before_final(self) -> None:
        versions = _versions("1.2.0", "1.3.0", "1.3.0-rc.1")

        assert plan_position_repair(versions, versions[2], semantic_key) == PositionMove(after=versions[0])

    def test_target_without_key(self) -> None:
        versions = _versions("Backlog")

        with pytest.raises(ValueError):
            plan_position_repair(versions, versions[0], semantic_key)


class TestRepairVersionPosition:
    """Tests for repair_version_position()."""

    def test_moves_once(self) -> None:
        """A second repair of an unchanged project changes nothing."""
        tracker = FakeTracker()
        for name in ("1.0.0", "2.0.0", "1.5.0"):
            tracker.add_version(name)
        target = tracker.by_name("1.5.0")

        first = repair_version_position(tracker, target.id, console=MockConsole())
        second = repair_version_position(tracker, target.id, console=MockConsole())

        assert first == Ok(True)
        assert second == Ok(False)
        assert tracker.names() == ["1.0.0", "1.5.0", "2.0.0"]

    def test_moves_first(self) -> None:
        tracker = FakeTracker()
        for name in ("1.0.0", "0.1.0"):
            tracker.add_version(name)

        assert repair_version_position(tracker, tracker.by_name("0.1.0").id, console=MockConsole()) == Ok(True)
        assert tracker.names() == ["0.1.0", "1.0.0"]

    def test_dotted_scheme(self) -> None:
        tracker = FakeTracker()
        for name in ("1.0.0.0", "1.2.0.0", "1.1.0.0"):
            tracker.add_version(name)

        assert repair_version_position(tracker, tracker.by_name("1.1.0.0").id, console=MockConsole()) == Ok(True)
        assert tracker.names() == ["1.0.0.0", "1.1.0.0", "1.2.0.0"]

    def test_unsupported_scheme(self) -> None:
        tracker = FakeTracker()
        sprint = tracker.add_version("Sprint 5")

        result = repair_version_position(tracker, sprint.id, console=MockConsole())

        assert result == Err(UnsupportedVersionScheme(name="Sprint 5"))


# =============================================================================
# Creation
# =============================================================================


class TestCreateVersionIfAbsent:
    """Tests for create_version_if_absent()."""

    def test_existing_unreleased_is_reused(self) -> None:
        tracker = FakeTracker()
        existing = tracker.add_version("1.3.0")

        assert create_version_if_absent(tracker, "RPA", "1.3.0", console=MockConsole()) == Ok(existing.id)
        assert tracker.calls == []

    def test_existing_released_fails(self) -> None:
        tracker = FakeTracker()
        tracker.add_version("1.3.0", released=True)

        result = create_version_if_absent(tracker, "RPA", "1.3.0", console=MockConsole())

        assert result == Err(VersionAlreadyReleased(name="1.3.0"))
        assert "got already released" in str(result.error)

    def test_created_version_is_positioned(self) -> None:
        tracker = FakeTracker()
        tracker.add_version("1.0.0")
        tracker.add_version("2.0.0")

        result = create_version_if_absent(tracker, "RPA", "1.1.0", console=MockConsole())

        assert isinstance(result, Ok)
        assert tracker.by_name("1.1.0").id == result.value
        assert tracker.names() == ["1.0.0", "1.1.0", "2.0.0"]

    def test_creation_failure(self) -> None:
        tracker = FakeTracker(failing={"create_version": TrackerHttpError(status=400, url="version", message="bad")})

        assert isinstance(create_version_if_absent(tracker, "RPA", "1.1.0", console=MockConsole()), Err)


# =============================================================================
# Releasing
# =============================================================================


class TestReleaseVersion:
    """Tests for release_version()."""

    def test_moves_open_issues_only(self) -> None:
        tracker = FakeTracker()
        current = tracker.add_version("1.3.0")
        upcoming = tracker.add_version("1.4.0")
        tracker.add_issue("RPA-1", current)
        tracker.add_issue("RPA-2", current, closed=True)

        result = release_version(tracker, current.id, upcoming.id, today=TODAY, console=MockConsole())

        assert result == Ok(None)
        assert tracker.issue_versions("RPA-1") == (upcoming.id,)
        assert tracker.issue_versions("RPA-2") == (current.id,)
        released = tracker.by_name("1.3.0")
        assert released.released is True
        assert released.release_date == TODAY

    def test_without_next_moves_nothing(self) -> None:
        tracker = FakeTracker()
        current = tracker.add_version("1.3.0")
        tracker.add_issue("RPA-1", current)

        assert release_version(tracker, current.id, None, today=TODAY, console=MockConsole()) == Ok(None)
        assert tracker.issue_versions("RPA-1") == (current.id,)
        assert not any(call[0] == "move issues" for call in tracker.calls)


class TestSquash:
    """Tests for release_version_and_squash_unreleased()."""

    def _project(self) -> FakeTracker:
        tracker = FakeTracker()
        for name in ("1.2.0", "1.3.0", "Backlog", "1.3.1", "1.4.0", "2.0.0", "2.1.0"):
            tracker.add_version(name, released=name == "1.2.0")
        return tracker

    def test_squashes_versions_between(self) -> None:
        tracker = self._project()
        current, upcoming = tracker.by_name("1.3.0"), tracker.by_name("2.0.0")
        tracker.add_issue("RPA-1", current)
        tracker.add_issue("RPA-2", tracker.by_name("1.3.1"))
        tracker.add_issue("RPA-3", tracker.by_name("1.4.0"))

        result = release_version_and_squash_unreleased(
            tracker, current.id, upcoming.id, "RPA", today=TODAY, console=MockConsole()
        )

        assert result == Ok(None)
        assert tracker.names() == ["1.2.0", "1.3.0", "Backlog", "2.0.0", "2.1.0"]
        for key in ("RPA-1", "RPA-2", "RPA-3"):
            assert tracker.issue_versions(key) == (upcoming.id,)
        assert tracker.by_name("1.3.0").released is True

    def test_released_version_in_between_blocks(self) -> None:
        tracker = self._project()
        tracker.release_version(tracker.by_name("1.3.1").id, TODAY)
        tracker.calls.clear()

        result = release_version_and_squash_unreleased(
            tracker, tracker.by_name("1.3.0").id, tracker.by_name("2.0.0").id, "RPA", console=MockConsole()
        )

        assert result == Err(SquashBlockedReleased(version="1.3.0", next_version="2.0.0", released=("1.3.1",)))
        assert tracker.calls == []

    def test_closed_issues_in_between_block(self) -> None:
        tracker = self._project()
        tracker.add_issue("RPA-9", tracker.by_name("1.4.0"), closed=True)

        result = release_version_and_squash_unreleased(
            tracker, tracker.by_name("1.3.0").id, tracker.by_name("2.0.0").id, "RPA", console=MockConsole()
        )

        assert result == Err(SquashBlockedClosedIssues(version="1.3.0", issue_keys=("RPA-9",)))
        assert tracker.calls == []
        assert "1.4.0" in tracker.names()

    def test_released_check_comes_before_closed_issue_check(self) -> None:
        tracker = self._project()
        tracker.add_issue("RPA-9", tracker.by_name("1.4.0"), closed=True)
        tracker.release_version(tracker.by_name("1.3.1").id, TODAY)

        result = release_version_and_squash_unreleased(
            tracker, tracker.by_name("1.3.0").id, tracker.by_name("2.0.0").id, "RPA", console=MockConsole()
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, SquashBlockedReleased)

    def test_same_version_just_releases(self) -> None:
        tracker = self._project()
        current = tracker.by_name("1.3.0")

        result = release_version_and_squash_unreleased(tracker, current.id, current.id, "RPA", console=MockConsole())

        assert result == Ok(None)
        assert tracker.calls == [("release", current.id)]

    def test_open_issues_stay_when_not_moving(self) -> None:
        tracker = self._project()
        current, upcoming = tracker.by_name("1.3.0"), tracker.by_name("1.4.0")
        tracker.add_issue("RPA-1", current)
        tracker.add_issue("RPA-2", tracker.by_name("1.3.1"))

        result = release_version_and_squash_unreleased(
            tracker, current.id, upcoming.id, "RPA", move_open_issues=False, console=MockConsole()
        )

        assert result == Ok(None)
        assert tracker.issue_versions("RPA-1") == (current.id,)
        assert tracker.issue_versions("RPA-2") == (upcoming.id,)

    def test_failure_while_deleting_warns(self) -> None:
        tracker = self._project()
        tracker.failing["delete_version"] = TrackerHttpError(status=500, url="version", message="boom")
        console = MockConsole()

        result = release_version_and_squash_unreleased(
            tracker, tracker.by_name("1.3.0").id, tracker.by_name("2.0.0").id, "RPA", console=console
        )

        assert isinstance(result, Err)
        assert console.find("checked manually")
        assert tracker.by_name("1.3.0").released is False


class TestSquashPrereleases:
    """Squashing across a prerelease train, with Jira listing it out of order."""

    def _train(self, *, released: str | None = None) -> FakeTracker:
        tracker = FakeTracker()
        for name in ("1.0.1-beta.1", "1.0.1-alpha.2", "1.0.0", "1.0.1-alpha.1"):
            tracker.add_version(name, released=name == released)
        return tracker

    def test_released_prerelease_blocks(self) -> None:
        tracker = self._train(released="1.0.1-alpha.2")

        result = release_version_and_squash_unreleased(
            tracker, tracker.by_name("1.0.0").id, tracker.by_name("1.0.1-beta.1").id, "RPA", console=MockConsole()
        )

        assert result == Err(
            SquashBlockedReleased(version="1.0.0", next_version="1.0.1-beta.1", released=("1.0.1-alpha.2",))
        )
        assert tracker.calls == []
        assert tracker.names() == ["1.0.1-beta.1", "1.0.1-alpha.2", "1.0.0", "1.0.1-alpha.1"]

    def test_closed_issue_on_prerelease_blocks(self) -> None:
        tracker = self._train()
        tracker.add_issue("RPA-7", tracker.by_name("1.0.1-alpha.1"), closed=True)

        result = release_version_and_squash_unreleased(
            tracker, tracker.by_name("1.0.0").id, tracker.by_name("1.0.1-beta.1").id, "RPA", console=MockConsole()
        )

        assert result == Err(SquashBlockedClosedIssues(version="1.0.0", issue_keys=("RPA-7",)))
        assert tracker.calls == []
        assert len(tracker.names()) == 4

    def test_squashes_alpha_train_into_beta(self) -> None:
        tracker = self._train()
        current, upcoming = tracker.by_name("1.0.0"), tracker.by_name("1.0.1-beta.1")
        tracker.add_issue("RPA-1", current)
        tracker.add_issue("RPA-2", tracker.by_name("1.0.1-alpha.1"))

        result = release_version_and_squash_unreleased(
            tracker, current.id, upcoming.id, "RPA", today=TODAY, console=MockConsole()
        )

        assert result == Ok(None)
        assert tracker.names() == ["1.0.1-beta.1", "1.0.0"]
        assert tracker.issue_versions("RPA-1") == (upcoming.id,)
        assert tracker.issue_versions("RPA-2") == (upcoming.id,)
        assert tracker.by_name("1.0.0").released is True
        assert tracker.by_name("1.0.1-beta.1").released is False
