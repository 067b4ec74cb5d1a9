"""Tests for pipeline/common.py."""

from __future__ import annotations

from rpa.core.result import Err, Ok
from rpa.git.client import GitError
from rpa.pipeline.collaborators import BuildMode
from rpa.pipeline.common import (
    choose_version,
    create_tag,
    ensure_up_to_date,
    git_call,
    merge_skipping_ignored,
    offer_support_branch,
    prerelease_branch,
    release_branch,
    release_version_and_move_issues,
    require_branch,
)
from rpa.pipeline.errors import GitCommandFailed
from rpa.test.fakes import FakeGit, FakeTracker, RecordingBuild, ScriptedOperator, make_env, v


def test_branch_names() -> None:
    assert release_branch(v("1.3.0")) == "release/v1.3.0"
    assert prerelease_branch(v("1.3.0-rc.1")) == "prerelease/v1.3.0-rc.1"


def test_git_call_wraps_errors() -> None:
    error = GitError(command="push", message="rejected")

    assert git_call(Err(error)) == Err(GitCommandFailed(error))
    assert git_call(Ok("out")) == Ok("out")


class TestChooseVersion:
    """Tests for choose_version()."""

    def test_single_candidate_needs_no_prompt(self) -> None:
        operator = ScriptedOperator()
        env, _ = make_env(FakeGit(), operator=operator)

        assert choose_version(env, "Pick", (v("1.2.5"),)) == v("1.2.5")
        assert operator.prompts == []

    def test_several_candidates_are_offered(self) -> None:
        operator = ScriptedOperator(choices=[v("2.0.0")])
        env, _ = make_env(FakeGit(), operator=operator)

        assert choose_version(env, "Pick", (v("1.3.0"), v("2.0.0"))) == v("2.0.0")
        assert operator.offered == [(v("1.3.0"), v("2.0.0"))]


def test_require_branch_prefix() -> None:
    env, _ = make_env(FakeGit(current="hotfix/v1.2.4", branches={"hotfix/v1.2.4"}))

    assert require_branch(env, "hotfix/", "hotfix needed") == Ok("hotfix/v1.2.4")
    assert isinstance(require_branch(env, "develop", "develop needed"), Err)


def test_create_tag_message() -> None:
    git = FakeGit()
    env, _ = make_env(git)

    assert create_tag(env, "v1.3.0") == Ok(None)
    assert "v1.3.0" in git.tags


def test_ensure_up_to_date_wraps_git_errors() -> None:
    env, _ = make_env(FakeGit())

    result = ensure_up_to_date(env, "support/v9.9")

    assert isinstance(result, Err)
    assert isinstance(result.error, GitCommandFailed)


class TestMergeSkippingIgnored:
    """Tests for merge_skipping_ignored()."""

    def test_order_of_operations(self) -> None:
        """Ignored files are reset before conflicts are resolved and the merge committed."""
        git = FakeGit(branches={"develop", "master", "prerelease/v1.3.0-beta.1"})
        env, _ = make_env(git)

        result = merge_skipping_ignored(env, "develop", "prerelease/v1.3.0-beta.1", ["Build/Version.props"])

        assert result == Ok(None)
        assert git.calls == [
            ("checkout", "develop"),
            ("merge", "prerelease/v1.3.0-beta.1"),
            ("reset", "Build/Version.props"),
            ("discard", "Build/Version.props"),
            ("resolve",),
            ("commit", "Merge branch 'prerelease/v1.3.0-beta.1' into develop"),
        ]

    def test_merge_failure(self) -> None:
        git = FakeGit(branches={"develop", "release/v1.3.0"}, failing={"merge": "not something we can merge"})
        env, _ = make_env(git)

        result = merge_skipping_ignored(env, "develop", "release/v1.3.0", [])

        assert isinstance(result, Err)
        assert not any(c[0] == "commit" for c in git.calls)


class TestOfferSupportBranch:
    """Tests for offer_support_branch()."""

    def test_creates_support_and_hotfix(self) -> None:
        git = FakeGit(current="master")
        build = RecordingBuild()
        env, _ = make_env(git, build=build)

        assert offer_support_branch(env, v("1.3.0")) == Ok(None)
        assert git.calls == [("checkout -b", "support/v1.3"), ("checkout -b", "hotfix/v1.3.1")]
        assert build.calls == [(BuildMode.DEVELOPMENT_FOR_NEXT_RELEASE, v("1.3.1"))]

    def test_declined(self) -> None:
        git = FakeGit(current="master")
        env, _ = make_env(git, operator=ScriptedOperator(confirmations=[False]))

        assert offer_support_branch(env, v("1.3.0")) == Ok(None)
        assert git.calls == []

    def test_existing_support_branch_is_not_offered(self) -> None:
        git = FakeGit(current="master", branches={"master", "support/v1.3"})
        operator = ScriptedOperator()
        env, _ = make_env(git, operator=operator)

        assert offer_support_branch(env, v("1.3.0")) == Ok(None)
        assert operator.prompts == []

    def test_existing_hotfix_branch_is_kept(self) -> None:
        git = FakeGit(current="master", branches={"master", "hotfix/v1.3.1"})
        build = RecordingBuild()
        env, _ = make_env(git, build=build)

        assert offer_support_branch(env, v("1.3.0")) == Ok(None)
        assert git.calls == [("checkout -b", "support/v1.3")]
        assert build.calls == []


class TestReleaseVersionAndMoveIssues:
    """Tests for release_version_and_move_issues()."""

    def test_without_tracker_only_warns(self) -> None:
        env, console = make_env(FakeGit())

        assert release_version_and_move_issues(env, v("1.3.0"), v("1.4.0")) == Ok(None)
        assert console.has_warning()

    def test_creates_both_versions(self) -> None:
        tracker = FakeTracker()
        tracker.add_version("1.2.0", released=True)
        env, _ = make_env(FakeGit(), tracker=tracker)

        assert release_version_and_move_issues(env, v("1.3.0"), v("1.4.0")) == Ok(None)
        assert tracker.names() == ["1.2.0", "1.3.0", "1.4.0"]
        assert tracker.by_name("1.3.0").released is True

    def test_moves_open_issues_when_confirmed(self) -> None:
        tracker = FakeTracker()
        current = tracker.add_version("1.3.0")
        tracker.add_issue("RPA-1", current)
        env, _ = make_env(FakeGit(), tracker=tracker, operator=ScriptedOperator(confirmations=[True]))

        assert release_version_and_move_issues(env, v("1.3.0"), v("1.4.0")) == Ok(None)
        assert tracker.issue_versions("RPA-1") == (tracker.by_name("1.4.0").id,)

    def test_already_released(self) -> None:
        tracker = FakeTracker()
        tracker.add_version("1.3.0", released=True)
        env, _ = make_env(FakeGit(), tracker=tracker)

        result = release_version_and_move_issues(env, v("1.3.0"), v("1.4.0"))

        assert isinstance(result, Err)
        assert "got already released" in str(result.error)
