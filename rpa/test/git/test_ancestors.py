"""Tests for Repository.get_ancestors() against real repositories."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from rpa.git.repository import Repository

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not available")

EXPECTED = ["develop", "hotfix/v"]


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        raise RuntimeError(f"git {' '.join(args)} failed (code {result.returncode}): {result.stderr.strip()}")
    return result.stdout.strip()


def _commit(cwd: Path, message: str) -> None:
    _git(cwd, "commit", "--allow-empty", "-m", message)


def _init_repo(path: Path) -> Path:
    """Repository with a single root commit on master."""
    _git(path, "init")
    _git(path, "symbolic-ref", "HEAD", "refs/heads/master")
    _git(path, "config", "user.email", "test@example.com")
    _git(path, "config", "user.name", "Test")
    _git(path, "config", "commit.gpgsign", "false")
    _commit(path, "root")
    return path


def test_old_hotfix_is_not_an_ancestor_of_release_from_develop(tmp_path: Path) -> None:
    repo = _init_repo(tmp_path)
    _git(repo, "checkout", "-b", "hotfix/v1.0.1")
    _commit(repo, "fix")
    _git(repo, "checkout", "master")
    _git(repo, "checkout", "-b", "develop")
    _commit(repo, "feature")
    _git(repo, "checkout", "-b", "release/v1.1.0")

    assert Repository(repo).get_ancestors(EXPECTED) == ("develop",)


def test_develop_moved_past_the_fork_still_counts(tmp_path: Path) -> None:
    repo = _init_repo(tmp_path)
    _git(repo, "checkout", "-b", "hotfix/v1.0.1")
    _commit(repo, "fix")
    _git(repo, "checkout", "master")
    _git(repo, "checkout", "-b", "develop")
    _commit(repo, "feature")
    _git(repo, "checkout", "-b", "release/v1.1.0")
    _commit(repo, "release metadata")
    _git(repo, "checkout", "develop")
    _commit(repo, "next feature")
    _git(repo, "checkout", "release/v1.1.0")

    assert Repository(repo).get_ancestors(EXPECTED) == ("develop",)


def test_release_cut_from_hotfix(tmp_path: Path) -> None:
    repo = _init_repo(tmp_path)
    _git(repo, "checkout", "-b", "develop")
    _commit(repo, "feature")
    _git(repo, "checkout", "master")
    _git(repo, "checkout", "-b", "hotfix/v1.0.1")
    _commit(repo, "fix")
    _git(repo, "checkout", "-b", "release/v1.0.1")

    assert Repository(repo).get_ancestors(EXPECTED) == ("hotfix/v1.0.1",)


def test_hotfix_merged_into_develop_before_the_cut(tmp_path: Path) -> None:
    repo = _init_repo(tmp_path)
    _git(repo, "checkout", "-b", "hotfix/v1.0.1")
    _commit(repo, "fix")
    _git(repo, "checkout", "master")
    _git(repo, "checkout", "-b", "develop")
    _git(repo, "merge", "--no-ff", "-m", "Merge hotfix", "hotfix/v1.0.1")
    _git(repo, "checkout", "-b", "release/v1.1.0")

    assert Repository(repo).get_ancestors(EXPECTED) == ("develop",)


def test_same_fork_point_is_ambiguous(tmp_path: Path) -> None:
    """Both branches point at the commit the release was cut from."""
    repo = _init_repo(tmp_path)
    _git(repo, "branch", "develop")
    _git(repo, "branch", "hotfix/v1.0.1")
    _git(repo, "checkout", "-b", "release/v1.1.0")
    _commit(repo, "release metadata")

    assert Repository(repo).get_ancestors(EXPECTED) == ("develop", "hotfix/v1.0.1")


def test_unrelated_and_unexpected_branches_are_ignored(tmp_path: Path) -> None:
    repo = _init_repo(tmp_path)
    _git(repo, "checkout", "-b", "develop")
    _commit(repo, "feature")
    _git(repo, "checkout", "-b", "feature/login")
    _commit(repo, "login")
    _git(repo, "checkout", "develop")
    _git(repo, "checkout", "-b", "release/v1.1.0")

    assert Repository(repo).get_ancestors(EXPECTED) == ("develop",)


def test_detached_head_has_no_ancestors(tmp_path: Path) -> None:
    repo = _init_repo(tmp_path)
    _git(repo, "checkout", "-b", "develop")
    _commit(repo, "feature")
    _git(repo, "checkout", "--detach")

    assert Repository(repo).get_ancestors(EXPECTED) == ()
