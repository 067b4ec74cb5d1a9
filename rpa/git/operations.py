"""Branch synchronisation with the configured remotes."""

from __future__ import annotations

from collections.abc import Sequence

from rpa.core.result import Err, Ok, Result
from rpa.git.client import GitClient, GitError
from rpa.git.errors import BehindError, DivergedError, NoRemotesConfigured, SyncError
from rpa.output.console import ConsoleProtocol, Style

__all__ = [
    "ensure_branch_up_to_date",
    "push_to_repos",
    "should_set_upstream",
    "usable_remotes",
]


def usable_remotes(remotes: Sequence[str]) -> tuple[str, ...]:
    return tuple(r for r in remotes if r.strip())


def ensure_branch_up_to_date(
    git: GitClient,
    remotes: Sequence[str],
    branch: str,
    *,
    console: ConsoleProtocol,
) -> Result[None, SyncError]:
    """Fail unless ``branch`` contains everything its remotes have.

    A branch that is ahead of a remote (or missing there) is fine. The
    branch that was checked out on entry is checked out again on return.
    """
    names = usable_remotes(remotes)
    if not names:
        return Err(NoRemotesConfigured())

    console.print(f"Ensuring branch '{branch}' is up to date", Style.DIM)
    # On a detached HEAD the commit itself is checked out again.
    before = git.current_branch_name() or git.get_hash("HEAD")

    checked_out = git.checkout(branch)
    if isinstance(checked_out, Err):
        return checked_out

    result = _compare_with_remotes(git, names, branch, console=console)

    if before is not None:
        restored = git.checkout(before)
        if isinstance(restored, Err) and isinstance(result, Ok):
            return restored
    return result


def _compare_with_remotes(
    git: GitClient,
    remotes: tuple[str, ...],
    branch: str,
    *,
    console: ConsoleProtocol,
) -> Result[None, SyncError]:
    for remote in remotes:
        fetched = git.fetch(remote, branch)
        if isinstance(fetched, Err):
            console.warning(f"Could not fetch '{branch}' from '{remote}': {fetched.error.message}")

        local = git.get_hash(branch) or ""
        on_remote = git.get_hash(branch, remote) or ""
        base = git.get_most_recent_common_ancestor_with_remote(branch, branch, remote) or ""

        if local == on_remote:
            console.print(f"'{branch}' and remote '{remote}' are up to date", Style.DIM)
        elif local == base:
            return Err(BehindError(branch=branch, remote=remote))
        elif on_remote == base:
            console.print(f"Remote branch on '{remote}' is behind of '{branch}'", Style.DIM)
        else:
            return Err(DivergedError(branch=branch, remote=remote))

    return Ok(None)


def should_set_upstream(
    *,
    remote: str,
    is_first_remote: bool,
    branch_remote: str | None,
    ancestor_remote: str | None,
) -> bool:
    """Whether ``push`` to ``remote`` should pass ``-u``.

    A branch that already tracks a remote keeps tracking it. An untracked
    branch tracks the first remote, unless its nearest ancestor tracks one.
    """
    if branch_remote:
        return branch_remote == remote
    return not ancestor_remote and is_first_remote


def push_to_repos(
    git: GitClient,
    remotes: Sequence[str],
    branch: str,
    tag: str | None = None,
) -> Result[None, GitError]:
    """Push ``branch`` (and ``tag``) to every configured remote."""
    before = git.current_branch_name()
    if before is None:
        return Err(GitError(command="push", message="could not determine the current branch"))

    checked_out = git.checkout(branch)
    if isinstance(checked_out, Err):
        return checked_out

    if tag and not git.does_tag_exist(tag):
        git.checkout(before)
        return Err(
            GitError(
                command="push",
                message=f"Tag with name '{tag}' does not exist, it must be created before pushing",
            )
        )

    branch_remote = git.get_remote_of_branch(branch)
    ancestor_remote: str | None = None
    if not branch_remote:
        ancestor = git.get_first_ancestor()
        if ancestor:
            ancestor_remote = git.get_remote_of_branch(ancestor)

    for index, remote in enumerate(usable_remotes(remotes)):
        upstream = should_set_upstream(
            remote=remote,
            is_first_remote=index == 0,
            branch_remote=branch_remote,
            ancestor_remote=ancestor_remote,
        )
        pushed = git.push(remote, branch, tag, set_upstream=upstream)
        if isinstance(pushed, Err):
            git.checkout(before)
            return pushed

    return git.checkout(before)
