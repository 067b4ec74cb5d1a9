"""The git operations the release process depends on.

``GitClient`` is satisfied by ``rpa.git.repository.Repository`` (the git
command line) and by the in-memory fake used in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from rpa.core.result import Result

__all__ = ["GitClient", "GitError"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: git's stderr, or a description when git gave none
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def __str__(self) -> str:
        return f"git {self.command}: {self.message}"


class GitClient(Protocol):
    # Queries

    def current_branch_name(self) -> str | None: ...

    def is_on_branch(self, name: str) -> bool:
        """Exact match, or prefix match when ``name`` ends with ``/``."""
        ...

    def get_ancestors(self, expected: Sequence[str]) -> tuple[str, ...]:
        """Local branches matching ``expected`` that HEAD was branched from.

        An expected entry matches a branch of the same name, or any branch
        starting with it (``hotfix/v`` matches ``hotfix/v1.2.4``). The current
        branch is never returned.
        """
        ...

    def does_branch_exist(self, name: str) -> bool: ...

    def does_tag_exist(self, name: str) -> bool: ...

    def is_commit_hash(self, ref: str) -> bool: ...

    def is_working_directory_clean(self) -> bool: ...

    def get_tags(self, from_ref: str = "HEAD", contains: str | None = None) -> Result[tuple[str, ...], GitError]:
        """Tags reachable from ``from_ref`` (and containing ``contains``)."""
        ...

    def get_hash(self, branch: str, remote: str | None = None) -> str | None: ...

    def get_most_recent_common_ancestor_with_remote(
        self, branch: str, branch_on_remote: str, remote: str
    ) -> str | None: ...

    def get_remote_of_branch(self, branch: str) -> str | None: ...

    def get_first_ancestor(self) -> str | None:
        """The nearest local branch HEAD was branched from."""
        ...

    # Mutations

    def checkout(self, ref: str) -> Result[None, GitError]: ...

    def checkout_new_branch(self, name: str) -> Result[None, GitError]: ...

    def checkout_commit_with_new_branch(self, commit: str | None, name: str) -> Result[None, GitError]: ...

    def merge_branch(self, name: str, *, no_commit: bool = False) -> Result[None, GitError]:
        """``merge --no-ff``; a merge stopped by conflicts is not an error."""
        ...

    def merge_branch_taking_content(self, name: str) -> Result[None, GitError]:
        """Start a merge whose resulting tree is exactly ``name``'s tree.

        The merge is left uncommitted.
        """
        ...

    def commit_all(self, message: str) -> Result[None, GitError]: ...

    def add_all(self) -> Result[None, GitError]: ...

    def resolve_merge_conflicts(self) -> Result[None, GitError]: ...

    def reset_file(self, path: str) -> Result[None, GitError]: ...

    def checkout_discard(self, path: str) -> Result[None, GitError]: ...

    def tag(self, name: str, message: str) -> Result[None, GitError]: ...

    def fetch(self, remote: str, branch: str) -> Result[str, GitError]: ...

    def push(
        self, remote: str, branch: str, tag: str | None = None, *, set_upstream: bool = False
    ) -> Result[str, GitError]: ...

    def push_to_repos(
        self, remotes: Sequence[str], branch: str, tag: str | None = None
    ) -> Result[None, GitError]: ...
