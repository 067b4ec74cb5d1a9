from __future__ import annotations

from dataclasses import dataclass

from rpa.git.client import GitError


@dataclass(frozen=True, slots=True)
class BehindError:
    """The local branch lacks commits that exist on the remote."""

    branch: str
    remote: str

    def __str__(self) -> str:
        return f"Need to pull, local '{self.branch}' branch is behind on repository '{self.remote}'"


@dataclass(frozen=True, slots=True)
class DivergedError:
    branch: str
    remote: str

    def __str__(self) -> str:
        return f"'{self.branch}' diverged, need to rebase at repository '{self.remote}'"


@dataclass(frozen=True, slots=True)
class NoRemotesConfigured:
    def __str__(self) -> str:
        return "There were no remotes specified in the config. Stopping execution"


@dataclass(frozen=True, slots=True)
class InvalidAncestorError:
    branch: str
    ancestor: str

    def __str__(self) -> str:
        return f"Ancestor '{self.ancestor}' of branch '{self.branch}' is not a valid base for this release"


@dataclass(frozen=True, slots=True)
class InvalidBranchError:
    branch: str | None
    expected: str

    def __str__(self) -> str:
        current = self.branch if self.branch is not None else "(detached HEAD)"
        return f"Cannot release from '{current}': {self.expected}"


SyncError = BehindError | DivergedError | NoRemotesConfigured | GitError
TopologyError = InvalidAncestorError | InvalidBranchError
