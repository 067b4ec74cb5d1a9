"""Failures a release step can end with."""

from __future__ import annotations

from dataclasses import dataclass

from rpa.git.client import GitError
from rpa.git.errors import (
    BehindError,
    DivergedError,
    InvalidAncestorError,
    InvalidBranchError,
    NoRemotesConfigured,
)
from rpa.semver import VersionFormatError
from rpa.tracker.errors import TrackerError

__all__ = [
    "BuildFailed",
    "GitCommandFailed",
    "OperatorAborted",
    "PipelineError",
    "StepPreconditionFailed",
]


@dataclass(frozen=True, slots=True)
class StepPreconditionFailed:
    """The repository is not in the state the step needs (branch or tag exists, ...)."""

    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class GitCommandFailed:
    error: GitError

    def __str__(self) -> str:
        return str(self.error)


@dataclass(frozen=True, slots=True)
class BuildFailed:
    target: str
    message: str

    def __str__(self) -> str:
        return f"Build target '{self.target}' failed: {self.message}"


@dataclass(frozen=True, slots=True)
class OperatorAborted:
    message: str

    def __str__(self) -> str:
        return self.message


PipelineError = (
    StepPreconditionFailed
    | GitCommandFailed
    | BuildFailed
    | OperatorAborted
    | BehindError
    | DivergedError
    | NoRemotesConfigured
    | InvalidAncestorError
    | InvalidBranchError
    | VersionFormatError
    | TrackerError
)
