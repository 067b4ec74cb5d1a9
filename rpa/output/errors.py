"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rpa.core.errors import ErrorCode
from rpa.git.client import GitError
from rpa.git.errors import (
    BehindError,
    DivergedError,
    InvalidAncestorError,
    InvalidBranchError,
    NoRemotesConfigured,
)
from rpa.output.console import Style
from rpa.pipeline.errors import (
    BuildFailed,
    GitCommandFailed,
    OperatorAborted,
    PipelineError,
    StepPreconditionFailed,
)
from rpa.semver import VersionFormatError
from rpa.tracker.errors import (
    SquashBlockedClosedIssues,
    SquashBlockedReleased,
    TrackerHttpError,
    TrackerVersionNotFound,
    UnsupportedVersionScheme,
    VersionAlreadyReleased,
)

if TYPE_CHECKING:
    from rpa.output.console import ConsoleProtocol

__all__ = ["pipeline_error_exit_code", "print_git_error", "print_pipeline_error"]


def print_git_error(error: GitError, console: ConsoleProtocol) -> None:
    console.error(f"git {error.command} failed")
    if error.message:
        console.print(error.message.strip(), Style.DIM)


def print_pipeline_error(error: PipelineError, console: ConsoleProtocol) -> None:
    """Print a release failure with a hint where one helps."""
    match error:
        case GitCommandFailed(error=git_error):
            print_git_error(git_error, console)
        case StepPreconditionFailed(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case BehindError() | DivergedError():
            console.error(str(error))
            console.print("hint: synchronise the branch with its remote and run the command again", Style.DIM)
        case NoRemotesConfigured():
            console.error(str(error))
            console.print("hint: add [remotes] names = [\"origin\"] to .rpa.toml", Style.DIM)
        case SquashBlockedReleased() | SquashBlockedClosedIssues():
            console.error(str(error))
            console.print("hint: release without --squash-unreleased or clean up the Jira versions", Style.DIM)
        case TrackerHttpError(status=status) if status in (401, 403):
            console.error(str(error))
            console.print("hint: check RPA_JIRA_USER and RPA_JIRA_TOKEN", Style.DIM)
        case _:
            console.error(str(error))


def pipeline_error_exit_code(error: PipelineError) -> int:
    """Get exit code for a release failure."""
    match error:
        case InvalidBranchError() | InvalidAncestorError() | VersionFormatError() | OperatorAborted():
            return int(ErrorCode.USER_ERROR)
        case NoRemotesConfigured():
            return int(ErrorCode.ENV_ERROR)
        case (
            StepPreconditionFailed()
            | GitCommandFailed()
            | BuildFailed()
            | BehindError()
            | DivergedError()
        ):
            return int(ErrorCode.REPOSITORY_ERROR)
        case (
            TrackerHttpError()
            | TrackerVersionNotFound()
            | VersionAlreadyReleased()
            | SquashBlockedReleased()
            | SquashBlockedClosedIssues()
            | UnsupportedVersionScheme()
        ):
            return int(ErrorCode.TRACKER_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
