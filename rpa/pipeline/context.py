from __future__ import annotations

from dataclasses import dataclass

from rpa.core.config import Config
from rpa.git.client import GitClient
from rpa.git.versioned import SemanticVersionedRepository
from rpa.output.console import ConsoleProtocol
from rpa.pipeline.collaborators import BuildAndCommit, Operator
from rpa.semver import SemanticVersion
from rpa.tracker.client import Tracker

__all__ = ["PipelineContext", "ReleaseEnvironment"]


@dataclass(frozen=True, slots=True)
class PipelineContext:
    """Invocation flags plus what earlier steps decided.

    Steps derive new contexts with ``dataclasses.replace``.

    Attributes:
        branch_name: Branch the step works from
        current_version: Version being released
        next_version: Tracker version open issues move to
        commit_hash: Commit to branch from (None for HEAD)
        ancestor: Base branch a release or prerelease merges back into
        on_master: Patch releases merge into master instead of a support branch
    """

    branch_name: str = ""
    current_version: SemanticVersion | None = None
    next_version: SemanticVersion | None = None
    commit_hash: str | None = None
    start_release_phase: bool = False
    pause_for_commit: bool = False
    squash_unreleased: bool = False
    no_push: bool = False
    ancestor: str | None = None
    on_master: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseEnvironment:
    """Collaborators shared by every step of one invocation.

    ``tracker`` is None when Jira is not configured; tracker synchronisation
    is then skipped with a warning.
    """

    git: GitClient
    versions: SemanticVersionedRepository
    operator: Operator
    build: BuildAndCommit
    config: Config
    console: ConsoleProtocol
    tracker: Tracker | None = None
