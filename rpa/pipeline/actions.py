"""What a step asks the driver to do next."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rpa.pipeline.context import PipelineContext
from rpa.semver import SemanticVersion

__all__ = ["Action", "ContinueWith", "PauseAndStop", "Step", "Stop"]


class Step(Enum):
    RELEASE_ON_MASTER = "release on master"
    RELEASE_ALPHA_BETA = "release alpha/beta"
    RELEASE_PATCH = "release patch"
    RELEASE_RC = "release rc"
    RELEASE_WITH_RC = "release with rc"
    CONTINUE_ALPHA_BETA = "continue alpha/beta"
    CONTINUE_RELEASE_ON_MASTER = "continue release on master"
    CONTINUE_RELEASE_PATCH = "continue release patch"
    PUSH_MASTER_RELEASE = "push master release"
    PUSH_PRE_RELEASE = "push prerelease"
    PUSH_PATCH_RELEASE = "push patch release"
    PUSH_NEW_RELEASE_BRANCH = "push new release branch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Stop:
    """The release is done (or deliberately ends here)."""

    message: str


@dataclass(frozen=True, slots=True)
class PauseAndStop:
    """Stopped so the operator can commit by hand; ``close-version`` resumes."""

    message: str


@dataclass(frozen=True, slots=True)
class ContinueWith:
    step: Step
    version: SemanticVersion
    context: PipelineContext


Action = Stop | PauseAndStop | ContinueWith
