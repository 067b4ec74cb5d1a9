"""The release process as a chain of steps.

- ``dispatch``: entry points and the driver loop
- ``branching``: choose the version from the current branch
- ``releases``: cut release and prerelease branches
- ``continues``: tag, merge back and push
"""

from rpa.pipeline.actions import Action, ContinueWith, PauseAndStop, Step, Stop
from rpa.pipeline.build import CommandBuildAndCommit
from rpa.pipeline.collaborators import BuildAndCommit, BuildMode, Operator
from rpa.pipeline.context import PipelineContext, ReleaseEnvironment
from rpa.pipeline.dispatch import continue_release, run_steps, start_release
from rpa.pipeline.errors import (
    BuildFailed,
    GitCommandFailed,
    OperatorAborted,
    PipelineError,
    StepPreconditionFailed,
)

__all__ = [
    # actions
    "Action",
    "ContinueWith",
    "PauseAndStop",
    "Step",
    "Stop",
    # collaborators
    "BuildAndCommit",
    "BuildMode",
    "CommandBuildAndCommit",
    "Operator",
    # context
    "PipelineContext",
    "ReleaseEnvironment",
    # dispatch
    "continue_release",
    "run_steps",
    "start_release",
    # errors
    "BuildFailed",
    "GitCommandFailed",
    "OperatorAborted",
    "PipelineError",
    "StepPreconditionFailed",
]
