"""Entry points of the release process and the loop that chains its steps.

``start_release`` and ``continue_release`` pick the entry step from the
branch that is checked out. Every step returns the next ``Action``; the
driver runs ``ContinueWith`` actions until a ``Stop`` or ``PauseAndStop``.

Usage:
    result = start_release(env, PipelineContext(pause_for_commit=True))
    match result:
        case Ok(PauseAndStop(message)):
            console.info(message)
        case Err(error):
            print_pipeline_error(error, console)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace

from rpa.core.result import Err, Ok, Result
from rpa.git.errors import InvalidBranchError
from rpa.git.topology import Classification, classify
from rpa.output.console import Style
from rpa.pipeline.actions import Action, ContinueWith, PauseAndStop, Step, Stop
from rpa.pipeline.branching import (
    branch_from_develop,
    branch_from_hotfix,
    branch_from_master,
    branch_from_prerelease_for_continue,
    branch_from_release,
    branch_from_release_for_continue,
)
from rpa.pipeline.context import PipelineContext, ReleaseEnvironment
from rpa.pipeline.continues import (
    continue_alpha_beta,
    continue_release_on_master,
    continue_release_patch,
    push_master_release,
    push_new_release_branch,
    push_patch_release,
    push_pre_release,
)
from rpa.pipeline.errors import PipelineError, StepPreconditionFailed
from rpa.pipeline.releases import (
    release_alpha_beta,
    release_on_master,
    release_patch,
    release_rc,
    release_with_rc,
)
from rpa.semver import SemanticVersion

__all__ = [
    "ENTRY_STEPS",
    "RESUME_STEPS",
    "STEPS",
    "continue_release",
    "run_steps",
    "start_release",
]

EntryFunction = Callable[[ReleaseEnvironment, PipelineContext], Result[Action, PipelineError]]
StepFunction = Callable[[ReleaseEnvironment, PipelineContext, SemanticVersion], Result[Action, PipelineError]]

ENTRY_STEPS: Mapping[Classification, EntryFunction] = {
    Classification.RELEASE: branch_from_release,
    Classification.HOTFIX: branch_from_hotfix,
    Classification.DEVELOP: branch_from_develop,
    Classification.MASTER: branch_from_master,
}

RESUME_STEPS: Mapping[Classification, EntryFunction] = {
    Classification.PRERELEASE: branch_from_prerelease_for_continue,
    Classification.RELEASE: branch_from_release_for_continue,
}

STEPS: Mapping[Step, StepFunction] = {
    Step.RELEASE_ON_MASTER: release_on_master,
    Step.RELEASE_ALPHA_BETA: release_alpha_beta,
    Step.RELEASE_PATCH: release_patch,
    Step.RELEASE_RC: release_rc,
    Step.RELEASE_WITH_RC: release_with_rc,
    Step.CONTINUE_ALPHA_BETA: continue_alpha_beta,
    Step.CONTINUE_RELEASE_ON_MASTER: continue_release_on_master,
    Step.CONTINUE_RELEASE_PATCH: continue_release_patch,
    Step.PUSH_MASTER_RELEASE: push_master_release,
    Step.PUSH_PRE_RELEASE: push_pre_release,
    Step.PUSH_PATCH_RELEASE: push_patch_release,
    Step.PUSH_NEW_RELEASE_BRANCH: push_new_release_branch,
}


def run_steps(env: ReleaseEnvironment, first: Action) -> Result[Stop | PauseAndStop, PipelineError]:
    """Execute actions until one of them ends the release."""
    action = first
    while isinstance(action, ContinueWith):
        env.console.print(f"Step: {action.step} ({action.version})", Style.DIM)
        step = STEPS[action.step]
        result = step(env, replace(action.context, current_version=action.version), action.version)
        if isinstance(result, Err):
            return result
        action = result.value
    return Ok(action)


def start_release(env: ReleaseEnvironment, ctx: PipelineContext) -> Result[Stop | PauseAndStop, PipelineError]:
    """Release from the checked-out ``develop``, ``master``, ``release/*`` or ``hotfix/*`` branch."""
    if ctx.commit_hash is not None and not env.git.is_commit_hash(ctx.commit_hash):
        return Err(StepPreconditionFailed(f"The commit '{ctx.commit_hash}' was not found in the repository"))

    branch = env.git.current_branch_name()
    classification = classify(branch)
    entry = ENTRY_STEPS.get(classification)
    if branch is None or entry is None:
        return Err(
            InvalidBranchError(
                branch=branch,
                expected="releasing requires a 'hotfix/*', 'release/*', 'develop' or 'master' branch",
            )
        )

    if classification is not Classification.RELEASE and not ctx.start_release_phase:
        env.console.info(
            "As you are not on a release branch, you won't be able to release a release candidate version. "
            "To create a release branch, use 'rpa new-release-branch'."
        )

    first = entry(env, replace(ctx, branch_name=branch))
    if isinstance(first, Err):
        return first
    return run_steps(env, first.value)


def continue_release(env: ReleaseEnvironment, ctx: PipelineContext) -> Result[Stop | PauseAndStop, PipelineError]:
    """Finish a paused release from its ``release/*`` or ``prerelease/*`` branch."""
    branch = env.git.current_branch_name()
    entry = RESUME_STEPS.get(classify(branch))
    if branch is None or entry is None:
        return Err(
            InvalidBranchError(
                branch=branch,
                expected="continuing a release requires a 'prerelease/*' or 'release/*' branch",
            )
        )

    first = entry(env, replace(ctx, branch_name=branch))
    if isinstance(first, Err):
        return first
    return run_steps(env, first.value)
