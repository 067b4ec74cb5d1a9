"""Continue and push steps: tag, merge back and publish a prepared release."""

from __future__ import annotations

from dataclasses import replace

from rpa.core.result import Err, Ok, Result
from rpa.git.topology import DEVELOP, HOTFIX_PREFIX, MASTER, PRERELEASE_PREFIX, RELEASE_PREFIX, SUPPORT_PREFIX
from rpa.output.console import Style
from rpa.pipeline.actions import Action, ContinueWith, Step, Stop
from rpa.pipeline.collaborators import BuildMode
from rpa.pipeline.common import (
    create_tag,
    ensure_up_to_date,
    ensure_working_directory_clean,
    git_call,
    merge_skipping_ignored,
    offer_support_branch,
    push_branch,
    release_branch,
    require_branch,
    require_new_tag,
    resolve_base_branch,
)
from rpa.pipeline.context import PipelineContext, ReleaseEnvironment
from rpa.pipeline.errors import PipelineError, StepPreconditionFailed
from rpa.semver import SemanticVersion, next_patch, parse_from_branch_name

__all__ = [
    "continue_alpha_beta",
    "continue_release_on_master",
    "continue_release_patch",
    "push_master_release",
    "push_new_release_branch",
    "push_patch_release",
    "push_pre_release",
]

_PRERELEASE_BASES = (f"{RELEASE_PREFIX}v", DEVELOP, f"{HOTFIX_PREFIX}v")


def _done(ctx: PipelineContext, version: SemanticVersion, push: Step) -> Action:
    if ctx.no_push:
        return Stop(f"Released '{version}' locally, nothing was pushed")
    return ContinueWith(push, version, ctx)


def continue_alpha_beta(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Tag the prerelease and merge it back into the branch it was cut from."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean
    prerelease = require_branch(env, PRERELEASE_PREFIX, "continuing a prerelease requires a 'prerelease/*' branch")
    if isinstance(prerelease, Err):
        return prerelease

    base = resolve_base_branch(env, ctx.ancestor, _PRERELEASE_BASES)
    for branch in (base, prerelease.value):
        synced = ensure_up_to_date(env, branch)
        if isinstance(synced, Err):
            return synced

    checked_out = git_call(env.git.checkout(prerelease.value))
    if isinstance(checked_out, Err):
        return checked_out

    tag = version.to_tag()
    untagged = require_new_tag(env, tag)
    if isinstance(untagged, Err):
        return untagged
    tagged = create_tag(env, tag)
    if isinstance(tagged, Err):
        return tagged

    merged = merge_skipping_ignored(env, base, prerelease.value, env.config.ignore_lists.prerelease_merge)
    if isinstance(merged, Err):
        return merged

    return Ok(_done(replace(ctx, branch_name=prerelease.value, ancestor=base), version, Step.PUSH_PRE_RELEASE))


def continue_release_on_master(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Put the release branch's content on master, tag it and return to develop."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean
    current = require_branch(env, RELEASE_PREFIX, "finishing a release requires a 'release/*' branch")
    if isinstance(current, Err):
        return current

    released = parse_from_branch_name(current.value)
    if isinstance(released, Err):
        return released

    for branch in (current.value, MASTER, DEVELOP):
        synced = ensure_up_to_date(env, branch)
        if isinstance(synced, Err):
            return synced

    tag = released.value.to_tag()
    untagged = require_new_tag(env, tag)
    if isinstance(untagged, Err):
        return untagged

    checked_out = git_call(env.git.checkout(MASTER))
    if isinstance(checked_out, Err):
        return checked_out
    merged = git_call(env.git.merge_branch_taking_content(current.value))
    if isinstance(merged, Err):
        return merged
    committed = git_call(env.git.commit_all(f"Merge branch '{current.value}' into {MASTER}"))
    if isinstance(committed, Err):
        return committed

    tagged = create_tag(env, tag)
    if isinstance(tagged, Err):
        return tagged

    supported = offer_support_branch(env, released.value)
    if isinstance(supported, Err):
        return supported

    back = git_call(env.git.checkout(DEVELOP))
    if isinstance(back, Err):
        return back

    return Ok(_done(ctx, released.value, Step.PUSH_MASTER_RELEASE))


def continue_release_patch(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Merge ``release/v<version>`` into master or its support branch, tag it and open the next hotfix."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean

    target = MASTER if ctx.on_master else f"{SUPPORT_PREFIX}v{version.major}.{version.minor}"
    source = release_branch(version)
    for branch in (target, source):
        synced = ensure_up_to_date(env, branch)
        if isinstance(synced, Err):
            return synced

    tag = version.to_tag()
    untagged = require_new_tag(env, tag)
    if isinstance(untagged, Err):
        return untagged

    merged = merge_skipping_ignored(env, target, source, env.config.ignore_lists.tag_stable_merge)
    if isinstance(merged, Err):
        return merged
    tagged = create_tag(env, tag)
    if isinstance(tagged, Err):
        return tagged

    hotfix_version = next_patch(version)
    hotfix = f"{HOTFIX_PREFIX}v{hotfix_version}"
    if env.git.does_branch_exist(hotfix):
        env.console.print(f"Hotfix branch '{hotfix}' already exists", Style.DIM)
    else:
        created = git_call(env.git.checkout_new_branch(hotfix))
        if isinstance(created, Err):
            return created
        built = env.build.call_build_steps_and_commit(BuildMode.DEVELOPMENT_FOR_NEXT_RELEASE, hotfix_version)
        if isinstance(built, Err):
            return built

    back = git_call(env.git.checkout(target))
    if isinstance(back, Err):
        return back

    if ctx.on_master:
        supported = offer_support_branch(env, version)
        if isinstance(supported, Err):
            return supported
        back = git_call(env.git.checkout(target))
        if isinstance(back, Err):
            return back

    return Ok(_done(replace(ctx, branch_name=target), version, Step.PUSH_PATCH_RELEASE))


def push_master_release(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    branch = release_branch(version)
    if not env.git.does_branch_exist(branch):
        return Err(
            StepPreconditionFailed(
                f"The branch '{branch}' does not exist.",
                hint="create a release branch with 'rpa new-release-branch' first",
            )
        )

    synced = ensure_up_to_date(env, branch)
    if isinstance(synced, Err):
        return synced
    pushed = push_branch(env, branch)
    if isinstance(pushed, Err):
        return pushed

    for stable in (MASTER, DEVELOP):
        synced = ensure_up_to_date(env, stable)
        if isinstance(synced, Err):
            return synced

    pushed = push_branch(env, MASTER, version.to_tag())
    if isinstance(pushed, Err):
        return pushed
    pushed = push_branch(env, DEVELOP)
    if isinstance(pushed, Err):
        return pushed

    return Ok(Stop(f"Released version '{version}'"))


def push_pre_release(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    pushed = push_branch(env, ctx.branch_name, version.to_tag())
    if isinstance(pushed, Err):
        return pushed
    if ctx.ancestor:
        pushed = push_branch(env, ctx.ancestor)
        if isinstance(pushed, Err):
            return pushed
    return Ok(Stop(f"Released prerelease '{version}'"))


def push_patch_release(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    pushed = push_branch(env, ctx.branch_name, version.to_tag())
    if isinstance(pushed, Err):
        return pushed
    pushed = push_branch(env, release_branch(version))
    if isinstance(pushed, Err):
        return pushed
    return Ok(Stop(f"Released patch '{version}'"))


def push_new_release_branch(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    branch = release_branch(version)
    pushed = push_branch(env, branch)
    if isinstance(pushed, Err):
        return pushed
    if ctx.ancestor:
        pushed = push_branch(env, ctx.ancestor)
        if isinstance(pushed, Err):
            return pushed
    return Ok(Stop(f"Created and pushed '{branch}'"))
