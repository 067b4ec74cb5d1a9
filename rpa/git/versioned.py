from __future__ import annotations

from rpa.core.result import Err, Ok, Result
from rpa.git.client import GitClient, GitError
from rpa.git.errors import InvalidBranchError
from rpa.git.topology import SUPPORT_PREFIX
from rpa.semver import SemanticVersion, VersionFormatError, parse_from_branch_name, parse_tag

__all__ = ["SemanticVersionedRepository"]


class SemanticVersionedRepository:
    """Release versions as recorded by ``v``-prefixed tags."""

    def __init__(self, git: GitClient) -> None:
        self.git = git

    def versions_sorted(
        self, from_ref: str = "HEAD", contains: str | None = None
    ) -> Result[tuple[SemanticVersion, ...], GitError]:
        """Versions tagged on ``from_ref``'s history, newest first.

        Tags that are not ``v<semantic version>`` are ignored.
        """
        tags = self.git.get_tags(from_ref, contains)
        if isinstance(tags, Err):
            return tags
        versions = {v for v in (parse_tag(t) for t in tags.value) if v is not None}
        return Ok(tuple(sorted(versions, reverse=True)))

    def current_version(
        self, from_ref: str = "HEAD", contains: str | None = None
    ) -> Result[SemanticVersion | None, GitError]:
        versions = self.versions_sorted(from_ref, contains)
        if isinstance(versions, Err):
            return versions
        return Ok(versions.value[0] if versions.value else None)

    def most_recent_hotfix_version(
        self,
    ) -> Result[SemanticVersion, InvalidBranchError | VersionFormatError | GitError]:
        """The version a hotfix branch currently stands at.

        That is the branch's own version, unless a prerelease of it was
        already tagged since the matching support branch was cut.
        """
        branch = self.git.current_branch_name()
        if branch is None:
            return Err(InvalidBranchError(branch=None, expected="a hotfix branch is required"))

        parsed = parse_from_branch_name(branch)
        if isinstance(parsed, Err):
            return parsed
        branch_version = parsed.value

        support = f"{SUPPORT_PREFIX}v{branch_version.major}.{branch_version.minor}"
        if not self.git.does_branch_exist(support):
            return Ok(branch_version)

        recent = self.current_version("HEAD", support)
        if isinstance(recent, Err):
            return recent
        if recent.value is not None and recent.value.is_pre_release:
            return Ok(recent.value)
        return Ok(branch_version)
