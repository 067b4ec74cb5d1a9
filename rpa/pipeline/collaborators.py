"""Interfaces the release steps use to talk to the operator and the build."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from rpa.core.result import Result
from rpa.semver import SemanticVersion

if TYPE_CHECKING:
    from rpa.pipeline.errors import PipelineError

__all__ = ["BuildAndCommit", "BuildMode", "Operator"]


class Operator(Protocol):
    """The person running the release.

    Every method blocks until an answer is given. Choices are returned as
    one of the offered values, never as free text.
    """

    def read_version_choice(self, prompt: str, versions: Sequence[SemanticVersion]) -> SemanticVersion: ...

    def read_version(self, prompt: str) -> SemanticVersion: ...

    def read_string_choice(self, prompt: str, choices: Sequence[str]) -> str: ...

    def read_string(self, prompt: str) -> str: ...

    def read_confirmation(self, prompt: str) -> bool: ...


class BuildMode(Enum):
    PREPARE_NEXT_VERSION = "prepare_next_version"
    DEVELOPMENT_FOR_NEXT_RELEASE = "development_for_next_release"

    def __str__(self) -> str:
        return self.value.replace("_", " ")


class BuildAndCommit(Protocol):
    def call_build_steps_and_commit(self, mode: BuildMode, version: SemanticVersion) -> Result[None, PipelineError]:
        """Run the build targets configured for ``mode`` and commit their changes."""
        ...
