from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering

from rpa.core.result import Err, Ok, Result

__all__ = [
    "PreReleaseStage",
    "SemanticVersion",
    "VersionFormatError",
    "parse",
    "parse_from_branch_name",
    "parse_tag",
    "try_parse",
]

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<stage>[A-Za-z]+)\.(?P<counter>-?\d+))?$"
)

BRANCH_VERSION_SEPARATOR = "/v"


class PreReleaseStage(IntEnum):
    """Prerelease stages, ranked in release order."""

    ALPHA = 1
    BETA = 2
    RC = 3

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class VersionFormatError:
    text: str
    reason: str

    def __str__(self) -> str:
        return f"'{self.text}' is not a valid version: {self.reason}"


@total_ordering
@dataclass(frozen=True, slots=True)
class SemanticVersion:
    """``MAJOR.MINOR.PATCH`` with an optional ``-stage.counter`` suffix.

    A final release sorts after every prerelease of the same
    ``MAJOR.MINOR.PATCH``; prereleases sort by stage, then counter.
    """

    major: int
    minor: int
    patch: int
    pre_release_stage: PreReleaseStage | None = None
    pre_release_counter: int | None = None

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(f"version components must be non-negative: {self._render()}")
        if (self.pre_release_stage is None) != (self.pre_release_counter is None):
            raise ValueError("pre_release_stage and pre_release_counter must be set together")
        if self.pre_release_counter is not None and self.pre_release_counter < 1:
            raise ValueError(f"pre_release_counter must be >= 1, got {self.pre_release_counter}")

    @property
    def is_pre_release(self) -> bool:
        return self.pre_release_stage is not None

    @property
    def sort_key(self) -> tuple[int, int, int, int, int, int]:
        if self.pre_release_stage is None:
            return (self.major, self.minor, self.patch, 1, 0, 0)
        return (
            self.major,
            self.minor,
            self.patch,
            0,
            int(self.pre_release_stage),
            self.pre_release_counter or 0,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.sort_key < other.sort_key

    def to_tag(self) -> str:
        return f"v{self}"

    def _render(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release_stage is None:
            return core
        return f"{core}-{self.pre_release_stage}.{self.pre_release_counter}"

    def __str__(self) -> str:
        return self._render()


def parse(text: str) -> Result[SemanticVersion, VersionFormatError]:
    """Parse ``1.2.3`` or ``1.2.3-rc.2`` (stage token is case-insensitive)."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return Err(VersionFormatError(text, "expected MAJOR.MINOR.PATCH[-(alpha|beta|rc).N]"))

    stage_text = m.group("stage")
    if stage_text is None:
        return Ok(SemanticVersion(int(m.group("major")), int(m.group("minor")), int(m.group("patch"))))

    try:
        stage = PreReleaseStage[stage_text.upper()]
    except KeyError:
        return Err(VersionFormatError(text, f"unknown prerelease stage '{stage_text}'"))

    counter = int(m.group("counter"))
    if counter < 1:
        return Err(VersionFormatError(text, "prerelease counter must be positive"))

    return Ok(
        SemanticVersion(
            int(m.group("major")),
            int(m.group("minor")),
            int(m.group("patch")),
            stage,
            counter,
        )
    )


def try_parse(text: str) -> SemanticVersion | None:
    result = parse(text)
    if isinstance(result, Err):
        return None
    return result.value


def parse_tag(tag: str) -> SemanticVersion | None:
    """Parse a ``v``-prefixed release tag, ``None`` for any other tag."""
    if not tag.startswith("v"):
        return None
    return try_parse(tag[1:])


def parse_from_branch_name(name: str) -> Result[SemanticVersion, VersionFormatError]:
    """Parse the version label of ``release/v1.2.3`` style branch names."""
    prefix, sep, label = name.partition(BRANCH_VERSION_SEPARATOR)
    if not sep or not prefix or not label or BRANCH_VERSION_SEPARATOR in label:
        return Err(VersionFormatError(name, "branch name has no '/v<version>' label"))
    return parse(label)
