from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TrackerHttpError:
    """Jira answered with a non-2xx status (0 when it could not be reached)."""

    status: int
    url: str
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"Jira request failed with HTTP {self.status}: {self.message} ({self.url})"
        return f"Jira request failed: {self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class TrackerVersionNotFound:
    version: str

    def __str__(self) -> str:
        return f"Jira version '{self.version}' does not exist"


@dataclass(frozen=True, slots=True)
class VersionAlreadyReleased:
    name: str

    def __str__(self) -> str:
        return f"The Version '{self.name}' got already released in Jira."


@dataclass(frozen=True, slots=True)
class SquashBlockedReleased:
    version: str
    next_version: str
    released: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Version '{self.version}' cannot be released, as there is already one or multiple "
            f"released version(s) ({','.join(self.released)}) before the next version '{self.next_version}'."
        )


@dataclass(frozen=True, slots=True)
class SquashBlockedClosedIssues:
    version: str
    issue_keys: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Version '{self.version}' cannot be released, as one or multiple versions "
            f"contain closed issues ({', '.join(self.issue_keys)})"
        )


@dataclass(frozen=True, slots=True)
class UnsupportedVersionScheme:
    name: str

    def __str__(self) -> str:
        return (
            f"Version '{self.name}' has to be either a semantic version (1.0.0) "
            "or a dotted numeric version (1.0.0.0)"
        )


TrackerError = (
    TrackerHttpError
    | TrackerVersionNotFound
    | VersionAlreadyReleased
    | SquashBlockedReleased
    | SquashBlockedClosedIssues
    | UnsupportedVersionScheme
)
