"""Process exit codes for the ``rpa`` commands."""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes returned by every command.

    The values are part of the command line contract and must stay stable:
    - 0: Success
    - 1: User error (bad arguments, wrong branch, declined prompt)
    - 2: Environment error (missing config, no remotes, git not usable)
    - 3: Repository state error (branch behind/diverged, tag exists, build failed)
    - 4: Tracker error (Jira unreachable or refusing a version change)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    REPOSITORY_ERROR = 3
    TRACKER_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
