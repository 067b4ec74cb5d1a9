"""Typed configuration for a release-managed repository.

The configuration lives in ``.rpa.toml`` at the repository root:

    [remotes]
    names = ["origin"]

    [jira]
    url = "https://jira.example.com"
    project_key = "RPA"

    [ignore_lists]
    prerelease_merge = ["Build/Version.props"]

    [build]
    command = ["msbuild", "Build/Project.build"]

    [[build.prepare_next_version]]
    target = "UpdateAssemblyInfos"
    commit_message = "Update metadata to version '{version}'."
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table, get_table_list

__all__ = [
    "CONFIG_FILE_NAME",
    "BuildConfig",
    "BuildStep",
    "Config",
    "ConfigError",
    "IgnoreListsConfig",
    "JiraConfig",
    "JiraCredentials",
    "RemotesConfig",
    "load_config",
    "load_credentials",
]

CONFIG_FILE_NAME = ".rpa.toml"

JIRA_USER_ENV = "RPA_JIRA_USER"
JIRA_TOKEN_ENV = "RPA_JIRA_TOKEN"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RemotesConfig:
    names: tuple[str, ...] = ()

    @property
    def usable(self) -> tuple[str, ...]:
        """Remote names with blanks dropped, in configured order."""
        return tuple(n for n in self.names if n.strip())


@dataclass(frozen=True, slots=True)
class JiraConfig:
    url: str | None = None
    project_key: str | None = None
    # Kept for config compatibility; authentication is always basic auth.
    use_ntlm: bool = False

    @property
    def api_url(self) -> str | None:
        """Base URL of the REST API v2, with a trailing slash."""
        if self.url is None:
            return None
        return f"{self.url.rstrip('/')}/rest/api/2/"


@dataclass(frozen=True, slots=True)
class IgnoreListsConfig:
    """Files whose changes are discarded while merging a given kind of branch."""

    prerelease_merge: tuple[str, ...] = ()
    tag_stable_merge: tuple[str, ...] = ()
    develop_stable_merge: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BuildStep:
    target: str
    commit_message: str | None = None


@dataclass(frozen=True, slots=True)
class BuildConfig:
    command: tuple[str, ...] = ()
    prepare_next_version: tuple[BuildStep, ...] = ()
    development_for_next_release: tuple[BuildStep, ...] = ()


@dataclass(frozen=True, slots=True)
class Config:
    remotes: RemotesConfig = field(default_factory=RemotesConfig)
    jira: JiraConfig = field(default_factory=JiraConfig)
    ignore_lists: IgnoreListsConfig = field(default_factory=IgnoreListsConfig)
    build: BuildConfig = field(default_factory=BuildConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML."""
        remotes: StrDict = get_table(data, "remotes") or {}
        jira: StrDict = get_table(data, "jira") or {}
        ignore: StrDict = get_table(data, "ignore_lists") or {}
        build: StrDict = get_table(data, "build") or {}

        return cls(
            remotes=RemotesConfig(names=tuple(get_str_list(remotes, "names") or ())),
            jira=JiraConfig(
                url=get_str(jira, "url"),
                project_key=get_str(jira, "project_key"),
                use_ntlm=get_bool(jira, "use_ntlm"),
            ),
            ignore_lists=IgnoreListsConfig(
                prerelease_merge=tuple(get_str_list(ignore, "prerelease_merge") or ()),
                tag_stable_merge=tuple(get_str_list(ignore, "tag_stable_merge") or ()),
                develop_stable_merge=tuple(get_str_list(ignore, "develop_stable_merge") or ()),
            ),
            build=BuildConfig(
                command=tuple(get_str_list(build, "command") or ()),
                prepare_next_version=_build_steps(build, "prepare_next_version"),
                development_for_next_release=_build_steps(build, "development_for_next_release"),
            ),
        )


def _build_steps(build: StrDict, key: str) -> tuple[BuildStep, ...]:
    steps: list[BuildStep] = []
    for entry in get_table_list(build, key) or []:
        target = get_str(entry, "target")
        if target is None:
            raise ValueError(f"build.{key} entry without a target")
        steps.append(BuildStep(target=target, commit_message=get_str(entry, "commit_message")))
    return tuple(steps)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse the release configuration.

    Args:
        path: Path to ``.rpa.toml``

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


@dataclass(frozen=True, slots=True)
class JiraCredentials:
    user: str
    token: str


def load_credentials(environ: Mapping[str, str] | None = None) -> JiraCredentials | None:
    """Read Jira credentials from ``RPA_JIRA_USER`` / ``RPA_JIRA_TOKEN``."""
    env = os.environ if environ is None else environ
    user = env.get(JIRA_USER_ENV, "").strip()
    token = env.get(JIRA_TOKEN_ENV, "").strip()
    if not user or not token:
        return None
    return JiraCredentials(user=user, token=token)
