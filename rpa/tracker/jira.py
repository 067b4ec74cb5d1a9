"""Jira REST API (v2) implementation of ``Tracker``."""

from __future__ import annotations

import urllib.parse
from collections.abc import Sequence
from datetime import date
from typing import Any

from rpa.core.result import Err, Ok, Result
from rpa.core.structured import as_obj_list, as_str_dict, get_bool, get_str
from rpa.tracker.errors import TrackerError, TrackerHttpError, TrackerVersionNotFound
from rpa.tracker.http import HttpClient, HttpError
from rpa.tracker.model import TrackerIssue, TrackerVersion

__all__ = ["JiraTracker", "parse_issue", "parse_version"]

_SEARCH_PAGE_SIZE = 100
_ISSUE_FIELDS = "id,fixVersions,summary"


class JiraTracker:
    """Talks to ``<jira>/rest/api/2/``.

    Attributes:
        http: Transport (real or mocked)
        api_url: REST base URL ending with a slash
    """

    def __init__(self, http: HttpClient, api_url: str) -> None:
        self.http = http
        self.api_url = api_url if api_url.endswith("/") else f"{api_url}/"

    # Versions

    def create_version(self, project: str, name: str) -> Result[TrackerVersion, TrackerError]:
        result = self._call("POST", "version", {"name": name, "project": project})
        if isinstance(result, Err):
            return result
        version = parse_version(result.value)
        if version is None:
            return Err(
                TrackerHttpError(status=0, url=self._url("version"), message="unexpected answer to version creation")
            )
        return Ok(version)

    def get_versions(self, project: str) -> Result[tuple[TrackerVersion, ...], TrackerError]:
        resource = f"project/{urllib.parse.quote(project)}/versions"
        result = self._call("GET", resource)
        if isinstance(result, Err):
            return result
        items = as_obj_list(result.value)
        if items is None:
            return Err(TrackerHttpError(status=0, url=self._url(resource), message="expected a list of versions"))
        versions = [parse_version(item) for item in items]
        return Ok(tuple(v for v in versions if v is not None))

    def get_version(self, version_id: str) -> Result[TrackerVersion, TrackerError]:
        result = self._call("GET", f"version/{version_id}")
        if isinstance(result, Err):
            if isinstance(result.error, TrackerHttpError) and result.error.status == 404:
                return Err(TrackerVersionNotFound(version=version_id))
            return result
        version = parse_version(result.value)
        if version is None:
            return Err(TrackerVersionNotFound(version=version_id))
        return Ok(version)

    def move_version(self, version_id: str, after_self_link: str) -> Result[None, TrackerError]:
        return self._discard(self._call("POST", f"version/{version_id}/move", {"after": after_self_link}))

    def move_version_first(self, version_id: str) -> Result[None, TrackerError]:
        return self._discard(self._call("POST", f"version/{version_id}/move", {"position": "First"}))

    def release_version(self, version_id: str, release_date: date) -> Result[None, TrackerError]:
        body = {"id": version_id, "released": True, "releaseDate": release_date.isoformat()}
        return self._discard(self._call("PUT", f"version/{version_id}", body))

    def delete_version(self, version_id: str) -> Result[None, TrackerError]:
        return self._discard(self._call("DELETE", f"version/{version_id}"))

    # Issues

    def find_all_non_closed_issues(self, version_id: str) -> Result[tuple[TrackerIssue, ...], TrackerError]:
        return self._search(f'fixVersion={version_id} and resolution = "unresolved"')

    def find_all_closed_issues(self, version_id: str) -> Result[tuple[TrackerIssue, ...], TrackerError]:
        return self._search(f'fixVersion={version_id} and resolution != "unresolved"')

    def move_issues_to_version(
        self, issues: Sequence[TrackerIssue], from_version_id: str, to_version_id: str
    ) -> Result[None, TrackerError]:
        for issue in issues:
            kept = [vid for vid in issue.fix_version_ids if vid != from_version_id]
            if to_version_id not in kept:
                kept.append(to_version_id)
            body = {"fields": {"fixVersions": [{"id": vid} for vid in kept]}}
            result = self._call("PUT", f"issue/{issue.id}", body)
            if isinstance(result, Err):
                return result
        return Ok(None)

    # Internals

    def _search(self, jql: str) -> Result[tuple[TrackerIssue, ...], TrackerError]:
        issues: list[TrackerIssue] = []
        start = 0
        while True:
            query = urllib.parse.urlencode(
                {"jql": jql, "fields": _ISSUE_FIELDS, "startAt": start, "maxResults": _SEARCH_PAGE_SIZE}
            )
            result = self._call("GET", f"search?{query}")
            if isinstance(result, Err):
                return result

            page = as_str_dict(result.value) or {}
            raw_issues = as_obj_list(page.get("issues")) or []
            issues.extend(i for i in (parse_issue(raw) for raw in raw_issues) if i is not None)

            total = page.get("total")
            start += len(raw_issues)
            if not raw_issues or not isinstance(total, int) or start >= total:
                return Ok(tuple(issues))

    def _url(self, resource: str) -> str:
        return f"{self.api_url}{resource}"

    def _call(self, method: str, resource: str, body: object | None = None) -> Result[Any, TrackerError]:
        url = self._url(resource)
        result = self.http.request(method, url, body)
        if isinstance(result, Err):
            return Err(_tracker_error(result.error))
        return Ok(result.value)

    @staticmethod
    def _discard(result: Result[Any, TrackerError]) -> Result[None, TrackerError]:
        if isinstance(result, Err):
            return result
        return Ok(None)


def _tracker_error(error: HttpError) -> TrackerHttpError:
    return TrackerHttpError(status=error.status, url=error.url, message=error.message)


def _id(value: object) -> str | None:
    # Jira sends ids as strings but project ids as numbers.
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_version(raw: object) -> TrackerVersion | None:
    data = as_str_dict(raw)
    if data is None:
        return None
    version_id = _id(data.get("id"))
    name = get_str(data, "name")
    if version_id is None or name is None:
        return None

    release_date: date | None = None
    raw_date = get_str(data, "releaseDate")
    if raw_date is not None:
        try:
            release_date = date.fromisoformat(raw_date[:10])
        except ValueError:
            release_date = None

    return TrackerVersion(
        id=version_id,
        name=name,
        released=get_bool(data, "released"),
        release_date=release_date,
        project_id=_id(data.get("projectId")),
        self_link=get_str(data, "self"),
    )


def parse_issue(raw: object) -> TrackerIssue | None:
    data = as_str_dict(raw)
    if data is None:
        return None
    issue_id = _id(data.get("id"))
    if issue_id is None:
        return None
    fields = as_str_dict(data.get("fields")) or {}
    fix_versions = as_obj_list(fields.get("fixVersions")) or []
    fix_version_ids = tuple(
        vid for vid in (_id((as_str_dict(v) or {}).get("id")) for v in fix_versions) if vid is not None
    )
    return TrackerIssue(
        id=issue_id,
        key=get_str(data, "key") or issue_id,
        summary=get_str(fields, "summary") or "",
        fix_version_ids=fix_version_ids,
    )
