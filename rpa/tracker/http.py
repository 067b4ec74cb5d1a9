"""HTTP client abstraction for the Jira REST API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Canned responses for testing
"""

from __future__ import annotations

import base64
import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from rpa.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def request(self, method: str, url: str, body: object | None = None) -> Result[Any, HttpError]:
        """Send ``body`` as JSON and decode the JSON answer.

        Returns:
            Ok with the decoded document (None for an empty body), or Err
            with HttpError for non-2xx answers and transport failures
        """
        ...


class RealHttpClient:
    """urllib based client with optional basic authentication."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "rpa/0.3.0",
        basic_auth: tuple[str, str] | None = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if basic_auth is not None:
            token = base64.b64encode(f"{basic_auth[0]}:{basic_auth[1]}".encode()).decode("ascii")
            self._headers["Authorization"] = f"Basic {token}"
        self._ssl_context = ssl.create_default_context()

    def request(self, method: str, url: str, body: object | None = None) -> Result[Any, HttpError]:
        data = None if body is None else json.dumps(body).encode("utf-8")
        try:
            req = urllib.request.Request(url, data=data, headers=self._headers, method=method)
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as response:
                payload: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_detail(e)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not payload.strip():
            return Ok(None)
        try:
            return Ok(json.loads(payload.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


def _error_detail(error: urllib.error.HTTPError) -> str:
    """Jira explains refusals in ``errorMessages``; fall back to the reason phrase."""
    try:
        document = json.loads(error.read().decode("utf-8"))
    except (OSError, ValueError):
        return str(error.reason)
    if isinstance(document, dict):
        messages = document.get("errorMessages")
        errors = document.get("errors")
        parts = [str(m) for m in messages] if isinstance(messages, list) else []
        if isinstance(errors, dict):
            parts += [f"{k}: {v}" for k, v in errors.items()]
        if parts:
            return "; ".join(parts)
    return str(error.reason)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", "https://jira/rest/api/2/version/1", {"id": "1"})
        result = client.request("GET", "https://jira/rest/api/2/version/1")
        assert result == Ok({"id": "1"})
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str, object | None]] = []

    def set_response(self, method: str, url: str, response: Any) -> None:
        """Set the answer for ``method url``; an HttpError is returned as Err."""
        self._responses[(method, url)] = response

    def request(self, method: str, url: str, body: object | None = None) -> Result[Any, HttpError]:
        self.calls.append((method, url, body))

        key = (method, url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def requests_for(self, method: str) -> list[tuple[str, object | None]]:
        return [(url, body) for m, url, body in self.calls if m == method]
