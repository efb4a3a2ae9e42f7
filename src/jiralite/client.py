"""Jira REST API client.

Provides an async httpx-based client for the Jira REST API (v2 by default)
with Basic Auth. Every endpoint method is one call to ``request()``, which
builds the URL (sorted query string), sends at most one JSON body and
returns a ``Response`` holding the parsed body and HTTP status.

Non-success statuses are not errors: endpoints report them through their
return value (None / False / {}). Exceptions are reserved for requests that
could not be completed (``JiraTransportError``) or whose successful or
JSON-typed body does not parse (``JiraResponseParseError``).

Reference: https://developer.atlassian.com/cloud/jira/platform/rest/v2/intro/
"""

import base64
import json
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any

import httpx

from .config import DEFAULT_API_VERSION, JiraSettings, get_config
from .models import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_START_AT,
    ApiResult,
    EditIssueConfig,
    NoResponse,
    Page,
    RequestMethod,
    Response,
    SearchIssuesConfig,
)
from .pagination import paginate
from .query import params_to_query

logger = logging.getLogger("jiralite.client")

__all__ = [
    "JiraClient",
    "JiraClientError",
    "JiraResponseParseError",
    "JiraTransportError",
]


class JiraClientError(Exception):
    """Base class for failures that prevented a usable response."""

    pass


class JiraTransportError(JiraClientError):
    """Raised when the HTTP round trip itself fails.

    Attributes:
        payload: Best-effort JSON parse of the error text; falls back to
            ``{"message": <text>}`` when the text is not a JSON object.
    """

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        super().__init__(payload.get("message") or payload.get("error") or str(payload))


class JiraResponseParseError(JiraClientError):
    """Raised when a 2xx or JSON-typed response body is not valid JSON."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"JIRA_RESPONSE_NOT_JSON: HTTP {status}, {len(body)} bytes")


def _parse_error_payload(text: str) -> dict[str, Any]:
    try:
        parsed = json.loads(text)
    except (ValueError, TypeError):
        return {"message": text}
    if isinstance(parsed, dict):
        return parsed
    return {"message": text}


def _claims_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("Content-Type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


def _edit_params(config: EditIssueConfig | Mapping[str, Any] | None) -> dict[str, Any]:
    if config is None:
        return {}
    if isinstance(config, EditIssueConfig):
        return config.to_params()
    return dict(config)


class JiraClient:
    """Jira REST API client using httpx with Basic Auth.

    Uses a long-lived httpx.AsyncClient with connection pooling. Connection
    settings are fixed at construction time.

    Attributes:
        base_url: Jira instance URL
        api_base_url: ``base_url`` joined with ``rest/api/<version>/``
        auth_header: Basic Auth header, or None when a credential is empty
        client: Underlying httpx.AsyncClient

    Example:
        >>> async with JiraClient("https://company.atlassian.net", "user", "token") as jira:
        ...     issue = await jira.get_issue("PROJ-1")
        ...     if issue is not None:
        ...         print(issue["fields"]["summary"])
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        version: str = DEFAULT_API_VERSION,
        *,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Jira instance URL (e.g., https://company.atlassian.net)
            username: Account name for Basic Auth
            password: Password or API token for Basic Auth
            version: REST API version segment (default: "2")
            timeout: httpx timeout override
            transport: Custom httpx transport (e.g. httpx.MockTransport)

        Raises:
            ValueError: If url is not an absolute http(s) URL
        """
        base_url = httpx.URL(url)
        if base_url.scheme not in ("http", "https") or not base_url.host:
            raise ValueError(f"Jira url must be an absolute http(s) URL, got {url!r}")

        self._base_url = base_url
        self._version = version or DEFAULT_API_VERSION
        self._api_base_url = base_url.join(f"rest/api/{self._version}/")
        self._username = username

        # Basic Auth only when both parts are present
        self.auth_header: str | None = None
        if username and password:
            encoded = base64.b64encode(f"{username}:{password}".encode()).decode()
            self.auth_header = f"Basic {encoded}"

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.auth_header:
            headers["Authorization"] = self.auth_header

        if timeout is None:
            timeout = httpx.Timeout(connect=3.0, read=15.0, write=5.0, pool=3.0)

        limits = httpx.Limits(
            max_keepalive_connections=20,
            max_connections=100,
            keepalive_expiry=10.0,
        )

        self.client = httpx.AsyncClient(
            timeout=timeout,
            limits=limits,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: JiraSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "JiraClient":
        """Build a client from JiraSettings (defaults to the global settings)."""
        settings = settings or get_config()
        timeout = httpx.Timeout(
            connect=settings.timeout_connect,
            read=settings.timeout_read,
            write=settings.timeout_write,
            pool=settings.timeout_pool,
        )
        return cls(
            settings.url,
            settings.username,
            settings.password.get_secret_value(),
            settings.api_version,
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def api_base_url(self) -> httpx.URL:
        return self._api_base_url

    @property
    def version(self) -> str:
        return self._version

    @property
    def username(self) -> str:
        return self._username

    def build_url(self, rel: str, params: Mapping[str, Any] | None = None) -> str:
        """Resolve ``rel`` against the API base and append the sorted query."""
        return str(self._api_base_url.join(rel)) + params_to_query(params)

    async def request(
        self,
        method: RequestMethod | str,
        rel: str,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> ApiResult:
        """Send one request and return its parsed result.

        Top-level None values are dropped from ``body``. A JSON body is sent
        only for POST/PUT and only when something remains after that.

        Args:
            method: GET, POST, PUT or DELETE
            rel: Path relative to the versioned API base (e.g. "issue/PROJ-1")
            params: Query parameters; None values are skipped
            body: JSON body for POST/PUT

        Returns:
            Response with parsed body and status, or NoResponse when the
            transport produced no status code.

        Raises:
            JiraTransportError: If the HTTP round trip fails
            JiraResponseParseError: If a 2xx or application/json body is not
                valid JSON. Other non-JSON bodies (proxy error pages) yield
                ``data={}`` with the real status.
            ValueError: If method is not one of GET/POST/PUT/DELETE
        """
        method = RequestMethod(method)
        url = self.build_url(rel, params)

        payload = {k: v for k, v in (body or {}).items() if v is not None}
        content = None
        if method.sends_body and payload:
            content = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode(
                "utf-8"
            )

        logger.debug(
            "jira_request",
            extra={"method": method.value, "path": rel, "has_body": content is not None},
        )

        try:
            response = await self.client.request(method.value, url, content=content)
        except httpx.HTTPError as e:
            logger.error(
                "jira_transport_error",
                extra={"method": method.value, "path": rel, "error": str(e)},
            )
            raise JiraTransportError(_parse_error_payload(str(e))) from e

        status = response.status_code
        text = response.text
        if text.strip():
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                if not (response.is_success or _claims_json(response)):
                    # Non-JSON error page: report the status, drop the body
                    logger.debug(
                        "jira_response_not_json",
                        extra={"method": method.value, "path": rel, "status_code": status},
                    )
                    data = {}
                else:
                    logger.error(
                        "jira_response_parse_error",
                        extra={"method": method.value, "path": rel, "status_code": status},
                    )
                    raise JiraResponseParseError(status, text) from e
        else:
            # 204 No Content and friends
            data = {}

        logger.debug(
            "jira_response",
            extra={"method": method.value, "path": rel, "status_code": status},
        )

        if not status:
            return NoResponse(data)
        return Response(data=data, status=status)

    # =========================================================================
    # Issues
    # =========================================================================

    async def create_issue(
        self, body: Mapping[str, Any], update_history: bool = False
    ) -> dict[str, Any] | None:
        """POST issue. Returns the created issue (id/key/self) on 201, else None."""
        res = await self.request(
            RequestMethod.POST, "issue", {"updateHistory": update_history}, body
        )
        return res.data if res.status == 201 else None

    async def get_issue(self, key_or_id: str) -> dict[str, Any] | None:
        """GET issue/{key}. Returns the issue on 200, else None."""
        res = await self.request(RequestMethod.GET, f"issue/{key_or_id}")
        return res.data if res.status == 200 else None

    async def update_issue(
        self,
        key_or_id: str,
        body: Mapping[str, Any],
        config: EditIssueConfig | Mapping[str, Any] | None = None,
    ) -> bool:
        """PUT issue/{key}. True on 204."""
        res = await self.request(
            RequestMethod.PUT, f"issue/{key_or_id}", _edit_params(config), body
        )
        return res.status == 204

    async def edit_issue(
        self,
        key_or_id: str,
        body: Mapping[str, Any],
        config: EditIssueConfig | Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Update an issue, then refetch it.

        The refetch only happens when the update reports success; any other
        outcome returns None without a second request.
        """
        if await self.update_issue(key_or_id, body, config):
            return await self.get_issue(key_or_id)
        return None

    async def delete_issue(self, key_or_id: str, delete_subtasks: bool = True) -> bool:
        res = await self.request(
            RequestMethod.DELETE, f"issue/{key_or_id}", {"deleteSubtasks": delete_subtasks}
        )
        return res.status == 204

    async def assign_issue(self, key_or_id: str, body: Mapping[str, Any]) -> bool:
        """PUT issue/{key}/assignee with a user object (e.g. {"name": "jdoe"})."""
        res = await self.request(RequestMethod.PUT, f"issue/{key_or_id}/assignee", {}, body)
        return res.status == 204

    # =========================================================================
    # Paged reads
    # =========================================================================

    @staticmethod
    def _page_params(page: Page | None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "maxResults": DEFAULT_MAX_RESULTS,
            "startAt": DEFAULT_START_AT,
        }
        if page is not None:
            params.update(page.to_params())
        return params

    async def get_issue_changelog_page(
        self, key_or_id: str, page: Page | None = None
    ) -> dict[str, Any] | None:
        """GET issue/{key}/changelog. Page object (``values``, ``total``) on 200, else None."""
        res = await self.request(
            RequestMethod.GET, f"issue/{key_or_id}/changelog", self._page_params(page)
        )
        return res.data if res.status == 200 else None

    async def get_issue_comment_page(
        self, key_or_id: str, page: Page | None = None
    ) -> dict[str, Any] | None:
        """GET issue/{key}/comment. Page object (``comments``, ``total``) on 200, else None."""
        res = await self.request(
            RequestMethod.GET, f"issue/{key_or_id}/comment", self._page_params(page)
        )
        return res.data if res.status == 200 else None

    async def search_issues_page(
        self,
        jql: str,
        config: SearchIssuesConfig | None = None,
        page: Page | None = None,
    ) -> dict[str, Any]:
        """POST search for one page of JQL results.

        Returns:
            The search page (``issues``, ``total``, ...) on 200, else {}.
        """
        config = config or SearchIssuesConfig()
        body = {**self._page_params(page), "jql": jql, **config.to_body()}
        res = await self.request(RequestMethod.POST, "search", {}, body)
        return res.data if res.status == 200 else {}

    def search_issues_generator(
        self,
        jql: str,
        config: SearchIssuesConfig | None = None,
        page_size: int = DEFAULT_MAX_RESULTS,
    ) -> AsyncIterator[dict[str, Any]]:
        """Lazily iterate every issue matching ``jql``, one search page per pull."""
        return paginate(
            self.search_issues_page,
            jql,
            config or SearchIssuesConfig(),
            key="issues",
            page_size=page_size,
        )

    def iter_issue_comments(
        self, key_or_id: str, page_size: int = DEFAULT_MAX_RESULTS
    ) -> AsyncIterator[dict[str, Any]]:
        """Lazily iterate every comment on an issue."""
        return paginate(
            self.get_issue_comment_page, key_or_id, key="comments", page_size=page_size
        )

    def iter_issue_changelog(
        self, key_or_id: str, page_size: int = DEFAULT_MAX_RESULTS
    ) -> AsyncIterator[dict[str, Any]]:
        """Lazily iterate every changelog entry of an issue."""
        return paginate(
            self.get_issue_changelog_page, key_or_id, key="values", page_size=page_size
        )

    # =========================================================================
    # Connectivity
    # =========================================================================

    async def test_connection(self) -> dict[str, Any]:
        """Check connectivity and credentials with GET myself.

        Returns:
            dict with keys:
                - success (bool): True if the server answered 200
                - user (str | None): Authenticated user's name
                - error (str | None): Error message if failed

        Example:
            >>> result = await jira.test_connection()
            >>> if result["success"]:
            ...     print(f"Connected as: {result['user']}")
        """
        try:
            res = await self.request(RequestMethod.GET, "myself")
        except JiraClientError as e:
            return {"success": False, "user": None, "error": f"Connection error: {e}"}

        if res.status != 200:
            logger.warning("jira_connection_failed", extra={"status_code": res.status})
            return {"success": False, "user": None, "error": f"HTTP {res.status}"}

        data = res.data if isinstance(res.data, dict) else {}
        return {
            "success": True,
            "user": data.get("name") or data.get("emailAddress"),
            "error": None,
        }

    async def close(self) -> None:
        """Close the HTTP client connection."""
        if getattr(self, "client", None) is not None:
            await self.client.aclose()

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
