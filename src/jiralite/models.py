"""Request and response types for the Jira REST client.

Issues, comments and changelog entries stay open-ended dicts; only the
pieces the client itself interprets are modelled here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

__all__ = [
    "NO_RESPONSE_STATUS",
    "ApiResult",
    "EditIssueConfig",
    "NoResponse",
    "Page",
    "RequestMethod",
    "Response",
    "SearchIssuesConfig",
]

# Numeric stand-in older callers used for "no status received"
NO_RESPONSE_STATUS = 902

# Server-side defaults for offset-paginated endpoints
DEFAULT_MAX_RESULTS = 100
DEFAULT_START_AT = 0


class RequestMethod(str, Enum):
    """HTTP methods the dispatcher knows how to send.

    Note: Uses (str, Enum) so members can be handed straight to httpx.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def sends_body(self) -> bool:
        """Only POST and PUT ever carry a JSON body."""
        return self in (RequestMethod.POST, RequestMethod.PUT)


@dataclass(frozen=True)
class Response:
    """Parsed JSON body plus the HTTP status of one round trip."""

    data: dict[str, Any]
    status: int


@dataclass(frozen=True)
class NoResponse:
    """Round trip that produced no usable HTTP status.

    Endpoints compare ``status`` against their success code; ``None`` never
    matches, so they fall through to their failure sentinel.
    """

    data: dict[str, Any] = field(default_factory=dict)
    status: None = None

    @property
    def legacy_status(self) -> int:
        return NO_RESPONSE_STATUS


ApiResult = Response | NoResponse


@dataclass(frozen=True)
class Page:
    """Offset/limit cursor for paginated endpoints.

    Attributes:
        starts_at: Zero-based index of the first item to return
        max_results: Page size requested from the server
    """

    starts_at: int | None = None
    max_results: int | None = None

    def to_params(self) -> dict[str, int]:
        """Render the cursor with Jira's wire names, skipping unset fields."""
        params: dict[str, int] = {}
        if self.starts_at is not None:
            params["startAt"] = self.starts_at
        if self.max_results is not None:
            params["maxResults"] = self.max_results
        return params


@dataclass
class EditIssueConfig:
    """Query flags accepted by the edit-issue endpoint."""

    notify_users: bool | None = None
    override_editable_flag: bool | None = None
    override_screen_security: bool | None = None

    def to_params(self) -> dict[str, bool]:
        params = {
            "notifyUsers": self.notify_users,
            "overrideEditableFlag": self.override_editable_flag,
            "overrideScreenSecurity": self.override_screen_security,
        }
        return {k: v for k, v in params.items() if v is not None}


@dataclass
class SearchIssuesConfig:
    """Optional knobs for a JQL search.

    Attributes:
        expand: Entities to expand; sent as one comma-separated string
        fields: Field ids to return (server default when None)
        fields_by_keys: Reference fields by key instead of id
        properties: Issue property keys to return
    """

    expand: list[str] = field(default_factory=list)
    fields: list[str] | None = None
    fields_by_keys: bool | None = None
    properties: list[str] | None = None

    def to_body(self) -> dict[str, Any]:
        """Render the search body fragment. ``None`` entries are dropped later."""
        return {
            "expand": ",".join(self.expand) if self.expand else None,
            "fields": self.fields,
            "fieldsByKeys": self.fields_by_keys,
            "properties": self.properties,
        }
