"""jiralite - minimal async client for the Jira REST API.

Provides:
- JiraClient: request dispatcher plus issue endpoints (create/get/update/
  edit/delete/assign, changelog and comment pages, JQL search)
- paginate: lazy offset pagination over any single-page endpoint
- JiraSettings: optional pydantic-settings loader (JIRA_* variables)
- configure_logging: opt-in structured logging for the jiralite loggers

Python Version: 3.10+ required
"""

from .__version__ import __version__
from .client import JiraClient, JiraClientError, JiraResponseParseError, JiraTransportError
from .config import JiraSettings, get_config, reset_config
from .logging_config import StructuredFormatter, configure_logging
from .models import (
    NO_RESPONSE_STATUS,
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

__all__ = [
    "NO_RESPONSE_STATUS",
    "ApiResult",
    "EditIssueConfig",
    "JiraClient",
    "JiraClientError",
    "JiraResponseParseError",
    "JiraSettings",
    "JiraTransportError",
    "NoResponse",
    "Page",
    "RequestMethod",
    "Response",
    "SearchIssuesConfig",
    "StructuredFormatter",
    "__version__",
    "configure_logging",
    "get_config",
    "params_to_query",
    "paginate",
    "reset_config",
]
