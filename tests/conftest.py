"""Shared pytest fixtures for jiralite tests.

Fixture Organization:
    - fake_jira: in-process Jira stand-in built on httpx.MockTransport
    - jira: JiraClient wired to fake_jira
    - reset_logging / clean_settings: isolation for logging and settings tests
"""

import json
import logging
import os
from typing import Any

import httpx
import pytest
import pytest_asyncio

from jiralite.client import JiraClient
from jiralite.config import reset_config

# =============================================================================
# Fake Jira Server
# =============================================================================


class FakeJiraServer:
    """Records every request and answers with a canned status/body.

    ``queue`` holds (status, body) pairs consumed in order before falling
    back to ``status``/``body``. ``raw_body`` (bytes) bypasses JSON encoding.
    ``error`` is raised instead of answering, to simulate transport failures.
    ``headers`` are added to every canned response.
    """

    def __init__(self) -> None:
        self.status = 200
        self.body: Any = {}
        self.raw_body: bytes | None = None
        self.error: Exception | None = None
        self.headers: dict[str, str] = {}
        self.queue: list[tuple[int, Any]] = []
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.queue:
            status, body = self.queue.pop(0)
            return httpx.Response(
                status, headers=self.headers, content=json.dumps(body).encode()
            )
        if self.raw_body is not None:
            return httpx.Response(self.status, headers=self.headers, content=self.raw_body)
        return httpx.Response(
            self.status, headers=self.headers, content=json.dumps(self.body).encode()
        )

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def request_line(self, index: int = -1) -> str:
        """``METHOD url`` plus the body on a second line when one was sent."""
        request = self.requests[index]
        line = f"{request.method} {request.url}"
        if request.content:
            line += "\n" + request.content.decode()
        return line

    def json_body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def fake_jira() -> FakeJiraServer:
    return FakeJiraServer()


@pytest_asyncio.fixture
async def jira(fake_jira):
    """JiraClient for https://example.com with foo/bar credentials, closed after the test."""
    client = JiraClient(
        "https://example.com",
        "foo",
        "bar",
        transport=fake_jira.transport,
    )
    yield client
    await client.close()


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging():
    """Strip handlers from jiralite loggers so caplog can see records."""
    yield
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("jiralite"):
            child_logger = logging.getLogger(name)
            child_logger.handlers.clear()
            child_logger.propagate = True
            child_logger.setLevel(logging.NOTSET)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Drop JIRA_* variables, run from an empty directory and reset the singleton."""
    for key in list(os.environ.keys()):
        if key.upper().startswith("JIRA_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()
