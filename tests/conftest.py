"""Test configuration and fixtures."""

from collections.abc import Iterator
from typing import Any
from unittest.mock import Mock, patch

import pytest

from gh_adapter.config import AdapterConfig, Credentials, HttpAuthType, RetryPolicy
from gh_adapter.github_client.adapter import GitHubAdapter
from tests.fakes import FakeRequester


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(http_auth_type=HttpAuthType.TOKEN, password_or_token="tok")


@pytest.fixture
def config(credentials: Credentials) -> AdapterConfig:
    return AdapterConfig(
        owner="acme",
        repo="widgets",
        credentials=credentials,
        retry=RetryPolicy(max_attempts=3, backoff_base=0, jitter=0),
    )


@pytest.fixture
def requester() -> FakeRequester:
    return FakeRequester()


@pytest.fixture
def mock_github_class(requester: FakeRequester) -> Iterator[Mock]:
    with patch("gh_adapter.github_client.adapter.Github") as github_class:
        github_class.return_value.requester = requester
        yield github_class


@pytest.fixture
def adapter(config: AdapterConfig, mock_github_class: Mock) -> GitHubAdapter:
    return GitHubAdapter(config, sleep=lambda seconds: None)


@pytest.fixture
def raw_issue() -> dict[str, Any]:
    return {
        "number": 42,
        "html_url": "https://github.com/acme/widgets/issues/42",
        "state": "open",
        "title": "Widget falls over",
        "body": "It tips when loaded.",
        "user": {"login": "reporter", "id": 1},
        "labels": [
            {"name": "bug", "color": "ff0000"},
            {"name": "wontfix", "color": "ffffff"},
        ],
        "assignee": {"login": "fixer", "id": 2},
        "milestone": {"title": "v1.0", "number": 3},
        "created_at": "2021-01-01T00:00:00Z",
        "updated_at": "2021-01-02T12:30:00Z",
        "closed_by": None,
    }


@pytest.fixture
def raw_pull_request() -> dict[str, Any]:
    return {
        "number": 7,
        "html_url": "https://github.com/acme/widgets/pull/7",
        "state": "closed",
        "title": "Stabilize widget",
        "body": "Adds a wider base.",
        "user": {"login": "contributor"},
        "merged_by": {"login": "maintainer"},
        "head": {
            "ref": "feature/base",
            "sha": "aaa111",
            "user": {"login": "contributor"},
            "repo": {"name": "widgets-fork"},
        },
        "base": {
            "ref": "main",
            "label": "acme:main",
            "sha": "bbb222",
            "repo": {"name": "widgets"},
        },
        "created_at": "2021-02-01T00:00:00Z",
        "updated_at": "2021-02-03T00:00:00Z",
    }


@pytest.fixture
def raw_release() -> dict[str, Any]:
    return {
        "id": 1001,
        "html_url": "https://github.com/acme/widgets/releases/tag/v1.0.0",
        "upload_url": (
            "https://uploads.github.com/repos/acme/widgets/releases/1001/assets"
            "{?name,label}"
        ),
        "name": "First stable",
        "tag_name": "v1.0.0",
        "body": "Notes",
        "draft": False,
        "prerelease": True,
        "created_at": "2021-03-01T00:00:00Z",
        "published_at": "2021-03-02T00:00:00Z",
        "author": {"login": "releaser"},
    }
