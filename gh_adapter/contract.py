"""Operation contract every provider adapter implements.

Providers do not share a base class. Each one implements these protocols on
its own and is selected through ``gh_adapter.providers``.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .models import (
    Comment,
    CommitRef,
    ForkResult,
    Issue,
    PullRequest,
    Release,
    ReleaseRef,
)


@runtime_checkable
class AuthOperations(Protocol):
    def authenticate(self) -> None: ...

    def is_authenticated(self) -> bool: ...

    def get_token_generation_url(self) -> str: ...


@runtime_checkable
class IssueOperations(Protocol):
    def open_issue(
        self, subject: str, body: str, options: Mapping[str, Any] | None = None
    ) -> int: ...

    def get_issue(self, number: int) -> Issue: ...

    def get_issue_url(self, number: int) -> str: ...

    def list_issues(
        self,
        filters: Mapping[str, Any] | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> list[Issue]: ...

    def update_issue(self, number: int, patch: Mapping[str, Any]) -> None: ...

    def close_issue(self, number: int) -> None: ...

    def create_comment(self, number: int, text: str) -> str: ...

    def list_comments(self, number: int) -> list[Comment]: ...

    def list_labels(self) -> list[str]: ...

    def list_milestones(
        self, filters: Mapping[str, Any] | None = None
    ) -> list[str]: ...


@runtime_checkable
class PullRequestOperations(Protocol):
    def create_fork(self, org: str | None = None) -> ForkResult: ...

    def open_pull_request(
        self,
        base: str,
        head: str,
        subject: str,
        body: str,
        options: Mapping[str, Any] | None = None,
    ) -> PullRequest: ...

    def get_pull_request(self, number: int) -> PullRequest: ...

    def get_pull_request_url(self, number: int) -> str: ...

    def list_pull_request_commits(self, number: int) -> list[CommitRef]: ...

    def merge_pull_request(self, number: int, message: str) -> str: ...

    def list_pull_requests(
        self,
        state: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> list[PullRequest]: ...

    def list_pull_request_states(self) -> Sequence[str]: ...


@runtime_checkable
class ReleaseOperations(Protocol):
    def create_release(
        self, name: str, options: Mapping[str, Any] | None = None
    ) -> ReleaseRef: ...

    def list_releases(self) -> list[Release]: ...

    def delete_release(self, release_id: int) -> None: ...

    def upload_release_asset(
        self, release_id: int, name: str, content_type: str, content: bytes
    ) -> int: ...


@runtime_checkable
class RepositoryAdapter(
    AuthOperations, IssueOperations, PullRequestOperations, ReleaseOperations, Protocol
):
    """Full capability set of a repository adapter."""
