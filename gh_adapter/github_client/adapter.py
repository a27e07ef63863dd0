"""GitHub implementation of the repository adapter contract."""

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from github import Auth, Github

from ..config import AdapterConfig, HttpAuthType
from ..exceptions import AuthenticationFailure, MergeRejected, TransportFailure
from ..models import (
    Comment,
    CommitRef,
    ForkResult,
    Issue,
    PullRequest,
    Release,
    ReleaseRef,
)
from ..utils.date_parser import format_timestamp
from .auth import AuthenticationSelector
from .normalizers import (
    normalize_asset,
    normalize_comment,
    normalize_commit,
    normalize_fork,
    normalize_issue,
    normalize_label,
    normalize_milestone,
    normalize_pull_request,
    normalize_release,
    normalize_release_ref,
)
from .pagination import CancellationToken, ResultPager
from .resources import ApiResources, RestClient, error_message

logger = logging.getLogger(__name__)

# Status codes GitHub uses when a pull request cannot be merged.
MERGE_REFUSED_STATUSES = frozenset({405, 409})


class GitHubAdapter:
    """Canonical repository operations backed by the GitHub REST API.

    Repository scope (owner and name) comes from the configuration and is
    supplied to every call. One instance owns one PyGithub connection and
    must not be shared between threads without external locking.
    """

    PULL_REQUEST_STATES = ("open", "closed", "all")

    def __init__(
        self,
        config: AdapterConfig,
        pager: ResultPager | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            pager: Listing driver, defaults to one honoring config.listing_timeout
            sleep: Sleep function used between retries
        """
        self.config = config
        self.owner = config.owner
        self.repo = config.repo
        self.domain = config.repo_domain_url
        self.pager = pager or ResultPager(timeout=config.listing_timeout)
        self._sleep = sleep
        self._auth = AuthenticationSelector()

        self._connect(None)

    @classmethod
    def get_name(cls) -> str:
        return "github"

    def _connect(self, auth: Auth.Auth | None) -> None:
        self.github = Github(
            auth=auth,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            retry=None,
            seconds_between_requests=None,
            seconds_between_writes=None,
        )
        self.resources = ApiResources(
            RestClient(
                self.github.requester,
                self.config.retry,
                sleep=self._sleep,
                verbose=self.config.debug,
            )
        )

    def _scope(self) -> tuple[str, str]:
        return self.owner, self.repo

    def _list(
        self,
        resource: Any,
        method: str,
        *args: Any,
        page: int | None = None,
        per_page: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[Any]:
        if page is None:
            return self.pager.fetch_all(
                resource, method, *args, per_page=per_page, cancel=cancel
            )
        return self.pager.fetch_page(
            resource, method, *args, page=page, per_page=per_page, cancel=cancel
        )

    # Authentication

    @property
    def auth_mode(self) -> HttpAuthType:
        return self._auth.mode

    def authenticate(self) -> None:
        """Authenticate with the configured credentials.

        Raises:
            ValueError: If no credentials are configured
        """
        if self.config.credentials is None:
            raise ValueError("No credentials configured for authentication")
        auth = self._auth.select(self.config.credentials)
        self._connect(auth)
        logger.debug("Authenticating in %s mode", self._auth.mode.value)

    def is_authenticated(self) -> bool:
        """Probe the platform with the current credentials.

        Rejected credentials yield False; other failures propagate.
        """
        try:
            _, data = self.resources.client.send("GET", self._auth.check_path)
        except AuthenticationFailure:
            return False
        return self._auth.accepts(data)

    def get_token_generation_url(self) -> str:
        return f"{self.domain}/settings/tokens"

    # Repository

    def create_fork(self, org: str | None = None) -> ForkResult:
        return normalize_fork(self.resources.forks.create(*self._scope(), org))

    # Issues

    def open_issue(
        self, subject: str, body: str, options: Mapping[str, Any] | None = None
    ) -> int:
        payload = {**(options or {}), "title": subject, "body": body}
        number = self.resources.issues.create(*self._scope(), payload)["number"]
        logger.info("Opened issue #%d in %s/%s", number, self.owner, self.repo)
        return number

    def get_issue(self, number: int) -> Issue:
        raw = self.resources.issues.show(*self._scope(), number)
        # The requested number stays canonical, also for transferred issues.
        return normalize_issue({**raw, "number": number}, self.get_issue_url(number))

    def get_issue_url(self, number: int) -> str:
        return f"{self.domain}/{self.owner}/{self.repo}/issues/{number}"

    def list_issues(
        self,
        filters: Mapping[str, Any] | None = None,
        page: int | None = None,
        per_page: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[Issue]:
        """List issues.

        Args:
            filters: Issue filters (state, labels, since, assignee, ...);
                datetimes and label lists are converted to API form
            page: Page to fetch, or None to fetch every page
            per_page: Page size
            cancel: Token that aborts a multi-page fetch between pages

        Returns:
            Issues in server order
        """
        raw_issues = self._list(
            self.resources.issues,
            "all",
            *self._scope(),
            _filter_params(filters),
            page=page,
            per_page=per_page,
            cancel=cancel,
        )
        return [
            normalize_issue(raw, self.get_issue_url(raw["number"]))
            for raw in raw_issues
        ]

    def update_issue(self, number: int, patch: Mapping[str, Any]) -> None:
        self.resources.issues.update(*self._scope(), number, dict(patch))

    def close_issue(self, number: int) -> None:
        self.update_issue(number, {"state": "closed"})

    def create_comment(self, number: int, text: str) -> str:
        raw = self.resources.comments.create(*self._scope(), number, {"body": text})
        return raw["html_url"]

    def list_comments(
        self, number: int, cancel: CancellationToken | None = None
    ) -> list[Comment]:
        raw_comments = self.pager.fetch_all(
            self.resources.comments, "all", *self._scope(), number, cancel=cancel
        )
        return [normalize_comment(raw) for raw in raw_comments]

    def list_labels(self, cancel: CancellationToken | None = None) -> list[str]:
        raw_labels = self.pager.fetch_all(
            self.resources.labels, "all", *self._scope(), cancel=cancel
        )
        return [normalize_label(raw).name for raw in raw_labels]

    def list_milestones(
        self,
        filters: Mapping[str, Any] | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[str]:
        raw_milestones = self.pager.fetch_all(
            self.resources.milestones,
            "all",
            *self._scope(),
            _filter_params(filters),
            cancel=cancel,
        )
        return [normalize_milestone(raw).title for raw in raw_milestones]

    # Pull requests

    def open_pull_request(
        self,
        base: str,
        head: str,
        subject: str,
        body: str,
        options: Mapping[str, Any] | None = None,
    ) -> PullRequest:
        payload = {
            **(options or {}),
            "base": base,
            "head": head,
            "title": subject,
            "body": body,
        }
        pull_request = self._pull_request(
            self.resources.pull_requests.create(*self._scope(), payload)
        )
        logger.info(
            "Opened pull request #%d (%s -> %s)", pull_request.number, head, base
        )
        return pull_request

    def get_pull_request(self, number: int) -> PullRequest:
        return self._pull_request(
            self.resources.pull_requests.show(*self._scope(), number)
        )

    def get_pull_request_url(self, number: int) -> str:
        return f"{self.domain}/{self.owner}/{self.repo}/pull/{number}"

    def _pull_request(self, raw: dict[str, Any]) -> PullRequest:
        return normalize_pull_request(
            raw, fallback_url=self.get_pull_request_url(raw["number"])
        )

    def list_pull_request_commits(
        self, number: int, cancel: CancellationToken | None = None
    ) -> list[CommitRef]:
        raw_commits = self.pager.fetch_all(
            self.resources.pull_requests,
            "commits",
            *self._scope(),
            number,
            cancel=cancel,
        )
        return [normalize_commit(raw) for raw in raw_commits]

    def merge_pull_request(self, number: int, message: str) -> str:
        """Merge a pull request.

        Returns:
            SHA of the merge commit

        Raises:
            MergeRejected: If the platform refuses or fails the merge
        """
        try:
            result = self.resources.pull_requests.merge(*self._scope(), number, message)
        except TransportFailure as e:
            if e.status in MERGE_REFUSED_STATUSES:
                raise MergeRejected(error_message(e.data, str(e))) from e
            raise

        result = result or {}
        if not result.get("merged"):
            raise MergeRejected(result.get("message") or "no reason given")

        logger.info("Merged pull request #%d as %s", number, result.get("sha"))
        return result["sha"]

    def list_pull_requests(
        self,
        state: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[PullRequest]:
        """List pull requests, optionally filtered by state.

        Raises:
            ValueError: If ``state`` is not one of list_pull_request_states()
        """
        if state is not None and state not in self.PULL_REQUEST_STATES:
            raise ValueError(
                f"Invalid pull request state '{state}'. "
                f"Expected one of: {', '.join(self.PULL_REQUEST_STATES)}"
            )
        raw_prs = self._list(
            self.resources.pull_requests,
            "all",
            *self._scope(),
            state,
            page=page,
            per_page=per_page,
            cancel=cancel,
        )
        return [self._pull_request(raw) for raw in raw_prs]

    def list_pull_request_states(self) -> Sequence[str]:
        return self.PULL_REQUEST_STATES

    # Releases

    def create_release(
        self, name: str, options: Mapping[str, Any] | None = None
    ) -> ReleaseRef:
        payload = {**(options or {}), "tag_name": name}
        return normalize_release_ref(
            self.resources.releases.create(*self._scope(), payload)
        )

    def list_releases(self, cancel: CancellationToken | None = None) -> list[Release]:
        raw_releases = self.pager.fetch_all(
            self.resources.releases, "all", *self._scope(), cancel=cancel
        )
        return [normalize_release(raw) for raw in raw_releases]

    def delete_release(self, release_id: int) -> None:
        self.resources.releases.remove(*self._scope(), release_id)

    def upload_release_asset(
        self, release_id: int, name: str, content_type: str, content: bytes
    ) -> int:
        raw = self.resources.release_assets.create(
            *self._scope(), release_id, name, content_type, content
        )
        return normalize_asset(raw).id


def _filter_params(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Convert listing filters to query parameters."""
    params: dict[str, Any] = {}
    for key, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, datetime):
            value = format_timestamp(value)
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        params[key] = value
    return params
