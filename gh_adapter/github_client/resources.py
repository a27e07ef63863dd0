"""Raw GitHub REST resources.

Each resource wraps one REST collection and returns the platform's JSON as-is.
Requests go through PyGithub's ``Requester``, which owns the connection,
authentication headers and timeouts. Failures are classified into the
adapter's typed errors here, so nothing above this layer sees PyGithub or
requests exceptions.
"""

import io
import logging
import time
from collections.abc import Callable
from typing import Any, NamedTuple, TypeVar

import requests
from github.GithubException import (
    BadCredentialsException,
    GithubException,
    TwoFactorException,
    UnknownObjectException,
)
from github.Requester import Requester

from ..config import RetryPolicy
from ..exceptions import AuthenticationFailure, NotFoundFailure, TransportFailure
from .retry import call_with_retries

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Page(NamedTuple):
    """One listing response.

    ``links`` holds the parsed ``Link`` header relations, or None when the
    response carried no ``Link`` header at all.
    """

    items: list[Any]
    links: dict[str, str] | None


def parse_link_header(header: str) -> dict[str, str]:
    """Parse an RFC 5988 ``Link`` header into ``{rel: url}``."""
    link_dict: dict[str, str] = {}
    for link in header.split(","):
        parts = link.strip().split(";")
        if len(parts) < 2:
            continue
        url_part = parts[0].strip().strip("<>")
        for param in parts[1:]:
            key, _, value = param.strip().partition("=")
            if key == "rel":
                link_dict[value.strip('"')] = url_part
    return link_dict


def error_message(data: Any, default: str) -> str:
    """Extract the platform's ``message`` from an error body."""
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return default


class RestClient:
    """Executes REST calls and classifies their failures.

    Only GET requests are retried; writes run exactly once. Requests are
    logged at DEBUG, or at INFO when ``verbose`` is set.
    """

    def __init__(
        self,
        requester: Requester,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        verbose: bool = False,
    ):
        self.requester = requester
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._request_level = logging.INFO if verbose else logging.DEBUG

    def get(
        self, path: str, parameters: dict[str, Any] | None = None
    ) -> tuple[dict[str, Any], Any]:
        """GET a resource, retrying transient failures."""
        return self._classify(
            "GET",
            path,
            lambda: call_with_retries(
                lambda: self.requester.requestJsonAndCheck(
                    "GET", path, parameters=parameters
                ),
                self.retry_policy,
                description=f"GET {path}",
                sleep=self._sleep,
            ),
        )

    def send(
        self, verb: str, path: str, payload: dict[str, Any] | None = None
    ) -> tuple[dict[str, Any], Any]:
        """Send a request exactly once, without retries."""
        return self._classify(
            verb,
            path,
            lambda: self.requester.requestJsonAndCheck(verb, path, input=payload),
        )

    def upload(
        self,
        url: str,
        parameters: dict[str, Any],
        content_type: str,
        content: bytes,
    ) -> tuple[dict[str, Any], Any]:
        """POST raw bytes, e.g. a release asset."""
        return self._classify(
            "POST",
            url,
            lambda: self.requester.requestMemoryBlobAndCheck(
                "POST",
                url,
                parameters,
                {"Content-Type": content_type, "Content-Length": str(len(content))},
                io.BytesIO(content),
            ),
        )

    def _classify(self, verb: str, path: str, call: Callable[[], T]) -> T:
        logger.log(self._request_level, "%s %s", verb, path)
        try:
            return call()
        except (BadCredentialsException, TwoFactorException) as e:
            raise AuthenticationFailure(
                error_message(e.data, "Bad credentials")
            ) from e
        except UnknownObjectException as e:
            raise NotFoundFailure(f"{verb} {path}: not found") from e
        except GithubException as e:
            raise TransportFailure(
                f"{verb} {path} failed with status {e.status}: "
                f"{error_message(e.data, str(e))}",
                status=e.status,
                data=e.data,
            ) from e
        except requests.RequestException as e:
            raise TransportFailure(f"{verb} {path} failed: {e}") from e


class Resource:
    """Base for REST collections."""

    def __init__(self, client: RestClient):
        self.client = client

    def _list(
        self,
        path: str,
        parameters: dict[str, Any] | None,
        page: int | None,
        per_page: int | None,
    ) -> Page:
        params = dict(parameters or {})
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page
        headers, data = self.client.get(path, params)
        headers = {key.lower(): value for key, value in (headers or {}).items()}
        links = parse_link_header(headers["link"]) if "link" in headers else None
        return Page(items=list(data or []), links=links)


def repo_path(owner: str, repo: str) -> str:
    return f"/repos/{owner}/{repo}"


class IssueResource(Resource):
    def show(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return self.client.get(f"{repo_path(owner, repo)}/issues/{number}")[1]

    def all(
        self,
        owner: str,
        repo: str,
        parameters: dict[str, Any] | None = None,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        return self._list(
            f"{repo_path(owner, repo)}/issues", parameters, page, per_page
        )

    def create(self, owner: str, repo: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self.client.send("POST", f"{repo_path(owner, repo)}/issues", payload)[1]

    def update(
        self, owner: str, repo: str, number: int, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return self.client.send(
            "PATCH", f"{repo_path(owner, repo)}/issues/{number}", payload
        )[1]


class CommentResource(Resource):
    def all(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        return self._list(
            f"{repo_path(owner, repo)}/issues/{number}/comments", None, page, per_page
        )

    def create(
        self, owner: str, repo: str, number: int, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return self.client.send(
            "POST", f"{repo_path(owner, repo)}/issues/{number}/comments", payload
        )[1]


class LabelResource(Resource):
    def all(
        self,
        owner: str,
        repo: str,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        return self._list(f"{repo_path(owner, repo)}/labels", None, page, per_page)


class MilestoneResource(Resource):
    def all(
        self,
        owner: str,
        repo: str,
        parameters: dict[str, Any] | None = None,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        return self._list(
            f"{repo_path(owner, repo)}/milestones", parameters, page, per_page
        )


class PullRequestResource(Resource):
    def show(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return self.client.get(f"{repo_path(owner, repo)}/pulls/{number}")[1]

    def all(
        self,
        owner: str,
        repo: str,
        state: str | None = None,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        parameters = {"state": state} if state else None
        return self._list(f"{repo_path(owner, repo)}/pulls", parameters, page, per_page)

    def create(self, owner: str, repo: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self.client.send("POST", f"{repo_path(owner, repo)}/pulls", payload)[1]

    def commits(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        return self._list(
            f"{repo_path(owner, repo)}/pulls/{number}/commits", None, page, per_page
        )

    def merge(
        self, owner: str, repo: str, number: int, message: str | None
    ) -> dict[str, Any]:
        payload = {"commit_message": message} if message else {}
        return self.client.send(
            "PUT", f"{repo_path(owner, repo)}/pulls/{number}/merge", payload
        )[1]


class ReleaseResource(Resource):
    def show(self, owner: str, repo: str, release_id: int) -> dict[str, Any]:
        return self.client.get(f"{repo_path(owner, repo)}/releases/{release_id}")[1]

    def all(
        self,
        owner: str,
        repo: str,
        *,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Page:
        return self._list(f"{repo_path(owner, repo)}/releases", None, page, per_page)

    def create(self, owner: str, repo: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self.client.send(
            "POST", f"{repo_path(owner, repo)}/releases", payload
        )[1]

    def remove(self, owner: str, repo: str, release_id: int) -> None:
        self.client.send("DELETE", f"{repo_path(owner, repo)}/releases/{release_id}")


class ReleaseAssetResource(Resource):
    def __init__(self, client: RestClient, releases: ReleaseResource):
        super().__init__(client)
        self.releases = releases

    def create(
        self,
        owner: str,
        repo: str,
        release_id: int,
        name: str,
        content_type: str,
        content: bytes,
    ) -> dict[str, Any]:
        """Upload an asset to the release's upload endpoint.

        The upload host differs from the API host on github.com, so the
        endpoint is read from the release's ``upload_url`` template.
        """
        release = self.releases.show(owner, repo, release_id)
        upload_url = (release or {}).get("upload_url") or (
            f"{repo_path(owner, repo)}/releases/{release_id}/assets"
        )
        return self.client.upload(
            upload_url.split("{", 1)[0], {"name": name}, content_type, content
        )[1]


class ForkResource(Resource):
    def create(self, owner: str, repo: str, org: str | None = None) -> dict[str, Any]:
        payload = {"organization": org} if org else {}
        return self.client.send("POST", f"{repo_path(owner, repo)}/forks", payload)[1]


class ApiResources:
    """All REST resources bound to one client."""

    def __init__(self, client: RestClient):
        self.client = client
        self.issues = IssueResource(client)
        self.comments = CommentResource(client)
        self.labels = LabelResource(client)
        self.milestones = MilestoneResource(client)
        self.pull_requests = PullRequestResource(client)
        self.releases = ReleaseResource(client)
        self.release_assets = ReleaseAssetResource(client, self.releases)
        self.forks = ForkResource(client)
