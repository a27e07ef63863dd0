"""Map raw GitHub JSON onto canonical records.

All normalizers share one policy: a nested object that is absent or null
(``user``, ``assignee``, ``milestone``, ``merged_by``, ``closed_by``,
``head.repo``, ...) becomes ``None`` in the canonical record. The same
functions serve single-item and listing responses.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..models import (
    Comment,
    CommitRef,
    ForkResult,
    Issue,
    Label,
    Milestone,
    PullRequest,
    PullRequestBase,
    PullRequestHead,
    Release,
    ReleaseAsset,
    ReleaseRef,
)
from ..utils.date_parser import parse_timestamp

logger = logging.getLogger(__name__)

Raw = dict[str, Any]


def _nested(raw: Raw | None, key: str) -> Raw:
    """Return ``raw[key]`` when it is an object, else an empty dict."""
    value = (raw or {}).get(key)
    return value if isinstance(value, dict) else {}


def login_of(raw_user: Any) -> str | None:
    """Login of a user object, or None when the user is absent."""
    if isinstance(raw_user, dict):
        return raw_user.get("login") or None
    return None


def _timestamp(raw: Raw, key: str) -> datetime | None:
    try:
        return parse_timestamp(raw.get(key))
    except ValueError:
        logger.warning("Ignoring unparseable %s: %r", key, raw.get(key))
        return None


def label_names(raw_labels: Iterable[Any] | None) -> list[str]:
    """Names of a label collection, in order.

    The issues API returns label objects; some payloads carry plain strings.
    """
    names = []
    for label in raw_labels or []:
        if isinstance(label, dict):
            if label.get("name"):
                names.append(label["name"])
        elif isinstance(label, str):
            names.append(label)
    return names


def normalize_issue(raw: Raw, url: str) -> Issue:
    """Convert a raw issue to an Issue.

    Args:
        raw: Issue JSON from the issues API
        url: Human-facing URL computed by the adapter
    """
    return Issue(
        url=url,
        number=raw["number"],
        state=raw.get("state") or "open",
        title=raw.get("title") or "",
        body=raw.get("body"),
        author=login_of(raw.get("user")),
        labels=label_names(raw.get("labels")),
        assignee=login_of(raw.get("assignee")),
        milestone=_nested(raw, "milestone").get("title"),
        created_at=_timestamp(raw, "created_at"),
        updated_at=_timestamp(raw, "updated_at"),
        closed_by=login_of(raw.get("closed_by")),
        is_pull_request=raw.get("pull_request") is not None,
    )


def normalize_comment(raw: Raw) -> Comment:
    """Convert a raw issue comment to a Comment."""
    return Comment(
        id=raw["id"],
        url=raw.get("html_url"),
        body=raw.get("body"),
        author=login_of(raw.get("user")),
        created_at=_timestamp(raw, "created_at"),
        updated_at=_timestamp(raw, "updated_at"),
    )


def normalize_label(raw: Raw) -> Label:
    return Label(name=raw["name"])


def normalize_milestone(raw: Raw) -> Milestone:
    return Milestone(title=raw["title"])


def _normalize_head(raw: Raw) -> PullRequestHead:
    return PullRequestHead(
        ref=raw.get("ref"),
        sha=raw.get("sha"),
        user=login_of(raw.get("user")),
        repo=_nested(raw, "repo").get("name"),
    )


def _normalize_base(raw: Raw) -> PullRequestBase:
    return PullRequestBase(
        ref=raw.get("ref"),
        label=raw.get("label"),
        sha=raw.get("sha"),
        repo=_nested(raw, "repo").get("name"),
    )


def normalize_pull_request(raw: Raw, fallback_url: str | None = None) -> PullRequest:
    """Convert a raw pull request to a PullRequest.

    ``fallback_url`` is used when the payload carries no ``html_url``.

    ``merged`` is derived from the presence of a merger, so it agrees with
    ``merged_by`` even on listing payloads, which omit the ``merged`` flag.
    Labels, milestone, assignee and merge commit stay empty.
    """
    merged_by = login_of(raw.get("merged_by"))
    return PullRequest(
        url=raw.get("html_url") or fallback_url,
        number=raw["number"],
        state=raw.get("state") or "open",
        title=raw.get("title") or "",
        body=raw.get("body"),
        author=login_of(raw.get("user")),
        merged=merged_by is not None,
        merged_by=merged_by,
        head=_normalize_head(_nested(raw, "head")),
        base=_normalize_base(_nested(raw, "base")),
        created_at=_timestamp(raw, "created_at"),
        updated_at=_timestamp(raw, "updated_at"),
    )


def normalize_release(raw: Raw) -> Release:
    """Convert a raw release to a Release."""
    return Release(
        url=raw.get("html_url"),
        id=raw["id"],
        name=raw.get("name"),
        tag_name=raw.get("tag_name") or "",
        body=raw.get("body"),
        draft=bool(raw.get("draft")),
        prerelease=bool(raw.get("prerelease")),
        created_at=_timestamp(raw, "created_at"),
        updated_at=_timestamp(raw, "updated_at"),
        published_at=_timestamp(raw, "published_at"),
        author=login_of(raw.get("author") or raw.get("user")),
    )


def normalize_release_ref(raw: Raw) -> ReleaseRef:
    return ReleaseRef(url=raw.get("html_url"), id=raw["id"])


def normalize_asset(raw: Raw) -> ReleaseAsset:
    return ReleaseAsset(id=raw["id"])


def normalize_commit(raw: Raw) -> CommitRef:
    """Convert a raw pull request commit to a CommitRef.

    The platform account is null when the commit email matches no user; the
    git author name is used then.
    """
    commit = _nested(raw, "commit")
    author = login_of(raw.get("author")) or _nested(commit, "author").get("name")
    return CommitRef(
        sha=raw["sha"],
        author=author,
        message=commit.get("message") or "",
    )


def normalize_fork(raw: Raw) -> ForkResult:
    return ForkResult(git_url=raw.get("ssh_url"), html_url=raw.get("html_url"))
