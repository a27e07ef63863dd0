"""Canonical records returned by adapter operations.

These models are provider-agnostic: every provider maps its own wire schema
onto them. Records are immutable and every optional field is always present,
holding ``None`` when the platform did not supply a value.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CanonicalRecord(BaseModel):
    """Base for immutable canonical records."""

    model_config = ConfigDict(frozen=True)


class Issue(CanonicalRecord):
    """Issue as seen by workflow tooling.

    Pull requests are issues on some platforms; ``is_pull_request`` marks them.
    """

    url: str = Field(..., description="Human-facing issue URL")
    number: int = Field(..., description="Issue number within the repository")
    state: str = Field(..., description="Current state: 'open' or 'closed'")
    title: str = Field(..., description="Issue title")
    body: str | None = Field(None, description="Issue description in markdown")
    author: str | None = Field(None, description="Login of the issue author")
    labels: tuple[str, ...] = Field(
        default_factory=tuple, description="Label names in platform order"
    )
    assignee: str | None = Field(None, description="Login of the assignee")
    milestone: str | None = Field(None, description="Milestone title")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")
    closed_by: str | None = Field(None, description="Login of the user who closed it")
    is_pull_request: bool = Field(False, description="Whether this is a pull request")


class Comment(CanonicalRecord):
    """Comment on an issue or pull request."""

    id: int = Field(..., description="Comment identifier")
    url: str | None = Field(None, description="Human-facing comment URL")
    body: str | None = Field(None, description="Comment text")
    author: str | None = Field(None, description="Login of the comment author")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")


class Label(CanonicalRecord):
    """Repository label. Color and description are not part of the canonical form."""

    name: str


class Milestone(CanonicalRecord):
    """Repository milestone, reduced to its title."""

    title: str


class PullRequestHead(CanonicalRecord):
    """Source side of a pull request."""

    ref: str | None = None
    sha: str | None = None
    user: str | None = None
    repo: str | None = None


class PullRequestBase(CanonicalRecord):
    """Target side of a pull request."""

    ref: str | None = None
    label: str | None = None
    sha: str | None = None
    repo: str | None = None


class PullRequest(CanonicalRecord):
    """Pull request.

    ``labels``, ``milestone``, ``assignee`` and ``merge_commit`` are not
    populated for GitHub: the pull request endpoints do not expose them
    reliably.
    """

    url: str | None = Field(None, description="Human-facing pull request URL")
    number: int = Field(..., description="Pull request number")
    state: str = Field(..., description="Current state: 'open' or 'closed'")
    title: str = Field(..., description="Pull request title")
    body: str | None = Field(None, description="Description in markdown")
    labels: tuple[str, ...] = Field(default_factory=tuple)
    milestone: str | None = None
    author: str | None = Field(None, description="Login of the author")
    assignee: str | None = None
    merge_commit: str | None = None
    merged: bool = Field(False, description="Whether the pull request was merged")
    merged_by: str | None = Field(None, description="Login of the merger")
    head: PullRequestHead = Field(default_factory=PullRequestHead)
    base: PullRequestBase = Field(default_factory=PullRequestBase)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _merged_matches_merger(self) -> "PullRequest":
        if self.merged != (self.merged_by is not None):
            raise ValueError("merged must be true exactly when merged_by is set")
        return self


class Release(CanonicalRecord):
    """Published or draft release."""

    url: str | None = Field(None, description="Human-facing release URL")
    id: int = Field(..., description="Release identifier")
    name: str | None = Field(None, description="Release title")
    tag_name: str = Field(..., description="Tag the release points at")
    body: str | None = Field(None, description="Release notes")
    draft: bool = False
    prerelease: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None
    author: str | None = Field(None, description="Login of the release author")


class ReleaseAsset(CanonicalRecord):
    """Binary attached to a release."""

    id: int


class CommitRef(CanonicalRecord):
    """Commit belonging to a pull request."""

    sha: str
    author: str | None = None
    message: str = ""


class ForkResult(CanonicalRecord):
    """Locations of a newly created fork."""

    git_url: str | None = None
    html_url: str | None = None


class ReleaseRef(CanonicalRecord):
    """Identity of a newly created release."""

    url: str | None = None
    id: int
