"""Main CLI entry point.

A thin diagnostic front end over the adapter: it reads configuration from the
environment, runs one canonical operation and prints the result.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import AdapterConfig
from ..contract import RepositoryAdapter
from ..exceptions import AdapterError
from ..providers import build_adapter
from .options import (
    DEBUG_OPTION,
    OWNER_OPTION,
    PAGE_OPTION,
    PER_PAGE_OPTION,
    REPO_OPTION,
    STATE_OPTION,
)

app = typer.Typer(
    name="gh-adapter",
    help="Run canonical repository operations against a code-hosting platform",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def setup_logging(debug: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@contextmanager
def _errors_to_exit() -> Iterator[None]:
    try:
        yield
    except (AdapterError, ValueError) as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _connect(owner: str | None, repo: str | None, debug: bool) -> RepositoryAdapter:
    # Without --debug, GH_ADAPTER_DEBUG decides.
    overrides = {"debug": True} if debug else {}
    config = AdapterConfig.from_env(owner=owner, repo=repo, **overrides)
    setup_logging(config.debug)
    adapter = build_adapter(config)
    adapter.authenticate()
    return adapter


def _run(
    owner: str | None,
    repo: str | None,
    debug: bool,
    action: Callable[[RepositoryAdapter], None],
) -> None:
    with _errors_to_exit():
        action(_connect(owner, repo, debug))


@app.command("auth-check")
def auth_check(
    owner: str | None = OWNER_OPTION,
    repo: str | None = REPO_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Check that the configured credentials are accepted."""

    def action(adapter: RepositoryAdapter) -> None:
        if adapter.is_authenticated():
            console.print("✅ [green]Credentials accepted[/green]")
            return
        console.print("❌ [red]Credentials rejected[/red]")
        console.print(f"Create a token at {adapter.get_token_generation_url()}")
        raise typer.Exit(1)

    _run(owner, repo, debug, action)


@app.command("issue")
def show_issue(
    number: int = typer.Argument(..., help="Issue number"),
    owner: str | None = OWNER_OPTION,
    repo: str | None = REPO_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Show a single issue."""

    def action(adapter: RepositoryAdapter) -> None:
        issue = adapter.get_issue(number)
        console.print(f"[bold]#{issue.number} {issue.title}[/bold] ({issue.state})")
        console.print(f"URL: {issue.url}")
        console.print(f"Author: {issue.author or '-'}")
        console.print(f"Assignee: {issue.assignee or '-'}")
        console.print(f"Milestone: {issue.milestone or '-'}")
        console.print(f"Labels: {', '.join(issue.labels) or '-'}")
        if issue.body:
            console.print()
            console.print(issue.body)

    _run(owner, repo, debug, action)


@app.command("issues")
def list_issues(
    state: str | None = STATE_OPTION,
    page: int | None = PAGE_OPTION,
    per_page: int | None = PER_PAGE_OPTION,
    owner: str | None = OWNER_OPTION,
    repo: str | None = REPO_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """List issues (all pages unless --page is given)."""

    def action(adapter: RepositoryAdapter) -> None:
        filters = {"state": state} if state else None
        issues = adapter.list_issues(filters, page=page, per_page=per_page)
        table = Table(title=f"Issues ({len(issues)})")
        table.add_column("#", justify="right")
        table.add_column("State")
        table.add_column("Title")
        table.add_column("Author")
        table.add_column("Labels")
        for issue in issues:
            table.add_row(
                str(issue.number),
                issue.state,
                issue.title,
                issue.author or "-",
                ", ".join(issue.labels),
            )
        console.print(table)

    _run(owner, repo, debug, action)


@app.command("pulls")
def list_pulls(
    state: str | None = STATE_OPTION,
    page: int | None = PAGE_OPTION,
    per_page: int | None = PER_PAGE_OPTION,
    owner: str | None = OWNER_OPTION,
    repo: str | None = REPO_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """List pull requests (all pages unless --page is given)."""

    def action(adapter: RepositoryAdapter) -> None:
        pulls = adapter.list_pull_requests(state, page=page, per_page=per_page)
        table = Table(title=f"Pull requests ({len(pulls)})")
        table.add_column("#", justify="right")
        table.add_column("State")
        table.add_column("Title")
        table.add_column("Head")
        table.add_column("Base")
        table.add_column("Merged by")
        for pr in pulls:
            table.add_row(
                str(pr.number),
                pr.state,
                pr.title,
                pr.head.ref or "-",
                pr.base.ref or "-",
                pr.merged_by or "-",
            )
        console.print(table)

    _run(owner, repo, debug, action)


@app.command("labels")
def list_labels(
    owner: str | None = OWNER_OPTION,
    repo: str | None = REPO_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """List repository labels."""

    def action(adapter: RepositoryAdapter) -> None:
        for name in adapter.list_labels():
            console.print(name)

    _run(owner, repo, debug, action)


@app.command("releases")
def list_releases(
    owner: str | None = OWNER_OPTION,
    repo: str | None = REPO_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """List releases."""

    def action(adapter: RepositoryAdapter) -> None:
        releases = adapter.list_releases()
        table = Table(title=f"Releases ({len(releases)})")
        table.add_column("ID", justify="right")
        table.add_column("Tag")
        table.add_column("Name")
        table.add_column("Published")
        for release in releases:
            flags = " (draft)" if release.draft else ""
            flags += " (pre)" if release.prerelease else ""
            table.add_row(
                str(release.id),
                release.tag_name,
                f"{release.name or '-'}{flags}",
                release.published_at.isoformat() if release.published_at else "-",
            )
        console.print(table)

    _run(owner, repo, debug, action)


@app.command()
def version() -> None:
    """Show version information."""
    from gh_adapter import __version__

    console.print(f"gh-adapter v{__version__}")


if __name__ == "__main__":
    app()
