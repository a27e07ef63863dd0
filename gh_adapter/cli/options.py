"""Shared CLI option definitions."""

import typer

OWNER_OPTION = typer.Option(
    None, "--owner", "-o", help="Repository owner (defaults to GH_ADAPTER_OWNER)"
)

REPO_OPTION = typer.Option(
    None, "--repo", "-r", help="Repository name (defaults to GH_ADAPTER_REPO)"
)

STATE_OPTION = typer.Option(None, "--state", "-s", help="open, closed or all")

PAGE_OPTION = typer.Option(
    None, "--page", "-p", help="Fetch a single page instead of the full listing"
)

PER_PAGE_OPTION = typer.Option(None, "--per-page", help="Page size (1-100)")

DEBUG_OPTION = typer.Option(False, "--debug", help="Log every API request")
