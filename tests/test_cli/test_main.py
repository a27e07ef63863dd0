"""Test main CLI functionality."""

from collections.abc import Iterator
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from gh_adapter.cli.main import app
from gh_adapter.exceptions import NotFoundFailure
from gh_adapter.models import Issue, Release

runner = CliRunner()


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GH_ADAPTER_OWNER", "acme")
    monkeypatch.setenv("GH_ADAPTER_REPO", "widgets")
    monkeypatch.setenv("GH_ADAPTER_TOKEN", "tok")


@pytest.fixture
def mock_build(env: None) -> Iterator[Mock]:
    with patch("gh_adapter.cli.main.build_adapter") as build:
        build.return_value = Mock()
        yield build


@pytest.fixture
def mock_adapter(mock_build: Mock) -> Mock:
    return mock_build.return_value


def test_version_command() -> None:
    """Test version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "gh-adapter v" in result.stdout


def test_auth_check_accepted(mock_adapter: Mock) -> None:
    mock_adapter.is_authenticated.return_value = True

    result = runner.invoke(app, ["auth-check"])

    assert result.exit_code == 0
    assert "Credentials accepted" in result.stdout
    mock_adapter.authenticate.assert_called_once()


def test_auth_check_rejected(mock_adapter: Mock) -> None:
    """Rejected credentials point at the token page."""
    mock_adapter.is_authenticated.return_value = False
    mock_adapter.get_token_generation_url.return_value = (
        "https://github.com/settings/tokens"
    )

    result = runner.invoke(app, ["auth-check"])

    assert result.exit_code == 1
    assert "Credentials rejected" in result.stdout
    assert "https://github.com/settings/tokens" in result.stdout


def test_show_issue(mock_adapter: Mock) -> None:
    mock_adapter.get_issue.return_value = Issue(
        url="https://github.com/acme/widgets/issues/42",
        number=42,
        state="open",
        title="Widget falls over",
        labels=("bug",),
    )

    result = runner.invoke(app, ["issue", "42"])

    assert result.exit_code == 0
    assert "Widget falls over" in result.stdout
    assert "bug" in result.stdout
    mock_adapter.get_issue.assert_called_once_with(42)


def test_issue_not_found(mock_adapter: Mock) -> None:
    mock_adapter.get_issue.side_effect = NotFoundFailure("GET /issues/9: not found")

    result = runner.invoke(app, ["issue", "9"])

    assert result.exit_code == 1
    assert "Error" in result.stdout


def test_list_issues_single_page(mock_adapter: Mock) -> None:
    mock_adapter.list_issues.return_value = []

    result = runner.invoke(
        app, ["issues", "--state", "closed", "--page", "2", "--per-page", "10"]
    )

    assert result.exit_code == 0
    mock_adapter.list_issues.assert_called_once_with(
        {"state": "closed"}, page=2, per_page=10
    )


def test_list_pulls_all_pages(mock_adapter: Mock) -> None:
    mock_adapter.list_pull_requests.return_value = []

    result = runner.invoke(app, ["pulls"])

    assert result.exit_code == 0
    mock_adapter.list_pull_requests.assert_called_once_with(
        None, page=None, per_page=None
    )


def test_list_labels(mock_adapter: Mock) -> None:
    mock_adapter.list_labels.return_value = ["bug", "wontfix"]

    result = runner.invoke(app, ["labels"])

    assert result.exit_code == 0
    assert "bug" in result.stdout
    assert "wontfix" in result.stdout


def test_list_releases(mock_adapter: Mock) -> None:
    mock_adapter.list_releases.return_value = [
        Release(id=1001, tag_name="v1.0.0", name="First stable", prerelease=True)
    ]

    result = runner.invoke(app, ["releases"])

    assert result.exit_code == 0
    assert "v1.0.0" in result.stdout


def test_debug_from_environment(
    mock_build: Mock, monkeypatch: pytest.MonkeyPatch
) -> None:
    """GH_ADAPTER_DEBUG stays in effect when --debug is not given."""
    monkeypatch.setenv("GH_ADAPTER_DEBUG", "1")
    mock_build.return_value.list_labels.return_value = []

    result = runner.invoke(app, ["labels"])

    assert result.exit_code == 0
    assert mock_build.call_args.args[0].debug is True


@pytest.mark.parametrize(("env_value", "args"), [("", ["--debug"]), ("0", [])])
def test_debug_flag(
    mock_build: Mock, monkeypatch: pytest.MonkeyPatch, env_value: str, args: list[str]
) -> None:
    monkeypatch.setenv("GH_ADAPTER_DEBUG", env_value)
    mock_build.return_value.list_labels.return_value = []

    result = runner.invoke(app, ["labels", *args])

    assert result.exit_code == 0
    assert mock_build.call_args.args[0].debug is bool(args)


def test_missing_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("GH_ADAPTER_OWNER", "GH_ADAPTER_REPO", "GH_ADAPTER_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    result = runner.invoke(app, ["labels"])

    assert result.exit_code == 1
    assert "Environment variables required" in result.stdout
