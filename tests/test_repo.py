"""Tests for repository spec parsing and URL synthesis."""

import pytest

from gitcop.errors import ConfigurationError, InvalidRepoSpec, UnsupportedRepoType
from gitcop.repo import GitHubRepo, parse_repo_spec


def test_bare_owner_takes_project_from_key() -> None:
    """Verifies that a spec without a project falls back to the registry key."""
    repo = parse_repo_spec("use-package", "jweigley")
    assert repo == GitHubRepo(owner="jweigley", project="use-package")


def test_owner_and_project() -> None:
    """Verifies that an ``owner/project`` spec ignores the registry key."""
    repo = parse_repo_spec("dash", "magnars/dash.el")
    assert repo == GitHubRepo(owner="magnars", project="dash.el")


@pytest.mark.parametrize("spec", ["bar/baz/foo", "/dash.el", "magnars/", "", "/"])
def test_invalid_spec(spec: str) -> None:
    """Verifies that malformed specs are rejected with the original spec attached."""
    with pytest.raises(InvalidRepoSpec) as exc_info:
        parse_repo_spec("foo", spec)

    assert exc_info.value.spec == spec
    assert str(exc_info.value) == f"invalid repo name: {spec}"


def test_unsupported_repo_type() -> None:
    """Verifies that only GitHub repositories are accepted."""
    with pytest.raises(UnsupportedRepoType, match="unknown repo type: bitbucket"):
        parse_repo_spec("foo", "bar/baz", "bitbucket")


def test_spec_errors_are_configuration_errors() -> None:
    """Verifies that spec errors abort the run like any other config error."""
    assert issubclass(InvalidRepoSpec, ConfigurationError)
    assert issubclass(UnsupportedRepoType, ConfigurationError)


def test_url_is_bit_exact() -> None:
    """Verifies the rendered remote URL."""
    repo = GitHubRepo(owner="jweigley", project="use-package")
    assert repo.url() == "https://github.com/jweigley/use-package.git"
    assert repo.kind == "github"
