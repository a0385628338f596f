"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest
import structlog

from gitops_providers.config.settings import ProviderOptions, ProviderSettings
from gitops_providers.enums import GitProviderName, RepositoryVisibility
from gitops_providers.models.domain import Commit, RepositoryInfo
from gitops_providers.providers.base import ProviderClient


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging configuration so later tests never log to a closed stream."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def options() -> ProviderOptions:
    """Options with wait bounds short enough for unit tests."""
    return ProviderOptions(wait_interval=0.001, wait_timeout=0.01)


@pytest.fixture
def mock_client() -> MagicMock:
    """ProviderClient fake for github.com with an existing repository."""
    client = MagicMock(spec=ProviderClient)
    client.provider_name = GitProviderName.GITHUB
    client.domain = "github.com"
    client.get_repository.return_value = RepositoryInfo(
        description="GitOps managed repository",
        visibility=RepositoryVisibility.PRIVATE,
        default_branch="main",
    )
    return client


@pytest.fixture
def sample_commit() -> Commit:
    """Latest commit on a target branch."""
    return Commit(sha="a" * 40, message="Initial commit", author="octocat")


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> ProviderSettings:
    """Settings with tokens for both providers and no ambient GITOPS_* env."""
    for name in ("GITOPS_GITHUB_TOKEN", "GITOPS_GITLAB_TOKEN", "GITOPS_DRY_RUN"):
        monkeypatch.delenv(name, raising=False)
    return ProviderSettings(github_token="ghp_test_token", gitlab_token="glpat-test-token")
