"""Tests for gitops_providers/providers/factory.py."""

from unittest.mock import patch

import pytest

from gitops_providers.config.settings import ProviderSettings
from gitops_providers.enums import GitProviderName
from gitops_providers.exceptions import ConfigurationError
from gitops_providers.git import InvalidRepoURLError, normalize_repo_url
from gitops_providers.providers.dry_run import DryRunClient
from gitops_providers.providers.factory import create_git_provider, create_provider_client
from gitops_providers.providers.github_rest import GitHubRestClient
from gitops_providers.providers.gitlab_rest import GitLabRestClient


class TestCreateProviderClient:
    """Tests for create_provider_client."""

    @patch("gitops_providers.providers.github_rest.Github")
    def test_github(self, mock_github_class, settings) -> None:
        client = create_provider_client(GitProviderName.GITHUB, settings)

        assert isinstance(client, GitHubRestClient)
        assert client.token == "ghp_test_token"
        assert client.base_url == "https://api.github.com"

    def test_gitlab_self_hosted(self, settings) -> None:
        """The configured GitLab URL is used for the API base."""
        settings = settings.model_copy(update={"gitlab_url": "https://gitlab.example.com"})

        client = create_provider_client(GitProviderName.GITLAB, settings)

        assert isinstance(client, GitLabRestClient)
        assert client.api_base == "https://gitlab.example.com/api/v4"

    def test_missing_token(self, monkeypatch) -> None:
        """A provider without a token is a configuration error."""
        monkeypatch.delenv("GITOPS_GITLAB_TOKEN", raising=False)

        with pytest.raises(ConfigurationError, match="No gitlab token configured"):
            create_provider_client(GitProviderName.GITLAB, ProviderSettings(github_token="x"))

    def test_dry_run_needs_no_token(self, monkeypatch) -> None:
        """Dry-run mode never builds a real client."""
        monkeypatch.delenv("GITOPS_GITHUB_TOKEN", raising=False)

        client = create_provider_client(GitProviderName.GITHUB, ProviderSettings(dry_run=True))

        assert isinstance(client, DryRunClient)
        assert client.provider_name == GitProviderName.GITHUB


class TestCreateGitProvider:
    """Tests for create_git_provider."""

    def test_from_normalized_url(self, settings) -> None:
        """The provider follows the URL's host and carries the settings' options."""
        settings = settings.model_copy(update={"deploy_key_name": "flux-key"})

        provider = create_git_provider(normalize_repo_url("git@gitlab.com:group/sub/repo"), settings)

        assert isinstance(provider.client, GitLabRestClient)
        assert provider.options.deploy_key_name == "flux-key"

    @patch("gitops_providers.providers.github_rest.Github")
    def test_from_raw_string(self, mock_github_class, settings) -> None:
        provider = create_git_provider("https://github.com/acme/widgets", settings)

        assert provider.provider_domain == "github.com"

    def test_invalid_url(self, settings) -> None:
        with pytest.raises(InvalidRepoURLError):
            create_git_provider("https://example.com/acme/widgets", settings)
