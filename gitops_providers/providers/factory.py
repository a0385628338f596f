"""Factory for creating provider instances based on configuration."""

import structlog

from gitops_providers.config.settings import ProviderSettings
from gitops_providers.enums import GitProviderName
from gitops_providers.git.models import NormalizedRepoURL
from gitops_providers.git.parser import normalize_repo_url
from gitops_providers.providers.base import ProviderClient
from gitops_providers.providers.dry_run import DryRunClient
from gitops_providers.providers.git_provider import GitProvider
from gitops_providers.providers.github_rest import GitHubRestClient
from gitops_providers.providers.gitlab_rest import GitLabRestClient

log = structlog.get_logger(__name__)


def create_provider_client(provider: GitProviderName, settings: ProviderSettings) -> ProviderClient:
    """Create the SDK binding for ``provider``.

    Args:
        provider: Provider detected from the repository URL
        settings: Settings holding tokens and API base URLs

    Returns:
        ProviderClient instance (GitHub, GitLab, or dry-run)

    Raises:
        ConfigurationError: If no token is configured for the provider
        ValueError: If provider type is not supported
    """
    if settings.dry_run:
        log.info("creating_dry_run_client", provider=str(provider))
        return DryRunClient(provider)

    base_url = settings.base_url_for(provider)

    if provider == GitProviderName.GITHUB:
        log.info("creating_github_client", base_url=base_url)
        return GitHubRestClient(token=settings.token_for(provider), base_url=base_url)

    elif provider == GitProviderName.GITLAB:
        log.info("creating_gitlab_client", base_url=base_url)
        return GitLabRestClient(token=settings.token_for(provider), base_url=base_url)

    else:
        raise ValueError(f"Unsupported Git provider type: {provider}. Supported types: github, gitlab")


def create_git_provider(url: NormalizedRepoURL | str, settings: ProviderSettings) -> GitProvider:
    """Create a GitProvider for the provider hosting ``url``.

    Example:
        >>> settings = ProviderSettings()
        >>> provider = create_git_provider("git@github.com:acme/widgets", settings)
        >>> provider.repository_exists("widgets", "acme")
    """
    if isinstance(url, str):
        url = normalize_repo_url(url)

    client = create_provider_client(url.provider, settings)
    return GitProvider(client, settings.to_options())
