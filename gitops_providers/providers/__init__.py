"""Provider implementations for GitHub and GitLab.

This package provides the repository lifecycle operations a GitOps CLI needs
(repositories, deploy keys, branches, commits, pull requests) behind one
provider-agnostic facade.

Key Components:
    - ProviderClient: Abstract base for provider SDK bindings
    - GitHubRestClient: GitHub REST API implementation (PyGithub)
    - GitLabRestClient: GitLab REST API v4 implementation (httpx)
    - DryRunClient: Logs calls without contacting a provider
    - GitProvider: Facade composing the workflows over a ProviderClient

Workflows:
    - AccountTypeResolver: user vs. organization classification
    - RepositoryManager: existence checks and creation
    - DeployKeyManager: deploy key lookup and upload
    - ChangeProposer: branch, commit and pull request workflow

Example:
    >>> from gitops_providers.providers import create_git_provider
    >>> provider = create_git_provider("git@gitlab.com:acme/platform/gitops", settings)
    >>> provider.deploy_key_exists("acme/platform", "gitops")
"""

from gitops_providers.providers.base import ProviderClient
from gitops_providers.providers.factory import create_git_provider, create_provider_client
from gitops_providers.providers.git_provider import GitProvider

__all__ = [
    "GitProvider",
    "ProviderClient",
    "create_git_provider",
    "create_provider_client",
]
