"""Repository URL normalization and provider detection.

The main entry point is ``normalize_repo_url``, which turns any supported
spelling of a GitHub or GitLab repository URL into a NormalizedRepoURL.

Example:
    >>> from gitops_providers.git import normalize_repo_url
    >>> url = normalize_repo_url("git@github.com:acme/widgets")
    >>> print(f"{url.provider} {url.owner}/{url.repository_name}")
    github acme/widgets

Error Handling:
    >>> from gitops_providers.git import InvalidRepoURLError
    >>> try:
    ...     normalize_repo_url("https://example.com/acme/widgets")
    ... except InvalidRepoURLError as e:
    ...     print(e.message)
    no git providers found for "https://example.com/acme/widgets"
"""

from gitops_providers.git.exceptions import InvalidRepoURLError, UnsupportedHostError
from gitops_providers.git.models import NormalizedRepoURL, canonical_repo_url
from gitops_providers.git.parser import (
    detect_provider_from_url,
    get_owner_from_url,
    normalize_repo_url,
    normalize_repo_url_string,
    url_to_repo_name,
)

__all__ = [
    # Main API
    "normalize_repo_url",
    "detect_provider_from_url",
    # Helpers
    "normalize_repo_url_string",
    "get_owner_from_url",
    "url_to_repo_name",
    "canonical_repo_url",
    # Models
    "NormalizedRepoURL",
    # Exceptions
    "InvalidRepoURLError",
    "UnsupportedHostError",
]
