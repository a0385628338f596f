"""Repository identity model.

This module defines the immutable value produced by the URL normalizer.

Example:
    >>> from gitops_providers.git.parser import normalize_repo_url
    >>> url = normalize_repo_url("git@github.com:acme/widgets")
    >>> str(url)
    'ssh://git@github.com/acme/widgets.git'
    >>> url.full_name
    'acme/widgets'
"""

from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit

from gitops_providers.enums import GitProviderName, RepositoryURLProtocol


def canonical_repo_url(provider: GitProviderName, owner: str, repository_name: str) -> str:
    """Build the canonical SSH form of a repository identity."""
    return f"ssh://git@{provider.hostname}/{owner}/{repository_name}.git"


@dataclass(frozen=True, eq=False)
class NormalizedRepoURL:
    """Canonical identity of a remote repository.

    Two identities are equal exactly when their canonical strings are equal;
    ``raw_url`` and ``protocol`` are advisory and do not take part in
    comparisons.

    Attributes:
        provider: Git hosting provider
        owner: User, organization or ``group/subgroup`` path
        repository_name: Repository name without ``.git``
        protocol: HTTPS only when the canonical string kept an https scheme
        canonical: Normalized ``ssh://git@<host>/<owner>/<repo>.git`` string
        raw_url: Original input (advisory only)
    """

    provider: GitProviderName
    owner: str
    repository_name: str
    protocol: RepositoryURLProtocol
    canonical: str
    raw_url: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.canonical

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NormalizedRepoURL):
            return NotImplemented
        return self.canonical == other.canonical

    def __hash__(self) -> int:
        return hash(self.canonical)

    @property
    def url(self) -> SplitResult:
        """Parsed form of the canonical string."""
        return urlsplit(self.canonical)

    @property
    def hostname(self) -> str:
        return self.provider.hostname

    @property
    def full_name(self) -> str:
        """Return ``owner/repo`` form."""
        return f"{self.owner}/{self.repository_name}"
