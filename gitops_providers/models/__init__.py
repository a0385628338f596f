"""Domain models for the provider layer.

Key Models:
    - RepositoryRef / OrgRepositoryRef / UserRepositoryRef: ownership-scoped
      repository references
    - RepositoryInfo, RepositoryCreateOptions: repository metadata
    - DeployKeyInfo, DeployKey: deploy key request and result
    - CommitFile, Commit, PullRequest: change proposal handles
    - Organization: organization or GitLab group

Example:
    >>> from gitops_providers.models import UserRepositoryRef
    >>> str(UserRepositoryRef("github.com", "octocat", "hello"))
    'github.com/octocat/hello'
"""

from gitops_providers.models.domain import (
    Commit,
    CommitFile,
    DeployKey,
    DeployKeyInfo,
    Organization,
    OrgRepositoryRef,
    PullRequest,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryRef,
    UserRepositoryRef,
    make_repository_ref,
)

__all__ = [
    "Commit",
    "CommitFile",
    "DeployKey",
    "DeployKeyInfo",
    "Organization",
    "OrgRepositoryRef",
    "PullRequest",
    "RepositoryCreateOptions",
    "RepositoryInfo",
    "RepositoryRef",
    "UserRepositoryRef",
    "make_repository_ref",
]
