"""
Domain models for the provider layer.

This module contains the value types exchanged between the provider
workflows and the per-provider SDK bindings. They are the normalized
internal representation, converted from provider-specific payloads
(PyGithub objects, GitLab REST JSON).

All models are plain dataclasses owned by the workflow step that created
them; none of them is shared mutable state.

Example:
    Routing a repository to the right ownership scope::

        ref = make_repository_ref(
            ProviderAccountType.ORGANIZATION, "github.com", "acme", "widgets"
        )
        assert isinstance(ref, OrgRepositoryRef)
        assert str(ref) == "github.com/acme/widgets"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from gitops_providers.enums import ProviderAccountType, RepositoryVisibility
from gitops_providers.exceptions import AccountTypeNotSupportedError


@dataclass(frozen=True)
class RepositoryRef:
    """Reference to a repository on a provider.

    Use one of the two concrete variants; the variant decides whether
    repository creation happens under an organization or under the
    authenticated user.
    """

    domain: str
    """Provider domain, e.g. ``github.com``."""

    owner: str
    """Organization login, GitLab group path, or user login."""

    repository_name: str
    """Repository name without ``.git``."""

    account_type = ProviderAccountType.USER

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repository_name}"

    def __str__(self) -> str:
        return f"{self.domain}/{self.owner}/{self.repository_name}"


@dataclass(frozen=True)
class OrgRepositoryRef(RepositoryRef):
    """Repository owned by an organization (or a GitLab group)."""

    account_type = ProviderAccountType.ORGANIZATION


@dataclass(frozen=True)
class UserRepositoryRef(RepositoryRef):
    """Repository owned by a personal account."""

    account_type = ProviderAccountType.USER


def make_repository_ref(
    account_type: ProviderAccountType,
    domain: str,
    owner: str,
    repository_name: str,
) -> RepositoryRef:
    """Build the ref variant matching ``account_type``.

    Raises:
        AccountTypeNotSupportedError: For any value other than USER or
            ORGANIZATION.
    """
    if account_type == ProviderAccountType.ORGANIZATION:
        return OrgRepositoryRef(domain, owner, repository_name)
    if account_type == ProviderAccountType.USER:
        return UserRepositoryRef(domain, owner, repository_name)
    raise AccountTypeNotSupportedError(account_type)


@dataclass
class Organization:
    """An organization (GitHub) or group (GitLab)."""

    name: str
    """Login or full group path."""

    id: int | None = None
    """Provider-assigned identifier, when reported."""


@dataclass
class RepositoryInfo:
    """Repository metadata, used both for create requests and read results.

    Fields the provider did not report are left as None.
    """

    description: str | None = None
    visibility: RepositoryVisibility | None = None
    default_branch: str | None = None
    """Branch that new pull requests target when none is given."""

    html_url: str | None = None
    ssh_url: str | None = None


@dataclass
class RepositoryCreateOptions:
    """Options applied only when a repository is created."""

    auto_init: bool = True
    """Create an initial commit so the default branch exists."""

    license_template: str | None = "apache-2.0"
    """License template key; ignored by providers without template support."""


@dataclass
class DeployKeyInfo:
    """Deploy key upload request.

    Created transiently per upload; the matching private key is never seen
    by this layer.
    """

    name: str
    key: bytes
    read_only: bool = False
    """GitOps reconciliation pushes to the repository, so keys are writable."""


@dataclass
class DeployKey:
    """A deploy key as reported by the provider."""

    id: int | None
    name: str
    key: str
    read_only: bool


@dataclass
class CommitFile:
    """A file change within a commit.

    A ``content`` of None deletes ``path``.
    """

    path: str
    content: str | None


@dataclass
class Commit:
    """A commit as reported by the provider."""

    sha: str
    message: str = ""
    author: str = ""
    created_at: datetime | None = None
    url: str = ""
    tree_sha: str | None = None
    parent_shas: list[str] = field(default_factory=list)


@dataclass
class PullRequest:
    """A pull request (merge request in GitLab terminology)."""

    number: int
    """Repository-scoped number (``iid`` for GitLab)."""

    url: str
    """Web URL to view the pull request."""

    title: str = ""
    head: str = ""
    base: str = ""
    merged: bool = False
