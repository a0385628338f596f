"""
Abstract base class for provider SDK bindings.

This module defines the remote operations the provider workflows consume.
Each git hosting service gets exactly one implementation; the workflows in
``gitops_providers.providers`` never branch on provider identity.
"""

from abc import ABC, abstractmethod

from gitops_providers.enums import GitProviderName
from gitops_providers.models.domain import (
    Commit,
    CommitFile,
    DeployKey,
    DeployKeyInfo,
    Organization,
    PullRequest,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryRef,
)


class ProviderClient(ABC):
    """Abstract base class for git provider API bindings.

    Implementations translate between the domain models and a provider's
    API, and normalize its failures into the ``ProviderError`` family:

    - A missing resource raises ``NotFoundError`` (``GroupNotFoundError`` for
      GitLab groups).
    - Any other failure raises ``ProviderError`` carrying the provider's own
      error text.

    Every method is a single synchronous request/response exchange (or a
    short fixed sequence of them for multi-file commits). No method retries;
    callers that need read-after-write confirmation poll with
    ``gitops_providers.utils.wait.wait_until``.

    Repository-scoped methods accept either ref variant. Only
    ``create_repository`` behaves differently for organization and user refs.
    """

    @property
    @abstractmethod
    def provider_name(self) -> GitProviderName:
        """Provider this client talks to."""
        pass

    @property
    def domain(self) -> str:
        """Provider domain used in repository refs (e.g. ``github.com``)."""
        return self.provider_name.hostname

    @abstractmethod
    def get_organization(self, name: str) -> Organization:
        """Look up an organization (GitHub) or group (GitLab).

        Args:
            name: Organization login or full group path.

        Returns:
            Organization with its provider identifier.

        Raises:
            NotFoundError: If no organization exists with that name.
            GroupNotFoundError: GitLab variant of NotFoundError.
            ProviderError: For any other API failure.
        """
        pass

    @abstractmethod
    def get_repository(self, ref: RepositoryRef) -> RepositoryInfo:
        """Fetch repository metadata.

        Raises:
            NotFoundError: If the repository does not exist (or is not yet
                visible after creation).
            ProviderError: For any other API failure.
        """
        pass

    @abstractmethod
    def create_repository(
        self,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions,
    ) -> RepositoryInfo:
        """Create a repository.

        Organization refs create the repository under the organization or
        group; user refs create it under the authenticated user.

        Args:
            ref: Where to create the repository.
            info: Description and visibility of the new repository.
            options: Creation-only options (auto-init, license template).

        Returns:
            Metadata of the created repository as returned by the create call.

        Raises:
            ProviderError: If the provider rejects the request.
        """
        pass

    @abstractmethod
    def get_deploy_key(self, ref: RepositoryRef, name: str) -> DeployKey:
        """Find a deploy key on a repository by its title.

        Raises:
            NotFoundError: If no key with that title exists.
            ProviderError: For any other API failure.
        """
        pass

    @abstractmethod
    def create_deploy_key(self, ref: RepositoryRef, key: DeployKeyInfo) -> DeployKey:
        """Add a deploy key to a repository.

        Raises:
            ProviderError: If the provider rejects the key (including keys
                already registered elsewhere).
        """
        pass

    @abstractmethod
    def create_branch(self, ref: RepositoryRef, branch: str, sha: str) -> None:
        """Create ``branch`` pointing at commit ``sha``.

        Raises:
            ProviderError: If the branch already exists or the request fails.
        """
        pass

    @abstractmethod
    def list_commits(
        self,
        ref: RepositoryRef,
        branch: str,
        page_size: int,
        page: int = 0,
    ) -> list[Commit]:
        """List one page of commits on ``branch``, newest first.

        Args:
            ref: Repository to read.
            branch: Branch name.
            page_size: Maximum number of commits returned.
            page: Zero-based page index.

        Returns:
            Up to ``page_size`` commits. Empty when the branch has none.
        """
        pass

    @abstractmethod
    def create_commit(
        self,
        ref: RepositoryRef,
        branch: str,
        message: str,
        files: list[CommitFile],
    ) -> Commit:
        """Commit ``files`` onto the tip of ``branch`` in one commit.

        Files whose ``content`` is None are deleted.
        """
        pass

    @abstractmethod
    def create_pull_request(
        self,
        ref: RepositoryRef,
        title: str,
        head: str,
        base: str,
        description: str,
    ) -> PullRequest:
        """Open a pull (merge) request from ``head`` into ``base``."""
        pass

    def close(self) -> None:
        """Release network resources held by the client."""
        return None
