"""
Provider facade consumed by the GitOps CLI.

GitProvider composes the account type resolver, repository manager, deploy
key manager and change proposer over a single ProviderClient. It holds no
state beyond its collaborators; every call goes to the remote provider.
"""

import structlog

from gitops_providers.config.settings import ProviderOptions
from gitops_providers.enums import GitProviderName, ProviderAccountType, RepositoryVisibility
from gitops_providers.exceptions import RepositoryError
from gitops_providers.git.models import NormalizedRepoURL
from gitops_providers.git.parser import normalize_repo_url
from gitops_providers.models.domain import (
    Commit,
    CommitFile,
    OrgRepositoryRef,
    PullRequest,
    RepositoryInfo,
    RepositoryRef,
    UserRepositoryRef,
)
from gitops_providers.providers.accounts import AccountTypeResolver
from gitops_providers.providers.base import ProviderClient
from gitops_providers.providers.deploy_keys import DeployKeyManager
from gitops_providers.providers.pull_requests import ChangeProposer
from gitops_providers.providers.repositories import RepositoryManager

log = structlog.get_logger(__name__)

DEFAULT_BRANCH_FALLBACK = "main"


def _as_normalized(url: NormalizedRepoURL | str) -> NormalizedRepoURL:
    if isinstance(url, NormalizedRepoURL):
        return url
    return normalize_repo_url(url)


class GitProvider:
    """Repository lifecycle operations against one git hosting provider.

    Example:
        >>> client = GitHubRestClient(token="...")
        >>> provider = GitProvider(client, ProviderOptions())
        >>> if not provider.repository_exists("widgets", "acme"):
        ...     provider.create_repository("widgets", "acme", private=True)
    """

    def __init__(self, client: ProviderClient, options: ProviderOptions | None = None):
        self.client = client
        self.options = options or ProviderOptions()

        self.accounts = AccountTypeResolver(client)
        self.repositories = RepositoryManager(client, self.accounts, self.options)
        self.deploy_keys = DeployKeyManager(client, self.repositories, self.options)
        self.changes = ChangeProposer(client)

    @property
    def provider_name(self) -> GitProviderName:
        return self.client.provider_name

    @property
    def provider_domain(self) -> str:
        """Return the provider's domain, e.g. ``gitlab.com``."""
        return self.client.domain

    def get_account_type(self, owner: str) -> ProviderAccountType:
        return self.accounts.resolve(owner)

    def repository_exists(self, name: str, owner: str, strict: bool = False) -> bool:
        return self.repositories.repository_exists(name, owner, strict=strict)

    def create_repository(self, name: str, owner: str, private: bool) -> RepositoryInfo:
        return self.repositories.create_repository(name, owner, private)

    def deploy_key_exists(self, owner: str, repo: str) -> bool:
        return self.deploy_keys.deploy_key_exists(owner, repo)

    def upload_deploy_key(self, owner: str, repo: str, public_key: bytes) -> None:
        self.deploy_keys.upload_deploy_key(owner, repo, public_key)

    def get_repo_info(self, account_type: ProviderAccountType, owner: str, repo: str) -> RepositoryInfo:
        return self.repositories.get_repo_info(account_type, owner, repo)

    def get_repo_info_from_url(self, url: NormalizedRepoURL | str) -> RepositoryInfo:
        """Resolve the owner of ``url`` and fetch the repository metadata."""
        url = _as_normalized(url)
        account_type = self.accounts.resolve(url.owner)
        return self.repositories.get_repo_info(account_type, url.owner, url.repository_name)

    def get_default_branch(self, url: NormalizedRepoURL | str) -> str:
        """Return the default branch of ``url``, or ``main`` if unreported."""
        info = self.get_repo_info_from_url(url)
        if not info.default_branch:
            log.debug("default_branch_fallback", repo=str(url), branch=DEFAULT_BRANCH_FALLBACK)
            return DEFAULT_BRANCH_FALLBACK
        return info.default_branch

    def get_repo_visibility(self, url: NormalizedRepoURL | str) -> RepositoryVisibility:
        """Return the visibility of ``url``.

        Raises:
            RepositoryError: If the repository cannot be fetched or the
                provider does not report a visibility.
        """
        url = _as_normalized(url)
        info = self.get_repo_info_from_url(url)
        if info.visibility is None:
            raise RepositoryError(
                f"unable to obtain repository visibility for: {url}",
                url.owner,
                url.repository_name,
            )
        return info.visibility

    def propose_change(
        self,
        ref: RepositoryRef,
        target_branch: str,
        new_branch: str,
        files: list[CommitFile],
        commit_message: str,
        pr_title: str,
        pr_description: str,
    ) -> PullRequest:
        return self.changes.propose_change(
            ref, target_branch, new_branch, files, commit_message, pr_title, pr_description
        )

    def create_pull_request_to_user_repo(
        self,
        owner: str,
        repo: str,
        target_branch: str,
        new_branch: str,
        files: list[CommitFile],
        commit_message: str,
        pr_title: str,
        pr_description: str,
    ) -> PullRequest:
        ref = UserRepositoryRef(self.provider_domain, owner, repo)
        return self.propose_change(
            ref, target_branch, new_branch, files, commit_message, pr_title, pr_description
        )

    def create_pull_request_to_org_repo(
        self,
        owner: str,
        repo: str,
        target_branch: str,
        new_branch: str,
        files: list[CommitFile],
        commit_message: str,
        pr_title: str,
        pr_description: str,
    ) -> PullRequest:
        ref = OrgRepositoryRef(self.provider_domain, owner, repo)
        return self.propose_change(
            ref, target_branch, new_branch, files, commit_message, pr_title, pr_description
        )

    def list_commits(
        self,
        ref: RepositoryRef,
        branch: str,
        page_size: int,
        page_token: int = 0,
    ) -> list[Commit]:
        return self.changes.list_commits(ref, branch, page_size, page_token)

    def get_commits_from_user_repo(
        self, owner: str, repo: str, branch: str, page_size: int, page_token: int = 0
    ) -> list[Commit]:
        ref = UserRepositoryRef(self.provider_domain, owner, repo)
        return self.list_commits(ref, branch, page_size, page_token)

    def get_commits_from_org_repo(
        self, owner: str, repo: str, branch: str, page_size: int, page_token: int = 0
    ) -> list[Commit]:
        ref = OrgRepositoryRef(self.provider_domain, owner, repo)
        return self.list_commits(ref, branch, page_size, page_token)

    def ref_for_url(self, url: NormalizedRepoURL) -> RepositoryRef:
        """Resolve the owner of ``url`` into a user or organization ref."""
        return self.repositories.ref_for(url.owner, url.repository_name)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GitProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
