"""
Dry-run provider client.

Logs every call instead of talking to a provider. Reads return fixed
placeholder values: every owner is a user, every repository exists on
``main``, and the deploy key is already registered, so the workflows run to
completion without side effects.
"""

from datetime import UTC, datetime

import structlog

from gitops_providers.enums import GitProviderName, RepositoryVisibility
from gitops_providers.exceptions import NotFoundError
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
from gitops_providers.providers.base import ProviderClient

log = structlog.get_logger(__name__)

PLACEHOLDER_SHA = "0" * 40


class DryRunClient(ProviderClient):
    """ProviderClient that performs no remote calls."""

    def __init__(self, provider: GitProviderName):
        self._provider = provider

    @property
    def provider_name(self) -> GitProviderName:
        return self._provider

    def get_organization(self, name: str) -> Organization:
        log.info("dry_run_get_organization", provider=str(self._provider), name=name)
        raise NotFoundError(f"dry run: organization {name} not looked up")

    def get_repository(self, ref: RepositoryRef) -> RepositoryInfo:
        log.info("dry_run_get_repository", repo=str(ref))
        return RepositoryInfo(
            description="dry run",
            visibility=RepositoryVisibility.PRIVATE,
            default_branch="main",
            html_url=f"https://{ref.domain}/{ref.full_name}",
            ssh_url=f"git@{ref.domain}:{ref.full_name}.git",
        )

    def create_repository(
        self,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions,
    ) -> RepositoryInfo:
        log.info(
            "dry_run_create_repository",
            repo=str(ref),
            account_type=str(ref.account_type),
            visibility=str(info.visibility),
            auto_init=options.auto_init,
            license_template=options.license_template,
        )
        return RepositoryInfo(
            description=info.description,
            visibility=info.visibility,
            default_branch="main",
        )

    def get_deploy_key(self, ref: RepositoryRef, name: str) -> DeployKey:
        log.info("dry_run_get_deploy_key", repo=str(ref), key=name)
        return DeployKey(id=None, name=name, key="", read_only=False)

    def create_deploy_key(self, ref: RepositoryRef, key: DeployKeyInfo) -> DeployKey:
        log.info("dry_run_create_deploy_key", repo=str(ref), key=key.name, read_only=key.read_only)
        return DeployKey(id=None, name=key.name, key=key.key.decode(errors="replace"), read_only=key.read_only)

    def create_branch(self, ref: RepositoryRef, branch: str, sha: str) -> None:
        log.info("dry_run_create_branch", repo=str(ref), branch=branch, sha=sha)

    def list_commits(
        self,
        ref: RepositoryRef,
        branch: str,
        page_size: int,
        page: int = 0,
    ) -> list[Commit]:
        log.info("dry_run_list_commits", repo=str(ref), branch=branch, page_size=page_size, page=page)
        if page > 0 or page_size < 1:
            return []
        return [Commit(sha=PLACEHOLDER_SHA, message="dry run", created_at=datetime.now(UTC))]

    def create_commit(
        self,
        ref: RepositoryRef,
        branch: str,
        message: str,
        files: list[CommitFile],
    ) -> Commit:
        log.info(
            "dry_run_create_commit",
            repo=str(ref),
            branch=branch,
            message=message,
            files=[f.path for f in files],
        )
        return Commit(sha=PLACEHOLDER_SHA, message=message, parent_shas=[PLACEHOLDER_SHA])

    def create_pull_request(
        self,
        ref: RepositoryRef,
        title: str,
        head: str,
        base: str,
        description: str,
    ) -> PullRequest:
        log.info("dry_run_create_pull_request", repo=str(ref), title=title, head=head, base=base)
        return PullRequest(
            number=0,
            url=f"https://{ref.domain}/{ref.full_name}",
            title=title,
            head=head,
            base=base,
        )
