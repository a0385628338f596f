"""Branch, commit and pull request workflow.

``propose_change`` is a strictly sequential pipeline:

    1. fetch repository (resolve default branch if no target given)
    2. list the latest commit on the target branch
    3. create the new branch at that commit
    4. commit the files onto the new branch
    5. open a pull request from the new branch into the target branch

Each step is a single remote call. A failure stops the pipeline and nothing
is cleaned up: a branch (and commit) created by an earlier step stays on the
remote. Steps are never retried, so a rerun cannot create a duplicate branch
or pull request behind the caller's back.
"""

import structlog

from gitops_providers.exceptions import PullRequestWorkflowError, ProviderError, TargetBranchNotFoundError
from gitops_providers.models.domain import Commit, CommitFile, PullRequest, RepositoryRef
from gitops_providers.providers.base import ProviderClient

log = structlog.get_logger(__name__)


class ChangeProposer:
    """Propose file changes to a repository as a pull request."""

    def __init__(self, client: ProviderClient):
        self._client = client

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
        """Commit ``files`` to a new branch and open a pull request.

        Args:
            ref: Repository to change (user or organization scoped).
            target_branch: Branch the pull request targets. Empty means the
                repository's default branch.
            new_branch: Branch to create for the change. Must not exist.
            files: Complete set of file changes for the single commit.
            commit_message: Message of the commit.
            pr_title: Pull request title.
            pr_description: Pull request body.

        Returns:
            The created pull request.

        Raises:
            TargetBranchNotFoundError: If the target branch has no commits.
                No branch, commit or pull request is created.
            PullRequestWorkflowError: If any remote step fails. ``step`` names
                the failing step; earlier steps are not undone.
        """
        try:
            repo_info = self._client.get_repository(ref)
        except ProviderError as e:
            raise PullRequestWorkflowError(
                f"error getting info for repo [{ref}] err [{e}]",
                step="get_repository",
                repository=str(ref),
            ) from e

        if not target_branch:
            target_branch = repo_info.default_branch or ""

        try:
            commits = self._client.list_commits(ref, target_branch, page_size=1, page=0)
        except ProviderError as e:
            raise PullRequestWorkflowError(
                f"error getting commits for repo [{ref}] err [{e}]",
                step="list_commits",
                repository=str(ref),
                branch=target_branch,
            ) from e

        if not commits:
            raise TargetBranchNotFoundError(target_branch, str(ref))

        latest_commit = commits[0]

        log.info("creating_branch", repo=str(ref), branch=new_branch, sha=latest_commit.sha)
        try:
            self._client.create_branch(ref, new_branch, latest_commit.sha)
        except ProviderError as e:
            raise PullRequestWorkflowError(
                f"error creating branch [{new_branch}] for repo [{ref}] err [{e}]",
                step="create_branch",
                repository=str(ref),
                branch=new_branch,
            ) from e

        try:
            self._client.create_commit(ref, new_branch, commit_message, files)
        except ProviderError as e:
            raise PullRequestWorkflowError(
                f"error creating commit for branch [{new_branch}] for repo [{ref}] err [{e}]",
                step="create_commit",
                repository=str(ref),
                branch=new_branch,
            ) from e

        try:
            pr = self._client.create_pull_request(ref, pr_title, new_branch, target_branch, pr_description)
        except ProviderError as e:
            raise PullRequestWorkflowError(
                f"error creating pull request [{pr_title}] for branch [{new_branch}] for repo [{ref}] err [{e}]",
                step="create_pull_request",
                repository=str(ref),
                branch=new_branch,
            ) from e

        log.info("pull_request_created", repo=str(ref), number=pr.number, url=pr.url)
        return pr

    def list_commits(
        self,
        ref: RepositoryRef,
        branch: str,
        page_size: int,
        page_token: int = 0,
    ) -> list[Commit]:
        """Return one page of commits on ``branch``.

        Only the requested page is fetched; callers paginate by incrementing
        ``page_token`` (zero-based) until a short page comes back.

        Raises:
            ProviderError: If the listing fails. Not retried.
        """
        try:
            return self._client.list_commits(ref, branch, page_size=page_size, page=page_token)
        except ProviderError as e:
            raise ProviderError(
                f"error getting commits for repo [{ref}] err [{e.message}]",
                status_code=e.status_code,
            ) from e
