"""GitHub provider binding using PyGithub."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import requests
import structlog
from github import Auth, Github, GithubException, InputGitTreeElement  # type: ignore[import-not-found]
from github.Commit import Commit as GHCommit  # type: ignore[import-not-found]
from github.GitCommit import GitCommit as GHGitCommit  # type: ignore[import-not-found]
from github.PullRequest import PullRequest as GHPullRequest  # type: ignore[import-not-found]
from github.Repository import Repository as GHRepository  # type: ignore[import-not-found]
from github.RepositoryKey import RepositoryKey as GHRepositoryKey  # type: ignore[import-not-found]

from gitops_providers.enums import GitProviderName, RepositoryVisibility
from gitops_providers.exceptions import NotFoundError, ProviderError
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
)
from gitops_providers.providers.base import ProviderClient

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
BLOB_MODE = "100644"


def _error_text(e: GithubException) -> str:
    """Flatten a GitHub error payload into one line of text.

    GitHub puts the useful detail (e.g. "key is already in use") in the
    ``errors`` list, not in the top-level message.
    """
    data = e.data if isinstance(e.data, dict) else {}
    parts = [str(data.get("message") or e.status)]
    for detail in data.get("errors") or []:
        if isinstance(detail, dict) and detail.get("message"):
            parts.append(str(detail["message"]))
        elif isinstance(detail, str):
            parts.append(detail)
    return ": ".join(parts)


@contextmanager
def _translate_errors(operation: str, **context: Any) -> Iterator[None]:
    """Re-raise PyGithub and transport exceptions as ProviderError / NotFoundError."""
    try:
        yield
    except GithubException as e:
        if e.status == 404:
            log.debug("github_not_found", operation=operation, **context)
            raise NotFoundError(_error_text(e)) from e
        log.error("github_request_failed", operation=operation, status=e.status, error=str(e), **context)
        raise ProviderError(_error_text(e), status_code=e.status) from e
    except requests.exceptions.RequestException as e:
        log.error("github_request_failed", operation=operation, error=str(e), **context)
        raise ProviderError(f"{operation} failed: {e}") from e


class GitHubRestClient(ProviderClient):
    """GitHub implementation using the PyGithub library."""

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token or App token
            base_url: GitHub API base URL (for GitHub Enterprise)
        """
        self.token = token.strip() if token else token
        # Normalize base_url by removing trailing slash (Pydantic HttpUrl adds it)
        self.base_url = base_url.rstrip("/")
        self._client = Github(auth=Auth.Token(self.token), base_url=self.base_url)

    @property
    def provider_name(self) -> GitProviderName:
        return GitProviderName.GITHUB

    def close(self) -> None:
        """Close GitHub client."""
        self._client.close()

    def _get_repo(self, ref: RepositoryRef) -> GHRepository:
        return self._client.get_repo(ref.full_name)

    def get_organization(self, name: str) -> Organization:
        """Get organization by login."""
        with _translate_errors("get_organization", organization=name):
            gh_org = self._client.get_organization(name)
            return Organization(name=gh_org.login, id=gh_org.id)

    def get_repository(self, ref: RepositoryRef) -> RepositoryInfo:
        """Get repository metadata."""
        with _translate_errors("get_repository", repo=str(ref)):
            return self._convert_repository(self._get_repo(ref))

    def create_repository(
        self,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions,
    ) -> RepositoryInfo:
        """Create a repository under an organization or the authenticated user."""
        log.info("create_repository", repo=str(ref), visibility=str(info.visibility))

        kwargs: dict[str, Any] = {
            "private": info.visibility == RepositoryVisibility.PRIVATE,
            "auto_init": options.auto_init,
        }
        if info.description is not None:
            kwargs["description"] = info.description
        if options.license_template:
            kwargs["license_template"] = options.license_template

        with _translate_errors("create_repository", repo=str(ref)):
            if isinstance(ref, OrgRepositoryRef):
                owner = self._client.get_organization(ref.owner)
            else:
                owner = self._client.get_user()
            gh_repo = owner.create_repo(ref.repository_name, **kwargs)
            return self._convert_repository(gh_repo)

    def get_deploy_key(self, ref: RepositoryRef, name: str) -> DeployKey:
        """Find a deploy key by title."""
        with _translate_errors("get_deploy_key", repo=str(ref), key=name):
            for gh_key in self._get_repo(ref).get_keys():
                if gh_key.title == name:
                    return self._convert_key(gh_key)

        raise NotFoundError(f"deploy key {name} not found in {ref}")

    def create_deploy_key(self, ref: RepositoryRef, key: DeployKeyInfo) -> DeployKey:
        """Add a deploy key to the repository."""
        log.info("create_deploy_key", repo=str(ref), key=key.name, read_only=key.read_only)

        with _translate_errors("create_deploy_key", repo=str(ref), key=key.name):
            gh_key = self._get_repo(ref).create_key(
                title=key.name,
                key=key.key.decode("utf-8").strip(),
                read_only=key.read_only,
            )
            return self._convert_key(gh_key)

    def create_branch(self, ref: RepositoryRef, branch: str, sha: str) -> None:
        """Create a branch via the git refs API."""
        log.info("create_branch", repo=str(ref), branch=branch, sha=sha)

        with _translate_errors("create_branch", repo=str(ref), branch=branch):
            self._get_repo(ref).create_git_ref(ref=f"refs/heads/{branch}", sha=sha)

    def list_commits(
        self,
        ref: RepositoryRef,
        branch: str,
        page_size: int,
        page: int = 0,
    ) -> list[Commit]:
        """List one page of commits on a branch."""
        start = page * page_size

        with _translate_errors("list_commits", repo=str(ref), branch=branch):
            gh_commits = self._get_repo(ref).get_commits(sha=branch)
            return [self._convert_commit(c) for c in gh_commits[start : start + page_size]]

    def create_commit(
        self,
        ref: RepositoryRef,
        branch: str,
        message: str,
        files: list[CommitFile],
    ) -> Commit:
        """Create a single commit containing all files via the git data API."""
        log.info("create_commit", repo=str(ref), branch=branch, files=len(files))

        with _translate_errors("create_commit", repo=str(ref), branch=branch):
            gh_repo = self._get_repo(ref)
            git_ref = gh_repo.get_git_ref(f"heads/{branch}")
            parent = gh_repo.get_git_commit(git_ref.object.sha)

            elements = []
            for file in files:
                if file.content is None:
                    # A null sha removes the path from the tree
                    elements.append(InputGitTreeElement(file.path, BLOB_MODE, "blob", sha=None))
                else:
                    elements.append(InputGitTreeElement(file.path, BLOB_MODE, "blob", content=file.content))

            tree = gh_repo.create_git_tree(elements, base_tree=parent.tree)
            gh_commit = gh_repo.create_git_commit(message, tree, [parent])
            git_ref.edit(sha=gh_commit.sha)

            return self._convert_git_commit(gh_commit)

    def create_pull_request(
        self,
        ref: RepositoryRef,
        title: str,
        head: str,
        base: str,
        description: str,
    ) -> PullRequest:
        """Create a pull request."""
        log.info("create_pull_request", repo=str(ref), title=title, head=head, base=base)

        with _translate_errors("create_pull_request", repo=str(ref), head=head, base=base):
            gh_pr = self._get_repo(ref).create_pull(title=title, body=description, head=head, base=base)
            return self._convert_pull_request(gh_pr)

    def _convert_repository(self, gh_repo: GHRepository) -> RepositoryInfo:
        """Convert GitHub Repository to our RepositoryInfo model."""
        return RepositoryInfo(
            description=gh_repo.description,
            visibility=RepositoryVisibility.from_private(gh_repo.private),
            default_branch=gh_repo.default_branch,
            html_url=gh_repo.html_url,
            ssh_url=gh_repo.ssh_url,
        )

    def _convert_key(self, gh_key: GHRepositoryKey) -> DeployKey:
        return DeployKey(
            id=gh_key.id,
            name=gh_key.title,
            key=gh_key.key,
            read_only=bool(gh_key.read_only),
        )

    def _convert_commit(self, gh_commit: GHCommit) -> Commit:
        """Convert a listed GitHub commit to our Commit model."""
        git_author = gh_commit.commit.author
        return Commit(
            sha=gh_commit.sha,
            message=gh_commit.commit.message,
            author=git_author.name if git_author else "",
            created_at=git_author.date if git_author else None,
            url=gh_commit.html_url,
        )

    def _convert_git_commit(self, gh_commit: GHGitCommit) -> Commit:
        """Convert a freshly created git data commit to our Commit model."""
        return Commit(
            sha=gh_commit.sha,
            message=gh_commit.message,
            author=gh_commit.author.name if gh_commit.author else "",
            created_at=gh_commit.author.date if gh_commit.author else None,
            url=gh_commit.html_url,
            tree_sha=gh_commit.tree.sha,
            parent_shas=[parent.sha for parent in gh_commit.parents],
        )

    def _convert_pull_request(self, gh_pr: GHPullRequest) -> PullRequest:
        """Convert GitHub PullRequest to our PullRequest model."""
        return PullRequest(
            number=gh_pr.number,
            url=gh_pr.html_url,
            title=gh_pr.title,
            head=gh_pr.head.ref,
            base=gh_pr.base.ref,
            merged=bool(gh_pr.merged),
        )
