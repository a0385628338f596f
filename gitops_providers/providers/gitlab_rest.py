"""GitLab provider binding using direct REST API calls."""

import urllib.parse
from datetime import datetime
from typing import Any

import httpx
import structlog

from gitops_providers.enums import GitProviderName, RepositoryVisibility
from gitops_providers.exceptions import GroupNotFoundError, NotFoundError, ProviderError
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
from gitops_providers.utils.http_client import HTTPClient

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://gitlab.com"
DEPLOY_KEYS_PAGE_SIZE = 100


def _quote(path: str) -> str:
    """URL-encode a namespace or file path for use as a single API path segment."""
    return urllib.parse.quote(path, safe="")


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _error_text(response: httpx.Response) -> str:
    """Extract GitLab's error message from a failed response.

    Validation failures come back as ``{"message": {"field": ["reason"]}}``;
    these are flattened to ``field: reason``.
    """
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if not isinstance(data, dict):
        return str(data)

    message = data.get("message") or data.get("error") or response.reason_phrase
    if isinstance(message, dict):
        parts = []
        for field, reasons in message.items():
            if isinstance(reasons, list):
                reasons = ", ".join(str(r) for r in reasons)
            parts.append(f"{field}: {reasons}")
        return "; ".join(parts)
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    return str(message)


class GitLabRestClient(ProviderClient):
    """GitLab implementation using direct REST API v4 calls.

    Supports gitlab.com and self-hosted GitLab instances.

    GitLab API differences from GitHub:
    - Organizations are groups, addressed by their full (possibly nested) path
    - Projects are addressed by their URL-encoded ``namespace/name`` path
    - Deploy keys use ``can_push`` instead of ``read_only``
    - Multi-file commits are a single call with a list of actions
    - Pull requests are merge requests, numbered by ``iid``
    - License templates are not available at project creation
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        http: HTTPClient | None = None,
    ):
        """Initialize GitLab client.

        Args:
            token: Personal access token with api scope
            base_url: GitLab base URL (e.g., https://gitlab.com)
            http: Pre-built HTTP session (tests inject a mock here)
        """
        self.base_url = base_url.rstrip("/")
        self.api_base = f"{self.base_url}/api/v4"
        self.token = token
        self._http = http or HTTPClient(
            base_url=self.api_base,
            headers={
                "PRIVATE-TOKEN": self.token,
                "Content-Type": "application/json",
            },
        )

    @property
    def provider_name(self) -> GitProviderName:
        return GitProviderName.GITLAB

    def close(self) -> None:
        self._http.close()

    def _project_path(self, ref: RepositoryRef) -> str:
        return f"/projects/{_quote(ref.full_name)}"

    def _send(self, method: str, path: str, operation: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise the ProviderError family on failure."""
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.error("gitlab_request_failed", operation=operation, path=path, error=str(e))
            raise ProviderError(f"{operation} failed: {e}") from e

        if response.status_code == 404:
            log.debug("gitlab_not_found", operation=operation, path=path)
            raise NotFoundError(_error_text(response))

        if response.is_error:
            text = _error_text(response)
            log.error(
                "gitlab_request_failed",
                operation=operation,
                path=path,
                status=response.status_code,
                error=text,
            )
            raise ProviderError(text, status_code=response.status_code)

        return response

    def get_organization(self, name: str) -> Organization:
        """Get group by full path."""
        try:
            response = self._send("GET", f"/groups/{_quote(name)}", "get_organization")
        except NotFoundError as e:
            raise GroupNotFoundError(name) from e

        data = response.json()
        return Organization(name=data.get("full_path", name), id=data["id"])

    def get_repository(self, ref: RepositoryRef) -> RepositoryInfo:
        """Get project metadata."""
        response = self._send("GET", self._project_path(ref), "get_repository")
        return self._parse_project(response.json())

    def create_repository(
        self,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions,
    ) -> RepositoryInfo:
        """Create a project in a group or in the authenticated user's namespace."""
        log.info("create_repository", repo=str(ref), visibility=str(info.visibility))

        data: dict[str, Any] = {
            "name": ref.repository_name,
            "path": ref.repository_name,
            "visibility": str(info.visibility or RepositoryVisibility.PRIVATE),
            "initialize_with_readme": options.auto_init,
        }
        if info.description is not None:
            data["description"] = info.description
        if options.license_template:
            log.debug("gitlab_license_template_ignored", template=options.license_template)

        if isinstance(ref, OrgRepositoryRef):
            group = self.get_organization(ref.owner)
            data["namespace_id"] = group.id

        response = self._send("POST", "/projects", "create_repository", json=data)
        return self._parse_project(response.json())

    def get_deploy_key(self, ref: RepositoryRef, name: str) -> DeployKey:
        """Find a deploy key by title."""
        response = self._send(
            "GET",
            f"{self._project_path(ref)}/deploy_keys",
            "get_deploy_key",
            params={"per_page": DEPLOY_KEYS_PAGE_SIZE},
        )

        for key_data in response.json():
            if key_data.get("title") == name:
                return self._parse_deploy_key(key_data)

        raise NotFoundError(f"deploy key {name} not found in {ref}")

    def create_deploy_key(self, ref: RepositoryRef, key: DeployKeyInfo) -> DeployKey:
        """Add a deploy key to the project."""
        log.info("create_deploy_key", repo=str(ref), key=key.name, read_only=key.read_only)

        data = {
            "title": key.name,
            "key": key.key.decode("utf-8").strip(),
            "can_push": not key.read_only,
        }
        response = self._send("POST", f"{self._project_path(ref)}/deploy_keys", "create_deploy_key", json=data)
        return self._parse_deploy_key(response.json())

    def create_branch(self, ref: RepositoryRef, branch: str, sha: str) -> None:
        """Create a branch from a commit SHA."""
        log.info("create_branch", repo=str(ref), branch=branch, sha=sha)

        self._send(
            "POST",
            f"{self._project_path(ref)}/repository/branches",
            "create_branch",
            params={"branch": branch, "ref": sha},
        )

    def list_commits(
        self,
        ref: RepositoryRef,
        branch: str,
        page_size: int,
        page: int = 0,
    ) -> list[Commit]:
        """List one page of commits on a branch."""
        response = self._send(
            "GET",
            f"{self._project_path(ref)}/repository/commits",
            "list_commits",
            # GitLab pages are 1-based
            params={"ref_name": branch, "per_page": page_size, "page": page + 1},
        )
        return [self._parse_commit(commit_data) for commit_data in response.json()]

    def create_commit(
        self,
        ref: RepositoryRef,
        branch: str,
        message: str,
        files: list[CommitFile],
    ) -> Commit:
        """Create a single commit with one action per file."""
        log.info("create_commit", repo=str(ref), branch=branch, files=len(files))

        actions = []
        for file in files:
            if file.content is None:
                actions.append({"action": "delete", "file_path": file.path})
                continue

            action = "update" if self._file_exists(ref, branch, file.path) else "create"
            actions.append({"action": action, "file_path": file.path, "content": file.content})

        data = {"branch": branch, "commit_message": message, "actions": actions}
        response = self._send("POST", f"{self._project_path(ref)}/repository/commits", "create_commit", json=data)
        return self._parse_commit(response.json())

    def create_pull_request(
        self,
        ref: RepositoryRef,
        title: str,
        head: str,
        base: str,
        description: str,
    ) -> PullRequest:
        """Create a merge request."""
        log.info("create_pull_request", repo=str(ref), title=title, head=head, base=base)

        data = {
            "source_branch": head,
            "target_branch": base,
            "title": title,
            "description": description,
        }
        response = self._send(
            "POST",
            f"{self._project_path(ref)}/merge_requests",
            "create_pull_request",
            json=data,
        )
        return self._parse_merge_request(response.json())

    def _file_exists(self, ref: RepositoryRef, branch: str, path: str) -> bool:
        try:
            self._send(
                "HEAD",
                f"{self._project_path(ref)}/repository/files/{_quote(path)}",
                "get_file",
                params={"ref": branch},
            )
        except NotFoundError:
            return False
        return True

    def _parse_project(self, data: dict[str, Any]) -> RepositoryInfo:
        """Parse project data from GitLab API response.

        GitLab's "internal" visibility is reported as private.
        """
        visibility = data.get("visibility")
        return RepositoryInfo(
            description=data.get("description"),
            visibility=(
                None
                if visibility is None
                else RepositoryVisibility.PUBLIC if visibility == "public" else RepositoryVisibility.PRIVATE
            ),
            default_branch=data.get("default_branch"),
            html_url=data.get("web_url"),
            ssh_url=data.get("ssh_url_to_repo"),
        )

    def _parse_deploy_key(self, data: dict[str, Any]) -> DeployKey:
        return DeployKey(
            id=data.get("id"),
            name=data["title"],
            key=data.get("key", ""),
            read_only=not data.get("can_push", False),
        )

    def _parse_commit(self, data: dict[str, Any]) -> Commit:
        return Commit(
            sha=data["id"],
            message=data.get("message", ""),
            author=data.get("author_name", ""),
            created_at=_parse_datetime(data.get("created_at")),
            url=data.get("web_url", ""),
            parent_shas=list(data.get("parent_ids") or []),
        )

    def _parse_merge_request(self, data: dict[str, Any]) -> PullRequest:
        """Parse merge request data.

        Maps 'iid' -> number, 'source_branch' -> head, 'target_branch' -> base.
        """
        return PullRequest(
            number=data["iid"],
            url=data["web_url"],
            title=data.get("title", ""),
            head=data.get("source_branch", ""),
            base=data.get("target_branch", ""),
            merged=data.get("state") == "merged",
        )
