"""Custom exception hierarchy for the gitops-providers layer.

Every error raised by this package carries enough context (operation, owner,
repository, branch) for the caller to present it directly to a user. The
original provider error is always chained with ``raise ... from err`` so its
text stays available for display.

Exception Hierarchy:
    GitOpsProvidersError (base)
    ├── ConfigurationError
    ├── ProviderError
    │   ├── NotFoundError
    │   │   └── GroupNotFoundError
    │   └── AccountTypeNotSupportedError
    ├── WaitTimeoutError
    ├── RepositoryError
    ├── DeployKeyError
    └── PullRequestWorkflowError
        └── TargetBranchNotFoundError

URL parsing errors live in ``gitops_providers.git.exceptions``.

Example Usage:
    >>> from gitops_providers.exceptions import NotFoundError
    >>> try:
    ...     client.get_organization("someone")
    ... except NotFoundError:
    ...     account_type = ProviderAccountType.USER
"""

from __future__ import annotations

GROUP_NOT_FOUND = "group not found"


class GitOpsProvidersError(Exception):
    """Base exception for all gitops-providers errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(GitOpsProvidersError):
    """Configuration-related errors.

    Raised when a settings file is missing or invalid, or when no token is
    configured for the provider a repository URL points at.
    """

    pass


class ProviderError(GitOpsProvidersError):
    """A remote provider API call failed.

    The provider's own error text is preserved verbatim in ``message`` so
    conflict errors such as "reference already exists" reach the caller
    unchanged.

    Attributes:
        message: Provider error text
        status_code: HTTP status code, when the provider returned one
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize exception.

        Args:
            message: Provider error text
            status_code: HTTP status code (if applicable)
        """
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class NotFoundError(ProviderError):
    """The requested remote resource does not exist."""

    def __init__(self, message: str = "the requested resource was not found") -> None:
        super().__init__(message, status_code=404)


class GroupNotFoundError(NotFoundError):
    """GitLab reports that a group (namespace) does not exist."""

    def __init__(self, group: str) -> None:
        self.group = group
        super().__init__(f"{GROUP_NOT_FOUND}: {group}")


class AccountTypeNotSupportedError(ProviderError):
    """An account type other than user or organization was requested."""

    def __init__(self, account_type: object) -> None:
        self.account_type = account_type
        super().__init__(f"account type not supported {account_type}")


class WaitTimeoutError(GitOpsProvidersError):
    """An eventual-consistency probe never succeeded within its bound.

    Attributes:
        timeout: The bound that was exceeded, in seconds
        last_error: The error returned by the final probe
    """

    def __init__(self, timeout: float, last_error: BaseException | None) -> None:
        self.timeout = timeout
        self.last_error = last_error
        message = f"timed out after {timeout}s"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)


class RepositoryError(GitOpsProvidersError):
    """Creating a repository or confirming its existence failed.

    Attributes:
        owner: Repository owner (user, organization or group path)
        repository: Repository name
    """

    def __init__(self, message: str, owner: str, repository: str) -> None:
        self.owner = owner
        self.repository = repository
        super().__init__(message)


class DeployKeyError(GitOpsProvidersError):
    """Looking up, uploading or confirming a deploy key failed.

    Attributes:
        owner: Repository owner
        repository: Repository name
    """

    def __init__(self, message: str, owner: str, repository: str) -> None:
        self.owner = owner
        self.repository = repository
        super().__init__(message)


class PullRequestWorkflowError(GitOpsProvidersError):
    """A step of the propose-change workflow failed.

    Earlier steps are not rolled back: a branch or commit created before the
    failing step remains on the remote.

    Attributes:
        step: Name of the failing step ("get_repository", "list_commits",
            "create_branch", "create_commit" or "create_pull_request")
        repository: String form of the repository reference
        branch: Branch involved in the failing step, if any
    """

    def __init__(
        self,
        message: str,
        step: str,
        repository: str,
        branch: str | None = None,
    ) -> None:
        self.step = step
        self.repository = repository
        self.branch = branch
        super().__init__(message)


class TargetBranchNotFoundError(PullRequestWorkflowError):
    """The target branch of a proposed change has no commits."""

    def __init__(self, branch: str, repository: str) -> None:
        super().__init__(
            f"targetBranch [{branch}] does not exist",
            step="list_commits",
            repository=repository,
            branch=branch,
        )


def is_not_found(err: BaseException) -> bool:
    """Return True when ``err`` means the remote resource is absent.

    Covers the ``NotFoundError`` family and any provider error whose text
    carries GitLab's "group not found" wording.
    """
    if isinstance(err, NotFoundError):
        return True
    return GROUP_NOT_FOUND in str(err).lower()
