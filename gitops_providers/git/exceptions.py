"""Repository URL exceptions.

This module defines the exceptions raised while normalizing user-supplied
repository URLs. Both include a hint listing the accepted URL grammars.

Example:
    >>> from gitops_providers.git.exceptions import UnsupportedHostError
    >>> raise UnsupportedHostError("gitea.example.com", "https://gitea.example.com/o/r")
    Traceback (most recent call last):
        ...
    UnsupportedHostError: no git providers found for "https://gitea.example.com/o/r"

    Hint: Only github.com and gitlab.com repositories are supported.
"""

from gitops_providers.exceptions import GitOpsProvidersError

EXPECTED_FORMATS = (
    "Expected formats:\n"
    "  - git@github.com:owner/repo.git\n"
    "  - ssh://git@gitlab.com/group/subgroup/repo.git\n"
    "  - https://github.com/owner/repo"
)


class InvalidRepoURLError(GitOpsProvidersError):
    """Raised when a repository URL cannot be normalized.

    Attributes:
        url: The invalid URL
        hint: Optional hint for resolution
    """

    def __init__(self, url: str, reason: str | None = None, hint: str | None = EXPECTED_FORMATS) -> None:
        """Initialize exception.

        Args:
            url: The invalid URL
            reason: Optional reason for the error
            hint: Optional hint for resolution
        """
        msg = f"invalid repository URL: {url}"
        if reason:
            msg += f" ({reason})"

        super().__init__(msg)
        self.url = url
        self.reason = reason
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class UnsupportedHostError(InvalidRepoURLError):
    """Raised when the URL's host is not a known git provider.

    Attributes:
        host: The unsupported host
        url: The full URL
    """

    def __init__(self, host: str, url: str) -> None:
        """Initialize exception.

        Args:
            host: The unsupported host
            url: The full URL
        """
        super().__init__(
            url,
            hint="Only github.com and gitlab.com repositories are supported.",
        )
        self.message = f'no git providers found for "{url}"'
        self.host = host
