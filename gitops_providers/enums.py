"""Enumerations for git providers, URL protocols and account types."""

from enum import Enum


class GitProviderName(str, Enum):
    """Remote git hosting providers supported by gitops-providers."""

    GITHUB = "github"
    GITLAB = "gitlab"

    def __str__(self) -> str:
        return self.value

    @property
    def hostname(self) -> str:
        """Public SaaS hostname of the provider (e.g. ``github.com``)."""
        return f"{self.value}.com"


class RepositoryURLProtocol(str, Enum):
    """Transport protocol of a repository URL as the user supplied it."""

    SSH = "ssh"
    HTTPS = "https"

    def __str__(self) -> str:
        return self.value


class ProviderAccountType(str, Enum):
    """Ownership kind of a repository owner.

    Resolved per owner string by probing the provider's organization API;
    never cached across CLI invocations.
    """

    USER = "user"
    ORGANIZATION = "organization"

    def __str__(self) -> str:
        return self.value


class RepositoryVisibility(str, Enum):
    """Repository visibility attached to creation requests."""

    PUBLIC = "public"
    PRIVATE = "private"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_private(cls, private: bool) -> "RepositoryVisibility":
        """Map a ``private`` flag to a visibility value."""
        return cls.PRIVATE if private else cls.PUBLIC
