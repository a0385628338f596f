"""Account type resolution.

An owner string is either a personal account or an organization (a group on
GitLab). Providers expose different create APIs for the two, so every
repository-scoped workflow resolves the owner first.
"""

import structlog

from gitops_providers.enums import ProviderAccountType
from gitops_providers.exceptions import ProviderError, is_not_found
from gitops_providers.providers.base import ProviderClient

log = structlog.get_logger(__name__)


class AccountTypeResolver:
    """Classify owners by probing the provider's organization API.

    Results are not cached: each call is one remote round trip. Callers that
    need the answer twice should thread the returned value through.
    """

    def __init__(self, client: ProviderClient):
        self._client = client

    def resolve(self, owner: str) -> ProviderAccountType:
        """Return whether ``owner`` is a user or an organization.

        Args:
            owner: Login, organization name, or GitLab group path.

        Returns:
            ORGANIZATION if the organization lookup succeeds, USER if it fails
            with a not-found (or GitLab "group not found") error.

        Raises:
            ProviderError: Any other lookup failure, unchanged.
        """
        try:
            self._client.get_organization(owner)
        except ProviderError as e:
            if is_not_found(e):
                log.debug("account_type_resolved", owner=owner, account_type="user")
                return ProviderAccountType.USER
            raise

        log.debug("account_type_resolved", owner=owner, account_type="organization")
        return ProviderAccountType.ORGANIZATION
