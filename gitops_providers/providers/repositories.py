"""Repository existence checks and creation."""

import structlog

from gitops_providers.config.settings import ProviderOptions
from gitops_providers.enums import ProviderAccountType, RepositoryVisibility
from gitops_providers.exceptions import (
    NotFoundError,
    ProviderError,
    RepositoryError,
    WaitTimeoutError,
)
from gitops_providers.models.domain import (
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryRef,
    make_repository_ref,
)
from gitops_providers.providers.accounts import AccountTypeResolver
from gitops_providers.providers.base import ProviderClient
from gitops_providers.utils.wait import wait_until

log = structlog.get_logger(__name__)


class RepositoryManager:
    """Create and look up repositories under the right ownership scope."""

    def __init__(
        self,
        client: ProviderClient,
        resolver: AccountTypeResolver,
        options: ProviderOptions,
    ):
        self._client = client
        self._resolver = resolver
        self._options = options

    def ref_for(self, owner: str, name: str) -> RepositoryRef:
        """Resolve ``owner`` and build the matching repository ref."""
        account_type = self._resolver.resolve(owner)
        return make_repository_ref(account_type, self._client.domain, owner, name)

    def repository_exists(self, name: str, owner: str, strict: bool = False) -> bool:
        """Check whether ``owner/name`` exists.

        Args:
            name: Repository name.
            owner: User, organization or group path.
            strict: When False (the default) any failure of the repository
                fetch reads as "does not exist", so a transient network error
                is indistinguishable from absence. When True only a not-found
                answer returns False and other failures propagate.

        Raises:
            ProviderError: If the owner lookup fails, or (strict only) the
                repository fetch fails for a reason other than not-found.
        """
        ref = self.ref_for(owner, name)

        try:
            self._client.get_repository(ref)
        except NotFoundError:
            return False
        except ProviderError as e:
            if strict:
                raise
            log.warning("repository_lookup_failed", repo=str(ref), error=str(e))
            return False

        return True

    def create_repository(self, name: str, owner: str, private: bool) -> RepositoryInfo:
        """Create ``owner/name`` and wait until the provider serves it.

        The repository is auto-initialized with a first commit and the
        configured license template.

        Returns:
            Metadata returned by the create call.

        Raises:
            ProviderError: If the owner lookup fails.
            RepositoryError: If creation fails or the repository does not
                become visible within the configured wait timeout.
        """
        info = RepositoryInfo(
            description=self._options.repository_description,
            visibility=RepositoryVisibility.from_private(private),
        )
        create_options = RepositoryCreateOptions(
            auto_init=True,
            license_template=self._options.license_template,
        )

        ref = self.ref_for(owner, name)
        log.info("creating_repository", repo=str(ref), account_type=str(ref.account_type), private=private)

        try:
            created = self._client.create_repository(ref, info, create_options)
        except ProviderError as e:
            raise RepositoryError(f"error creating repo {ref}: {e}", owner, name) from e

        self._wait_until_created(ref)
        log.info("repository_created", repo=str(ref))
        return created

    def get_repo_info(
        self,
        account_type: ProviderAccountType,
        owner: str,
        name: str,
    ) -> RepositoryInfo:
        """Fetch repository metadata for an already-resolved owner.

        Raises:
            AccountTypeNotSupportedError: For an unknown account type.
            RepositoryError: If the repository cannot be fetched.
        """
        ref = make_repository_ref(account_type, self._client.domain, owner, name)

        try:
            return self._client.get_repository(ref)
        except ProviderError as e:
            raise RepositoryError(f"error getting {account_type} repository {ref}: {e}", owner, name) from e

    def _wait_until_created(self, ref: RepositoryRef) -> None:
        try:
            wait_until(
                lambda: self._client.get_repository(ref),
                interval=self._options.wait_interval,
                timeout=self._options.wait_timeout,
            )
        except WaitTimeoutError as e:
            raise RepositoryError(
                f"could not verify repo existence {ref}: {e}",
                ref.owner,
                ref.repository_name,
            ) from e
