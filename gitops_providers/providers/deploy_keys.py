"""Deploy key lookup and upload.

The in-cluster engine authenticates to the repository with a single deploy
key per repository, identified by a fixed, well-known title.
"""

import structlog

from gitops_providers.config.settings import ProviderOptions
from gitops_providers.exceptions import DeployKeyError, NotFoundError, ProviderError, WaitTimeoutError
from gitops_providers.models.domain import DeployKeyInfo, RepositoryRef
from gitops_providers.providers.base import ProviderClient
from gitops_providers.providers.repositories import RepositoryManager
from gitops_providers.utils.wait import wait_until

log = structlog.get_logger(__name__)

# Providers reuse this text for a harmless collision with an existing key
KEY_ALREADY_IN_USE = "key is already in use"


class DeployKeyManager:
    """Check for and upload the repository deploy key."""

    def __init__(
        self,
        client: ProviderClient,
        repositories: RepositoryManager,
        options: ProviderOptions,
    ):
        self._client = client
        self._repositories = repositories
        self._options = options

    @property
    def key_name(self) -> str:
        return self._options.deploy_key_name

    def deploy_key_exists(self, owner: str, repo: str) -> bool:
        """Check whether the deploy key is registered on ``owner/repo``.

        Returns:
            True if the key exists, or if the provider reports that the key is
            already in use. False if the provider reports it as not found.

        Raises:
            ProviderError: If the owner lookup fails.
            DeployKeyError: If the repository cannot be fetched, or the key
                lookup fails for any other reason.
        """
        ref = self._fetch_repository(owner, repo)

        try:
            self._client.get_deploy_key(ref, self.key_name)
        except ProviderError as e:
            if KEY_ALREADY_IN_USE in str(e):
                log.debug("deploy_key_in_use", repo=str(ref), key=self.key_name)
                return True
            if isinstance(e, NotFoundError):
                return False
            raise DeployKeyError(
                f"error getting deploy key {self.key_name} for repo {repo}: {e}",
                owner,
                repo,
            ) from e

        return True

    def upload_deploy_key(self, owner: str, repo: str, public_key: bytes) -> None:
        """Register ``public_key`` as a writable deploy key and wait for it.

        Raises:
            ProviderError: If the owner lookup fails.
            DeployKeyError: If the repository cannot be fetched, the upload is
                rejected, or the key does not become visible within the
                configured wait timeout.
        """
        key_info = DeployKeyInfo(name=self.key_name, key=public_key, read_only=False)
        ref = self._fetch_repository(owner, repo)

        log.info("uploading_deploy_key", repo=str(ref), key=self.key_name)
        try:
            self._client.create_deploy_key(ref, key_info)
        except ProviderError as e:
            raise DeployKeyError(f"error uploading deploy key: {e}", owner, repo) from e

        try:
            wait_until(
                lambda: self._client.get_deploy_key(ref, self.key_name),
                interval=self._options.wait_interval,
                timeout=self._options.wait_timeout,
            )
        except WaitTimeoutError as e:
            raise DeployKeyError(
                f"error verifying deploy key {self.key_name} existence for repo {repo}: {e}",
                owner,
                repo,
            ) from e

        log.info("deploy_key_uploaded", repo=str(ref), key=self.key_name)

    def _fetch_repository(self, owner: str, repo: str) -> RepositoryRef:
        ref = self._repositories.ref_for(owner, repo)

        try:
            self._client.get_repository(ref)
        except ProviderError as e:
            raise DeployKeyError(
                f"error getting {ref.account_type} repo reference for owner {owner}, repo {repo}: {e}",
                owner,
                repo,
            ) from e

        return ref
