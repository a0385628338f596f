"""Tests for the exception hierarchy."""

from gitops_providers.exceptions import (
    AccountTypeNotSupportedError,
    GitOpsProvidersError,
    GroupNotFoundError,
    NotFoundError,
    ProviderError,
    PullRequestWorkflowError,
    TargetBranchNotFoundError,
    WaitTimeoutError,
    is_not_found,
)
from gitops_providers.git.exceptions import InvalidRepoURLError, UnsupportedHostError


class TestProviderErrors:
    """Tests for the ProviderError family."""

    def test_status_code_in_text(self) -> None:
        error = ProviderError("Bad credentials", status_code=401)

        assert error.message == "Bad credentials"
        assert str(error) == "Bad credentials (HTTP 401)"

    def test_not_found_defaults(self) -> None:
        error = NotFoundError()

        assert error.status_code == 404
        assert isinstance(error, ProviderError)

    def test_group_not_found(self) -> None:
        error = GroupNotFoundError("group/sub")

        assert error.group == "group/sub"
        assert error.message == "group not found: group/sub"
        assert isinstance(error, NotFoundError)

    def test_account_type_not_supported(self) -> None:
        assert str(AccountTypeNotSupportedError("enterprise")) == "account type not supported enterprise"

    def test_is_not_found(self) -> None:
        assert is_not_found(NotFoundError())
        assert is_not_found(ProviderError("404 Group Not Found"))
        assert not is_not_found(ProviderError("Bad credentials", status_code=401))


class TestWorkflowErrors:
    """Tests for workflow-level errors."""

    def test_wait_timeout_without_last_error(self) -> None:
        assert str(WaitTimeoutError(5.0, None)) == "timed out after 5.0s"

    def test_target_branch_not_found(self) -> None:
        error = TargetBranchNotFoundError("release", "github.com/acme/widgets")

        assert isinstance(error, PullRequestWorkflowError)
        assert error.step == "list_commits"
        assert error.branch == "release"
        assert error.message == "targetBranch [release] does not exist"

    def test_all_share_base(self) -> None:
        for error in (
            NotFoundError(),
            WaitTimeoutError(1.0, None),
            TargetBranchNotFoundError("main", "r"),
            InvalidRepoURLError("x"),
        ):
            assert isinstance(error, GitOpsProvidersError)


class TestUrlErrors:
    """Tests for URL errors."""

    def test_invalid_url_without_hint(self) -> None:
        error = InvalidRepoURLError("x", reason="bad", hint=None)

        assert str(error) == "invalid repository URL: x (bad)"

    def test_unsupported_host(self) -> None:
        error = UnsupportedHostError("bitbucket.org", "https://bitbucket.org/a/b")

        assert error.host == "bitbucket.org"
        assert error.message == 'no git providers found for "https://bitbucket.org/a/b"'
        assert "Only github.com and gitlab.com" in str(error)
