"""Tests for gitops_providers/providers/dry_run.py."""

from gitops_providers.enums import GitProviderName, ProviderAccountType
from gitops_providers.git import normalize_repo_url
from gitops_providers.models.domain import CommitFile, UserRepositoryRef
from gitops_providers.providers.dry_run import PLACEHOLDER_SHA, DryRunClient
from gitops_providers.providers.git_provider import GitProvider


class TestDryRunWorkflows:
    """The workflows complete without contacting a provider."""

    def test_owners_are_users(self, options) -> None:
        provider = GitProvider(DryRunClient(GitProviderName.GITHUB), options)

        assert provider.get_account_type("acme") == ProviderAccountType.USER

    def test_repository_lifecycle(self, options) -> None:
        """Existence, creation and deploy key checks all succeed."""
        provider = GitProvider(DryRunClient(GitProviderName.GITLAB), options)

        assert provider.repository_exists("repo", "group/sub") is True
        provider.create_repository("repo", "group/sub", private=True)
        assert provider.deploy_key_exists("group/sub", "repo") is True
        provider.upload_deploy_key("group/sub", "repo", b"ssh-ed25519 AAAA")
        assert provider.get_default_branch(normalize_repo_url("git@gitlab.com:group/sub/repo")) == "main"

    def test_propose_change(self, options) -> None:
        """A change proposal returns a placeholder pull request."""
        provider = GitProvider(DryRunClient(GitProviderName.GITHUB), options)
        ref = UserRepositoryRef("github.com", "octocat", "hello")

        pr = provider.propose_change(
            ref, "", "feature", [CommitFile(path="a.yaml", content="a")], "msg", "title", "body"
        )

        assert pr.number == 0
        assert pr.base == "main"
        assert pr.head == "feature"

    def test_commit_pages(self) -> None:
        """Only the first page holds the placeholder commit."""
        client = DryRunClient(GitProviderName.GITHUB)
        ref = UserRepositoryRef("github.com", "octocat", "hello")

        assert [c.sha for c in client.list_commits(ref, "main", page_size=10)] == [PLACEHOLDER_SHA]
        assert client.list_commits(ref, "main", page_size=10, page=1) == []
