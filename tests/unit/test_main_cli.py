"""Tests for the gitops-providers CLI."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from gitops_providers.enums import ProviderAccountType, RepositoryVisibility
from gitops_providers.exceptions import PullRequestWorkflowError, RepositoryError
from gitops_providers.main import cli
from gitops_providers.models.domain import Commit, PullRequest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GITOPS_GITHUB_TOKEN", "GITOPS_GITLAB_TOKEN", "GITOPS_DRY_RUN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def mock_provider():
    """Patch provider construction with a MagicMock GitProvider."""
    provider = MagicMock()
    provider.__enter__.return_value = provider
    with patch("gitops_providers.main.create_git_provider", return_value=provider) as factory:
        provider.factory = factory
        yield provider


class TestCliGroup:
    """Tests for global options."""

    def test_help(self, runner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "propose-change" in result.output

    def test_missing_config_file(self, runner, tmp_path) -> None:
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "default-branch", "git@github.com:a/b"])

        assert result.exit_code == 1
        assert "Error: Configuration file not found" in result.output

    def test_invalid_log_level(self, runner) -> None:
        result = runner.invoke(cli, ["--log-level", "LOUD", "normalize", "git@github.com:a/b"])

        assert result.exit_code != 0
        assert "Unknown log level" in result.output

    def test_config_file_settings_are_used(self, runner, tmp_path, mock_provider) -> None:
        config_file = tmp_path / "gitops.yaml"
        config_file.write_text("github_token: ghp_file\ndeploy_key_name: flux\n")
        mock_provider.get_default_branch.return_value = "main"

        result = runner.invoke(cli, ["--config", str(config_file), "default-branch", "git@github.com:acme/widgets"])

        assert result.exit_code == 0
        settings = mock_provider.factory.call_args.args[1]
        assert settings.deploy_key_name == "flux"
        assert settings.dry_run is False


class TestNormalize:
    """Tests for the normalize command."""

    def test_normalize(self, runner) -> None:
        result = runner.invoke(cli, ["normalize", "https://gitlab.com/group/sub/repo"])

        assert result.exit_code == 0
        assert "ssh://git@gitlab.com/group/sub/repo.git" in result.output
        assert "owner: group/sub" in result.output
        assert "protocol: ssh" in result.output

    def test_normalize_invalid(self, runner) -> None:
        result = runner.invoke(cli, ["normalize", "https://example.com/a/b"])

        assert result.exit_code == 1
        assert 'Error: no git providers found for "https://example.com/a/b"' in result.output


class TestRepositoryCommands:
    """Tests for repository commands."""

    def test_account_type(self, runner, mock_provider) -> None:
        mock_provider.get_account_type.return_value = ProviderAccountType.ORGANIZATION

        result = runner.invoke(cli, ["account-type", "git@github.com:acme/widgets"])

        assert result.exit_code == 0
        assert result.output.strip() == "organization"
        mock_provider.get_account_type.assert_called_once_with("acme")

    def test_repo_exists(self, runner, mock_provider) -> None:
        mock_provider.repository_exists.return_value = True

        result = runner.invoke(cli, ["repo-exists", "git@gitlab.com:group/sub/repo"])

        assert result.exit_code == 0
        mock_provider.repository_exists.assert_called_once_with("repo", "group/sub", strict=False)

    def test_repo_missing_exits_2(self, runner, mock_provider) -> None:
        mock_provider.repository_exists.return_value = False

        result = runner.invoke(cli, ["repo-exists", "--strict", "git@github.com:acme/widgets"])

        assert result.exit_code == 2
        assert "false" in result.output
        assert mock_provider.repository_exists.call_args.kwargs == {"strict": True}

    def test_create_repo_public(self, runner, mock_provider) -> None:
        result = runner.invoke(cli, ["create-repo", "--public", "https://github.com/acme/widgets"])

        assert result.exit_code == 0
        mock_provider.create_repository.assert_called_once_with("widgets", "acme", False)

    def test_create_repo_error(self, runner, mock_provider) -> None:
        mock_provider.create_repository.side_effect = RepositoryError(
            "error creating repo github.com/acme/widgets: name already exists", "acme", "widgets"
        )

        result = runner.invoke(cli, ["create-repo", "https://github.com/acme/widgets"])

        assert result.exit_code == 1
        assert "Error: error creating repo github.com/acme/widgets" in result.output
        mock_provider.__exit__.assert_called_once()

    def test_visibility(self, runner, mock_provider) -> None:
        mock_provider.get_repo_visibility.return_value = RepositoryVisibility.PUBLIC

        result = runner.invoke(cli, ["visibility", "https://github.com/acme/widgets"])

        assert result.output.strip() == "public"


class TestDeployKeyCommands:
    """Tests for deploy key commands."""

    def test_deploy_key_exists(self, runner, mock_provider) -> None:
        mock_provider.deploy_key_exists.return_value = True

        result = runner.invoke(cli, ["deploy-key-exists", "git@github.com:acme/widgets"])

        assert result.exit_code == 0
        mock_provider.deploy_key_exists.assert_called_once_with("acme", "widgets")

    def test_upload_deploy_key(self, runner, mock_provider, tmp_path) -> None:
        key_file = tmp_path / "id_ed25519.pub"
        key_file.write_bytes(b"ssh-ed25519 AAAA gitops\n")

        result = runner.invoke(cli, ["upload-deploy-key", "git@github.com:acme/widgets", str(key_file)])

        assert result.exit_code == 0
        mock_provider.upload_deploy_key.assert_called_once_with("acme", "widgets", b"ssh-ed25519 AAAA gitops")


class TestCommitCommands:
    """Tests for commits and propose-change."""

    def test_commits_default_branch(self, runner, mock_provider) -> None:
        mock_provider.get_default_branch.return_value = "main"
        mock_provider.list_commits.return_value = [Commit(sha="0123456789abcdef", message="Add app\n\nbody")]

        result = runner.invoke(cli, ["commits", "git@github.com:acme/widgets", "--page-size", "5", "--page", "1"])

        assert result.exit_code == 0
        assert "0123456789ab Add app" in result.output
        _, branch, page_size, page = mock_provider.list_commits.call_args.args
        assert (branch, page_size, page) == ("main", 5, 1)

    def test_propose_change(self, runner, mock_provider, tmp_path) -> None:
        local = tmp_path / "kustomization.yaml"
        local.write_text("resources: []\n")
        mock_provider.propose_change.return_value = PullRequest(number=9, url="https://github.com/acme/widgets/pull/9")

        result = runner.invoke(
            cli,
            [
                "propose-change",
                "git@github.com:acme/widgets",
                "--new-branch",
                "update",
                "--title",
                "Update",
                "--file",
                f"clusters/dev/kustomization.yaml={local}",
                "--delete",
                "clusters/dev/old.yaml",
            ],
        )

        assert result.exit_code == 0
        assert "Created pull request #9" in result.output
        _, target, new_branch, files, message, title, _ = mock_provider.propose_change.call_args.args
        assert (target, new_branch, message, title) == ("", "update", "Update", "Update")
        assert [(f.path, f.content) for f in files] == [
            ("clusters/dev/kustomization.yaml", "resources: []\n"),
            ("clusters/dev/old.yaml", None),
        ]

    def test_propose_change_requires_files(self, runner, mock_provider) -> None:
        result = runner.invoke(
            cli, ["propose-change", "git@github.com:acme/widgets", "--new-branch", "b", "--title", "t"]
        )

        assert result.exit_code == 2
        mock_provider.propose_change.assert_not_called()

    def test_propose_change_bad_file_option(self, runner, mock_provider) -> None:
        result = runner.invoke(
            cli,
            ["propose-change", "git@github.com:acme/widgets", "--new-branch", "b", "--title", "t", "--file", "x"],
        )

        assert result.exit_code == 2
        assert "PATH=LOCALFILE" in result.output

    def test_propose_change_step_failure(self, runner, mock_provider, tmp_path) -> None:
        local = tmp_path / "a.yaml"
        local.write_text("a")
        mock_provider.propose_change.side_effect = PullRequestWorkflowError(
            "error creating branch [b] for repo [github.com/acme/widgets] err [Reference already exists]",
            step="create_branch",
            repository="github.com/acme/widgets",
        )

        result = runner.invoke(
            cli,
            ["propose-change", "git@github.com:acme/widgets", "--new-branch", "b", "--title", "t", "--file", f"a={local}"],
        )

        assert result.exit_code == 1
        assert "Reference already exists" in result.output


class TestDryRun:
    """End-to-end commands against the dry-run client."""

    def test_dry_run_propose_change(self, runner, tmp_path) -> None:
        local = tmp_path / "a.yaml"
        local.write_text("a: 1\n")

        result = runner.invoke(
            cli,
            [
                "--dry-run",
                "propose-change",
                "git@gitlab.com:group/sub/repo",
                "--new-branch",
                "b",
                "--title",
                "t",
                "--file",
                f"a.yaml={local}",
            ],
        )

        assert result.exit_code == 0
        assert "Created pull request #0" in result.output

    def test_dry_run_create_repo(self, runner) -> None:
        result = runner.invoke(cli, ["--dry-run", "create-repo", "https://github.com/acme/widgets"])

        assert result.exit_code == 0
        assert "Created https://github.com/acme/widgets" in result.output
