"""CLI entry point for gitops-providers."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import structlog
from pydantic import ValidationError

from gitops_providers.config.settings import ProviderSettings
from gitops_providers.exceptions import ConfigurationError, GitOpsProvidersError
from gitops_providers.git.models import NormalizedRepoURL
from gitops_providers.git.parser import normalize_repo_url
from gitops_providers.models.domain import CommitFile
from gitops_providers.providers.factory import create_git_provider
from gitops_providers.providers.git_provider import GitProvider
from gitops_providers.utils.logging_config import bind_repository, configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option("--config", default=None, help="Path to configuration file (defaults to GITOPS_* environment)")
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option("--dry-run", is_flag=True, help="Log provider mutations instead of performing them")
@click.pass_context
def cli(ctx: click.Context, config: str | None, log_level: str, dry_run: bool) -> None:
    """gitops-providers: GitHub and GitLab repository lifecycle CLI."""
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e

    # normalize is purely local
    if ctx.invoked_subcommand == "normalize":
        ctx.obj = {"settings": None}
        return

    try:
        if config is not None:
            if not Path(config).exists():
                click.echo(f"Error: Configuration file not found: {config}", err=True)
                sys.exit(1)
            settings = ProviderSettings.from_yaml(config)
        else:
            settings = ProviderSettings()
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)
    except ValidationError as e:
        click.echo(f"Error: Invalid GITOPS_* environment settings: {e}", err=True)
        sys.exit(1)

    if dry_run:
        settings = settings.model_copy(update={"dry_run": True})

    ctx.obj = {"settings": settings}


def _run(ctx: click.Context, url: str, action: Callable[[GitProvider, NormalizedRepoURL], Any]) -> Any:
    """Normalize ``url``, build its provider and run ``action`` against it.

    Layer errors are reported as ``Error: <message>`` with exit status 1.
    """
    try:
        repo_url = normalize_repo_url(url)
        bind_repository(str(repo_url))
        with create_git_provider(repo_url, ctx.obj["settings"]) as provider:
            return action(provider, repo_url)
    except GitOpsProvidersError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("command_failed", command=ctx.command_path, exc_info=True)
        sys.exit(1)


@cli.command()
@click.argument("url")
def normalize(url: str) -> None:
    """Print the canonical form of a repository URL."""
    try:
        repo_url = normalize_repo_url(url)
    except GitOpsProvidersError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(str(repo_url))
    click.echo(f"provider: {repo_url.provider}")
    click.echo(f"owner: {repo_url.owner}")
    click.echo(f"repository: {repo_url.repository_name}")
    click.echo(f"protocol: {repo_url.protocol}")


@cli.command("account-type")
@click.argument("url")
@click.pass_context
def account_type(ctx: click.Context, url: str) -> None:
    """Print whether the repository owner is a user or an organization."""
    result = _run(ctx, url, lambda provider, repo: provider.get_account_type(repo.owner))
    click.echo(str(result))


@cli.command("repo-exists")
@click.argument("url")
@click.option("--strict", is_flag=True, help="Fail on lookup errors instead of reporting absence")
@click.pass_context
def repo_exists(ctx: click.Context, url: str, strict: bool) -> None:
    """Check whether a repository exists. Exit status 2 if it does not."""
    exists = _run(
        ctx,
        url,
        lambda provider, repo: provider.repository_exists(repo.repository_name, repo.owner, strict=strict),
    )
    click.echo("true" if exists else "false")
    if not exists:
        sys.exit(2)


@cli.command("create-repo")
@click.argument("url")
@click.option("--private/--public", default=True, help="Repository visibility (default: private)")
@click.pass_context
def create_repo(ctx: click.Context, url: str, private: bool) -> None:
    """Create a repository and wait until the provider serves it."""
    _run(
        ctx,
        url,
        lambda provider, repo: provider.create_repository(repo.repository_name, repo.owner, private),
    )
    click.echo(f"Created {url}")


@cli.command("deploy-key-exists")
@click.argument("url")
@click.pass_context
def deploy_key_exists(ctx: click.Context, url: str) -> None:
    """Check whether the deploy key is registered. Exit status 2 if not."""
    exists = _run(ctx, url, lambda provider, repo: provider.deploy_key_exists(repo.owner, repo.repository_name))
    click.echo("true" if exists else "false")
    if not exists:
        sys.exit(2)


@cli.command("upload-deploy-key")
@click.argument("url")
@click.argument("keyfile", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def upload_deploy_key(ctx: click.Context, url: str, keyfile: Path) -> None:
    """Upload the public key in KEYFILE as the repository deploy key."""
    public_key = keyfile.read_bytes().strip()
    _run(
        ctx,
        url,
        lambda provider, repo: provider.upload_deploy_key(repo.owner, repo.repository_name, public_key),
    )
    click.echo(f"Uploaded deploy key to {url}")


@cli.command("default-branch")
@click.argument("url")
@click.pass_context
def default_branch(ctx: click.Context, url: str) -> None:
    """Print the repository's default branch."""
    click.echo(_run(ctx, url, lambda provider, repo: provider.get_default_branch(repo)))


@cli.command()
@click.argument("url")
@click.pass_context
def visibility(ctx: click.Context, url: str) -> None:
    """Print the repository's visibility."""
    click.echo(str(_run(ctx, url, lambda provider, repo: provider.get_repo_visibility(repo))))


@cli.command()
@click.argument("url")
@click.option("--branch", default="", help="Branch to list (default: repository default branch)")
@click.option("--page-size", type=click.IntRange(min=1), default=20, help="Commits per page")
@click.option("--page", type=click.IntRange(min=0), default=0, help="Zero-based page index")
@click.pass_context
def commits(ctx: click.Context, url: str, branch: str, page_size: int, page: int) -> None:
    """List one page of commits."""

    def list_page(provider: GitProvider, repo: NormalizedRepoURL) -> list:
        target = branch or provider.get_default_branch(repo)
        return provider.list_commits(provider.ref_for_url(repo), target, page_size, page)

    for commit in _run(ctx, url, list_page):
        summary = commit.message.splitlines()[0] if commit.message else ""
        click.echo(f"{commit.sha[:12]} {summary}")


def _parse_file_specs(specs: tuple[str, ...], deletions: tuple[str, ...]) -> list[CommitFile]:
    files = []
    for spec in specs:
        path, sep, local = spec.partition("=")
        if not sep or not path or not local:
            raise click.BadParameter(f"expected PATH=LOCALFILE, got {spec!r}", param_hint="--file")
        try:
            content = Path(local).read_text()
        except OSError as e:
            raise click.BadParameter(f"cannot read {local}: {e}", param_hint="--file") from e
        files.append(CommitFile(path=path, content=content))
    files.extend(CommitFile(path=path, content=None) for path in deletions)
    return files


@cli.command("propose-change")
@click.argument("url")
@click.option("--new-branch", required=True, help="Branch to create for the change")
@click.option("--target-branch", default="", help="Branch to merge into (default: repository default branch)")
@click.option("--title", required=True, help="Pull request title")
@click.option("--description", default="", help="Pull request description")
@click.option("--message", default=None, help="Commit message (default: the title)")
@click.option("--file", "file_specs", multiple=True, metavar="PATH=LOCALFILE", help="File to add or update")
@click.option("--delete", "deletions", multiple=True, metavar="PATH", help="File to delete")
@click.pass_context
def propose_change(
    ctx: click.Context,
    url: str,
    new_branch: str,
    target_branch: str,
    title: str,
    description: str,
    message: str | None,
    file_specs: tuple[str, ...],
    deletions: tuple[str, ...],
) -> None:
    """Commit files to a new branch and open a pull request."""
    files = _parse_file_specs(file_specs, deletions)
    if not files:
        raise click.UsageError("at least one --file or --delete is required")

    def propose(provider: GitProvider, repo: NormalizedRepoURL) -> Any:
        return provider.propose_change(
            provider.ref_for_url(repo),
            target_branch,
            new_branch,
            files,
            message or title,
            title,
            description,
        )

    pr = _run(ctx, url, propose)
    click.echo(f"Created pull request #{pr.number}: {pr.url}")


if __name__ == "__main__":
    cli()
