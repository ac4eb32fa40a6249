"""CLI entrypoint for gush."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .application import Application
from .commands import (
    BaseCommand,
    BranchPushCommand,
    IssueListCommand,
    IssueShowCommand,
    IssueTakeCommand,
    PullRequestLabelListCommand,
    ReleaseListCommand,
    RepoInfoCommand,
)
from .commands.issue import ISSUE_ENUMS
from .harness.enums import EnumValidator
from .harness.errors import GushError

_issue_enums = EnumValidator.from_definitions(ISSUE_ENUMS)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _run(ctx: click.Context, command_cls: type[BaseCommand], **options) -> None:
    """Execute a command and exit with 0 for SUCCESS, 1 otherwise."""
    app: Application = ctx.obj["app"]
    try:
        result = command_cls(app).execute(**options)
    except GushError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(0 if result == BaseCommand.SUCCESS else 1)


def _repository_options(func):
    func = click.option("--repo", default=None, help="Repository name (defaults to the origin remote)")(func)
    func = click.option("--org", default=None, help="Organization or user (defaults to the origin remote)")(func)
    return func


@click.group()
@click.version_option(__version__, prog_name="gush")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to the config file (defaults to $GUSH_CONFIG or ~/.gush.yml)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str) -> None:
    """gush - GitHub workflow automation from the command line.

    Works on the repository of the current directory: vendor and
    repository names are read from the 'origin' remote.
    """
    _configure_logging(log_level.upper())
    ctx.ensure_object(dict)
    if "app" not in ctx.obj:
        try:
            ctx.obj["app"] = Application.from_config_file(config_path)
        except GushError as e:
            raise click.ClickException(str(e)) from e


# -----------------------------------------------------------------------------
# Repository
# -----------------------------------------------------------------------------


@cli.group()
def repo() -> None:
    """Inspect the local repository."""
    pass


@repo.command("info")
@click.pass_context
def repo_info(ctx: click.Context) -> None:
    """Show vendor, repository and branch inferred from git."""
    _run(ctx, RepoInfoCommand)


# -----------------------------------------------------------------------------
# Pull requests
# -----------------------------------------------------------------------------


@cli.group("pull-request")
def pull_request() -> None:
    """Work with pull requests."""
    pass


@pull_request.command("label-list")
@_repository_options
@click.pass_context
def pull_request_label_list(ctx: click.Context, org: str | None, repo: str | None) -> None:
    """List the labels available for pull requests."""
    _run(ctx, PullRequestLabelListCommand, org=org, repo=repo)


# -----------------------------------------------------------------------------
# Issues
# -----------------------------------------------------------------------------


@cli.group()
def issue() -> None:
    """Work with issues."""
    pass


@issue.command("list")
@_repository_options
@click.option("--state", default="open", show_default=True, help=f"Issue state. {_issue_enums.describe('state')}")
@click.option("--sort", default="created", show_default=True, help=f"Sort field. {_issue_enums.describe('sort')}")
@click.option(
    "--direction",
    default="desc",
    show_default=True,
    help=f"Sort direction. {_issue_enums.describe('direction')}",
)
@click.pass_context
def issue_list(
    ctx: click.Context,
    org: str | None,
    repo: str | None,
    state: str,
    sort: str,
    direction: str,
) -> None:
    """List issues of the repository."""
    _run(ctx, IssueListCommand, org=org, repo=repo, state=state, sort=sort, direction=direction)


@issue.command("show")
@click.argument("issue_number", type=int)
@_repository_options
@click.pass_context
def issue_show(ctx: click.Context, issue_number: int, org: str | None, repo: str | None) -> None:
    """Show one issue."""
    _run(ctx, IssueShowCommand, issue_number=issue_number, org=org, repo=repo)


@issue.command("take")
@click.argument("issue_number", type=int)
@click.option("--base", "base_branch", default=None, help="Branch to start from (defaults to config 'base' or main)")
@_repository_options
@click.pass_context
def issue_take(
    ctx: click.Context,
    issue_number: int,
    base_branch: str | None,
    org: str | None,
    repo: str | None,
) -> None:
    """Create a local branch for an issue.

    The branch name is the slug of the issue number and title, e.g.
    '60-write-a-behat-test'.
    """
    _run(ctx, IssueTakeCommand, issue_number=issue_number, base_branch=base_branch, org=org, repo=repo)


# -----------------------------------------------------------------------------
# Releases
# -----------------------------------------------------------------------------


@cli.group()
def release() -> None:
    """Work with releases."""
    pass


@release.command("list")
@_repository_options
@click.pass_context
def release_list(ctx: click.Context, org: str | None, repo: str | None) -> None:
    """List releases of the repository."""
    _run(ctx, ReleaseListCommand, org=org, repo=repo)


# -----------------------------------------------------------------------------
# Branches
# -----------------------------------------------------------------------------


@cli.group()
def branch() -> None:
    """Work with local branches."""
    pass


@branch.command("push")
@click.option("--remote", default=None, help="Remote to push to (defaults to config 'remote' or origin)")
@click.option("--branch", "branch_name", default=None, help="Branch to push (defaults to the current branch)")
@click.pass_context
def branch_push(ctx: click.Context, remote: str | None, branch_name: str | None) -> None:
    """Push a branch and set its upstream."""
    _run(ctx, BranchPushCommand, remote=remote, branch=branch_name)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
