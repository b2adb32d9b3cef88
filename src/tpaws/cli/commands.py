"""CLI entry point for tpaws.

Command groups:
- ticket: pick up, finish and inspect TargetProcess tickets
- pr: CodeCommit pull requests
- release: git-flow releases and environment branches
- config: global configuration
"""

from __future__ import annotations

import logging

import click

from tpaws import shell
from tpaws.aws import PullRequestStatus
from tpaws.cli import console
from tpaws.cli.groups import ErrorHandlingGroup
from tpaws.cli.runner import CliState, run_workflow
from tpaws.config import GlobalConfig, Settings
from tpaws.logging import setup_logging
from tpaws.release import ReleaseKind
from tpaws.target_process import TOKEN_ENV
from tpaws.workflows import (
    DeployTarget,
    create_pull_request,
    finish_release,
    finish_ticket,
    generate_changelog,
    generate_commit,
    init_project,
    list_pull_requests,
    merge_pull_request,
    push_release,
    reset_config,
    resolve_ticket_id,
    start_release,
    start_ticket,
    ticket_branch,
    ticket_link,
    ticket_project,
    view_pull_request,
    view_ticket,
)

logger = logging.getLogger("tpaws.cli")

AWS_INSTALL_URL = "https://docs.aws.amazon.com/cli/latest/userguide/getting-started-install.html"

# Subcommands that can run before TargetProcess is configured
NO_TP_REQUIRED = {"config"}


@click.group(cls=ErrorHandlingGroup)
@click.version_option(package_name="tpaws")
@click.option("--dry-run", is_flag=True, help="Stop before changing anything")
@click.option("-q", "--quiet", is_flag=True, help="Skip prompts and use default values")
@click.option("--debug", is_flag=True, help="Log debug output to the console")
@click.option("--profile", envvar="AWS_PROFILE", default=None, help="AWS CLI profile")
@click.pass_context
def main(ctx: click.Context, dry_run: bool, quiet: bool, debug: bool, profile: str | None) -> None:
    """tpaws - TargetProcess and AWS CodeCommit from your terminal."""
    setup_logging(level="DEBUG" if debug else None, console=True if debug else None)
    logger.debug("Invoked %s (dry_run=%s, quiet=%s)", ctx.invoked_subcommand, dry_run, quiet)

    if not shell.is_installed("aws"):
        click.echo("The aws CLI is required. Install it from:")
        click.echo(AWS_INSTALL_URL)
        ctx.exit(0)

    state = CliState(dry_run=dry_run, quiet=quiet, debug=debug, profile=profile)
    ctx.obj = state

    if ctx.invoked_subcommand in NO_TP_REQUIRED:
        state.config = GlobalConfig.read_or_default()
        return

    if not GlobalConfig.exists():
        click.echo("Looks like this is your first run, let's set things up.")
        state.config = run_workflow(reset_config)
    else:
        state.config = GlobalConfig.read()

    if not Settings.from_env(state.config).tp_token:
        console.error(f"No env for {TOKEN_ENV}")
        ctx.exit(console.ERROR_EXIT_CODE)


# ticket


@main.group()
def ticket() -> None:
    """TargetProcess tickets (user stories and bugs)."""


ID_ARGUMENT = click.argument("id_or_url", required=False)


@ticket.command("start")
@ID_ARGUMENT
@click.option("--branch", "-b", default=None, help="Feature branch name (without feature/)")
@click.option("--no-git", is_flag=True, help="Don't start a git-flow feature")
@click.option("--no-assign", is_flag=True, help="Don't assign the ticket to yourself")
@click.option("--project", "-p", default=None, help="TargetProcess project name")
def ticket_start(
    id_or_url: str | None, branch: str | None, no_git: bool, no_assign: bool, project: str | None
) -> None:
    """Start working on a ticket (asks which one when no ID is given)."""
    run_workflow(
        start_ticket,
        id_or_url,
        branch=branch,
        no_git=no_git,
        no_assign=no_assign,
        project=project,
    )


@ticket.command("finish")
@ID_ARGUMENT
@click.option("--no-git", is_flag=True, help="Don't finish the git-flow feature")
@click.option("--no-status", is_flag=True, help="Don't move the ticket to staging")
def ticket_finish(id_or_url: str | None, no_git: bool, no_status: bool) -> None:
    """Finish the feature branch and move the ticket to staging."""
    run_workflow(finish_ticket, id_or_url, no_git=no_git, no_status=no_status)


@ticket.command("view")
@ID_ARGUMENT
@click.option("--json", "as_json", is_flag=True, help="Print the raw ticket as JSON")
@click.option("--web", is_flag=True, help="Open the ticket in the browser")
def ticket_view(id_or_url: str | None, as_json: bool, web: bool) -> None:
    """Show a ticket (defaults to the one of the current branch)."""
    run_workflow(view_ticket, id_or_url, as_json=as_json, web=web)


@ticket.command("link")
@ID_ARGUMENT
def ticket_link_cmd(id_or_url: str | None) -> None:
    """Print the ticket link."""
    click.echo(run_workflow(ticket_link, id_or_url))


@ticket.command("get-branch")
@ID_ARGUMENT
def ticket_get_branch(id_or_url: str | None) -> None:
    """Print the feature branch name of a ticket."""
    click.echo(run_workflow(ticket_branch, id_or_url))


@ticket.command("get-id")
@ID_ARGUMENT
def ticket_get_id(id_or_url: str | None) -> None:
    """Print the ticket ID."""
    click.echo(run_workflow(resolve_ticket_id, id_or_url))


@ticket.command("get-project")
@ID_ARGUMENT
def ticket_get_project(id_or_url: str | None) -> None:
    """Print the TargetProcess project name."""
    click.echo(run_workflow(ticket_project, id_or_url))


@ticket.command("generate-commit")
@ID_ARGUMENT
@click.option("--json", "as_json", is_flag=True, help="Print message and description as JSON")
@click.option("--title-only", is_flag=True, help="Print only the commit subject")
def ticket_generate_commit(id_or_url: str | None, as_json: bool, title_only: bool) -> None:
    """Draft a conventional commit message with AI."""
    click.echo(run_workflow(generate_commit, id_or_url, as_json=as_json, title_only=title_only))


@ticket.command("generate-changelog")
@click.option("--from", "from_ref", required=True, help="Start of the range (exclusive)")
@click.option("--to", "to_ref", default="HEAD", show_default=True, help="End of the range")
@click.option("--project", "-p", default=None, help="Only tickets of this project")
@click.option("--prefix", default="#", show_default=True, help="Text before each ticket ID")
@click.option("--plain", is_flag=True, help="Plain text instead of markdown")
@click.option("--no-title", is_flag=True, help="Omit the changelog title")
def ticket_generate_changelog(
    from_ref: str, to_ref: str, project: str | None, prefix: str, plain: bool, no_title: bool
) -> None:
    """Changelog of the tickets referenced between two refs."""
    click.echo(
        run_workflow(
            generate_changelog,
            from_ref,
            to_ref,
            project=project,
            prefix=prefix,
            plain=plain,
            title=not no_title,
        )
    )


@ticket.command("init")
@click.option("--project", "-p", default=None, help="Project name or abbreviation")
@click.option("--force", is_flag=True, help="Overwrite an existing tpaws.json")
def ticket_init(project: str | None, force: bool) -> None:
    """Bind this repository to a TargetProcess project."""
    run_workflow(init_project, project=project, force=force)


# pull requests


@main.group()
def pr() -> None:
    """CodeCommit pull requests."""


@pr.command("create")
@click.option("--title", "-t", default=None, help="Pull request title")
@click.option("--description", "-d", default=None, help="Pull request description")
@click.option("--base", "-b", default="develop", show_default=True, help="Destination branch")
@click.option("--slack", is_flag=True, help="Notify a reviewer on Slack")
@click.option("--ai", "use_ai", is_flag=True, help="Draft the description with AI")
@click.option("--ai-model", default=None, help="AI model for the description")
@click.option("--copy", is_flag=True, help="Copy the new pull request link to the clipboard")
def pr_create(
    title: str | None,
    description: str | None,
    base: str,
    slack: bool,
    use_ai: bool,
    ai_model: str | None,
    copy: bool,
) -> None:
    """Open a pull request from the current branch."""
    run_workflow(
        create_pull_request,
        title=title,
        description=description,
        base=base,
        slack=slack,
        use_ai=use_ai,
        ai_model=ai_model,
        copy=copy,
        auth=True,
    )


@pr.command("view")
@click.option("--id", "pull_request_id", default=None, help="Pull request ID")
@click.option("--web", is_flag=True, help="Open the pull request in the browser")
@click.option("--json", "as_json", is_flag=True, help="Print the pull request as JSON")
@click.option("--copy-url", is_flag=True, help="Copy the pull request link to the clipboard")
@click.option("--markdown", is_flag=True, help="With --copy-url, copy a markdown link")
def pr_view(
    pull_request_id: str | None, web: bool, as_json: bool, copy_url: bool, markdown: bool
) -> None:
    """Show a pull request (defaults to the one of the current branch)."""
    run_workflow(
        view_pull_request,
        pull_request_id,
        web=web,
        as_json=as_json,
        copy_url=copy_url,
        markdown=markdown,
        auth=True,
    )


@pr.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in PullRequestStatus], case_sensitive=False),
    default=PullRequestStatus.OPEN.value,
    show_default=True,
)
def pr_list(status: str) -> None:
    """List your pull requests."""
    run_workflow(list_pull_requests, PullRequestStatus(status.upper()), auth=True)


@pr.command("merge")
@click.option("--id", "pull_request_id", default=None, help="Pull request ID")
@click.option("--author", default=None, help="Author name of the squash commit")
@click.option("--commit-message", "-m", default=None, help="Squash commit message")
@click.option(
    "--delete-branch/--keep-branch",
    default=None,
    help="Delete the source branch after merging (asks when omitted)",
)
def pr_merge(
    pull_request_id: str | None,
    author: str | None,
    commit_message: str | None,
    delete_branch: bool | None,
) -> None:
    """Squash merge a pull request."""
    run_workflow(
        merge_pull_request,
        pull_request_id,
        author=author,
        commit_message=commit_message,
        delete_branch=delete_branch,
        auth=True,
    )


# releases


@main.group()
def release() -> None:
    """git-flow releases of a package.json project."""


@release.command("start")
@click.argument(
    "kind",
    type=click.Choice([k.value for k in ReleaseKind], case_sensitive=False),
    default=ReleaseKind.PATCH.value,
)
def release_start(kind: str) -> None:
    """Bump the version and start a release branch."""
    run_workflow(start_release, ReleaseKind(kind.lower()))


@release.command("finish")
def release_finish() -> None:
    """Finish the release and push master, develop and tags."""
    run_workflow(finish_release)


@release.command("push")
@click.argument(
    "target",
    type=click.Choice([t.value for t in DeployTarget], case_sensitive=False),
)
@click.option("--from", "source", default="master", show_default=True, help="Branch to deploy")
@click.option("--pipeline", default=None, help="CodePipeline to report on after pushing")
def release_push(target: str, source: str, pipeline: str | None) -> None:
    """Force-push a branch to the staging and/or prod branches."""
    run_workflow(push_release, DeployTarget(target.lower()), source=source, pipeline=pipeline)


# config


@main.group()
def config() -> None:
    """Global configuration."""


@config.command("reset")
def config_reset() -> None:
    """Ask for every setting and rewrite the global config."""
    run_workflow(reset_config)


if __name__ == "__main__":
    main()
