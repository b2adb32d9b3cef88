"""Release workflows: git-flow releases and environment branches."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

import click

from tpaws.aws import AwsError
from tpaws.release import PackageManifest, ReleaseKind, Version
from tpaws.workflows.ticket import ABORTED

if TYPE_CHECKING:
    from tpaws.workflows.context import AppContext

logger = logging.getLogger("tpaws.workflows")

REMOTE = "origin"
MAIN_BRANCH = "master"
DEVELOP_BRANCH = "develop"


class DeployTarget(StrEnum):
    STAGING = "staging"
    PROD = "prod"
    ALL = "all"

    @property
    def branches(self) -> list[str]:
        if self is DeployTarget.ALL:
            return [DeployTarget.STAGING.value, DeployTarget.PROD.value]
        return [self.value]


async def start_release(
    ctx: AppContext, kind: ReleaseKind, manifest: PackageManifest | None = None
) -> Version | None:
    """Bump the manifest version inside a new git-flow release branch.

    Returns:
        The new version, or None in dry-run mode.
    """
    manifest = manifest or PackageManifest()
    previous = manifest.read_version()
    version = previous.bump(kind)
    logger.info("Release %s: %s -> %s", kind, previous, version)

    if ctx.dry_run:
        ctx.echo(f"Would bump version from {previous} to {version}")
        return None

    await ctx.git.flow_release_start(str(version))
    manifest.write_version(version)
    await ctx.git.commit_all(f"chore(release): {version}")
    ctx.echo(f"version bumped from {previous} to {version}")
    return version


async def finish_release(ctx: AppContext, manifest: PackageManifest | None = None) -> bool:
    """Finish the current release and publish master, develop and tags.

    Returns:
        Whether the release was finished.
    """
    manifest = manifest or PackageManifest()
    version = str(manifest.read_version())

    if not ctx.prompter.confirm(f"Finish release {version}?", default=False):
        ctx.echo(ABORTED)
        return False
    if ctx.dry_run:
        ctx.echo(f"Would finish release {version} and push {MAIN_BRANCH}, {DEVELOP_BRANCH}")
        return False

    await ctx.git.flow_release_finish(version, version)
    await ctx.git.push(REMOTE, MAIN_BRANCH)
    await ctx.git.push(REMOTE, DEVELOP_BRANCH)
    await ctx.git.push_tags(REMOTE)
    await ctx.git.delete_remote_branch(REMOTE, f"release/{version}")
    ctx.echo(f"Release {version} finished")
    return True


async def push_release(
    ctx: AppContext,
    target: DeployTarget,
    source: str = MAIN_BRANCH,
    pipeline: str | None = None,
) -> list[str]:
    """Force-push ``source`` onto the environment branches of ``target``.

    Returns:
        The branches that were pushed.
    """
    branches = target.branches
    if not ctx.prompter.confirm(
        f"Force push {source} to {', '.join(branches)}?", default=False
    ):
        ctx.echo(ABORTED)
        return []
    if ctx.dry_run:
        ctx.echo(f"Would force push {source} to {', '.join(branches)}")
        return []

    for branch in branches:
        await ctx.git.force_push(REMOTE, source, branch)
        ctx.echo(f"Pushed {source} to {REMOTE}/{branch}")

    if pipeline:
        await show_pipeline(ctx, pipeline)
    return branches


async def show_pipeline(ctx: AppContext, name: str) -> None:
    """Print the latest status of every stage of a CodePipeline."""
    try:
        state = await ctx.aws.get_pipeline_state(name)
    except AwsError as e:
        ctx.warn(f"Unable to read pipeline '{name}': {e}")
        return
    ctx.echo(f"Pipeline {click.style(state.pipeline_name, bold=True)}")
    for stage in state.stage_states:
        color = {"Succeeded": "green", "Failed": "red", "InProgress": "yellow"}.get(stage.status)
        ctx.echo(f"  {stage.stage_name}: {click.style(stage.status, fg=color)}")
