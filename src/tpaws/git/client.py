"""GitClient - git and git-flow operations."""

from __future__ import annotations

import logging
from pathlib import Path

from tpaws import shell
from tpaws.git.exceptions import BranchError, GitError, GitFlowError, PushError, RemoteError
from tpaws.shell import CommandFailedError

logger = logging.getLogger("tpaws.git")


class GitClient:
    """Runs git (and git-flow) commands in a local repository."""

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize Git client.

        Args:
            repo_path: Path to the local repository.
        """
        self.repo_path = Path(repo_path)

    async def _run_git(self, *args: str) -> str:
        """Run a git command in the repo directory.

        Returns:
            Command stdout

        Raises:
            CommandFailedError: If command fails
        """
        result = await shell.run("git", *args, cwd=self.repo_path)
        return result.stdout

    async def current_branch(self) -> str:
        """Name of the checked out branch.

        Raises:
            BranchError: If HEAD is detached or git fails.
        """
        try:
            branch = await self._run_git("branch", "--show-current")
        except CommandFailedError as e:
            raise BranchError(f"Unable to read current branch: {e.stderr}") from e
        if not branch:
            raise BranchError("Not on a branch (detached HEAD?)")
        return branch

    async def remote_url(self, remote: str = "origin") -> str:
        """URL of a remote."""
        try:
            return await self._run_git("remote", "get-url", remote)
        except CommandFailedError as e:
            raise RemoteError(f"Unable to read url of remote '{remote}': {e.stderr}") from e

    async def config_value(self, key: str) -> str | None:
        """Read a git config value, ``None`` when unset."""
        try:
            value = await self._run_git("config", "--get", key)
        except CommandFailedError:
            return None
        return value or None

    async def fetch(self, prune: bool = False) -> None:
        args = ["fetch", "--prune"] if prune else ["fetch"]
        try:
            await self._run_git(*args)
        except CommandFailedError as e:
            raise RemoteError(f"Failed to fetch: {e.stderr}") from e

    async def push(self, remote: str, branch: str) -> None:
        """Push a branch to a remote.

        Raises:
            PushError: If push fails
        """
        logger.info("Pushing %s to %s", branch, remote)
        try:
            await self._run_git("push", remote, branch)
        except CommandFailedError as e:
            raise PushError(f"Failed to push '{branch}' to '{remote}': {e.stderr}") from e

    async def push_tags(self, remote: str) -> None:
        logger.info("Pushing tags to %s", remote)
        try:
            await self._run_git("push", remote, "--tags")
        except CommandFailedError as e:
            raise PushError(f"Failed to push tags to '{remote}': {e.stderr}") from e

    async def force_push(self, remote: str, source: str, target: str) -> None:
        """Force-push ``source`` onto ``remote/target`` (environment branches)."""
        logger.info("Force pushing %s to %s/%s", source, remote, target)
        try:
            await self._run_git("push", "--force", remote, f"{source}:{target}")
        except CommandFailedError as e:
            raise PushError(
                f"Failed to force push '{source}' to '{remote}/{target}': {e.stderr}"
            ) from e

    async def delete_remote_branch(self, remote: str, branch: str) -> None:
        logger.info("Deleting remote branch %s/%s", remote, branch)
        try:
            await self._run_git("push", remote, "--delete", branch)
        except CommandFailedError as e:
            raise BranchError(f"Failed to delete remote branch '{branch}': {e.stderr}") from e

    async def log_subjects(self, from_ref: str, to_ref: str = "HEAD") -> list[str]:
        """Commit subjects reachable from ``to_ref`` but not ``from_ref``."""
        try:
            output = await self._run_git("log", "--pretty=format:%s", f"{from_ref}..{to_ref}")
        except CommandFailedError as e:
            raise GitError(f"Unable to read log {from_ref}..{to_ref}: {e.stderr}") from e
        return [line for line in output.splitlines() if line.strip()]

    async def commit_all(self, message: str) -> None:
        try:
            await self._run_git("commit", "-am", message)
        except CommandFailedError as e:
            raise GitError(f"Failed to commit: {e.stderr}") from e

    # git-flow

    async def _run_flow(self, *args: str) -> str:
        try:
            return await self._run_git("flow", *args)
        except CommandFailedError as e:
            raise GitFlowError(f"git flow {' '.join(args[:2])} failed: {e.stderr}") from e

    async def flow_feature_start(self, name: str) -> None:
        logger.info("Starting feature %s", name)
        await self._run_flow("feature", "start", name)

    async def flow_feature_finish(self, name: str) -> None:
        logger.info("Finishing feature %s", name)
        await self._run_flow("feature", "finish", name)

    async def flow_release_start(self, version: str) -> None:
        logger.info("Starting release %s", version)
        await self._run_flow("release", "start", version)

    async def flow_release_finish(self, version: str, message: str) -> None:
        logger.info("Finishing release %s", version)
        await self._run_flow("release", "finish", "-m", message, version)
