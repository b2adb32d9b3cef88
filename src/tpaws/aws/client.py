"""AwsClient - CodeCommit, STS and CodePipeline through the AWS CLI."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from tpaws import shell
from tpaws.aws.exceptions import AuthenticationError, AwsError, AwsResponseError, PullRequestError
from tpaws.aws.models import (
    CallerIdentity,
    PipelineState,
    PullRequest,
    PullRequestResponse,
    PullRequestsList,
    PullRequestStatus,
)
from tpaws.cache import memoized
from tpaws.shell import CommandFailedError, CommandOutputError

logger = logging.getLogger("tpaws.aws")

DEFAULT_PROFILE = "default"


@memoized
def build_pr_link(region: str, repository: str, pull_request_id: str) -> str:
    """Console URL of a CodeCommit pull request."""
    return (
        f"https://{region}.console.aws.amazon.com/codesuite/codecommit/repositories/"
        f"{repository}/pull-requests/{pull_request_id}/details"
    )


class AwsClient:
    """Thin wrapper over the ``aws`` CLI bound to one named profile.

    Each method builds an argument vector, runs it and validates the JSON
    output. Nothing is retried.
    """

    def __init__(self, profile: str = DEFAULT_PROFILE) -> None:
        """Initialize AWS client.

        Args:
            profile: AWS CLI named profile passed to every call.
        """
        self.profile = profile

    async def _run_aws(self, *args: str) -> str:
        """Run an aws command with the bound profile.

        Raises:
            CommandFailedError: If the command fails
        """
        result = await shell.run("aws", *args, "--profile", self.profile)
        return result.stdout

    async def _run_aws_json(self, *args: str) -> Any:
        """Run an aws command and parse its JSON output.

        Raises:
            CommandFailedError: If the command fails
            CommandOutputError: If the output is not JSON
        """
        return await shell.run_json("aws", *args, "--output", "json", "--profile", self.profile)

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise AwsResponseError(f"Unexpected AWS response for {model.__name__}: {e}") from e

    async def get_caller_identity(self) -> CallerIdentity:
        """Identity behind the current credentials.

        Raises:
            AuthenticationError: If the credentials are missing or expired.
        """
        try:
            data = await self._run_aws_json("sts", "get-caller-identity")
        except CommandFailedError as e:
            raise AuthenticationError(e.stderr or "Unable to get caller identity") from e
        except CommandOutputError as e:
            raise AwsResponseError(str(e)) from e
        identity: CallerIdentity = self._parse(CallerIdentity, data)
        return identity

    async def login(self) -> None:
        """Run the interactive ``aws sso login`` flow."""
        logger.info("Running SSO login for profile %s", self.profile)
        returncode = await shell.run_interactive("aws", "sso", "login", "--profile", self.profile)
        if returncode != 0:
            raise AuthenticationError(f"aws sso login failed with exit status {returncode}")

    async def refresh_auth(self) -> str:
        """Make sure credentials are valid, logging in if needed.

        Returns:
            The caller ARN.
        """
        try:
            identity = await self.get_caller_identity()
        except AuthenticationError:
            logger.info("Credentials expired for profile %s", self.profile)
            await self.login()
            identity = await self.get_caller_identity()
        return identity.arn

    @memoized
    async def get_region(self) -> str:
        try:
            region = await self._run_aws("configure", "get", "region")
        except CommandFailedError as e:
            raise AwsError(f"No region configured for profile '{self.profile}'") from e
        if not region:
            raise AwsError(f"No region configured for profile '{self.profile}'")
        return region

    @memoized
    async def list_pull_requests(
        self,
        repository: str,
        status: PullRequestStatus = PullRequestStatus.OPEN,
        author_arn: str | None = None,
    ) -> list[str]:
        """IDs of the pull requests of a repository.

        Args:
            repository: CodeCommit repository name.
            status: OPEN or CLOSED.
            author_arn: Only pull requests opened by this ARN.
        """
        args = [
            "codecommit",
            "list-pull-requests",
            "--repository-name",
            repository,
            "--pull-request-status",
            str(status),
        ]
        if author_arn:
            args.extend(["--author-arn", author_arn])
        try:
            data = await self._run_aws_json(*args)
        except CommandFailedError as e:
            raise PullRequestError(f"Failed to list pull requests: {e.stderr}") from e
        except CommandOutputError as e:
            raise AwsResponseError(str(e)) from e
        listing: PullRequestsList = self._parse(PullRequestsList, data)
        return listing.pull_request_ids

    @memoized
    async def get_pull_request(self, pull_request_id: str) -> PullRequest:
        try:
            data = await self._run_aws_json(
                "codecommit", "get-pull-request", "--pull-request-id", pull_request_id
            )
        except CommandFailedError as e:
            raise PullRequestError(
                f"Failed to get pull request {pull_request_id}: {e.stderr}"
            ) from e
        except CommandOutputError as e:
            raise AwsResponseError(str(e)) from e
        response: PullRequestResponse = self._parse(PullRequestResponse, data)
        return response.pull_request

    async def create_pull_request(
        self,
        repository: str,
        title: str,
        description: str,
        source_branch: str,
        destination_branch: str,
    ) -> PullRequest:
        logger.info(
            "Creating PR: %s (%s -> %s) in %s", title, source_branch, destination_branch, repository
        )
        targets = (
            f"repositoryName={repository},sourceReference={source_branch},"
            f"destinationReference={destination_branch}"
        )
        try:
            data = await self._run_aws_json(
                "codecommit",
                "create-pull-request",
                "--title",
                title,
                "--description",
                description,
                "--targets",
                targets,
            )
        except CommandFailedError as e:
            raise PullRequestError(f"Failed to create pull request: {e.stderr}") from e
        except CommandOutputError as e:
            raise AwsResponseError(str(e)) from e
        response: PullRequestResponse = self._parse(PullRequestResponse, data)
        logger.info("Created PR %s", response.pull_request.pull_request_id)
        return response.pull_request

    async def merge_pull_request_by_squash(
        self,
        pull_request_id: str,
        repository: str,
        commit_message: str,
        author_name: str,
        email: str,
    ) -> PullRequest:
        logger.info("Squash merging PR %s", pull_request_id)
        try:
            data = await self._run_aws_json(
                "codecommit",
                "merge-pull-request-by-squash",
                "--pull-request-id",
                pull_request_id,
                "--repository-name",
                repository,
                "--commit-message",
                commit_message,
                "--author-name",
                author_name,
                "--email",
                email,
            )
        except CommandFailedError as e:
            raise PullRequestError(
                f"Failed to merge pull request {pull_request_id}: {e.stderr}"
            ) from e
        except CommandOutputError as e:
            raise AwsResponseError(str(e)) from e
        response: PullRequestResponse = self._parse(PullRequestResponse, data)
        return response.pull_request

    async def get_pipeline_state(self, name: str) -> PipelineState:
        try:
            data = await self._run_aws_json("codepipeline", "get-pipeline-state", "--name", name)
        except CommandFailedError as e:
            raise AwsError(f"Failed to read pipeline '{name}': {e.stderr}") from e
        except CommandOutputError as e:
            raise AwsResponseError(str(e)) from e
        state: PipelineState = self._parse(PipelineState, data)
        return state
