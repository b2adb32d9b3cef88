"""AWS client - CodeCommit pull requests, STS identity and CodePipeline state."""

from tpaws.aws.client import DEFAULT_PROFILE, AwsClient, build_pr_link
from tpaws.aws.exceptions import (
    AuthenticationError,
    AwsError,
    AwsResponseError,
    PullRequestError,
)
from tpaws.aws.models import (
    CallerIdentity,
    PipelineState,
    PullRequest,
    PullRequestStatus,
    PullRequestTarget,
)

__all__ = [
    "DEFAULT_PROFILE",
    "AuthenticationError",
    "AwsClient",
    "AwsError",
    "AwsResponseError",
    "CallerIdentity",
    "PipelineState",
    "PullRequest",
    "PullRequestError",
    "PullRequestStatus",
    "PullRequestTarget",
    "build_pr_link",
]
