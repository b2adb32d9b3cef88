"""Custom exceptions for the AWS CLI client."""


class AwsError(Exception):
    """Base exception for AWS CLI errors."""


class AuthenticationError(AwsError):
    """SSO login or identity lookup failed."""


class AwsResponseError(AwsError):
    """The AWS CLI returned output that does not match the expected schema."""


class PullRequestError(AwsError):
    """Error creating, reading or merging pull requests."""
