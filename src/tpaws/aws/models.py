"""Data models for AWS CLI JSON output."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal

from tpaws.conventions import strip_heads


class PullRequestStatus(StrEnum):
    """CodeCommit pull request status."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class CamelModel(BaseModel):
    """Base for CodeCommit/CodePipeline payloads (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CallerIdentity(BaseModel):
    """Output of ``aws sts get-caller-identity`` (PascalCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")

    user_id: str
    account: str
    arn: str


class MergeMetadata(CamelModel):
    is_merged: bool = False
    merged_by: str | None = None


class PullRequestTarget(CamelModel):
    """A source -> destination branch pair of a pull request."""

    repository_name: str
    source_reference: str
    destination_reference: str
    merge_metadata: MergeMetadata | None = None

    @property
    def source_branch(self) -> str:
        return strip_heads(self.source_reference)

    @property
    def destination_branch(self) -> str:
        return strip_heads(self.destination_reference)


class PullRequest(CamelModel):
    """CodeCommit pull request."""

    pull_request_id: str
    title: str
    description: str = ""
    pull_request_status: PullRequestStatus = PullRequestStatus.OPEN
    author_arn: str | None = None
    creation_date: datetime | None = None
    targets: list[PullRequestTarget] = Field(default_factory=list, alias="pullRequestTargets")

    def has_source_branch(self, branch: str) -> bool:
        return any(target.source_branch == branch for target in self.targets)


class PullRequestResponse(CamelModel):
    pull_request: PullRequest


class PullRequestsList(CamelModel):
    pull_request_ids: list[str] = Field(default_factory=list)


class StageExecution(CamelModel):
    status: str
    pipeline_execution_id: str | None = None


class StageState(CamelModel):
    stage_name: str
    latest_execution: StageExecution | None = None

    @property
    def status(self) -> str:
        return self.latest_execution.status if self.latest_execution else "Unknown"


class PipelineState(CamelModel):
    """Output of ``aws codepipeline get-pipeline-state``."""

    pipeline_name: str
    stage_states: list[StageState] = Field(default_factory=list)
