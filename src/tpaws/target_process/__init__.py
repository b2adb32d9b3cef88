"""TargetProcess client - tickets (assignables), users and projects."""

from tpaws.target_process.client import TargetProcessClient
from tpaws.target_process.exceptions import (
    AssignableNotFoundError,
    HTTPStatusError,
    MissingConfigurationError,
    ResponseParseError,
    TargetProcessError,
    TransportError,
    UnknownEntityStateError,
)
from tpaws.target_process.models import (
    Assignable,
    AssignableV2,
    CurrentUser,
    EntityState,
    IdAndName,
    Project,
    ProjectRef,
)

BASE_URL_ENV = "TARGET_PROCESS_API_BASE_URL"
TOKEN_ENV = "TARGET_PROCESS_ACCESS_TOKEN"

__all__ = [
    "BASE_URL_ENV",
    "TOKEN_ENV",
    "Assignable",
    "AssignableNotFoundError",
    "AssignableV2",
    "CurrentUser",
    "EntityState",
    "HTTPStatusError",
    "IdAndName",
    "MissingConfigurationError",
    "Project",
    "ProjectRef",
    "ResponseParseError",
    "TargetProcessClient",
    "TargetProcessError",
    "TransportError",
    "UnknownEntityStateError",
]
