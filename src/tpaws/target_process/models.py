"""Data models for the TargetProcess API.

The v1 API speaks PascalCase and the v2 API camelCase. Both parse into the
same v1-shaped ``Assignable``.
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_pascal

from tpaws.conventions import ticket_branch_name
from tpaws.target_process.exceptions import UnknownEntityStateError


class EntityState(IntEnum):
    """Workflow states used by tpaws, mapped to their TargetProcess IDs."""

    OPEN = 73
    PLANNED = 74
    IN_PROGRESS = 75
    IN_STAGING = 127

    @classmethod
    def from_code(cls, code: int) -> EntityState:
        """Map a TargetProcess state ID to a known state.

        Raises:
            UnknownEntityStateError: For any ID outside the enum.
        """
        try:
            return cls(code)
        except ValueError as e:
            raise UnknownEntityStateError(f"Unknown entity state id: {code}") from e

    @property
    def code(self) -> int:
        return int(self.value)


class PascalModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class IdAndName(PascalModel):
    id: int
    name: str


class ProjectRef(PascalModel):
    id: int
    name: str
    resource_type: str | None = None
    abbreviation: str | None = None


class Project(PascalModel):
    """A TargetProcess project."""

    id: int
    name: str
    abbreviation: str | None = None

    @property
    def label(self) -> str:
        if self.abbreviation:
            return f"{self.abbreviation} - {self.name}"
        return self.name


class Assignable(PascalModel):
    """A user story or bug."""

    resource_type: str = ""
    id: int
    name: str
    description: str | None = None
    entity_state: IdAndName
    entity_type: IdAndName
    project: ProjectRef | None = None

    def link(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/entity/{self.id}"

    @property
    def branch_name(self) -> str:
        """``<id>_<slug>``, the git-flow feature name for this ticket."""
        return ticket_branch_name(self.id, self.name)

    @property
    def state(self) -> EntityState:
        return EntityState.from_code(self.entity_state.id)

    @property
    def is_bug(self) -> bool:
        return self.entity_type.name.lower() == "bug"

    @property
    def is_user_story(self) -> bool:
        return self.entity_type.name.lower() == "userstory"


class CurrentUser(PascalModel):
    id: int
    first_name: str = ""
    last_name: str = ""
    login: str = ""
    email: str = ""
    is_active: bool = True
    role: IdAndName | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# v2


class IdAndNameV2(CamelModel):
    id: int
    name: str


class ProjectV2(CamelModel):
    id: int
    name: str
    resource_type: str | None = None
    abbreviation: str | None = None


class AssignableV2(CamelModel):
    id: int
    name: str
    resource_type: str = ""
    description: str | None = None
    entity_type: IdAndNameV2
    entity_state: IdAndNameV2
    project: ProjectV2 | None = None

    def to_v1(self) -> Assignable:
        return Assignable(
            resource_type=self.resource_type,
            id=self.id,
            name=self.name,
            description=self.description,
            entity_state=IdAndName(id=self.entity_state.id, name=self.entity_state.name),
            entity_type=IdAndName(id=self.entity_type.id, name=self.entity_type.name),
            project=(
                ProjectRef(
                    id=self.project.id,
                    name=self.project.name,
                    resource_type=self.project.resource_type,
                    abbreviation=self.project.abbreviation,
                )
                if self.project
                else None
            ),
        )


class ListResponseV1(PascalModel):
    items: list[dict] = []


class ListResponseV2(CamelModel):
    items: list[dict] = []
