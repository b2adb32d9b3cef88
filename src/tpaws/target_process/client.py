"""TargetProcessClient - REST client for the TargetProcess v1/v2 APIs."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from tpaws.cache import memoized
from tpaws.logging import sanitize_for_log
from tpaws.target_process.exceptions import (
    AssignableNotFoundError,
    HTTPStatusError,
    MissingConfigurationError,
    ResponseParseError,
    TransportError,
)
from tpaws.target_process.models import (
    Assignable,
    AssignableV2,
    CurrentUser,
    EntityState,
    ListResponseV1,
    ListResponseV2,
    Project,
)

logger = logging.getLogger("tpaws.target_process")

M = TypeVar("M", bound=BaseModel)

# Role ID of "Developer" in TargetProcess assignments
DEVELOPER_ROLE_ID = 1

CURRENT_SPRINT_SELECT = "{id,name,description,resourceType,entityState,entityType,project}"


class TargetProcessClient:
    """Async client for a TargetProcess instance.

    Authenticates with an access token passed as the ``access_token`` query
    parameter on every request.
    """

    def __init__(self, base_url: str | None, token: str | None, timeout: float = 30.0) -> None:
        """Initialize TargetProcess client.

        Args:
            base_url: Instance URL, e.g. https://company.tpondemand.com
            token: Personal access token
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or "").rstrip("/")
        self.token = token or ""
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _url(self, path: str) -> str:
        if not self.base_url:
            raise MissingConfigurationError("TargetProcess base URL is not configured")
        if not self.token:
            raise MissingConfigurationError("TargetProcess access token is not configured")
        return f"{self.base_url}/api/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body.

        Raises:
            TransportError: If the request could not be sent.
            HTTPStatusError: On a non-2xx response.
            ResponseParseError: If the body is not JSON.
        """
        url = self._url(path)
        query = {"access_token": self.token, **(params or {})}
        logger.debug("%s %s %s", method, url, sanitize_for_log(str(params or {})))

        try:
            response = await self.client.request(method, url, params=query, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Error in the request: {e}") from e

        if not response.is_success:
            raise HTTPStatusError(response.status_code, response.text)

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ResponseParseError(f"Error parsing json: {e}") from e

    @staticmethod
    def _parse(model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(f"Error parsing {model.__name__}: {e}") from e

    @memoized
    async def get_assignable(self, assignable_id: str) -> Assignable:
        """Get a user story or bug by ID.

        Raises:
            AssignableNotFoundError: If the ticket doesn't exist.
        """
        try:
            data = await self._request("GET", f"v1/Assignables/{assignable_id}")
        except HTTPStatusError as e:
            if e.status_code == 404:
                raise AssignableNotFoundError(f"Assignable #{assignable_id} not found") from e
            raise
        return self._parse(Assignable, data)

    @memoized
    async def get_me(self) -> CurrentUser:
        """The user owning the access token."""
        data = await self._request("GET", "v1/Users/loggeduser")
        return self._parse(CurrentUser, data)

    async def get_projects(self, skip: int = 0, take: int = 200) -> list[Project]:
        data = await self._request("GET", "v1/Projects", params={"skip": skip, "take": take})
        listing = self._parse(ListResponseV1, data)
        return [self._parse(Project, item) for item in listing.items]

    async def get_current_sprint_open_tasks(self, project_name: str) -> list[Assignable]:
        """Initial-state tickets of the current (or previous) sprint, plus open bugs."""
        where = (
            "(EntityState.IsInitial = true) and "
            "(EntityType.Name = 'Bug' or "
            "(TeamIteration.IsCurrent = true or TeamIteration.IsPrevious = true)) and "
            f"(Project.Name = '{project_name}')"
        )
        data = await self._request(
            "GET",
            "v2/assignables",
            params={"where": where, "select": CURRENT_SPRINT_SELECT},
        )
        listing = self._parse(ListResponseV2, data)
        return [self._parse(AssignableV2, item).to_v1() for item in listing.items]

    async def assign(self, assignable_id: int, user_id: int) -> Assignable:
        """Assign a ticket to a user as developer."""
        logger.info("Assigning #%s to user %s", assignable_id, user_id)
        payload = {
            "Assignments": [
                {"GeneralUser": {"Id": user_id}, "Role": {"Id": DEVELOPER_ROLE_ID}},
            ]
        }
        data = await self._request("POST", f"v1/Assignables/{assignable_id}", payload=payload)
        return self._parse(Assignable, data)

    async def update_entity_state(self, assignable_id: int, state: EntityState) -> Assignable:
        """Move a ticket to another workflow state."""
        logger.info("Moving #%s to %s", assignable_id, state.name)
        payload = {"Id": assignable_id, "EntityState": {"Id": state.code}}
        data = await self._request("POST", f"v1/Assignables/{assignable_id}", payload=payload)
        return self._parse(Assignable, data)
