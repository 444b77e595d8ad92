from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from libs.core.domain.entities import Camera, Incident
from libs.core.domain.errors import DashboardGatewayError


class CameraPayload(BaseModel):
    """Camera as serialized by the incident API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    location: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def to_entity(self) -> Camera:
        return Camera(
            camera_id=self.id,
            name=self.name,
            location=self.location,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class IncidentPayload(BaseModel):
    """Incident as serialized by the incident API, camera embedded."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    camera_id: str = Field(alias="cameraId")
    camera: CameraPayload
    type: str
    ts_start: datetime = Field(alias="tsStart")
    ts_end: datetime = Field(alias="tsEnd")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    resolved: bool
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def to_entity(self) -> Incident:
        if self.camera.id != self.camera_id:
            raise DashboardGatewayError(
                f"Incident {self.id} embeds camera {self.camera.id}, "
                f"expected {self.camera_id}"
            )
        return Incident(
            incident_id=self.id,
            camera=self.camera.to_entity(),
            incident_type=self.type,
            ts_start=self.ts_start,
            ts_end=self.ts_end,
            thumbnail_url=self.thumbnail_url,
            resolved=self.resolved,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class HttpDashboardGateway:
    """Dashboard gateway over the incident HTTP API."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @classmethod
    def from_base_url(
        cls,
        api_base: str,
        timeout_sec: float = 10.0,
    ) -> "HttpDashboardGateway":
        return cls(httpx.Client(base_url=api_base, timeout=timeout_sec))

    def close(self) -> None:
        self._client.close()

    def list_incidents(self, resolved: bool) -> list[Incident]:
        payload = self._request(
            "GET",
            "/incidents",
            params={"resolved": "true" if resolved else "false"},
        )
        return [item.to_entity() for item in _parse_list(IncidentPayload, payload)]

    def list_cameras(self) -> list[Camera]:
        payload = self._request("GET", "/cameras")
        return [item.to_entity() for item in _parse_list(CameraPayload, payload)]

    def resolve_incident(self, incident_id: str) -> Incident:
        payload = self._request("PATCH", f"/incidents/{incident_id}/resolve")
        return _parse(IncidentPayload, payload).to_entity()

    def _request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = self._client.request(method, url, params=params)
        except httpx.HTTPError as error:
            raise DashboardGatewayError(f"{method} {url} failed: {error}") from error

        if response.is_error:
            raise DashboardGatewayError(
                f"{method} {url} returned {response.status_code}: "
                f"{_error_message(response)}"
            )
        try:
            return response.json()
        except ValueError as error:
            raise DashboardGatewayError(f"{method} {url} returned invalid JSON") from error


def _parse(model: type[BaseModel], item: Any) -> Any:
    try:
        return model.model_validate(item)
    except ValidationError as error:
        raise DashboardGatewayError(f"Malformed payload: {error}") from error


def _parse_list(model: type[BaseModel], payload: Any) -> list[Any]:
    if not isinstance(payload, list):
        raise DashboardGatewayError(
            f"Malformed payload: expected a list, got {type(payload).__name__}"
        )
    return [_parse(model, item) for item in payload]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return response.text
