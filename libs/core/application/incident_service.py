from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from libs.core.application.contracts import CameraRepository, IncidentRepository
from libs.core.domain.entities import Camera, Incident
from libs.core.domain.errors import (
    CameraNotFoundError,
    IncidentNotFoundError,
    InvalidIncidentError,
)


class IncidentService:
    """Application service behind the incident and camera endpoints."""

    def __init__(
        self,
        camera_repository: CameraRepository,
        incident_repository: IncidentRepository,
    ) -> None:
        self._cameras = camera_repository
        self._incidents = incident_repository

    def list_incidents(self, resolved: bool) -> list[Incident]:
        if not isinstance(resolved, bool):
            raise InvalidIncidentError("resolved filter must be a boolean")
        return self._incidents.list(resolved=resolved)

    def resolve_incident(self, incident_id: str) -> Incident:
        incident = self._incidents.mark_resolved(incident_id)
        if incident is None:
            raise IncidentNotFoundError(f"Incident not found: {incident_id}")
        return incident

    def list_cameras(self) -> list[Camera]:
        return self._cameras.list()

    def register_camera(self, name: str, location: str) -> Camera:
        now = _utc_now()
        camera = Camera(
            camera_id=str(uuid4()),
            name=name,
            location=location,
            created_at=now,
            updated_at=now,
        )
        self._cameras.add(camera)
        return camera

    def record_incident(
        self,
        camera_id: str,
        incident_type: str,
        ts_start: datetime,
        ts_end: datetime,
        thumbnail_url: str | None = None,
        resolved: bool = False,
    ) -> Incident:
        if not incident_type:
            raise InvalidIncidentError("incident type is required")
        ts_start = _ensure_aware(ts_start)
        ts_end = _ensure_aware(ts_end)
        if ts_end < ts_start:
            raise InvalidIncidentError("incident ends before it starts")

        camera = self._cameras.get(camera_id)
        if camera is None:
            raise CameraNotFoundError(f"Camera not found: {camera_id}")

        now = _utc_now()
        incident = Incident(
            incident_id=str(uuid4()),
            camera=camera,
            incident_type=incident_type,
            ts_start=ts_start,
            ts_end=ts_end,
            thumbnail_url=thumbnail_url,
            resolved=resolved,
            created_at=now,
            updated_at=now,
        )
        self._incidents.add(incident)
        return incident


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.astimezone()
    return value


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
