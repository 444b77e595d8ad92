"""In-memory storage for cameras and incidents (development and tests)."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from libs.core.application.contracts import CameraRepository, IncidentRepository
from libs.core.domain.entities import Camera, Incident
from libs.core.domain.errors import StoreUnavailableError


@dataclass
class InMemoryDatabase:
    """Process-local tables keyed by id, kept in insertion order."""

    cameras: dict[str, Camera] = field(default_factory=dict)
    incidents: dict[str, Incident] = field(default_factory=dict)

    def clear(self) -> None:
        self.cameras.clear()
        self.incidents.clear()


class InMemoryCameraRepository(CameraRepository):
    """Camera repository over ``InMemoryDatabase``."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def add(self, camera: Camera) -> None:
        self._db.cameras[camera.camera_id] = camera

    def get(self, camera_id: str) -> Camera | None:
        return self._db.cameras.get(camera_id)

    def list(self) -> list[Camera]:
        return list(self._db.cameras.values())


class InMemoryIncidentRepository(IncidentRepository):
    """Incident repository over ``InMemoryDatabase``.

    Incidents are re-hydrated with the stored camera on every read so the
    camera table stays the single source of camera data.
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def add(self, incident: Incident) -> None:
        self._db.incidents[incident.incident_id] = incident

    def list(self, resolved: bool) -> list[Incident]:
        incidents = [
            self._hydrate(item)
            for item in self._db.incidents.values()
            if item.resolved is resolved
        ]
        incidents.sort(key=lambda item: item.incident_id)
        incidents.sort(key=lambda item: item.ts_start, reverse=True)
        return incidents

    def mark_resolved(self, incident_id: str) -> Incident | None:
        incident = self._db.incidents.get(incident_id)
        if incident is None:
            return None
        if not incident.resolved:
            incident = replace(
                incident,
                resolved=True,
                updated_at=datetime.now(timezone.utc),
            )
            self._db.incidents[incident_id] = incident
        return self._hydrate(incident)

    def _hydrate(self, incident: Incident) -> Incident:
        camera = self._db.cameras.get(incident.camera_id)
        if camera is None:
            raise StoreUnavailableError(
                f"Incident {incident.incident_id} references missing camera "
                f"{incident.camera_id}"
            )
        return replace(incident, camera=camera)
