from typing import Protocol

from libs.core.domain.entities import Camera, Incident


class CameraRepository(Protocol):
    """Camera persistence contract."""

    def add(self, camera: Camera) -> None: ...

    def get(self, camera_id: str) -> Camera | None: ...

    def list(self) -> list[Camera]: ...


class IncidentRepository(Protocol):
    """Incident persistence contract.

    Every incident returned carries its camera. ``list`` orders by start
    time descending with the incident id as tie-break.
    """

    def add(self, incident: Incident) -> None: ...

    def list(self, resolved: bool) -> list[Incident]: ...

    def mark_resolved(self, incident_id: str) -> Incident | None: ...


class DashboardGateway(Protocol):
    """Client-side view of the incident API used by the dashboard."""

    def list_incidents(self, resolved: bool) -> list[Incident]: ...

    def list_cameras(self) -> list[Camera]: ...

    def resolve_incident(self, incident_id: str) -> Incident: ...
