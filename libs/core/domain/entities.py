from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Camera:
    """Camera that incidents are recorded against."""

    camera_id: str
    name: str
    location: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Incident:
    """Detection event with its owning camera embedded."""

    incident_id: str
    camera: Camera
    incident_type: str
    ts_start: datetime
    ts_end: datetime
    thumbnail_url: Optional[str] = None
    resolved: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def camera_id(self) -> str:
        return self.camera.camera_id
