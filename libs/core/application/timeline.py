"""Pure projections of incidents onto the 24-hour dashboard timeline.

Nothing here holds state: every function is a function of the incidents,
cameras, wall-clock time and the rendering timezone it is given. ``tz=None``
means the local timezone of the process.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Iterable, Sequence

from libs.core.domain.entities import Camera, Incident

MINUTES_PER_DAY = 24 * 60
STACK_WINDOW_SEC = 300.0
PLACEHOLDER_THUMBNAIL_URL = "/placeholder.svg"


class ThreatCategory(str, Enum):
    CRITICAL = "critical"
    ACCESS = "access"
    IDENTITY = "identity"
    TRAFFIC = "traffic"
    SUSPICIOUS = "suspicious"
    NEUTRAL = "neutral"

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]


_THREAT_CATEGORIES: dict[str, ThreatCategory] = {
    "Gun Threat": ThreatCategory.CRITICAL,
    "Unauthorised Access": ThreatCategory.ACCESS,
    "Face Recognised": ThreatCategory.IDENTITY,
    "Traffic congestion": ThreatCategory.TRAFFIC,
    "Suspicious Activity": ThreatCategory.SUSPICIOUS,
}

_CATEGORY_COLORS: dict[ThreatCategory, str] = {
    ThreatCategory.CRITICAL: "#dc2626",
    ThreatCategory.ACCESS: "#ea580c",
    ThreatCategory.IDENTITY: "#2563eb",
    ThreatCategory.TRAFFIC: "#0d9488",
    ThreatCategory.SUSPICIOUS: "#9333ea",
    ThreatCategory.NEUTRAL: "#4b5563",
}


@dataclass(frozen=True)
class TimelineMarker:
    incident: Incident
    position: float
    stack_count: int
    category: ThreatCategory

    @property
    def stacked(self) -> bool:
        return self.stack_count > 1


@dataclass(frozen=True)
class CameraRow:
    camera: Camera
    markers: tuple[TimelineMarker, ...]


@dataclass(frozen=True)
class HourBucket:
    hour: int
    incidents: tuple[Incident, ...]

    @property
    def label(self) -> str:
        return hour_range_label(self.hour)


@dataclass(frozen=True)
class TimelineView:
    rows: tuple[CameraRow, ...]
    buckets: tuple[HourBucket, ...]
    now_position: float
    generated_at: datetime


def threat_category(incident_type: str) -> ThreatCategory:
    return _THREAT_CATEGORIES.get(incident_type, ThreatCategory.NEUTRAL)


def thumbnail_or_placeholder(incident: Incident) -> str:
    return incident.thumbnail_url or PLACEHOLDER_THUMBNAIL_URL


def time_of_day_position(ts: datetime, tz: tzinfo | None = None) -> float:
    """Fraction of the day in [0, 1) at which ``ts`` falls, minute resolution."""
    local = ts.astimezone(tz)
    return (local.hour * 60 + local.minute) / MINUTES_PER_DAY


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


def hour_range_label(hour: int) -> str:
    return f"{hour}:00 - {hour + 1}:00"


def bucket_by_hour(
    incidents: Iterable[Incident],
    tz: tzinfo | None = None,
) -> list[HourBucket]:
    """Group incidents by start hour, latest hour first, input order kept within."""
    buckets: dict[int, list[Incident]] = {}
    for incident in incidents:
        hour = incident.ts_start.astimezone(tz).hour
        buckets.setdefault(hour, []).append(incident)
    return [
        HourBucket(hour=hour, incidents=tuple(buckets[hour]))
        for hour in sorted(buckets, reverse=True)
    ]


def group_by_camera(
    cameras: Sequence[Camera],
    incidents: Iterable[Incident],
) -> dict[str, list[Incident]]:
    grouped: dict[str, list[Incident]] = {camera.camera_id: [] for camera in cameras}
    for incident in incidents:
        if incident.camera_id in grouped:
            grouped[incident.camera_id].append(incident)
    return grouped


def stack_counts(
    incidents: Sequence[Incident],
    window_sec: float = STACK_WINDOW_SEC,
) -> dict[str, int]:
    """Count, per incident, the incidents starting strictly within ``window_sec``.

    The count includes the incident itself. Callers pass one camera's
    incidents. Sorted sweep with binary search, O(n log n).
    """
    starts = sorted(item.ts_start.timestamp() for item in incidents)
    counts: dict[str, int] = {}
    for incident in incidents:
        ts = incident.ts_start.timestamp()
        upper = bisect_left(starts, ts + window_sec)
        lower = bisect_right(starts, ts - window_sec)
        counts[incident.incident_id] = upper - lower
    return counts


def build_camera_rows(
    cameras: Sequence[Camera],
    incidents: Iterable[Incident],
    tz: tzinfo | None = None,
) -> list[CameraRow]:
    grouped = group_by_camera(cameras, incidents)
    rows: list[CameraRow] = []
    for camera in cameras:
        row_incidents = grouped[camera.camera_id]
        counts = stack_counts(row_incidents)
        markers = tuple(
            TimelineMarker(
                incident=incident,
                position=time_of_day_position(incident.ts_start, tz),
                stack_count=counts[incident.incident_id],
                category=threat_category(incident.incident_type),
            )
            for incident in row_incidents
        )
        rows.append(CameraRow(camera=camera, markers=markers))
    return rows


def build_timeline(
    cameras: Sequence[Camera],
    incidents: Sequence[Incident],
    now: datetime,
    tz: tzinfo | None = None,
) -> TimelineView:
    return TimelineView(
        rows=tuple(build_camera_rows(cameras, incidents, tz)),
        buckets=tuple(bucket_by_hour(incidents, tz)),
        now_position=time_of_day_position(now, tz),
        generated_at=now,
    )
