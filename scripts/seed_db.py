from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from urllib.parse import quote

from libs.core.application.incident_service import IncidentService
from services.api_gateway.dependencies import get_incident_service, init_store


@dataclass
class SeedIncident:
    """Incident placed on today's timeline."""

    camera_index: int
    incident_type: str
    hour: int
    minute: int
    duration_min: int


CAMERAS = [
    ("01", "Shop Floor Camera A"),
    ("02", "Shop Floor Camera B"),
    ("03", "Entrance Camera"),
]

INCIDENTS = [
    SeedIncident(0, "Unauthorised Access", 14, 35, 2),
    SeedIncident(0, "Gun Threat", 14, 37, 3),
    SeedIncident(0, "Unauthorised Access", 14, 40, 2),
    SeedIncident(0, "Unauthorised Access", 14, 43, 2),
    SeedIncident(0, "Unauthorised Access", 14, 45, 2),
    SeedIncident(1, "Unauthorised Access", 8, 15, 3),
    SeedIncident(1, "Face Recognised", 12, 30, 1),
    SeedIncident(1, "Unauthorised Access", 16, 20, 2),
    SeedIncident(2, "Face Recognised", 9, 45, 1),
    SeedIncident(2, "Traffic congestion", 11, 0, 5),
    SeedIncident(2, "Gun Threat", 18, 30, 4),
    SeedIncident(2, "Unauthorised Access", 20, 15, 2),
]


def thumbnail_url(incident_type: str) -> str:
    query = quote(f"{incident_type} security camera footage")
    return f"/placeholder.svg?height=120&width=200&query={query}"


def seed(
    service: IncidentService,
    day: datetime,
    resolved_ratio: float,
    rng: random.Random,
) -> tuple[int, int]:
    cameras = [
        service.register_camera(name=name, location=location)
        for name, location in CAMERAS
    ]
    for item in INCIDENTS:
        ts_start = day.replace(hour=item.hour, minute=item.minute)
        service.record_incident(
            camera_id=cameras[item.camera_index].camera_id,
            incident_type=item.incident_type,
            ts_start=ts_start,
            ts_end=ts_start + timedelta(minutes=item.duration_min),
            thumbnail_url=thumbnail_url(item.incident_type),
            resolved=rng.random() < resolved_ratio,
        )
    return len(cameras), len(INCIDENTS)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed cameras and incidents")
    parser.add_argument(
        "--resolved-ratio",
        type=float,
        default=0.2,
        help="Probability that a seeded incident starts resolved",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    if not 0.0 <= args.resolved_ratio <= 1.0:
        raise SystemExit("--resolved-ratio must be within [0, 1]")

    init_store()
    today = datetime.now().astimezone().replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    cameras, incidents = seed(
        service=get_incident_service(),
        day=today,
        resolved_ratio=args.resolved_ratio,
        rng=random.Random(args.seed),
    )
    print(f"[DONE] created {cameras} cameras and {incidents} incidents")


if __name__ == "__main__":
    main()
