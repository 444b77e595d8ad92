import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from libs.core.application.timeline import (
    TimelineView,
    build_timeline,
    hour_label,
    thumbnail_or_placeholder,
)
from libs.core.domain.entities import Camera, Incident
from libs.core.domain.errors import IncidentNotFoundError, StoreUnavailableError
from services.api_gateway.config import settings
from services.api_gateway.dependencies import get_incident_service, store_ready
from services.api_gateway.presentation.http.ui_page import build_ui_html

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/", response_class=HTMLResponse)
def ui_index() -> str:
    return build_ui_html()


@router.get("/favicon.ico")
def favicon() -> Response:
    return Response(status_code=204)


@router.get("/ready")
def ready() -> dict[str, str]:
    if not store_ready():
        return {"status": "not_ready"}
    return {"status": "ready"}


@router.get("/version")
def version() -> dict[str, str]:
    return {"version": settings.VERSION}


@router.get("/incidents")
def get_incidents(resolved: bool = Query(...)) -> list[dict[str, object]]:
    service = get_incident_service()
    try:
        incidents = service.list_incidents(resolved=resolved)
    except StoreUnavailableError as error:
        logger.exception("Error fetching incidents")
        raise HTTPException(status_code=500, detail="Failed to fetch incidents") from error
    return [_incident_to_dict(incident) for incident in incidents]


@router.patch("/incidents/{incident_id}/resolve")
def resolve_incident(incident_id: str) -> dict[str, object]:
    service = get_incident_service()
    try:
        incident = service.resolve_incident(incident_id)
    except IncidentNotFoundError as error:
        logger.warning("Resolve requested for unknown incident %s", incident_id)
        raise HTTPException(status_code=404, detail="Incident not found") from error
    except StoreUnavailableError as error:
        logger.exception("Error resolving incident %s", incident_id)
        raise HTTPException(status_code=500, detail="Failed to resolve incident") from error
    logger.info("Incident %s resolved", incident_id)
    return _incident_to_dict(incident)


@router.get("/cameras")
def get_cameras() -> list[dict[str, object]]:
    service = get_incident_service()
    try:
        cameras = service.list_cameras()
    except StoreUnavailableError as error:
        logger.exception("Error fetching cameras")
        raise HTTPException(status_code=500, detail="Failed to fetch cameras") from error
    return [_camera_to_dict(camera) for camera in cameras]


@router.get("/timeline")
def get_timeline(
    resolved: bool = False,
    tz_offset_minutes: int | None = Query(default=None, ge=-840, le=840),
) -> dict[str, object]:
    service = get_incident_service()
    try:
        incidents = service.list_incidents(resolved=resolved)
        cameras = service.list_cameras()
    except StoreUnavailableError as error:
        logger.exception("Error building timeline")
        raise HTTPException(status_code=500, detail="Failed to build timeline") from error

    tz = (
        timezone(timedelta(minutes=tz_offset_minutes))
        if tz_offset_minutes is not None
        else None
    )
    view = build_timeline(
        cameras=cameras,
        incidents=incidents,
        now=datetime.now(timezone.utc),
        tz=tz,
    )
    return _timeline_to_dict(view)


def _camera_to_dict(camera: Camera) -> dict[str, object]:
    return {
        "id": camera.camera_id,
        "name": camera.name,
        "location": camera.location,
        "createdAt": _iso(camera.created_at),
        "updatedAt": _iso(camera.updated_at),
    }


def _incident_to_dict(incident: Incident) -> dict[str, object]:
    return {
        "id": incident.incident_id,
        "cameraId": incident.camera_id,
        "camera": _camera_to_dict(incident.camera),
        "type": incident.incident_type,
        "tsStart": _iso(incident.ts_start),
        "tsEnd": _iso(incident.ts_end),
        "thumbnailUrl": incident.thumbnail_url,
        "resolved": incident.resolved,
        "createdAt": _iso(incident.created_at),
        "updatedAt": _iso(incident.updated_at),
    }


def _timeline_to_dict(view: TimelineView) -> dict[str, object]:
    return {
        "generatedAt": _iso(view.generated_at),
        "nowPosition": view.now_position,
        "hours": [hour_label(hour) for hour in range(24)],
        "rows": [
            {
                "camera": _camera_to_dict(row.camera),
                "markers": [
                    {
                        "incidentId": marker.incident.incident_id,
                        "type": marker.incident.incident_type,
                        "tsStart": _iso(marker.incident.ts_start),
                        "position": marker.position,
                        "stackCount": marker.stack_count,
                        "category": marker.category.value,
                        "color": marker.category.color,
                        "thumbnailUrl": thumbnail_or_placeholder(marker.incident),
                    }
                    for marker in row.markers
                ],
            }
            for row in view.rows
        ],
        "buckets": [
            {
                "hour": bucket.hour,
                "label": bucket.label,
                "incidentIds": [item.incident_id for item in bucket.incidents],
            }
            for bucket in view.buckets
        ],
    }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
