from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, sessionmaker

from libs.core.application.contracts import CameraRepository, IncidentRepository
from libs.core.domain.entities import Camera, Incident
from libs.core.domain.errors import StoreUnavailableError
from libs.infra.sql.models import CameraRecord, IncidentRecord


class SqlCameraRepository(CameraRepository):
    """SQLAlchemy implementation of camera repository."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def add(self, camera: Camera) -> None:
        with _session_scope(self._session_factory) as session:
            session.add(
                CameraRecord(
                    id=camera.camera_id,
                    name=camera.name,
                    location=camera.location,
                    created_at=_to_utc(camera.created_at),
                    updated_at=_to_utc(camera.updated_at),
                )
            )

    def get(self, camera_id: str) -> Camera | None:
        with _session_scope(self._session_factory) as session:
            record = session.get(CameraRecord, camera_id)
            return _camera_from_record(record) if record is not None else None

    def list(self) -> list[Camera]:
        stmt = select(CameraRecord).order_by(
            CameraRecord.created_at.asc(),
            CameraRecord.id.asc(),
        )
        with _session_scope(self._session_factory) as session:
            return [_camera_from_record(item) for item in session.scalars(stmt)]


class SqlIncidentRepository(IncidentRepository):
    """SQLAlchemy implementation of incident repository."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def add(self, incident: Incident) -> None:
        with _session_scope(self._session_factory) as session:
            session.add(
                IncidentRecord(
                    id=incident.incident_id,
                    camera_id=incident.camera_id,
                    type=incident.incident_type,
                    ts_start=_to_utc(incident.ts_start),
                    ts_end=_to_utc(incident.ts_end),
                    thumbnail_url=incident.thumbnail_url,
                    resolved=incident.resolved,
                    created_at=_to_utc(incident.created_at),
                    updated_at=_to_utc(incident.updated_at),
                )
            )

    def list(self, resolved: bool) -> list[Incident]:
        stmt = (
            select(IncidentRecord)
            .options(joinedload(IncidentRecord.camera))
            .where(IncidentRecord.resolved == resolved)
            .order_by(IncidentRecord.ts_start.desc(), IncidentRecord.id.asc())
        )
        with _session_scope(self._session_factory) as session:
            return [_incident_from_record(item) for item in session.scalars(stmt)]

    def mark_resolved(self, incident_id: str) -> Incident | None:
        with _session_scope(self._session_factory) as session:
            record = session.get(
                IncidentRecord,
                incident_id,
                options=[joinedload(IncidentRecord.camera)],
            )
            if record is None:
                return None
            if not record.resolved:
                record.resolved = True
                record.updated_at = datetime.now(timezone.utc)
                session.flush()
            return _incident_from_record(record)


@contextmanager
def _session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    try:
        with session_factory() as session, session.begin():
            yield session
    except SQLAlchemyError as error:
        raise StoreUnavailableError(str(error)) from error


def _camera_from_record(record: CameraRecord) -> Camera:
    return Camera(
        camera_id=record.id,
        name=record.name,
        location=record.location,
        created_at=_from_db(record.created_at),
        updated_at=_from_db(record.updated_at),
    )


def _incident_from_record(record: IncidentRecord) -> Incident:
    if record.camera is None:
        raise StoreUnavailableError(
            f"Incident {record.id} references missing camera {record.camera_id}"
        )
    return Incident(
        incident_id=record.id,
        camera=_camera_from_record(record.camera),
        incident_type=record.type,
        ts_start=_from_db(record.ts_start),
        ts_end=_from_db(record.ts_end),
        thumbnail_url=record.thumbnail_url,
        resolved=record.resolved,
        created_at=_from_db(record.created_at),
        updated_at=_from_db(record.updated_at),
    )


def _to_utc(value: datetime | None) -> datetime | None:
    # SQLite drops offsets, so everything is written as UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc)


def _from_db(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
