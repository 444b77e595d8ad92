import logging

from libs.core.application.incident_service import IncidentService
from libs.infra.sql.database import (
    check_connection,
    create_session_factory,
    create_store_engine,
    init_db,
)
from libs.infra.sql.repositories import SqlCameraRepository, SqlIncidentRepository
from services.api_gateway.config import settings
from services.api_gateway.infrastructure.memory_store import (
    InMemoryCameraRepository,
    InMemoryDatabase,
    InMemoryIncidentRepository,
)

logger = logging.getLogger(__name__)

db = InMemoryDatabase()
engine = None

if settings.STORE_BACKEND == "memory":
    camera_repository = InMemoryCameraRepository(db)
    incident_repository = InMemoryIncidentRepository(db)
elif settings.STORE_BACKEND == "sql":
    engine = create_store_engine(settings.DATABASE_URL)
    session_factory = create_session_factory(engine)
    camera_repository = SqlCameraRepository(session_factory)
    incident_repository = SqlIncidentRepository(session_factory)
else:
    raise ValueError(f"Unknown store backend: {settings.STORE_BACKEND}")

incident_service = IncidentService(
    camera_repository=camera_repository,
    incident_repository=incident_repository,
)


def get_incident_service() -> IncidentService:
    return incident_service


def init_store() -> None:
    if engine is not None:
        init_db(engine)
    logger.info("Using %s incident store", settings.STORE_BACKEND)


def store_ready() -> bool:
    if engine is None:
        return True
    return check_connection(engine)


def reset_state() -> None:
    db.clear()
