from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class CameraRecord(Base):
    __tablename__ = "Camera"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    location: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        "createdAt", DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", DateTime(timezone=True), default=_utc_now
    )

    incidents: Mapped[list["IncidentRecord"]] = relationship(
        back_populates="camera",
    )


class IncidentRecord(Base):
    __tablename__ = "Incident"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    camera_id: Mapped[str] = mapped_column(
        "cameraId", ForeignKey("Camera.id"), index=True
    )
    type: Mapped[str] = mapped_column(String(100))
    ts_start: Mapped[datetime] = mapped_column(
        "tsStart", DateTime(timezone=True), index=True
    )
    ts_end: Mapped[datetime] = mapped_column("tsEnd", DateTime(timezone=True))
    thumbnail_url: Mapped[str | None] = mapped_column(
        "thumbnailUrl", String(1024), nullable=True
    )
    resolved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        "createdAt", DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", DateTime(timezone=True), default=_utc_now
    )

    camera: Mapped[CameraRecord] = relationship(back_populates="incidents")
