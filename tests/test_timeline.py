"""Timeline projection tests."""

from datetime import datetime, timedelta, timezone

import pytest

from libs.core.application.timeline import (
    STACK_WINDOW_SEC,
    ThreatCategory,
    bucket_by_hour,
    build_camera_rows,
    build_timeline,
    group_by_camera,
    hour_label,
    stack_counts,
    threat_category,
    thumbnail_or_placeholder,
    time_of_day_position,
)
from libs.core.domain.entities import Camera, Incident

UTC = timezone.utc
CAMERA_A = Camera(camera_id="c1", name="01", location="Shop Floor Camera A")
CAMERA_B = Camera(camera_id="c2", name="02", location="Entrance Camera")


def _incident(
    incident_id: str,
    ts_start: datetime,
    camera: Camera = CAMERA_A,
    incident_type: str = "Unauthorised Access",
) -> Incident:
    return Incident(
        incident_id=incident_id,
        camera=camera,
        incident_type=incident_type,
        ts_start=ts_start,
        ts_end=ts_start + timedelta(minutes=2),
    )


def _at(hour: int, minute: int, second: int = 0, day: int = 5) -> datetime:
    return datetime(2025, 6, day, hour, minute, second, tzinfo=UTC)


def test_position_is_fraction_of_day() -> None:
    assert time_of_day_position(_at(0, 0), UTC) == 0.0
    assert time_of_day_position(_at(12, 0), UTC) == 0.5
    assert time_of_day_position(_at(14, 37), UTC) == pytest.approx(877 / 1440)
    assert time_of_day_position(_at(23, 59, 59), UTC) < 1.0


def test_position_ignores_date_and_seconds() -> None:
    assert time_of_day_position(_at(9, 45, day=5), UTC) == time_of_day_position(
        _at(9, 45, 30, day=20), UTC
    )


def test_position_uses_rendering_timezone() -> None:
    plus_two = timezone(timedelta(hours=2))
    assert time_of_day_position(_at(10, 0), plus_two) == 0.5


def test_bucket_by_hour_latest_first() -> None:
    incidents = [
        _incident("a", _at(14, 45)),
        _incident("b", _at(9, 45)),
        _incident("c", _at(14, 35)),
    ]

    buckets = bucket_by_hour(incidents, UTC)

    assert [bucket.hour for bucket in buckets] == [14, 9]
    assert [item.incident_id for item in buckets[0].incidents] == ["a", "c"]
    assert buckets[0].label == "14:00 - 15:00"
    assert bucket_by_hour([], UTC) == []


def test_group_by_camera_keeps_query_order() -> None:
    incidents = [
        _incident("a", _at(20, 15), CAMERA_B),
        _incident("b", _at(14, 45), CAMERA_A),
        _incident("c", _at(8, 15), CAMERA_B),
    ]

    grouped = group_by_camera([CAMERA_A, CAMERA_B], incidents)

    assert [item.incident_id for item in grouped["c1"]] == ["b"]
    assert [item.incident_id for item in grouped["c2"]] == ["a", "c"]


def test_stack_counts_five_minute_window() -> None:
    incidents = [
        _incident("first", _at(10, 0)),
        _incident("second", _at(10, 2)),
        _incident("third", _at(10, 10)),
    ]

    assert stack_counts(incidents) == {"first": 2, "second": 2, "third": 1}


def test_stack_window_is_strict() -> None:
    boundary = _at(10, 0) + timedelta(seconds=STACK_WINDOW_SEC)
    incidents = [_incident("a", _at(10, 0)), _incident("b", boundary)]

    assert stack_counts(incidents) == {"a": 1, "b": 1}


def test_stack_counts_matches_pairwise_count() -> None:
    offsets = [0, 30, 290, 299, 300, 301, 600, 601, 1200, 1490]
    incidents = [
        _incident(f"i{index}", _at(10, 0) + timedelta(seconds=offset))
        for index, offset in enumerate(offsets)
    ]
    expected = {
        item.incident_id: sum(
            1
            for other in incidents
            if abs((other.ts_start - item.ts_start).total_seconds()) < STACK_WINDOW_SEC
        )
        for item in incidents
    }

    assert stack_counts(incidents) == expected


def test_camera_rows_count_stacks_per_camera_only() -> None:
    incidents = [
        _incident("a", _at(10, 0), CAMERA_A),
        _incident("b", _at(10, 1), CAMERA_B),
    ]

    rows = build_camera_rows([CAMERA_A, CAMERA_B], incidents, UTC)

    assert [row.camera for row in rows] == [CAMERA_A, CAMERA_B]
    assert [marker.stack_count for row in rows for marker in row.markers] == [1, 1]
    assert not rows[0].markers[0].stacked


def test_threat_category_is_total() -> None:
    assert threat_category("Gun Threat") is ThreatCategory.CRITICAL
    assert threat_category("Face Recognised") is ThreatCategory.IDENTITY
    assert threat_category("Traffic congestion") is ThreatCategory.TRAFFIC
    assert threat_category("Suspicious Activity") is ThreatCategory.SUSPICIOUS
    assert threat_category("Loitering") is ThreatCategory.NEUTRAL
    assert threat_category("") is ThreatCategory.NEUTRAL
    assert all(category.color.startswith("#") for category in ThreatCategory)


def test_thumbnail_placeholder() -> None:
    incident = _incident("a", _at(10, 0))
    assert thumbnail_or_placeholder(incident) == "/placeholder.svg"


def test_build_timeline_is_deterministic() -> None:
    incidents = [_incident("a", _at(14, 37)), _incident("b", _at(14, 35))]
    now = _at(3, 12)

    first = build_timeline([CAMERA_A], incidents, now=now, tz=UTC)
    second = build_timeline([CAMERA_A], incidents, now=now, tz=UTC)

    assert first == second
    assert first.now_position == pytest.approx(192 / 1440)
    assert [marker.stack_count for marker in first.rows[0].markers] == [2, 2]
    assert hour_label(7) == "07:00"
