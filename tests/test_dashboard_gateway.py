"""HTTP dashboard gateway tests."""

import httpx
import pytest

from libs.core.domain.errors import DashboardGatewayError
from libs.infra.http.dashboard_gateway import HttpDashboardGateway

CAMERA = {
    "id": "c1",
    "name": "01",
    "location": "Shop Floor Camera A",
    "createdAt": "2025-06-05T08:00:00+00:00",
    "updatedAt": "2025-06-05T08:00:00+00:00",
}
INCIDENT = {
    "id": "i1",
    "cameraId": "c1",
    "camera": CAMERA,
    "type": "Gun Threat",
    "tsStart": "2025-06-05T14:37:00+00:00",
    "tsEnd": "2025-06-05T14:40:00+00:00",
    "thumbnailUrl": None,
    "resolved": False,
    "createdAt": None,
    "updatedAt": None,
}


def _gateway(handler) -> HttpDashboardGateway:
    client = httpx.Client(
        transport=httpx.MockTransport(handler),
        base_url="http://incident-desk.test",
    )
    return HttpDashboardGateway(client)


def test_list_incidents_sends_filter_and_parses_payload() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[INCIDENT])

    incidents = _gateway(handler).list_incidents(resolved=False)

    assert requests[0].url.path == "/incidents"
    assert requests[0].url.params["resolved"] == "false"
    assert len(incidents) == 1
    assert incidents[0].incident_id == "i1"
    assert incidents[0].camera.name == "01"
    assert incidents[0].ts_start.hour == 14
    assert incidents[0].ts_start.utcoffset() is not None


def test_resolve_uses_patch() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.url.path == "/incidents/i1/resolve"
        return httpx.Response(200, json={**INCIDENT, "resolved": True})

    assert _gateway(handler).resolve_incident("i1").resolved is True


def test_error_status_raises_gateway_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Failed to fetch cameras"})

    with pytest.raises(DashboardGatewayError, match="Failed to fetch cameras"):
        _gateway(handler).list_cameras()


def test_transport_error_raises_gateway_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DashboardGatewayError):
        _gateway(handler).list_cameras()


def test_malformed_payload_raises_gateway_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "i1", "type": "Gun Threat"}])

    with pytest.raises(DashboardGatewayError, match="Malformed payload"):
        _gateway(handler).list_incidents(resolved=False)


def test_camera_mismatch_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{**INCIDENT, "cameraId": "c2"}])

    with pytest.raises(DashboardGatewayError):
        _gateway(handler).list_incidents(resolved=False)


@pytest.mark.parametrize("body", [5, {"error": "nope"}, "incidents"])
def test_non_list_body_raises_gateway_error(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    gateway = _gateway(handler)
    with pytest.raises(DashboardGatewayError, match="expected a list"):
        gateway.list_incidents(resolved=False)
    with pytest.raises(DashboardGatewayError, match="expected a list"):
        gateway.list_cameras()
