from __future__ import annotations

import argparse
import logging
import time

from libs.core.application.dashboard_controller import (
    DashboardController,
    DashboardState,
)
from libs.core.application.timeline import build_camera_rows, threat_category
from libs.infra.http.dashboard_gateway import HttpDashboardGateway
from services.api_gateway.config import settings


def render(state: DashboardState) -> str:
    if state.loading:
        return "[LOADING]"

    lines = []
    clock = state.current_time.strftime("%H:%M:%S") if state.current_time else "--"
    now = f"{state.now_position:.3f}" if state.now_position is not None else "--"
    camera = state.selected_camera
    lines.append(
        f"[{clock} now={now}] camera={camera.name if camera else '-'} "
        f"incidents={len(state.incidents)}"
    )
    for incident in state.incidents:
        marker = ">" if incident == state.selected_incident else " "
        lines.append(
            f" {marker} {incident.incident_id} "
            f"{incident.ts_start.astimezone():%H:%M} "
            f"cam {incident.camera.name} {incident.incident_type} "
            f"({threat_category(incident.incident_type).value})"
        )
    for row in build_camera_rows(state.cameras, state.incidents):
        stacked = [marker for marker in row.markers if marker.stacked]
        lines.append(
            f"   row {row.camera.name}: {len(row.markers)} events, "
            f"{len(stacked)} stacked"
        )
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(description="Terminal incident dashboard")
    parser.add_argument("--api-base", default=settings.API_BASE)
    parser.add_argument(
        "--resolve",
        action="append",
        default=[],
        metavar="INCIDENT_ID",
        help="Resolve an incident after loading (repeatable)",
    )
    parser.add_argument(
        "--watch",
        type=float,
        default=0.0,
        help="Keep the clock running for this many seconds",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    gateway = HttpDashboardGateway.from_base_url(
        args.api_base, timeout_sec=settings.REQUEST_TIMEOUT_SEC
    )
    controller = DashboardController(
        gateway, clock_interval_sec=settings.CLOCK_INTERVAL_SEC
    )
    try:
        with controller:
            print(render(controller.state))
            for incident_id in args.resolve:
                print(render(controller.resolve(incident_id)))
            if args.watch > 0:
                unsubscribe = controller.subscribe(lambda state: print(render(state)))
                time.sleep(args.watch)
                unsubscribe()
    finally:
        gateway.close()


if __name__ == "__main__":
    main()
