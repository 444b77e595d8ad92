"""Client-side state for the operator dashboard.

The controller owns a single immutable ``DashboardState`` snapshot. Views
never mutate it: they call an action and receive the next snapshot, or
subscribe to be notified of every change.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Sequence

from libs.core.application.contracts import DashboardGateway
from libs.core.application.timeline import time_of_day_position
from libs.core.domain.entities import Camera, Incident
from libs.core.domain.errors import DashboardGatewayError

logger = logging.getLogger(__name__)

CLOCK_INTERVAL_SEC = 1.0


@dataclass(frozen=True)
class DashboardState:
    incidents: tuple[Incident, ...] = ()
    cameras: tuple[Camera, ...] = ()
    selected_incident: Incident | None = None
    selected_camera: Camera | None = None
    loading: bool = True
    current_time: datetime | None = None

    @property
    def now_position(self) -> float | None:
        """Position of the "now" marker for the current clock tick."""
        if self.current_time is None:
            return None
        return time_of_day_position(self.current_time, self.current_time.tzinfo)


Listener = Callable[[DashboardState], None]


class DashboardController:
    """Fetches incidents and cameras and tracks the operator's selection."""

    def __init__(
        self,
        gateway: DashboardGateway,
        clock_interval_sec: float = CLOCK_INTERVAL_SEC,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._gateway = gateway
        self._clock_interval_sec = clock_interval_sec
        self._now = now or _local_now
        self._lock = threading.Lock()
        self._state = DashboardState()
        self._listeners: list[Listener] = []
        self._ticker: _ClockTicker | None = None

    @property
    def state(self) -> DashboardState:
        with self._lock:
            return self._state

    @property
    def clock_running(self) -> bool:
        return self._ticker is not None and self._ticker.running

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self) -> DashboardState:
        """Fetch unresolved incidents and cameras together, then pick defaults.

        Both fetches must succeed; if either fails the fetched data is
        discarded and only the loading flag is cleared.
        """
        self._update(lambda state: replace(state, loading=True))
        with ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="dashboard-fetch"
        ) as pool:
            incidents_future = pool.submit(self._gateway.list_incidents, False)
            cameras_future = pool.submit(self._gateway.list_cameras)
            try:
                incidents = incidents_future.result()
                cameras = cameras_future.result()
            except DashboardGatewayError:
                logger.error("Failed to fetch dashboard data", exc_info=True)
                return self._update(lambda state: replace(state, loading=False))

        return self._update(
            lambda state: _apply_fetch(state, incidents=incidents, cameras=cameras)
        )

    def select_camera(self, camera: Camera) -> DashboardState:
        return self._update(lambda state: replace(state, selected_camera=camera))

    def select_incident(self, incident: Incident) -> DashboardState:
        return self._update(
            lambda state: replace(
                state,
                selected_incident=incident,
                selected_camera=incident.camera,
            )
        )

    def resolve(self, incident_id: str) -> DashboardState:
        """Resolve an incident, then reload everything from the API."""
        try:
            self._gateway.resolve_incident(incident_id)
        except DashboardGatewayError:
            logger.error("Failed to resolve incident %s", incident_id, exc_info=True)
            return self.state
        return self.load()

    def mount(self) -> DashboardState:
        state = self.load()
        self.start_clock()
        return state

    def unmount(self) -> None:
        self.stop_clock()

    def start_clock(self) -> None:
        if self.clock_running:
            return
        self._tick()
        self._ticker = _ClockTicker(self._clock_interval_sec, self._tick)
        self._ticker.start()

    def stop_clock(self) -> None:
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.stop()

    def __enter__(self) -> DashboardController:
        self.mount()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()

    def _tick(self) -> None:
        now = self._now()
        self._update(lambda state: replace(state, current_time=now))

    def _update(
        self,
        transition: Callable[[DashboardState], DashboardState],
    ) -> DashboardState:
        with self._lock:
            self._state = transition(self._state)
            state = self._state
        for listener in list(self._listeners):
            listener(state)
        return state


class _ClockTicker:
    def __init__(self, interval_sec: float, on_tick: Callable[[], None]) -> None:
        self._interval_sec = interval_sec
        self._on_tick = on_tick
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name="dashboard-clock",
            daemon=True,
        )

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not threading.current_thread():
            self._thread.join()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval_sec):
            try:
                self._on_tick()
            except Exception:
                logger.exception("Dashboard clock tick failed")


def _apply_fetch(
    state: DashboardState,
    incidents: Sequence[Incident],
    cameras: Sequence[Camera],
) -> DashboardState:
    # Incident selection wins over the default camera pick.
    selected_camera = state.selected_camera
    selected_incident = state.selected_incident
    if cameras:
        selected_camera = cameras[0]
    if incidents:
        selected_incident = incidents[0]
        selected_camera = incidents[0].camera
    return replace(
        state,
        incidents=tuple(incidents),
        cameras=tuple(cameras),
        selected_incident=selected_incident,
        selected_camera=selected_camera,
        loading=False,
    )


def _local_now() -> datetime:
    return datetime.now().astimezone()
