"""Keep the cameras of an account up to date by polling the Ring API.

Two independent pipelines run on the event loop:

* the status pipeline fetches the device inventory and hands each record to
  the camera with the same id. It is triggered by cameras asking for an
  update and, when a polling interval is set, by a timer re-armed after each
  completed fetch. Triggers go through a leading-edge throttle and only the
  most recently started fetch has its result applied.
* the ding pipeline fetches the active dings, one request at a time, waiting
  a full interval after each completed request before the next one.

Fetch failures never leave the pipelines: they count as "no data" for that
cycle and polling carries on.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
import logging
from typing import TYPE_CHECKING, Any

from .const import REFRESH_THROTTLE_SECONDS
from .models import ActiveDing

if TYPE_CHECKING:
    from .camera import RingCamera

_LOGGER = logging.getLogger(__name__)

FetchCameras = Callable[[], Awaitable[list[dict[str, Any]]]]
FetchActiveDings = Callable[[], Awaitable[list[ActiveDing]]]


class PipelineState(Enum):
    """What a polling pipeline is currently doing."""

    IDLE = "idle"
    WAITING = "waiting"
    IN_FLIGHT = "in-flight"


class LeadingEdgeThrottle:
    """Let the first event of a time window through and drop the rest."""

    def __init__(self, window: float) -> None:
        self.window = window
        self._last_passed: float | None = None

    def allow(self, now: float) -> bool:
        """Return True if an event happening at `now` may pass."""
        if self._last_passed is not None and now - self._last_passed < self.window:
            return False
        self._last_passed = now
        return True


class UpdateCoordinator:
    """Refresh the status and the active dings of a fixed set of cameras."""

    def __init__(
        self,
        cameras: Iterable[RingCamera],
        fetch_cameras: FetchCameras,
        fetch_active_dings: FetchActiveDings,
        status_polling_seconds: float | None = None,
        dings_polling_seconds: float | None = None,
        throttle_seconds: float = REFRESH_THROTTLE_SECONDS,
    ) -> None:
        """Initialize the coordinator, nothing runs until `start()`."""
        self.cameras = list(cameras)
        self._cameras_by_id = {camera.id: camera for camera in self.cameras}
        self._fetch_cameras = fetch_cameras
        self._fetch_active_dings = fetch_active_dings
        self._status_polling_seconds = status_polling_seconds or None
        self._dings_polling_seconds = dings_polling_seconds or None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._started = False

        self._request_throttle = LeadingEdgeThrottle(throttle_seconds)
        self._tick_throttle = LeadingEdgeThrottle(throttle_seconds)
        self._status_generation = 0
        self._status_task: asyncio.Task | None = None
        self._status_timer: asyncio.TimerHandle | None = None

        self._dings_task: asyncio.Task | None = None
        self._dings_timer: asyncio.TimerHandle | None = None

    @property
    def status_state(self) -> PipelineState:
        return self._state(self._status_task, self._status_timer)

    @property
    def dings_state(self) -> PipelineState:
        return self._state(self._dings_task, self._dings_timer)

    @staticmethod
    def _state(
        task: asyncio.Task | None, timer: asyncio.TimerHandle | None
    ) -> PipelineState:
        if task is not None:
            return PipelineState.IN_FLIGHT
        if timer is not None:
            return PipelineState.WAITING
        return PipelineState.IDLE

    def start(self) -> None:
        """Wire the cameras and kick off polling.

        Must be called from a running event loop. Polling then runs for as
        long as the loop does.
        """
        if self._started:
            _LOGGER.warning("Update coordinator is already running.")
            return
        self._started = True

        if not self.cameras:
            _LOGGER.debug("No cameras to keep up to date, not polling.")
            return

        self._loop = asyncio.get_running_loop()
        for camera in self.cameras:
            camera.add_request_update_listener(self._on_camera_request_update)

        if self._status_polling_seconds:
            _LOGGER.info(
                "Polling camera status every %s seconds.", self._status_polling_seconds
            )
            self._on_status_tick()

        if self._dings_polling_seconds:
            _LOGGER.info(
                "Polling active dings every %s seconds.", self._dings_polling_seconds
            )
            self._on_dings_tick()

    # Status pipeline

    def _on_camera_request_update(self) -> None:
        if self._request_throttle.allow(self._loop.time()):
            self._on_status_tick()

    def _on_status_timer(self) -> None:
        self._status_timer = None
        if not self._on_status_tick() and self._status_task is None:
            # Dropped with nothing in flight, nothing else would re-arm the timer
            self._arm_status_timer()

    def _on_status_tick(self) -> bool:
        if not self._tick_throttle.allow(self._loop.time()):
            _LOGGER.debug(
                "Dropping status refresh, one started less than %ss ago",
                self._tick_throttle.window,
            )
            return False

        self._status_generation += 1
        if self._status_task is not None:
            _LOGGER.debug("Discarding outdated camera status request.")
            self._status_task.cancel()
        self._status_task = self._loop.create_task(
            self._async_refresh_status(self._status_generation)
        )
        return True

    async def _async_refresh_status(self, generation: int) -> None:
        try:
            cameras_data = await self._fetch_cameras()
        except Exception as err:
            _LOGGER.warning("Failed to refresh camera status: %s", err)
            cameras_data = None

        if generation != self._status_generation:
            return

        self._status_task = None
        self._arm_status_timer()
        if cameras_data is None:
            return

        for camera_data in cameras_data:
            camera = self._cameras_by_id.get(camera_data.get("id"))
            if camera is None:
                _LOGGER.debug(
                    "Ignoring status of untracked camera %s", camera_data.get("id")
                )
                continue
            camera.update_data(camera_data)

    def _arm_status_timer(self) -> None:
        if not self._status_polling_seconds:
            return
        if self._status_timer is not None:
            self._status_timer.cancel()
        self._status_timer = self._loop.call_later(
            self._status_polling_seconds, self._on_status_timer
        )

    # Ding pipeline

    def _on_dings_tick(self) -> None:
        self._dings_timer = None
        self._dings_task = self._loop.create_task(self._async_poll_active_dings())

    async def _async_poll_active_dings(self) -> None:
        try:
            active_dings = await self._fetch_active_dings()
        except Exception as err:
            _LOGGER.warning("Failed to fetch active dings: %s", err)
            active_dings = None

        self._dings_task = None
        self._dings_timer = self._loop.call_later(
            self._dings_polling_seconds, self._on_dings_tick
        )
        if not active_dings:
            return

        dings_by_camera: dict[int, list[ActiveDing]] = defaultdict(list)
        for ding in active_dings:
            dings_by_camera[ding.doorbot_id].append(ding)

        for camera in self.cameras:
            camera_dings = dings_by_camera.get(camera.id)
            if camera_dings:
                camera.process_active_dings(camera_dings)
