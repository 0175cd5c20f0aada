"""Represents a Ring camera (doorbell, stickup cam, floodlight...)."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import TYPE_CHECKING, Any

from .const import (
    CAMERA_MODELS,
    DEFAULT_DING_EXPIRY,
    DOORBELL_DING_KINDS,
    DOORBOT_ENDPOINT,
    MOTION_DING_KINDS,
    client_api,
    is_battery_camera_kind,
)
from .models import ActiveDing

if TYPE_CHECKING:
    from .api import RingApi

_LOGGER = logging.getLogger(__name__)

Listener = Callable[..., None]


def _notify(listeners: list[Listener], *args: Any) -> None:
    """Call every listener, logging the ones that raise."""
    for listener in list(listeners):
        try:
            listener(*args)
        except Exception:
            _LOGGER.exception("Error in camera listener %s", listener)


def _subscribe(listeners: list[Listener], listener: Listener) -> Callable[[], None]:
    listeners.append(listener)

    def unsubscribe() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return unsubscribe


class RingCamera:
    """A camera of the account.

    The camera identity (`id`) and its class (`is_doorbot`) are fixed when the
    account topology is built. Everything else lives in `data`, the latest
    status record received from the `ring_devices` endpoint, which is replaced
    each time `update_data` is called by the update coordinator.
    """

    def __init__(
        self,
        initial_data: dict[str, Any],
        is_doorbot: bool,
        api: RingApi,
    ) -> None:
        """Initialize the camera from its inventory record."""
        self.id: int = initial_data["id"]
        self.is_doorbot = is_doorbot
        self.data: dict[str, Any] = initial_data
        self._api = api
        self._active_dings: dict[str, ActiveDing] = {}
        self._expiry_handles: dict[str, asyncio.TimerHandle] = {}
        self._data_listeners: list[Listener] = []
        self._ding_listeners: list[Listener] = []
        self._request_update_listeners: list[Listener] = []

    def __repr__(self) -> str:
        """Return a short description of the camera."""
        return f"<RingCamera id={self.id} name={self.name!r} kind={self.kind!r}>"

    @property
    def name(self) -> str:
        """Return the user facing name of the camera."""
        return self.data.get("description", "Unknown Camera")

    @property
    def location_id(self) -> str | None:
        """Return the id of the location the camera belongs to."""
        return self.data.get("location_id")

    @property
    def kind(self) -> str:
        """Return the raw kind of the camera, e.g. doorbell_v4."""
        return self.data.get("kind", "")

    @property
    def model(self) -> str:
        """Return the marketing name of the camera."""
        return CAMERA_MODELS.get(self.kind, "Unknown Model")

    @property
    def has_light(self) -> bool:
        return "led_status" in self.data

    @property
    def has_siren(self) -> bool:
        return "siren_status" in self.data

    @property
    def has_battery(self) -> bool:
        return is_battery_camera_kind(self.kind) and self.battery_level is not None

    @property
    def battery_level(self) -> int | None:
        """Return the battery percentage, None if it is not reported."""
        level = self.data.get("battery_life")
        if level is None or level == "":
            return None
        try:
            level = int(level)
        except (TypeError, ValueError):
            return None
        # Some doorbells report values well above 100
        return min(level, 100)

    @property
    def is_offline(self) -> bool:
        return (self.data.get("alerts") or {}).get("connection") == "offline"

    @property
    def active_dings(self) -> list[ActiveDing]:
        """Return the dings that have not expired yet."""
        return list(self._active_dings.values())

    @property
    def is_doorbell_pressed(self) -> bool:
        return any(d.kind in DOORBELL_DING_KINDS for d in self._active_dings.values())

    @property
    def is_motion_detected(self) -> bool:
        return any(
            d.motion or d.kind in MOTION_DING_KINDS
            for d in self._active_dings.values()
        )

    def add_data_listener(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(data)` each time new data is received."""
        return _subscribe(self._data_listeners, listener)

    def add_ding_listener(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(ding)` for every new active ding."""
        return _subscribe(self._ding_listeners, listener)

    def add_request_update_listener(self, listener: Listener) -> Callable[[], None]:
        """Call `listener()` each time the camera asks for fresh data."""
        return _subscribe(self._request_update_listeners, listener)

    def request_update(self) -> None:
        """Ask for the status of the camera to be refreshed soon."""
        _notify(self._request_update_listeners)

    def update_data(self, data: dict[str, Any]) -> None:
        """Replace the status record of the camera."""
        self.data = data
        _notify(self._data_listeners, data)

    def process_active_dings(self, dings: list[ActiveDing]) -> None:
        """Track the active dings addressed to this camera.

        Dings already known are ignored. New ones are announced to the ding
        listeners and forgotten once they expire.
        """
        for ding in dings:
            if ding.id_str in self._active_dings:
                continue
            _LOGGER.debug("New %s ding %s on camera %s", ding.kind, ding.id_str, self.id)
            self._active_dings[ding.id_str] = ding
            expires_in = ding.expires_in or DEFAULT_DING_EXPIRY
            self._expiry_handles[ding.id_str] = asyncio.get_running_loop().call_later(
                expires_in, self._expire_ding, ding.id_str
            )
            _notify(self._ding_listeners, ding)

    def _expire_ding(self, id_str: str) -> None:
        self._expiry_handles.pop(id_str, None)
        if self._active_dings.pop(id_str, None) is not None:
            _LOGGER.debug("Ding %s on camera %s expired", id_str, self.id)

    async def _async_doorbot_request(
        self, method: str, path: str = "", params: dict[str, Any] | None = None
    ) -> Any:
        url = client_api(DOORBOT_ENDPOINT.format(camera_id=self.id) + path)
        return await self._api.async_request(method, url, params=params)

    async def set_light(self, on: bool) -> bool:
        """Turn the light of the camera on or off.

        Returns False when the camera has no light.
        """
        if not self.has_light:
            return False

        state = "on" if on else "off"
        await self._async_doorbot_request("PUT", f"/floodlight_light_{state}")
        self.update_data({**self.data, "led_status": state})
        self.request_update()
        return True

    async def set_siren(self, on: bool, duration: int | None = None) -> bool:
        """Turn the siren of the camera on or off.

        Returns False when the camera has no siren.
        """
        if not self.has_siren:
            return False

        params = {"duration": duration} if on and duration else None
        await self._async_doorbot_request(
            "PUT", "/siren_on" if on else "/siren_off", params=params
        )
        self.request_update()
        return True

    async def get_health(self) -> dict[str, Any]:
        """Return the wifi and battery health of the camera."""
        response = await self._async_doorbot_request("GET", "/health")
        return response.get("device_health", {})

    async def get_history(
        self, limit: int = 10, favorites_only: bool = False
    ) -> list[dict[str, Any]]:
        """Return the recorded events of this camera."""
        params = {"limit": limit}
        if favorites_only:
            params["favorites"] = 1
        return await self._async_doorbot_request("GET", "/history", params=params)
