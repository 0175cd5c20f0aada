"""Represents a Ring account."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from .auth import AuthHandler
from .camera import RingCamera
from .const import (
    ACTIVE_DINGS_ENDPOINT,
    DEFAULT_API_VERSION,
    DEFAULT_TIMEOUT,
    HISTORY_ENDPOINT,
    LOCATIONS_URL,
    RING_DEVICES_ENDPOINT,
    client_api,
)
from .coordinator import UpdateCoordinator
from .exceptions import ApiError, AuthError, TopologyError
from .location import Location
from .models import ActiveDing, RingDevices, RingOptions
from .once import AsyncOnce
from .topology import build_locations

_LOGGER = logging.getLogger(__name__)


class RingApi:
    """Async class of a Ring account.

    The locations and cameras of the account are fetched and assembled once,
    on the first call to `get_locations()` or `get_cameras()`. From then on
    an `UpdateCoordinator` keeps the cameras up to date in the background.
    """

    def __init__(
        self,
        auth_handler: AuthHandler,
        location_ids: list[str] | None = None,
        camera_status_polling_seconds: int | None = None,
        camera_dings_polling_seconds: int | None = None,
        api_version: str = DEFAULT_API_VERSION,
    ) -> None:
        """Initialize the account."""
        if not isinstance(auth_handler, AuthHandler):
            err_msg = "auth_handler must be an instance of AuthHandler"
            raise TypeError(err_msg)
        self.auth_handler: AuthHandler = auth_handler
        self.options = RingOptions(
            location_ids=tuple(location_ids) if location_ids is not None else None,
            camera_status_polling_seconds=camera_status_polling_seconds,
            camera_dings_polling_seconds=camera_dings_polling_seconds,
        )
        self._api_version = api_version
        self.coordinator: UpdateCoordinator | None = None
        self._locations: AsyncOnce[list[Location]] = AsyncOnce(
            self._async_fetch_and_build_locations
        )

    async def async_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> Any:
        """Make an authenticated async request and return the parsed JSON."""
        try:
            access_token = await self.auth_handler.get_access_token()
        except AuthError as auth_err:
            _LOGGER.error("Authentication required but failed: %s", auth_err)
            raise

        headers = {
            "Authorization": f"Bearer {access_token}",
            "hardware_id": self.auth_handler.hardware_id,
            "User-Agent": "android:com.ringapp",
        }
        params = {"api_version": self._api_version, **(params or {})}

        session = await self.auth_handler._get_session()

        _LOGGER.debug("Making ASYNC %s request to %s", method, url)
        _LOGGER.debug(
            "Headers: %s",
            {
                k: (v[:30] + "..." if k == "Authorization" else v)
                for k, v in headers.items()
            },
        )
        _LOGGER.debug("Params: %s", params)
        _LOGGER.debug("JSON Data: %s", json_data)

        try:
            async with session.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                _LOGGER.debug("Response status code: %s", response.status)

                if response.status >= 400:
                    error_text = await response.text()
                    _LOGGER.error(
                        "API Error Response (%s): %s", response.status, error_text
                    )
                    try:
                        error_content = await response.json()
                        error_message = (
                            error_content.get("error_description")
                            or error_content.get("error")
                            or error_text
                        )
                    except (aiohttp.ContentTypeError, ValueError, AttributeError):
                        error_message = error_text
                    raise ApiError(response.status, error_message)

                if response.status == 204:
                    return {}

                return await response.json(content_type=None)

        except ApiError:
            raise
        except aiohttp.ClientResponseError as http_err:
            _LOGGER.error("HTTP error during API request: %s", http_err)
            raise ApiError(http_err.status, str(http_err)) from http_err
        except asyncio.TimeoutError as timeout_err:
            _LOGGER.error("Request timed out: %s %s", method, url)
            raise ApiError(408, "Request timed out") from timeout_err
        except aiohttp.ClientError as req_err:
            _LOGGER.error("Request error during API request: %s", req_err)
            raise ApiError(0, f"Request error: {req_err}") from req_err
        except Exception as err:
            _LOGGER.exception("Unexpected error during API request: %s", err)
            raise ApiError(0, f"Unexpected error: {err}") from err

    async def fetch_raw_locations(self) -> list[dict[str, Any]]:
        """Retrieve the raw list of locations of the account."""
        response = await self.async_request("GET", LOCATIONS_URL)
        return response.get("user_locations") or []

    async def fetch_ring_devices(self) -> RingDevices:
        """Retrieve the device inventory of the account."""
        response = await self.async_request("GET", client_api(RING_DEVICES_ENDPOINT))
        return RingDevices.from_dict(response)

    async def fetch_active_dings(self) -> list[ActiveDing]:
        """Retrieve the dings currently in progress on any camera."""
        response = await self.async_request(
            "GET", client_api(ACTIVE_DINGS_ENDPOINT), params={"burst": "false"}
        )
        return [ActiveDing.from_dict(ding) for ding in response or []]

    async def _async_fetch_cameras_data(self) -> list[dict[str, Any]]:
        devices = await self.fetch_ring_devices()
        return devices.all_cameras

    async def _async_fetch_and_build_locations(self) -> list[Location]:
        """Fetch the topology, build the locations and start polling."""
        try:
            raw_locations = await self.fetch_raw_locations()
            devices = await self.fetch_ring_devices()
        except (ApiError, AuthError) as err:
            err_msg = f"Failed to fetch the account topology: {err}"
            raise TopologyError(err_msg) from err

        locations, all_cameras = build_locations(
            raw_locations, devices, self.options.location_ids, self
        )
        # Cameras of filtered out locations are unreachable, don't poll them
        cameras = [camera for location in locations for camera in location.cameras]
        _LOGGER.info(
            "Topology built. Found %d locations and %d cameras (%d ignored).",
            len(locations),
            len(cameras),
            len(all_cameras) - len(cameras),
        )

        self.coordinator = UpdateCoordinator(
            cameras,
            self._async_fetch_cameras_data,
            self.fetch_active_dings,
            status_polling_seconds=self.options.camera_status_polling_seconds,
            dings_polling_seconds=self.options.camera_dings_polling_seconds,
        )
        self.coordinator.start()
        return locations

    async def get_locations(self) -> list[Location]:
        """Return the locations of the account, in the order Ring lists them."""
        return await self._locations.get()

    async def get_cameras(self) -> list[RingCamera]:
        """Return the cameras of every location, location by location."""
        locations = await self.get_locations()
        return [camera for location in locations for camera in location.cameras]

    async def get_history(
        self, limit: int = 10, favorites_only: bool = False
    ) -> list[dict[str, Any]]:
        """Retrieve the recent events of every camera of the account."""
        params = {"limit": limit}
        if favorites_only:
            params["favorites"] = 1
        return await self.async_request(
            "GET", client_api(HISTORY_ENDPOINT), params=params
        )
