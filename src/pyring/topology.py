"""Build the location and camera graph of an account."""

from __future__ import annotations

from collections.abc import Collection
import logging
from typing import TYPE_CHECKING, Any

from .camera import RingCamera
from .location import Location
from .models import RingDevices

if TYPE_CHECKING:
    from .api import RingApi

_LOGGER = logging.getLogger(__name__)


def build_cameras(devices: RingDevices, api: RingApi) -> list[RingCamera]:
    """Create one camera per camera record, doorbots first.

    Whether a camera is a doorbot only depends on the inventory bucket the
    record came from.
    """
    cameras: list[RingCamera] = []
    seen_ids: set[int] = set()
    buckets = ((devices.doorbots, True), (devices.stickup_cams, False))
    for records, is_doorbot in buckets:
        for camera_data in records:
            camera_id = camera_data.get("id")
            if camera_id is None:
                _LOGGER.warning(
                    "Skipping camera with missing ID: %s",
                    camera_data.get("description"),
                )
                continue
            if camera_id in seen_ids:
                _LOGGER.warning("Skipping duplicate camera ID %s", camera_id)
                continue
            seen_ids.add(camera_id)
            cameras.append(RingCamera(camera_data, is_doorbot, api))
    return cameras


def hub_location_ids(devices: RingDevices) -> set[str]:
    """Return the ids of the locations with a base station or a beam bridge."""
    return {
        hub["location_id"]
        for hub in devices.base_stations + devices.beam_bridges
        if hub.get("location_id")
    }


def build_locations(
    raw_locations: list[dict[str, Any]],
    devices: RingDevices,
    location_ids: Collection[str] | None,
    api: RingApi,
) -> tuple[list[Location], list[RingCamera]]:
    """Assemble the locations of the account.

    `location_ids` restricts the returned locations, None keeps them all.
    Returns the retained locations and every camera that was built, including
    the ones of locations that were filtered out.
    """
    cameras = build_cameras(devices, api)
    hub_ids = hub_location_ids(devices)

    locations: list[Location] = []
    seen_ids: set[str] = set()
    for location_data in raw_locations:
        location_id = location_data.get("location_id")
        if not location_id:
            _LOGGER.warning(
                "Skipping location with missing ID: %s", location_data.get("name")
            )
            continue
        if location_id in seen_ids:
            _LOGGER.warning("Skipping duplicate location ID %s", location_id)
            continue
        seen_ids.add(location_id)

        if location_ids is not None and location_id not in location_ids:
            _LOGGER.debug("Location %s is not in the allow-list", location_id)
            continue

        locations.append(
            Location(
                location_data,
                [camera for camera in cameras if camera.location_id == location_id],
                location_id in hub_ids,
            )
        )
        _LOGGER.debug("Built location: %s (%s)", locations[-1].name, location_id)

    return locations, cameras
