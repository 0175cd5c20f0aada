"""Represents a Ring location (a home, an office...)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .camera import RingCamera


class Location:
    """A location of the account and the cameras installed there.

    Membership is fixed once the location is built: cameras are never added
    or removed afterwards, only their data changes.
    """

    def __init__(
        self,
        location_data: dict[str, Any],
        cameras: list[RingCamera],
        has_hubs: bool,
    ) -> None:
        """Initialize the location."""
        self.location_id: str = location_data["location_id"]
        self.raw_data = location_data
        self.cameras: tuple[RingCamera, ...] = tuple(cameras)
        self.has_hubs = has_hubs

    def __repr__(self) -> str:
        """Return a short description of the location."""
        return (
            f"<Location id={self.location_id!r} name={self.name!r} "
            f"cameras={len(self.cameras)} has_hubs={self.has_hubs}>"
        )

    @property
    def name(self) -> str:
        return self.raw_data.get("name", "Unknown Location")

    @property
    def address(self) -> dict[str, Any]:
        """Return the postal address of the location."""
        return self.raw_data.get("address") or {}

    def get_camera(self, camera_id: int) -> RingCamera | None:
        """Return the camera with the given id, None if it is not here."""
        for camera in self.cameras:
            if camera.id == camera_id:
                return camera
        return None
