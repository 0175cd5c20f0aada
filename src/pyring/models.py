"""Data models for pyring."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RingOptions:
    """Options consumed when the account object is created."""

    location_ids: tuple[str, ...] | None = None
    camera_status_polling_seconds: int | None = None
    camera_dings_polling_seconds: int | None = None

    def __post_init__(self) -> None:
        """Validate the polling intervals."""
        for name in ("camera_status_polling_seconds", "camera_dings_polling_seconds"):
            value = getattr(self, name)
            if value is not None and value < 0:
                err_msg = f"{name} must be a positive number of seconds, got {value}"
                raise ValueError(err_msg)


@dataclass
class RingDevices:
    """The device inventory of an account, split by device class."""

    doorbots: list[dict[str, Any]] = field(default_factory=list)
    stickup_cams: list[dict[str, Any]] = field(default_factory=list)
    base_stations: list[dict[str, Any]] = field(default_factory=list)
    beam_bridges: list[dict[str, Any]] = field(default_factory=list)

    @property
    def all_cameras(self) -> list[dict[str, Any]]:
        """Return every camera record, doorbots first."""
        return self.doorbots + self.stickup_cams

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RingDevices":
        """Build the inventory from a ring_devices response."""
        return cls(
            doorbots=data.get("doorbots") or [],
            stickup_cams=data.get("stickup_cams") or [],
            base_stations=data.get("base_stations") or [],
            beam_bridges=data.get("beams_bridges") or [],
        )


@dataclass
class ActiveDing:
    """Represents a ding (doorbell press, motion, live view) still in progress."""

    id: int
    id_str: str
    doorbot_id: int
    kind: str
    state: str | None = None
    motion: bool = False
    expires_in: int | None = None
    now: float | None = None
    raw_data: dict[str, Any] = None  # Store the raw dictionary

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActiveDing":
        """Build an active ding from a dings/active record."""
        return cls(
            id=data.get("id"),
            id_str=data.get("id_str") or str(data.get("id")),
            doorbot_id=data.get("doorbot_id"),
            kind=data.get("kind"),
            state=data.get("state"),
            motion=bool(data.get("motion")),
            expires_in=data.get("expires_in"),
            now=data.get("now"),
            raw_data=data,
        )
