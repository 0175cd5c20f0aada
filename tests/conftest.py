"""Shared fixtures for pyring tests."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import pytest

from pyring.auth import AuthHandler
from pyring.camera import RingCamera
from pyring.models import ActiveDing, RingDevices


@pytest.fixture
def run_pending():
    """Return a coroutine letting the tasks scheduled on the loop run."""

    async def _run_pending(rounds: int = 5) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _run_pending


@pytest.fixture
def make_camera():
    """Return a factory of cameras whose entry points are mocks."""

    def _make_camera(camera_id, location_id="L1", is_doorbot=True, **data):
        camera = RingCamera(
            {"id": camera_id, "location_id": location_id, **data},
            is_doorbot,
            Mock(),
        )
        camera.update_data = Mock()
        camera.process_active_dings = Mock()
        return camera

    return _make_camera


@pytest.fixture
def mock_response():
    """Return a factory of what `async with session.request(...)` yields.

    An exception passed as `json_data` is raised by `response.json()`.
    """

    def _mock_response(status=200, json_data=None, text=""):
        response = MagicMock()
        response.status = status
        if isinstance(json_data, Exception):
            response.json = AsyncMock(side_effect=json_data)
        else:
            response.json = AsyncMock(return_value=json_data)
        response.text = AsyncMock(return_value=text)
        context = MagicMock()
        context.__aenter__.return_value = response
        context.__aexit__.return_value = None
        return context

    return _mock_response


@pytest.fixture
def make_ding():
    """Return a factory of active dings."""

    def _make_ding(ding_id, doorbot_id, kind="motion", expires_in=180):
        return ActiveDing.from_dict(
            {
                "id": ding_id,
                "id_str": str(ding_id),
                "doorbot_id": doorbot_id,
                "kind": kind,
                "state": "ringing",
                "motion": kind == "motion",
                "expires_in": expires_in,
            }
        )

    return _make_ding


@pytest.fixture
def raw_locations():
    """Three locations: L1 has a base station, L3 a beam bridge."""
    return [
        {"location_id": "L1", "name": "Home", "address": {"city": "Paris"}},
        {"location_id": "L2", "name": "Office"},
        {"location_id": "L3", "name": "Cabin"},
    ]


@pytest.fixture
def ring_devices_response():
    """A ring_devices response with two cameras in L1 and two in L2."""
    return {
        "doorbots": [
            {
                "id": 1,
                "location_id": "L1",
                "description": "Front Door",
                "kind": "doorbell_v4",
            },
            {
                "id": 3,
                "location_id": "L2",
                "description": "Office Door",
                "kind": "lpd_v1",
            },
        ],
        "stickup_cams": [
            {
                "id": 2,
                "location_id": "L1",
                "description": "Garden",
                "kind": "stickup_cam_v3",
            },
            {
                "id": 4,
                "location_id": "L2",
                "description": "Lobby",
                "kind": "stickup_cam_mini",
            },
        ],
        "base_stations": [{"id": 100, "location_id": "L1"}],
        "beams_bridges": [{"id": 200, "location_id": "L3"}],
    }


@pytest.fixture
def ring_devices(ring_devices_response):
    return RingDevices.from_dict(ring_devices_response)


@pytest.fixture
def mock_session():
    """Create a mock aiohttp session."""
    session = Mock(spec=aiohttp.ClientSession)
    session.closed = False
    return session


@pytest.fixture
def auth_handler(mock_session):
    """Create an AuthHandler that always has a token."""
    handler = AuthHandler("test@example.com", "test_password", session=mock_session)
    handler.get_access_token = AsyncMock(return_value="test_token")
    return handler
