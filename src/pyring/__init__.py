"""Python library for interacting with the Ring API."""

# Import main classes for easier access
from .auth import AuthHandler
from .api import RingApi
from .camera import RingCamera
from .coordinator import PipelineState, UpdateCoordinator
from .location import Location
from .models import ActiveDing, RingDevices, RingOptions

# Import exceptions for easier handling
from .exceptions import (
    ApiError,
    AuthError,
    PyRingException,
    TopologyError,
    TwoFactorAuthRequired,
)

__version__ = "0.1.0"

# Define what gets imported with 'from pyring import *'
__all__ = [
    "AuthHandler",
    "RingApi",
    "RingCamera",
    "Location",
    "UpdateCoordinator",
    "PipelineState",
    "ActiveDing",
    "RingDevices",
    "RingOptions",
    "PyRingException",
    "AuthError",
    "TwoFactorAuthRequired",
    "ApiError",
    "TopologyError",
    "__version__",
]
