"""
Core configuration, errors and middleware for the Chat Gateway.
"""
from .config import settings, Settings
from .exceptions import (
    RelayError,
    InvalidRequestError,
    UpstreamUnavailableError,
    UpstreamStatusError,
)

__all__ = [
    "settings",
    "Settings",
    "RelayError",
    "InvalidRequestError",
    "UpstreamUnavailableError",
    "UpstreamStatusError",
]
