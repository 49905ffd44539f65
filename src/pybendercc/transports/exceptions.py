"""Transport-specific exceptions.

All transport exceptions inherit from :class:`~pybendercc.exceptions.BenderError`
so callers can catch driver and transport failures with one handler.
Charger operations propagate these unchanged; the capability prober treats
them as "feature absent".
"""

from __future__ import annotations

from pybendercc.exceptions import BenderError


class TransportError(BenderError):
    """Base exception for all transport errors."""

    pass


class TransportConnectionError(TransportError):
    """Failed to connect to the device."""

    pass


class TransportTimeoutError(TransportError):
    """Operation timed out."""

    pass


class TransportReadError(TransportError):
    """Failed to read data from device."""

    pass


class TransportWriteError(TransportError):
    """Failed to write data to device."""

    pass


__all__ = [
    "TransportConnectionError",
    "TransportError",
    "TransportReadError",
    "TransportTimeoutError",
    "TransportWriteError",
]
