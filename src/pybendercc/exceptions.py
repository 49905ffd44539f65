"""Exception hierarchy for pybendercc.

Every exception raised by the library derives from :class:`BenderError`
so callers can use a single ``except BenderError`` around charger calls.
Transport failures live in :mod:`pybendercc.transports.exceptions` and
share the same root.
"""

from __future__ import annotations


class BenderError(Exception):
    """Base exception for all pybendercc errors."""

    pass


class ValidationError(BenderError, ValueError):
    """Caller supplied an out-of-range argument.

    Raised before any register is touched.
    """

    pass


class ProtocolError(BenderError):
    """A register decoded to a value outside its defined domain."""

    pass


class NotAvailableError(BenderError):
    """The feature exists but has no meaningful value right now.

    Example: state of charge requested while no smart vehicle is plugged in.
    Callers should treat this as "no value", not as a failure.
    """

    pass


class ConfigurationError(BenderError, ValueError):
    """Invalid connection or driver configuration."""

    pass


class RegistryError(BenderError):
    """Unknown or duplicate driver type in a :class:`DriverRegistry`."""

    pass


__all__ = [
    "BenderError",
    "ConfigurationError",
    "NotAvailableError",
    "ProtocolError",
    "RegistryError",
    "ValidationError",
]
