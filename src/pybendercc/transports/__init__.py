"""Transport layer for pybendercc.

Chargers only need an object satisfying :class:`RegisterTransport`; the
bundled :class:`ModbusTransport` provides that over Modbus TCP.

Usage:
    from pybendercc.transports import create_modbus_transport

    transport = create_modbus_transport(host="192.168.1.50")
    async with transport:
        data = await transport.read_registers(122, 1)
"""

from __future__ import annotations

from .config import TransportConfig
from .exceptions import (
    TransportConnectionError,
    TransportError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .factory import create_modbus_transport, create_transport_from_config
from .modbus import ModbusTransport
from .protocol import BaseTransport, RegisterTransport

__all__ = [
    # Factory functions (recommended)
    "create_modbus_transport",
    "create_transport_from_config",
    # Protocol
    "BaseTransport",
    "RegisterTransport",
    # Transport implementations
    "ModbusTransport",
    # Configuration
    "TransportConfig",
    # Exceptions
    "TransportConnectionError",
    "TransportError",
    "TransportReadError",
    "TransportTimeoutError",
    "TransportWriteError",
]
