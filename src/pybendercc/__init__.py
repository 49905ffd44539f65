"""Python client library for Bender CC612/CC613 EV charge controllers.

Usage:
    Direct usage:
        from pybendercc import BenderCharger, create_modbus_transport
        from pybendercc.api import Meter

        async with create_modbus_transport("192.168.1.50") as transport:
            charger = await BenderCharger.from_transport(transport)
            print(await charger.status())
            if isinstance(charger, Meter):
                print(await charger.current_power())

    Registry usage:
        from pybendercc import DriverRegistry, register_bender

        registry = DriverRegistry()
        register_bender(registry)
        charger = await registry.create("bender", {"uri": "192.168.1.50"})
"""

from __future__ import annotations

from .api import ChargeStatus, supports
from .devices import BenderCharger, ChargerFeatures, format_diagnostics
from .exceptions import (
    BenderError,
    ConfigurationError,
    NotAvailableError,
    ProtocolError,
    RegistryError,
    ValidationError,
)
from .registers import LayoutVariant
from .registry import DriverRegistry, create_bender_from_config, register_bender
from .transports import (
    ModbusTransport,
    TransportConfig,
    TransportError,
    create_modbus_transport,
)

__version__ = "0.1.0"
__all__ = [
    "BenderCharger",
    "ChargeStatus",
    "ChargerFeatures",
    "LayoutVariant",
    "format_diagnostics",
    "supports",
    # Registry
    "DriverRegistry",
    "create_bender_from_config",
    "register_bender",
    # Transports
    "ModbusTransport",
    "TransportConfig",
    "create_modbus_transport",
    # Exceptions
    "BenderError",
    "ConfigurationError",
    "NotAvailableError",
    "ProtocolError",
    "RegistryError",
    "TransportError",
    "ValidationError",
]
