"""Charger driver registry.

Applications that pick a charger driver by name from configuration keep a
:class:`DriverRegistry` and register the drivers they want during startup.
Nothing is registered on import.

Example:
    registry = DriverRegistry()
    register_bender(registry)

    charger = await registry.create("bender", {"uri": "192.168.1.50:502"})
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pybendercc.devices.charger import BenderCharger
from pybendercc.exceptions import ConfigurationError, RegistryError
from pybendercc.transports.config import TransportConfig
from pybendercc.transports.factory import create_transport_from_config
from pybendercc.transports.modbus import DEFAULT_TIMEOUT, DEFAULT_UNIT_ID

_LOGGER = logging.getLogger(__name__)

ChargerFactory = Callable[[Mapping[str, Any]], Awaitable[BenderCharger]]

_BENDER_CONFIG_KEYS = frozenset({"uri", "id", "timeout"})


class DriverRegistry:
    """Name → factory mapping for charger drivers."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._factories: dict[str, ChargerFactory] = {}

    def add(self, name: str, factory: ChargerFactory) -> None:
        """Register a factory under a driver type name.

        Raises:
            RegistryError: If the name is already registered
        """
        key = name.lower()
        if key in self._factories:
            raise RegistryError(f"Charger type '{name}' is already registered")
        self._factories[key] = factory
        _LOGGER.debug("Registered charger type %s", key)

    def get(self, name: str) -> ChargerFactory:
        """Look up the factory for a driver type name.

        Raises:
            RegistryError: If the name is unknown
        """
        try:
            return self._factories[name.lower()]
        except KeyError:
            raise RegistryError(f"Unknown charger type '{name}'") from None

    def types(self) -> list[str]:
        """Get all registered driver type names, sorted."""
        return sorted(self._factories)

    async def create(self, name: str, config: Mapping[str, Any]) -> BenderCharger:
        """Create a charger of the given type from a generic config mapping."""
        return await self.get(name)(config)


def _decode_bender_config(config: Mapping[str, Any]) -> TransportConfig:
    other = {str(k).lower(): v for k, v in config.items()}

    unknown = sorted(set(other) - _BENDER_CONFIG_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")
    if not other.get("uri"):
        raise ConfigurationError("uri is required")

    try:
        unit_id = int(other.get("id", DEFAULT_UNIT_ID))
        timeout = float(other.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as err:
        raise ConfigurationError(f"Invalid config value: {err}") from err

    config_obj = TransportConfig.from_uri(str(other["uri"]), unit_id=unit_id, timeout=timeout)
    config_obj.validate()
    return config_obj


async def create_bender_from_config(config: Mapping[str, Any]) -> BenderCharger:
    """Create a connected Bender charger from a generic config mapping.

    Recognised keys: ``uri`` (``host[:port]``, required), ``id`` (Modbus
    unit id, default 255) and ``timeout`` (seconds).

    Raises:
        ConfigurationError: If the mapping is invalid
        TransportConnectionError: If the controller cannot be reached
    """
    transport = create_transport_from_config(_decode_bender_config(config))
    await transport.connect()
    try:
        return await BenderCharger.from_transport(transport)
    except BaseException:
        _LOGGER.debug("Closing %s after failed charger setup", transport.name)
        await transport.disconnect()
        raise


def register_bender(registry: DriverRegistry) -> None:
    """Register the Bender driver under the ``bender`` type name."""
    registry.add("bender", create_bender_from_config)


__all__ = [
    "ChargerFactory",
    "DriverRegistry",
    "create_bender_from_config",
    "register_bender",
]
