"""Factory functions for creating transport instances.

Example:
    transport = create_modbus_transport(host="192.168.1.50")
    async with transport:
        charger = await BenderCharger.from_transport(transport)
        print(await charger.status())
"""

from __future__ import annotations

from .config import TransportConfig
from .modbus import DEFAULT_PORT, DEFAULT_TIMEOUT, DEFAULT_UNIT_ID, ModbusTransport


def create_modbus_transport(
    host: str,
    *,
    port: int = DEFAULT_PORT,
    unit_id: int = DEFAULT_UNIT_ID,
    timeout: float = DEFAULT_TIMEOUT,
) -> ModbusTransport:
    """Create a Modbus TCP transport for a charge controller.

    Args:
        host: Controller IP address or hostname
        port: Modbus TCP port (default: 502)
        unit_id: Modbus unit/slave ID (default: 255)
        timeout: Operation timeout in seconds (default: 10.0)

    Returns:
        ModbusTransport instance ready for use
    """
    return ModbusTransport(
        host=host,
        port=port,
        unit_id=unit_id,
        timeout=timeout,
    )


def create_transport_from_config(config: TransportConfig) -> ModbusTransport:
    """Create a transport from a validated TransportConfig.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config.validate()
    return create_modbus_transport(
        config.host,
        port=config.port,
        unit_id=config.unit_id,
        timeout=config.timeout,
    )


__all__ = [
    "create_modbus_transport",
    "create_transport_from_config",
]
