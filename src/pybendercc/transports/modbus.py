"""Modbus TCP transport implementation.

This module provides the ModbusTransport class for direct local
communication with Bender CC612/CC613 charge controllers via their built-in
"Modbus TCP Server for energy management systems".

Controller setup
----------------
- The Modbus TCP server for energy management systems must be enabled.
- "Register Address Set" must NOT be 'Phoenix', 'TQ-DM100' or 'ISE/IGT Kassel';
  use the selection labelled 'Ebee', 'Bender', 'MENNEKES' etc.
- Enable "Allow UID Disclose" to read RFID/user identifiers.

IMPORTANT: Single-Client Limitation
------------------------------------
The controller accepts one Modbus TCP client reliably. Running a second
energy manager against the same charger causes transaction ID mismatches and
intermittent timeouts.

Retries and timeouts are delegated to the pymodbus client; this transport
performs a single attempt per call and maps failures onto
:class:`~pybendercc.transports.exceptions.TransportError` subclasses.
"""

from __future__ import annotations

import asyncio
import logging
import struct
from typing import TYPE_CHECKING

from pymodbus.exceptions import ModbusException, ModbusIOException

from pybendercc.exceptions import ValidationError

from .exceptions import (
    TransportConnectionError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .protocol import BaseTransport

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusTcpClient

_LOGGER = logging.getLogger(__name__)

# Bender controllers answer on a fixed unit id.
DEFAULT_UNIT_ID = 255
DEFAULT_PORT = 502
DEFAULT_TIMEOUT = 10.0


class ModbusTransport(BaseTransport):
    """Modbus TCP transport for local charge controller communication.

    Example:
        transport = ModbusTransport(host="192.168.1.50")
        await transport.connect()

        data = await transport.read_registers(122, 1)

    Note:
        One transport per physical controller. Access to the underlying
        pymodbus client is serialised with an asyncio lock.
    """

    transport_type: str = "modbus_tcp"

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        unit_id: int = DEFAULT_UNIT_ID,
        timeout: float = DEFAULT_TIMEOUT,
        pymodbus_retries: int = 3,
    ) -> None:
        """Initialize Modbus transport.

        Args:
            host: IP address or hostname of the charge controller
            port: TCP port (default 502 for Modbus)
            unit_id: Modbus unit/slave ID (default 255)
            timeout: Connection and operation timeout in seconds
            pymodbus_retries: Number of retries passed to pymodbus client
                (default 3)
        """
        super().__init__(f"{host}:{port}")
        self._host = host
        self._port = port
        self._unit_id = unit_id
        self._timeout = timeout
        self._pymodbus_retries = pymodbus_retries
        self._client: AsyncModbusTcpClient | None = None
        self._lock = asyncio.Lock()

    @property
    def host(self) -> str:
        """Get the controller host."""
        return self._host

    @property
    def port(self) -> int:
        """Get the controller port."""
        return self._port

    @property
    def unit_id(self) -> int:
        """Get the Modbus unit/slave ID."""
        return self._unit_id

    async def connect(self) -> None:
        """Establish Modbus TCP connection.

        Raises:
            TransportConnectionError: If connection fails
        """
        from pymodbus.client import AsyncModbusTcpClient

        self._client = AsyncModbusTcpClient(
            host=self._host,
            port=self._port,
            timeout=self._timeout,
            retries=self._pymodbus_retries,
        )

        try:
            connected = await self._client.connect()
        except (TimeoutError, OSError) as err:
            _LOGGER.error(
                "Failed to connect to charge controller at %s:%s: %s",
                self._host,
                self._port,
                err,
            )
            raise TransportConnectionError(
                f"Failed to connect to {self._host}:{self._port}: {err}. "
                "Verify the address and that the Modbus TCP server is enabled."
            ) from err

        if not connected:
            raise TransportConnectionError(
                f"Failed to connect to charge controller at {self._host}:{self._port}"
            )

        self._connected = True
        _LOGGER.info(
            "Modbus transport connected to %s:%s (unit %s)",
            self._host,
            self._port,
            self._unit_id,
        )

    async def disconnect(self) -> None:
        """Close Modbus TCP connection."""
        if self._client:
            self._client.close()
            self._client = None

        self._connected = False
        _LOGGER.debug("Modbus transport disconnected from %s", self._name)

    def _require_client(self) -> AsyncModbusTcpClient:
        self._ensure_connected()
        if self._client is None:
            raise TransportConnectionError("Modbus client not initialized")
        return self._client

    async def read_registers(self, address: int, count: int) -> bytes:
        """Read holding registers (function code 0x03).

        Args:
            address: Starting register address
            count: Number of registers to read

        Returns:
            Register contents as big-endian bytes

        Raises:
            TransportReadError: On Modbus exception responses or I/O errors
            TransportTimeoutError: If the operation times out
        """
        client = self._require_client()

        async with self._lock:
            try:
                result = await client.read_holding_registers(
                    address=address,
                    count=count,
                    device_id=self._unit_id,
                )
            except ModbusIOException as err:
                if "timeout" in str(err).lower():
                    raise TransportTimeoutError(
                        f"Timeout reading registers at {address}"
                    ) from err
                raise TransportReadError(
                    f"Failed to read registers at {address}: {err}"
                ) from err
            except TimeoutError as err:
                raise TransportTimeoutError(f"Timeout reading registers at {address}") from err
            except (ModbusException, OSError) as err:
                raise TransportReadError(
                    f"Failed to read registers at {address}: {err}"
                ) from err

        if result.isError():
            raise TransportReadError(f"Modbus read error at address {address}: {result}")

        registers = getattr(result, "registers", None)
        if registers is None or len(registers) != count:
            raise TransportReadError(
                f"Invalid Modbus response at address {address}: expected {count} registers"
            )

        data = struct.pack(f">{count}H", *registers)
        _LOGGER.debug("read %d(%d): %s", address, count, data.hex())
        return data

    async def write_registers(self, address: int, count: int, data: bytes) -> None:
        """Write holding registers (function code 0x10).

        Args:
            address: Starting register address
            count: Number of registers to write
            data: ``2 * count`` bytes, big-endian per register

        Raises:
            ValidationError: If ``data`` does not match ``count``
            TransportWriteError: On Modbus exception responses or I/O errors
            TransportTimeoutError: If the operation times out
        """
        if len(data) != 2 * count:
            raise ValidationError(
                f"Write to {address} needs {2 * count} bytes, got {len(data)}"
            )

        client = self._require_client()
        values = list(struct.unpack(f">{count}H", data))
        _LOGGER.debug("write %d(%d): %s", address, count, data.hex())

        async with self._lock:
            try:
                result = await client.write_registers(
                    address=address,
                    values=values,
                    device_id=self._unit_id,
                )
            except ModbusIOException as err:
                if "timeout" in str(err).lower():
                    _LOGGER.error("Timeout writing registers at %d", address)
                    raise TransportTimeoutError(
                        f"Timeout writing registers at {address}"
                    ) from err
                _LOGGER.error("Failed to write registers at %d: %s", address, err)
                raise TransportWriteError(
                    f"Failed to write registers at {address}: {err}"
                ) from err
            except TimeoutError as err:
                _LOGGER.error("Timeout writing registers at %d", address)
                raise TransportTimeoutError(f"Timeout writing registers at {address}") from err
            except (ModbusException, OSError) as err:
                _LOGGER.error("Failed to write registers at %d: %s", address, err)
                raise TransportWriteError(
                    f"Failed to write registers at {address}: {err}"
                ) from err

        if result.isError():
            _LOGGER.error("Modbus error writing registers at %d: %s", address, result)
            raise TransportWriteError(f"Modbus write error at address {address}: {result}")


__all__ = ["DEFAULT_PORT", "DEFAULT_TIMEOUT", "DEFAULT_UNIT_ID", "ModbusTransport"]
