"""Transport protocol definitions.

A transport is the only thing a charger talks to. It moves raw holding
register bytes and nothing else: framing, timeouts and reconnects belong to
the transport, while scaling and meaning belong to the charger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Protocol, runtime_checkable

from .exceptions import TransportConnectionError


@runtime_checkable
class RegisterTransport(Protocol):
    """Structural protocol consumed by chargers.

    Any object with these two coroutines can drive a charger, which keeps
    test doubles free of inheritance.
    """

    async def read_registers(self, address: int, count: int) -> bytes:
        """Read ``count`` holding registers starting at ``address``.

        Returns:
            ``2 * count`` bytes, big-endian per register

        Raises:
            TransportError: On any I/O, timeout or Modbus exception response
        """
        ...

    async def write_registers(self, address: int, count: int, data: bytes) -> None:
        """Write ``count`` holding registers starting at ``address``.

        Raises:
            TransportError: On any I/O, timeout or Modbus exception response
        """
        ...


class BaseTransport(ABC):
    """Base class for connection-oriented register transports.

    Provides connection state tracking and async context manager support.

    Example:
        async with create_modbus_transport("192.168.1.50") as transport:
            charger = await BenderCharger.from_transport(transport)
    """

    transport_type: str = "unknown"

    def __init__(self, name: str) -> None:
        """Initialize base transport.

        Args:
            name: Human-readable endpoint name used in log messages
        """
        self._name = name
        self._connected = False

    @property
    def name(self) -> str:
        """Get the endpoint name."""
        return self._name

    @property
    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return self._connected

    def _ensure_connected(self) -> None:
        """Raise if the transport is not connected.

        Raises:
            TransportConnectionError: If not connected
        """
        if not self._connected:
            raise TransportConnectionError(f"Transport for {self._name} is not connected")

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection."""
        ...

    @abstractmethod
    async def read_registers(self, address: int, count: int) -> bytes:
        """Read holding registers as big-endian bytes."""
        ...

    @abstractmethod
    async def write_registers(self, address: int, count: int, data: bytes) -> None:
        """Write holding registers from big-endian bytes."""
        ...

    async def __aenter__(self) -> BaseTransport:
        """Connect on context entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Disconnect on context exit."""
        await self.disconnect()


__all__ = ["BaseTransport", "RegisterTransport"]
