"""Transport configuration for charge controller connections.

This module provides the TransportConfig dataclass for configuring
transport instances in a uniform way, supporting serialization to/from
dictionaries and parsing of ``host[:port]`` URIs.

Example:
    config = TransportConfig.from_uri("192.168.1.50:502")
    config.validate()

    # Serialize to dict for storage
    data = config.to_dict()

    # Restore from dict
    restored = TransportConfig.from_dict(data)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pybendercc.exceptions import ConfigurationError

from .modbus import DEFAULT_PORT, DEFAULT_TIMEOUT, DEFAULT_UNIT_ID


@dataclass
class TransportConfig:
    """Configuration for a single Modbus TCP connection.

    Attributes:
        host: IP address or hostname of the charge controller
        port: TCP port (default 502)
        unit_id: Modbus unit ID (default 255, fixed on Bender controllers)
        timeout: Connection timeout in seconds (default 10.0)
    """

    host: str
    port: int = DEFAULT_PORT
    unit_id: int = DEFAULT_UNIT_ID
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> None:
        """Validate configuration completeness.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.host:
            raise ConfigurationError("host is required")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"port must be 1-65535, got {self.port}")
        if not 0 <= self.unit_id <= 255:
            raise ConfigurationError(f"unit_id must be 0-255, got {self.unit_id}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @property
    def uri(self) -> str:
        """Get the ``host:port`` form of this configuration."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "host": self.host,
            "port": self.port,
            "unit_id": self.unit_id,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransportConfig:
        """Create configuration from dictionary.

        Args:
            data: Dictionary with configuration values (from to_dict())

        Returns:
            TransportConfig instance with values from dictionary
        """
        return cls(
            host=data.get("host", ""),
            port=int(data.get("port", DEFAULT_PORT)),
            unit_id=int(data.get("unit_id", DEFAULT_UNIT_ID)),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_uri(
        cls,
        uri: str,
        *,
        unit_id: int = DEFAULT_UNIT_ID,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> TransportConfig:
        """Create configuration from a ``host[:port]`` string.

        IPv6 addresses must be bracketed, e.g. ``[fd00::50]:502``.

        Raises:
            ConfigurationError: If the port is not a number or an IPv6
                address is not bracketed
        """
        text = uri.strip()
        if text.startswith("["):
            host, sep, rest = text[1:].partition("]")
            if not sep or (rest and not rest.startswith(":")):
                raise ConfigurationError(f"Invalid uri '{uri}'")
            port = rest[1:] or str(DEFAULT_PORT)
        elif text.count(":") > 1:
            raise ConfigurationError(
                f"IPv6 address in uri '{uri}' must be enclosed in brackets"
            )
        else:
            host, sep, port = text.partition(":")
            if not sep:
                port = str(DEFAULT_PORT)
        try:
            port_number = int(port)
        except ValueError as err:
            raise ConfigurationError(f"Invalid port in uri '{uri}'") from err
        return cls(host=host, port=port_number, unit_id=unit_id, timeout=timeout)


__all__ = ["TransportConfig"]
