"""Register access driven by the controller register catalog.

Every charger operation reads and writes through these helpers, so the
register count, scale, sentinel and kind come from one
:class:`~pybendercc.registers.controller.RegisterDefinition` instead of
being repeated at each call site.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pybendercc.codec import (
    bytes_as_string,
    decode_phases,
    decode_raw,
    decode_value,
    encode_u16,
)
from pybendercc.exceptions import ValidationError

if TYPE_CHECKING:
    from pybendercc.registers.controller import RegisterDefinition
    from pybendercc.transports.protocol import RegisterTransport


async def _read_block(transport: RegisterTransport, reg: RegisterDefinition) -> bytes:
    return await transport.read_registers(reg.address, reg.count)


async def read_int(transport: RegisterTransport, reg: RegisterDefinition) -> int:
    """Read the unscaled integer value of a register."""
    return decode_raw(reg, await _read_block(transport, reg))


async def read_float(transport: RegisterTransport, reg: RegisterDefinition) -> float:
    """Read a register scaled to engineering units."""
    return decode_raw(reg, await _read_block(transport, reg)) / reg.scale


async def read_text(transport: RegisterTransport, reg: RegisterDefinition) -> str:
    """Read a NUL-padded identifier block."""
    return bytes_as_string(await _read_block(transport, reg))


async def read_phases(
    transport: RegisterTransport,
    reg: RegisterDefinition,
) -> tuple[float, float, float]:
    """Read an L1-L3 register block; phases without data read 0."""
    return decode_phases(reg, await _read_block(transport, reg))


async def read_value(transport: RegisterTransport, reg: RegisterDefinition) -> int | float | str:
    """Read and decode any catalog register."""
    return decode_value(reg, await _read_block(transport, reg))


async def write_int(transport: RegisterTransport, reg: RegisterDefinition, value: int) -> None:
    """Write a raw value to a single writable register.

    Raises:
        ValidationError: If the register is read-only or the value does
            not fit into 16 bits
    """
    if not reg.writable:
        raise ValidationError(f"Register {reg.canonical_name} is read-only")
    await transport.write_registers(reg.address, reg.count, encode_u16(value))


__all__ = [
    "read_float",
    "read_int",
    "read_phases",
    "read_text",
    "read_value",
    "write_int",
]
