"""Register encoding and decoding helpers.

The controller speaks big-endian 16-bit registers. 32-bit quantities occupy
two consecutive registers with the high word first; identifier fields are
NUL-padded ASCII byte blocks. Meter registers use the all-ones 32-bit
pattern to signal "no data", which decodes to a zero reading.
"""

from __future__ import annotations

import struct

from pybendercc.exceptions import ProtocolError, ValidationError
from pybendercc.registers.controller import (
    U32_NO_DATA,
    RegisterDefinition,
    RegisterKind,
)

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")

# Padding and whitespace trimmed from both ends of identifier blocks
_TEXT_PADDING = "\x00 \t\r\n"


def _require(data: bytes, offset: int, size: int) -> None:
    if len(data) < offset + size:
        raise ProtocolError(
            f"Short register response: need {offset + size} bytes, got {len(data)}"
        )


def decode_u16(data: bytes, offset: int = 0) -> int:
    """Decode one big-endian unsigned 16-bit register."""
    _require(data, offset, 2)
    return _U16.unpack_from(data, offset)[0]


def decode_u32(data: bytes, offset: int = 0) -> int:
    """Decode a big-endian unsigned 32-bit register pair."""
    _require(data, offset, 4)
    return _U32.unpack_from(data, offset)[0]


def encode_u16(value: int) -> bytes:
    """Encode a value into one big-endian 16-bit register.

    Raises:
        ValidationError: If the value does not fit into 16 bits.
    """
    if not 0 <= value <= 0xFFFF:
        raise ValidationError(f"Value {value} out of range for a 16-bit register")
    return _U16.pack(value)


def decode_phase_values(
    data: bytes,
    divider: float,
    sentinel: int | None = U32_NO_DATA,
) -> tuple[float, float, float]:
    """Decode three consecutive 32-bit phase values.

    A slot holding the sentinel is reported as 0.0 rather than an error so
    consumers always receive a numeric reading.

    Args:
        data: 12 bytes (six registers) of raw register data
        divider: Scale divisor applied to each raw value
        sentinel: Raw value meaning "no data", None if there is none

    Returns:
        Tuple of (L1, L2, L3) in engineering units
    """
    values = []
    for i in range(3):
        raw = decode_u32(data, 4 * i)
        if raw == sentinel:
            raw = 0
        values.append(raw / divider)
    return values[0], values[1], values[2]


def bytes_as_string(data: bytes) -> str:
    """Decode a NUL-padded ASCII identifier block.

    NUL padding and whitespace are trimmed from both ends, so an all-zero
    block yields an empty string.
    """
    return data.decode("ascii", errors="replace").strip(_TEXT_PADDING)


def decode_raw(definition: RegisterDefinition, data: bytes) -> int:
    """Decode the unscaled integer of a register, sentinel reading as 0."""
    raw = decode_u32(data) if definition.bit_width == 32 else decode_u16(data)
    if definition.sentinel is not None and raw == definition.sentinel:
        return 0
    return raw


def decode_phases(definition: RegisterDefinition, data: bytes) -> tuple[float, float, float]:
    """Decode a three-phase register block in engineering units."""
    return decode_phase_values(data, definition.scale, definition.sentinel)


def decode_value(definition: RegisterDefinition, data: bytes) -> int | float | str:
    """Decode raw register data according to its catalog definition.

    Text registers return the trimmed string; integer registers return the
    raw value for unscaled registers and the scaled float otherwise. A
    sentinel decodes to zero.
    """
    if definition.kind is RegisterKind.TEXT:
        return bytes_as_string(data)

    raw = decode_raw(definition, data)
    if definition.scale == 1:
        return raw
    return raw / definition.scale


__all__ = [
    "bytes_as_string",
    "decode_phase_values",
    "decode_phases",
    "decode_raw",
    "decode_u16",
    "decode_u32",
    "decode_value",
    "encode_u16",
]
