"""Pytest configuration and fixtures for pybendercc tests."""

from __future__ import annotations

import struct

import pytest

from pybendercc.transports.exceptions import TransportReadError, TransportWriteError


class FakeRegisterTransport:
    """In-memory charge controller simulating the holding register map.

    Reading or writing any address that is not part of the register image
    fails with a transport error, the way the controller answers with an
    "illegal data address" exception for unimplemented registers.
    """

    def __init__(self) -> None:
        self.registers: dict[int, int] = {}
        self.reads: list[tuple[int, int]] = []
        self.writes: list[tuple[int, int, bytes]] = []

    # ------------------------------------------------------------------
    # Register image helpers
    # ------------------------------------------------------------------

    def set_u16(self, address: int, value: int) -> None:
        self.registers[address] = value

    def set_u32(self, address: int, value: int) -> None:
        self.registers[address] = value >> 16
        self.registers[address + 1] = value & 0xFFFF

    def set_text(self, address: int, count: int, text: str) -> None:
        raw = text.encode("ascii").ljust(2 * count, b"\x00")
        for i, word in enumerate(struct.unpack(f">{count}H", raw)):
            self.registers[address + i] = word

    def remove(self, address: int, count: int = 1) -> None:
        for reg in range(address, address + count):
            self.registers.pop(reg, None)

    def u16(self, address: int) -> int:
        return self.registers[address]

    # ------------------------------------------------------------------
    # RegisterTransport
    # ------------------------------------------------------------------

    async def read_registers(self, address: int, count: int) -> bytes:
        self.reads.append((address, count))
        words = []
        for reg in range(address, address + count):
            if reg not in self.registers:
                raise TransportReadError(f"Modbus read error at address {address}")
            words.append(self.registers[reg])
        return struct.pack(f">{count}H", *words)

    async def write_registers(self, address: int, count: int, data: bytes) -> None:
        if any(reg not in self.registers for reg in range(address, address + count)):
            raise TransportWriteError(f"Modbus write error at address {address}")
        self.writes.append((address, count, data))
        for i, word in enumerate(struct.unpack(f">{count}H", data)):
            self.registers[address + i] = word


def _base_image(transport: FakeRegisterTransport) -> None:
    transport.set_text(100, 2, "5.3")
    transport.set_u16(104, 0)
    transport.set_text(120, 2, "1.2")
    transport.set_u16(122, 1)
    transport.set_u16(1000, 0)


@pytest.fixture
def current_transport() -> FakeRegisterTransport:
    """Controller with current firmware and every optional feature."""
    transport = FakeRegisterTransport()
    _base_image(transport)
    transport.set_text(142, 10, "CC613-2M")
    for phase in range(3):
        transport.set_u32(200 + 2 * phase, 1000)
        transport.set_u32(212 + 2 * phase, 16000)
        transport.set_u32(222 + 2 * phase, 230)
    transport.set_u32(218, 12345)
    transport.set_u32(220, 11040)
    transport.set_text(720, 10, "")
    transport.set_u16(730, 55)
    transport.set_u16(740, 0)
    transport.set_text(741, 6, "")
    transport.set_u16(1001, 0)
    transport.set_u16(1002, 0xFFFF)
    return transport


@pytest.fixture
def legacy_transport() -> FakeRegisterTransport:
    """Controller with legacy firmware, per-phase metering and RFID."""
    transport = FakeRegisterTransport()
    _base_image(transport)
    for phase in range(3):
        transport.set_u32(200 + 2 * phase, 1000 * (phase + 1))
        transport.set_u32(212 + 2 * phase, 10000)
    transport.set_text(720, 10, "04A1B2C3D4")
    transport.set_text(741, 6, "")
    return transport


@pytest.fixture
def bare_transport() -> FakeRegisterTransport:
    """Controller that fails every optional probe."""
    transport = FakeRegisterTransport()
    _base_image(transport)
    return transport
