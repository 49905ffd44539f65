"""Charger capability interfaces.

Every charger implements :class:`Charger` and :class:`Diagnosis`. The
remaining interfaces are optional: a charger object only has their methods
when the controller proved at connection time that it supports them, so
``isinstance(charger, Meter)`` is the way to ask "can this charger meter?".

Example:
    charger = await BenderCharger.from_transport(transport)
    if isinstance(charger, Meter):
        print(await charger.current_power())
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class ChargeStatus(str, Enum):
    """IEC 61851 vehicle state as seen by the charger."""

    NONE = ""
    A = "A"  # Not connected
    B = "B"  # Connected, not charging
    C = "C"  # Charging

    @property
    def is_connected(self) -> bool:
        """True when a vehicle is plugged in."""
        return self in (ChargeStatus.B, ChargeStatus.C)


@runtime_checkable
class Charger(Protocol):
    """Mandatory charger operations."""

    async def status(self) -> ChargeStatus: ...

    async def enabled(self) -> bool: ...

    async def enable(self, enable: bool) -> None: ...

    async def max_current(self, current: int) -> None: ...


@runtime_checkable
class Diagnosis(Protocol):
    """Best-effort register dump for troubleshooting."""

    async def diagnose(self) -> dict[str, str]: ...


@runtime_checkable
class Meter(Protocol):
    """Active charging power in W."""

    async def current_power(self) -> float: ...


@runtime_checkable
class MeterEnergy(Protocol):
    """Total imported energy in kWh."""

    async def total_energy(self) -> float: ...


@runtime_checkable
class PhaseCurrents(Protocol):
    """Per-phase currents in A."""

    async def currents(self) -> tuple[float, float, float]: ...


@runtime_checkable
class PhaseVoltages(Protocol):
    """Per-phase voltages in V."""

    async def voltages(self) -> tuple[float, float, float]: ...


@runtime_checkable
class Battery(Protocol):
    """Vehicle state of charge in %."""

    async def soc(self) -> float: ...


@runtime_checkable
class Identifier(Protocol):
    """Vehicle or user identification (EVCCID / RFID)."""

    async def identify(self) -> str: ...


@runtime_checkable
class ChargerEx(Protocol):
    """Current limiting in 0.1 A steps."""

    async def max_current_millis(self, current: float) -> None: ...


@runtime_checkable
class PhaseSwitcher(Protocol):
    """1p/3p switching."""

    async def phases_1p3p(self, phases: int) -> None: ...


@runtime_checkable
class PhaseGetter(Protocol):
    """Active phase count."""

    async def get_phases(self) -> int: ...


def supports(charger: object, capability: type) -> bool:
    """Check whether a charger exposes a capability interface."""
    return isinstance(charger, capability)


__all__ = [
    "Battery",
    "ChargeStatus",
    "Charger",
    "ChargerEx",
    "Diagnosis",
    "Identifier",
    "Meter",
    "MeterEnergy",
    "PhaseCurrents",
    "PhaseGetter",
    "PhaseSwitcher",
    "PhaseVoltages",
    "supports",
]
