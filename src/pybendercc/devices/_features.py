"""Charge controller capability detection.

Bender controllers come in two register layout generations and with a
number of optional features (primary meter, OCPP voltage meter, ISO 15118
battery state, 0.1 A current control, power limit based phase switching,
RFID). None of this can be derived from the model name, so it is probed
once at connection time with read-only register accesses:

1. Charge point model block readable → current layout, else legacy
2. Active power (current) / phase energy (legacy) holds data → metering
   2a. Voltage register holds data → voltage metering
   2b. Battery state readable (current layout only) → state of charge
3. 0.1 A current limit readable → fine current control
4. HEMS power limit readable → phase switching
5. Identification succeeds → identification

Transport failures during probing mean "feature absent"; they are never
raised from probe_features().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pybendercc.codec import decode_u32
from pybendercc.exceptions import ProtocolError
from pybendercc.registers.controller import (
    REG_ACTIVE_POWER,
    REG_CHARGE_POINT_MODEL,
    REG_EV_BATTERY_STATE,
    REG_HEMS_CURRENT_LIMIT_10,
    REG_HEMS_POWER_LIMIT,
    REG_PHASE_ENERGY,
    REG_VOLTAGES,
    U32_NO_DATA,
    LayoutVariant,
)
from pybendercc.transports.exceptions import TransportError

from ._capabilities import read_identification

if TYPE_CHECKING:
    from pybendercc.transports.protocol import RegisterTransport

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargerFeatures:
    """Detected charge controller capabilities.

    Computed once after probing and never changed; a firmware update
    requires a new charger object. All optional features default to False.
    """

    layout: LayoutVariant = LayoutVariant.LEGACY

    metering: bool = False  # Power, currents and energy
    voltage_metering: bool = False  # OCPP meter voltages
    battery: bool = False  # Vehicle state of charge
    fine_current: bool = False  # 0.1 A current limit register
    phase_switching: bool = False  # 1p/3p via HEMS power limit
    identification: bool = False  # EVCCID / RFID

    @property
    def is_legacy(self) -> bool:
        """True for the legacy register layout."""
        return self.layout is LayoutVariant.LEGACY

    def enabled_features(self) -> list[str]:
        """Get the names of all detected optional features."""
        return [
            name
            for name in (
                "metering",
                "voltage_metering",
                "battery",
                "fine_current",
                "phase_switching",
                "identification",
            )
            if getattr(self, name)
        ]


async def _probe(transport: RegisterTransport, address: int, count: int) -> bytes | None:
    """Read registers, returning None instead of raising on transport errors."""
    try:
        return await transport.read_registers(address, count)
    except TransportError as err:
        _LOGGER.debug("Probe of register %d(%d) failed: %s", address, count, err)
        return None


def _u32_or_none(data: bytes | None) -> int | None:
    if data is None or len(data) < 4:
        return None
    return decode_u32(data)


async def probe_features(transport: RegisterTransport) -> ChargerFeatures:
    """Probe a controller for its layout and optional features.

    Args:
        transport: Connected register transport

    Returns:
        ChargerFeatures describing the controller
    """
    layout = LayoutVariant.CURRENT
    if await _probe(transport, REG_CHARGE_POINT_MODEL, 10) is None:
        layout = LayoutVariant.LEGACY

    metering = voltage_metering = battery = False

    meter_reg = REG_PHASE_ENERGY if layout is LayoutVariant.LEGACY else REG_ACTIVE_POWER
    meter_value = _u32_or_none(await _probe(transport, meter_reg, 2))
    if meter_value is not None and meter_value != U32_NO_DATA:
        metering = True

        voltage = _u32_or_none(await _probe(transport, REG_VOLTAGES, 2))
        voltage_metering = voltage is not None and voltage > 0

        if layout is LayoutVariant.CURRENT:
            battery = await _probe(transport, REG_EV_BATTERY_STATE, 1) is not None

    fine_current = await _probe(transport, REG_HEMS_CURRENT_LIMIT_10, 1) is not None
    phase_switching = await _probe(transport, REG_HEMS_POWER_LIMIT, 1) is not None

    try:
        await read_identification(transport, layout)
        identification = True
    except (TransportError, ProtocolError) as err:
        _LOGGER.debug("Identification probe failed: %s", err)
        identification = False

    features = ChargerFeatures(
        layout=layout,
        metering=metering,
        voltage_metering=voltage_metering,
        battery=battery,
        fine_current=fine_current,
        phase_switching=phase_switching,
        identification=identification,
    )

    _LOGGER.info(
        "Detected %s register layout with features: %s",
        layout.value,
        ", ".join(features.enabled_features()) or "none",
    )

    return features


__all__ = ["ChargerFeatures", "probe_features"]
