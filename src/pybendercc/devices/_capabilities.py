"""Optional charger capabilities as mixins.

Each mixin implements one capability interface from :mod:`pybendercc.api`
on top of the register transport. The composer in
:mod:`pybendercc.devices.charger` mixes in only the capabilities the
controller supports, so an unsupported operation simply does not exist on
the charger object.

The mixins expect the following attributes on the implementing class:
- _transport: RegisterTransport
- _layout: LayoutVariant
- _current: cached current in the active register's unit
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pybendercc.exceptions import NotAvailableError, ValidationError
from pybendercc.registers.controller import (
    BY_NAME,
    MAX_SOC,
    MIN_CHARGE_CURRENT,
    NOMINAL_VOLTAGE,
    POWER_LIMIT_1P,
    POWER_LIMIT_3P,
    LayoutVariant,
)

from ._reader import read_float, read_int, read_phases, read_text, write_int

if TYPE_CHECKING:
    from pybendercc.transports.protocol import RegisterTransport

_LOGGER = logging.getLogger(__name__)

_PHASE_ENERGY = BY_NAME["phase_energy"]
_CURRENTS = BY_NAME["currents"]
_TOTAL_ENERGY = BY_NAME["total_energy"]
_ACTIVE_POWER = BY_NAME["active_power"]
_VOLTAGES = BY_NAME["voltages"]
_USER_ID = BY_NAME["user_id"]
_EV_BATTERY_STATE = BY_NAME["ev_battery_state"]
_SMART_VEHICLE = BY_NAME["smart_vehicle_detected"]
_EVCCID = BY_NAME["evccid"]
_CURRENT_LIMIT_10 = BY_NAME["hems_current_limit_10"]
_POWER_LIMIT = BY_NAME["hems_power_limit"]


if TYPE_CHECKING:

    class _CapabilityBase:
        """Typed stubs so mypy sees attributes provided by the host class."""

        _transport: RegisterTransport
        _layout: LayoutVariant
        _current: int

else:
    _CapabilityBase = object


async def read_identification(transport: RegisterTransport, layout: LayoutVariant) -> str:
    """Read the vehicle or user identifier.

    On current firmware a smart vehicle's EVCCID takes precedence. Otherwise
    the OCPP IdTag of the session is returned, which may be empty.

    Raises:
        TransportError: If a register read fails
    """
    if layout in _SMART_VEHICLE.layouts:
        if await read_int(transport, _SMART_VEHICLE) != 0:
            evccid = await read_text(transport, _EVCCID)
            if evccid:
                return evccid

    return await read_text(transport, _USER_ID)


class MeterMixin(_CapabilityBase):
    """Charging power (api.Meter)."""

    async def current_power(self) -> float:
        """Get the active charging power in W.

        Legacy firmware has no power register, so power is estimated from
        the phase currents at nominal voltage.
        """
        if self._layout not in _ACTIVE_POWER.layouts:
            l1, l2, l3 = await read_phases(self._transport, _CURRENTS)
            return NOMINAL_VOLTAGE * (l1 + l2 + l3)

        return await read_float(self._transport, _ACTIVE_POWER)


class MeterEnergyMixin(_CapabilityBase):
    """Total energy (api.MeterEnergy)."""

    async def total_energy(self) -> float:
        """Get the total charged energy in kWh."""
        if self._layout not in _TOTAL_ENERGY.layouts:
            return sum(await read_phases(self._transport, _PHASE_ENERGY))

        return await read_float(self._transport, _TOTAL_ENERGY)


class PhaseCurrentsMixin(_CapabilityBase):
    """Phase currents (api.PhaseCurrents)."""

    async def currents(self) -> tuple[float, float, float]:
        """Get L1-L3 currents in A; unavailable phases read 0."""
        return await read_phases(self._transport, _CURRENTS)


class PhaseVoltagesMixin(_CapabilityBase):
    """Phase voltages (api.PhaseVoltages)."""

    async def voltages(self) -> tuple[float, float, float]:
        """Get L1-L3 voltages in V; unavailable phases read 0."""
        return await read_phases(self._transport, _VOLTAGES)


class BatteryMixin(_CapabilityBase):
    """Vehicle state of charge (api.Battery)."""

    async def soc(self) -> float:
        """Get the vehicle state of charge in %.

        Raises:
            NotAvailableError: If no smart vehicle is connected or the
                reported value is out of range
        """
        if await read_int(self._transport, _SMART_VEHICLE) == 1:
            soc = await read_int(self._transport, _EV_BATTERY_STATE)
            if soc <= MAX_SOC:
                return float(soc)
            _LOGGER.debug("Ignoring out of range battery state %d", soc)

        raise NotAvailableError("State of charge not available")


class IdentifierMixin(_CapabilityBase):
    """Vehicle/user identification (api.Identifier)."""

    async def identify(self) -> str:
        """Get the EVCCID of a smart vehicle or the session's RFID tag."""
        return await read_identification(self._transport, self._layout)


class ChargerExMixin(_CapabilityBase):
    """Fine-grained current limiting (api.ChargerEx), Wallbe firmware."""

    async def max_current_millis(self, current: float) -> None:
        """Set the current limit in 0.1 A steps.

        Args:
            current: Current in A, truncated to one decimal

        Raises:
            ValidationError: If current is below the 6 A minimum or does
                not fit the register
        """
        if current < MIN_CHARGE_CURRENT:
            raise ValidationError(f"invalid current {current:.5g}")

        curr = int(current * _CURRENT_LIMIT_10.scale)
        await write_int(self._transport, _CURRENT_LIMIT_10, curr)
        self._current = curr


class PhaseSwitcherMixin(_CapabilityBase):
    """1p/3p switching through the HEMS power limit (api.PhaseSwitcher)."""

    async def phases_1p3p(self, phases: int) -> None:
        """Switch between single and three phase charging.

        A power limit just below 3 x 6 A at 207 V forces single phase; the
        maximum value releases three phases.

        Raises:
            ValidationError: If phases is not 1 or 3
        """
        if phases not in (1, 3):
            raise ValidationError(f"invalid phases {phases}")

        limit = POWER_LIMIT_1P if phases == 1 else POWER_LIMIT_3P
        await write_int(self._transport, _POWER_LIMIT, limit)


class PhaseGetterMixin(_CapabilityBase):
    """Active phase count (api.PhaseGetter)."""

    async def get_phases(self) -> int:
        """Get the active phase count derived from the HEMS power limit."""
        limit = await read_int(self._transport, _POWER_LIMIT)
        return 1 if limit <= POWER_LIMIT_1P else 3


__all__ = [
    "BatteryMixin",
    "ChargerExMixin",
    "IdentifierMixin",
    "MeterEnergyMixin",
    "MeterMixin",
    "PhaseCurrentsMixin",
    "PhaseGetterMixin",
    "PhaseSwitcherMixin",
    "PhaseVoltagesMixin",
    "read_identification",
]
