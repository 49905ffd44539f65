"""Bender CC612/CC613 charger device.

This module provides :class:`BenderCharger`, the handle for one physical
charge controller, and the composer that turns probed features into a
charger class exposing exactly the supported capabilities.

Example:
    transport = create_modbus_transport(host="192.168.1.50")
    await transport.connect()

    charger = await BenderCharger.from_transport(transport)
    await charger.max_current(16)
    await charger.enable(True)

    if isinstance(charger, Meter):
        print(f"Power: {await charger.current_power()} W")
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pybendercc.api import ChargeStatus
from pybendercc.exceptions import ProtocolError, ValidationError
from pybendercc.registers.controller import (
    BY_NAME,
    MIN_CHARGE_CURRENT,
    LayoutVariant,
    RegisterDefinition,
)
from pybendercc.transports.exceptions import TransportError

from ._capabilities import (
    BatteryMixin,
    ChargerExMixin,
    IdentifierMixin,
    MeterEnergyMixin,
    MeterMixin,
    PhaseCurrentsMixin,
    PhaseGetterMixin,
    PhaseSwitcherMixin,
    PhaseVoltagesMixin,
)
from ._features import ChargerFeatures, probe_features
from ._reader import read_int, read_value, write_int

if TYPE_CHECKING:
    from pybendercc.transports.protocol import RegisterTransport

_LOGGER = logging.getLogger(__name__)

_CHARGE_POINT_STATE = BY_NAME["charge_point_state"]
_CURRENT_LIMIT = BY_NAME["hems_current_limit"]
_CURRENT_LIMIT_10 = BY_NAME["hems_current_limit_10"]

_STATUS_MAP: dict[int, ChargeStatus] = {
    1: ChargeStatus.A,
    2: ChargeStatus.B,
    3: ChargeStatus.C,
    4: ChargeStatus.C,
}

# Feature flag → mixins providing the capability, in MRO order
_FEATURE_MIXINS: tuple[tuple[str, tuple[type, ...]], ...] = (
    ("metering", (MeterMixin, PhaseCurrentsMixin, MeterEnergyMixin)),
    ("voltage_metering", (PhaseVoltagesMixin,)),
    ("battery", (BatteryMixin,)),
    ("identification", (IdentifierMixin,)),
    ("fine_current", (ChargerExMixin,)),
    ("phase_switching", (PhaseSwitcherMixin, PhaseGetterMixin)),
)


def _render_flag(value: int | float | str) -> str:
    return str(value != 0)


# Diagnostic label → register, renderer; registers outside the layout are skipped
_DIAGNOSTIC_FIELDS: tuple[tuple[str, str, Callable[[int | float | str], str]], ...] = (
    ("Model", "charge_point_model", str),
    ("Firmware", "firmware", str),
    ("Protocol", "protocol_version", str),
    ("OCPP Status", "ocpp_cp_status", str),
    ("Smart Vehicle", "smart_vehicle_detected", _render_flag),
    ("EVCCID", "evccid", str),
    ("UserID", "user_id", str),
)


class BenderCharger:
    """Handle for one Bender charge controller.

    Provides the mandatory charger operations (status, enable, current
    limit) and diagnostics. Optional capabilities are added by
    :func:`compose_charger_class`; use :meth:`from_transport` to get a
    charger with everything the controller supports.

    The charger is not safe for concurrent use: callers sharing one charger
    between tasks must serialise access themselves.
    """

    def __init__(self, transport: RegisterTransport, features: ChargerFeatures) -> None:
        """Initialize charger.

        Args:
            transport: Connected register transport
            features: Probed controller features
        """
        self._transport = transport
        self._features = features
        self._layout = features.layout

        # Active current register and cached current share one unit
        self._reg_curr: RegisterDefinition = (
            _CURRENT_LIMIT_10 if features.fine_current else _CURRENT_LIMIT
        )
        self._current = MIN_CHARGE_CURRENT * self._reg_curr.scale

    @classmethod
    async def from_transport(cls, transport: RegisterTransport) -> BenderCharger:
        """Probe a controller and create a charger with its capabilities.

        Args:
            transport: Connected register transport

        Returns:
            Charger instance whose class mixes in the detected capabilities
        """
        features = await probe_features(transport)
        charger_cls = compose_charger_class(features, base=cls)
        return charger_cls(transport, features)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def features(self) -> ChargerFeatures:
        """Get the probed controller features."""
        return self._features

    @property
    def layout(self) -> LayoutVariant:
        """Get the register layout variant."""
        return self._layout

    @property
    def current_register(self) -> int:
        """Get the register used for current limit read/write."""
        return self._reg_curr.address

    @property
    def last_commanded_current(self) -> int:
        """Get the cached current in the active register's unit."""
        return self._current

    # ------------------------------------------------------------------
    # Charger operations
    # ------------------------------------------------------------------

    async def status(self) -> ChargeStatus:
        """Get the vehicle charge status.

        Raises:
            ProtocolError: If the controller reports an unknown state
        """
        s = await read_int(self._transport, _CHARGE_POINT_STATE)
        try:
            return _STATUS_MAP[s]
        except KeyError:
            raise ProtocolError(f"invalid status: {s}") from None

    async def enabled(self) -> bool:
        """Check whether charging is enabled (current limit non-zero)."""
        return await read_int(self._transport, self._reg_curr) != 0

    async def enable(self, enable: bool) -> None:
        """Enable charging at the cached current, or disable it.

        Disabling writes 0 and keeps the cached current for the next enable.
        """
        await write_int(self._transport, self._reg_curr, self._current if enable else 0)

    async def max_current(self, current: int) -> None:
        """Set the current limit in whole amps.

        Raises:
            ValidationError: If current is below the 6 A minimum or too
                large for the active current register
        """
        if current < MIN_CHARGE_CURRENT:
            raise ValidationError(f"invalid current {current}")

        cached = current * self._reg_curr.scale
        if cached > 0xFFFF:
            raise ValidationError(f"invalid current {current}")

        await write_int(self._transport, _CURRENT_LIMIT, current)
        self._current = cached

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    async def diagnose(self) -> dict[str, str]:
        """Collect a best-effort register dump.

        Every field is read independently; fields whose read fails are left
        out instead of aborting the dump.

        Returns:
            Ordered mapping of field label to display value
        """
        fields: list[tuple[str, RegisterDefinition, Callable[[int | float | str], str]]] = [
            (label, BY_NAME[name], render)
            for label, name, render in _DIAGNOSTIC_FIELDS
            if self._layout in BY_NAME[name].layouts
        ]
        fields.append(("Current Limit", self._reg_curr, str))

        result: dict[str, str] = {"Legacy": str(self._layout is LayoutVariant.LEGACY)}
        for label, reg, render in fields:
            try:
                result[label] = render(await read_value(self._transport, reg))
            except (TransportError, ProtocolError) as err:
                _LOGGER.debug("Skipping diagnostic field %s: %s", label, err)
                continue
            _LOGGER.debug("%s: %s", label, result[label])

        return result


def format_diagnostics(diagnostics: dict[str, str]) -> str:
    """Render a diagnostics mapping as tab separated ``key: value`` lines."""
    return "\n".join(f"\t{label}:\t{value}" for label, value in diagnostics.items())


def compose_charger_class(
    features: ChargerFeatures,
    base: type[BenderCharger] = BenderCharger,
) -> type[BenderCharger]:
    """Build the charger class exposing exactly the detected capabilities.

    Classes are cached, so chargers with the same features share a class.

    Args:
        features: Probed controller features
        base: Charger base class (subclasses of BenderCharger allowed)

    Returns:
        Subclass of ``base`` with one mixin per supported capability
    """
    mixins: tuple[type, ...] = ()
    for flag, flag_mixins in _FEATURE_MIXINS:
        if getattr(features, flag):
            mixins += flag_mixins
    return _charger_class(base, mixins)


@functools.lru_cache(maxsize=None)
def _charger_class(base: type[BenderCharger], mixins: tuple[type, ...]) -> type[BenderCharger]:
    if not mixins:
        return base
    name = base.__name__ + "".join(m.__name__.removesuffix("Mixin") for m in mixins)
    return type(name, (*mixins, base), {"__module__": base.__module__})


__all__ = ["BenderCharger", "compose_charger_class", "format_diagnostics"]
