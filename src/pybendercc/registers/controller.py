"""Canonical Bender CC612/CC613 holding register map.

Single source of truth for every register the driver touches. All registers
are holding registers (function code 0x03 read, 0x10 write) on the
controller's "Modbus TCP Server for energy management systems", using the
Ebee/Bender/MENNEKES register address set.

Two firmware generations exist:
  - LEGACY: no charge point model block (142), no total energy / active
    power registers; metering is only available per phase.
  - CURRENT: full register set including smart vehicle / ISO 15118 data.

The `layouts` field controls which layout variants expose each register.
Multi-register values are big-endian (high word first).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LayoutVariant(str, Enum):
    """Register layout generation detected at probe time."""

    LEGACY = "legacy"
    CURRENT = "current"


BOTH: frozenset[LayoutVariant] = frozenset({LayoutVariant.LEGACY, LayoutVariant.CURRENT})
CURRENT_ONLY: frozenset[LayoutVariant] = frozenset({LayoutVariant.CURRENT})


class ScaleFactor(int, Enum):
    """Divisor applied to raw register value."""

    NONE = 1
    DIV_10 = 10
    DIV_1000 = 1000


class RegisterKind(str, Enum):
    """How the raw register words are interpreted."""

    INTEGER = "integer"
    TEXT = "text"


# All-ones 32-bit pattern the controller reports for "no data".
U32_NO_DATA = 0xFFFFFFFF


@dataclass(frozen=True)
class RegisterDefinition:
    """Single register definition.

    Attributes:
        address: Holding register address.
        canonical_name: Stable name used by the driver and diagnostics.
        count: Number of 16-bit registers read in one transaction.
        bit_width: 16 or 32 for integers; for phase triples this is the
            width of each element.
        scale: Divisor to convert raw value to engineering units.
        sentinel: Raw value meaning "no data", if the register has one.
        unit: Engineering unit string ("A", "V", "W", "kWh", "%").
        kind: Integer or byte-block text.
        layouts: Layout variants that implement this register.
        writable: True if the driver writes this register.
        description: Human-readable description from protocol documentation.
    """

    address: int
    canonical_name: str
    count: int = 1
    bit_width: int = 16
    scale: ScaleFactor = ScaleFactor.NONE
    sentinel: int | None = None
    unit: str = ""
    kind: RegisterKind = RegisterKind.INTEGER
    layouts: frozenset[LayoutVariant] = BOTH
    writable: bool = False
    description: str = ""


# =============================================================================
# Addresses
# =============================================================================

REG_FIRMWARE = 100
REG_OCPP_CP_STATUS = 104
REG_PROTOCOL_VERSION = 120
REG_CHARGE_POINT_STATE = 122
REG_CHARGE_POINT_MODEL = 142
REG_PHASE_ENERGY = 200
REG_CURRENTS = 212
REG_TOTAL_ENERGY = 218
REG_ACTIVE_POWER = 220
REG_VOLTAGES = 222
REG_USER_ID = 720
REG_EV_BATTERY_STATE = 730
REG_SMART_VEHICLE_DETECTED = 740
REG_EVCCID = 741
REG_HEMS_CURRENT_LIMIT = 1000
REG_HEMS_CURRENT_LIMIT_10 = 1001
REG_HEMS_POWER_LIMIT = 1002

# =============================================================================
# Protocol constants
# =============================================================================

MIN_CHARGE_CURRENT = 6  # A, IEC 61851 minimum
NOMINAL_VOLTAGE = 230  # V, used for legacy power estimation
POWER_LIMIT_1P = 3725  # 207V * 3p * 6A - 1W
POWER_LIMIT_3P = 0xFFFF
MAX_SOC = 100


CONTROLLER_REGISTERS: tuple[RegisterDefinition, ...] = (
    # =========================================================================
    # IDENTIFICATION (regs 100-142)
    # =========================================================================
    RegisterDefinition(
        address=REG_FIRMWARE,
        canonical_name="firmware",
        count=2,
        kind=RegisterKind.TEXT,
        description="Application version number.",
    ),
    RegisterDefinition(
        address=REG_OCPP_CP_STATUS,
        canonical_name="ocpp_cp_status",
        description="Charge point status according to the OCPP enumeration.",
    ),
    RegisterDefinition(
        address=REG_PROTOCOL_VERSION,
        canonical_name="protocol_version",
        count=2,
        kind=RegisterKind.TEXT,
        description="Modbus TCP server protocol version number.",
    ),
    RegisterDefinition(
        address=REG_CHARGE_POINT_STATE,
        canonical_name="charge_point_state",
        description="Vehicle (control pilot) state: 1=A, 2=B, 3=C, 4=D.",
    ),
    RegisterDefinition(
        address=REG_CHARGE_POINT_MODEL,
        canonical_name="charge_point_model",
        count=10,
        kind=RegisterKind.TEXT,
        layouts=CURRENT_ONLY,
        description="Charge point model, bytes 0 to 19.",
    ),
    # =========================================================================
    # PRIMARY METER (regs 200-223)
    # =========================================================================
    RegisterDefinition(
        address=REG_PHASE_ENERGY,
        canonical_name="phase_energy",
        count=6,
        bit_width=32,
        scale=ScaleFactor.DIV_1000,
        sentinel=U32_NO_DATA,
        unit="kWh",
        description="Per-phase energy L1-L3 from primary meter (Wh).",
    ),
    RegisterDefinition(
        address=REG_CURRENTS,
        canonical_name="currents",
        count=6,
        bit_width=32,
        scale=ScaleFactor.DIV_1000,
        sentinel=U32_NO_DATA,
        unit="A",
        description="Per-phase currents L1-L3 from primary meter (mA).",
    ),
    RegisterDefinition(
        address=REG_TOTAL_ENERGY,
        canonical_name="total_energy",
        count=2,
        bit_width=32,
        scale=ScaleFactor.DIV_1000,
        sentinel=U32_NO_DATA,
        unit="kWh",
        layouts=CURRENT_ONLY,
        description="Total energy from primary meter (Wh).",
    ),
    RegisterDefinition(
        address=REG_ACTIVE_POWER,
        canonical_name="active_power",
        count=2,
        bit_width=32,
        sentinel=U32_NO_DATA,
        unit="W",
        layouts=CURRENT_ONLY,
        description="Active power from primary meter.",
    ),
    RegisterDefinition(
        address=REG_VOLTAGES,
        canonical_name="voltages",
        count=6,
        bit_width=32,
        sentinel=U32_NO_DATA,
        unit="V",
        description="Per-phase voltages L1-L3 of the OCPP meter.",
    ),
    # =========================================================================
    # SESSION / VEHICLE (regs 720-746)
    # =========================================================================
    RegisterDefinition(
        address=REG_USER_ID,
        canonical_name="user_id",
        count=10,
        kind=RegisterKind.TEXT,
        description="User ID (OCPP IdTag) of the current session, bytes 0 to 19.",
    ),
    RegisterDefinition(
        address=REG_EV_BATTERY_STATE,
        canonical_name="ev_battery_state",
        unit="%",
        layouts=CURRENT_ONLY,
        description="EV battery state of charge (0-100).",
    ),
    RegisterDefinition(
        address=REG_SMART_VEHICLE_DETECTED,
        canonical_name="smart_vehicle_detected",
        layouts=CURRENT_ONLY,
        description="1 if the connected EV is a smart vehicle, 0 otherwise.",
    ),
    RegisterDefinition(
        address=REG_EVCCID,
        canonical_name="evccid",
        count=6,
        kind=RegisterKind.TEXT,
        description="ASCII hex representation of the EVCCID, bytes 0 to 11.",
    ),
    # =========================================================================
    # HEMS CONTROL (regs 1000-1002)
    # =========================================================================
    RegisterDefinition(
        address=REG_HEMS_CURRENT_LIMIT,
        canonical_name="hems_current_limit",
        unit="A",
        writable=True,
        description="HEMS current limit in whole amps.",
    ),
    RegisterDefinition(
        address=REG_HEMS_CURRENT_LIMIT_10,
        canonical_name="hems_current_limit_10",
        scale=ScaleFactor.DIV_10,
        unit="A",
        writable=True,
        description="HEMS current limit in 0.1 A steps (Wallbe firmware).",
    ),
    RegisterDefinition(
        address=REG_HEMS_POWER_LIMIT,
        canonical_name="hems_power_limit",
        unit="W",
        writable=True,
        description="HEMS power limit; used for 1p/3p switching.",
    ),
)


# =============================================================================
# LOOKUP INDEXES (built once at import time)
# =============================================================================

# canonical_name → RegisterDefinition
BY_NAME: dict[str, RegisterDefinition] = {r.canonical_name: r for r in CONTROLLER_REGISTERS}

# address → RegisterDefinition
BY_ADDRESS: dict[int, RegisterDefinition] = {r.address: r for r in CONTROLLER_REGISTERS}


def registers_for_layout(layout: LayoutVariant) -> tuple[RegisterDefinition, ...]:
    """Return only registers implemented by the given layout variant."""
    return tuple(r for r in CONTROLLER_REGISTERS if layout in r.layouts)
