"""Canonical Modbus register map for Bender charge controllers.

- controller: holding registers for both layout variants plus the protocol
  constants (current limits, phase switching power limits).
"""

from pybendercc.registers.controller import (
    BOTH,
    BY_ADDRESS,
    BY_NAME,
    CONTROLLER_REGISTERS,
    CURRENT_ONLY,
    MAX_SOC,
    MIN_CHARGE_CURRENT,
    NOMINAL_VOLTAGE,
    POWER_LIMIT_1P,
    POWER_LIMIT_3P,
    REG_ACTIVE_POWER,
    REG_CHARGE_POINT_MODEL,
    REG_CHARGE_POINT_STATE,
    REG_CURRENTS,
    REG_EV_BATTERY_STATE,
    REG_EVCCID,
    REG_FIRMWARE,
    REG_HEMS_CURRENT_LIMIT,
    REG_HEMS_CURRENT_LIMIT_10,
    REG_HEMS_POWER_LIMIT,
    REG_OCPP_CP_STATUS,
    REG_PHASE_ENERGY,
    REG_PROTOCOL_VERSION,
    REG_SMART_VEHICLE_DETECTED,
    REG_TOTAL_ENERGY,
    REG_USER_ID,
    REG_VOLTAGES,
    U32_NO_DATA,
    LayoutVariant,
    RegisterDefinition,
    RegisterKind,
    ScaleFactor,
    registers_for_layout,
)

__all__ = [
    # Types
    "LayoutVariant",
    "RegisterDefinition",
    "RegisterKind",
    "ScaleFactor",
    # Table and indexes
    "BOTH",
    "BY_ADDRESS",
    "BY_NAME",
    "CONTROLLER_REGISTERS",
    "CURRENT_ONLY",
    "registers_for_layout",
    # Addresses
    "REG_ACTIVE_POWER",
    "REG_CHARGE_POINT_MODEL",
    "REG_CHARGE_POINT_STATE",
    "REG_CURRENTS",
    "REG_EVCCID",
    "REG_EV_BATTERY_STATE",
    "REG_FIRMWARE",
    "REG_HEMS_CURRENT_LIMIT",
    "REG_HEMS_CURRENT_LIMIT_10",
    "REG_HEMS_POWER_LIMIT",
    "REG_OCPP_CP_STATUS",
    "REG_PHASE_ENERGY",
    "REG_PROTOCOL_VERSION",
    "REG_SMART_VEHICLE_DETECTED",
    "REG_TOTAL_ENERGY",
    "REG_USER_ID",
    "REG_VOLTAGES",
    # Constants
    "MAX_SOC",
    "MIN_CHARGE_CURRENT",
    "NOMINAL_VOLTAGE",
    "POWER_LIMIT_1P",
    "POWER_LIMIT_3P",
    "U32_NO_DATA",
]
