"""Device classes for pybendercc."""

from ._features import ChargerFeatures, probe_features
from .charger import BenderCharger, compose_charger_class, format_diagnostics

__all__ = [
    "BenderCharger",
    "ChargerFeatures",
    "compose_charger_class",
    "format_diagnostics",
    "probe_features",
]
