"""
domain/formulas.py
==================
Building-physics formulas per BS EN ISO 6946 and the SAP fabric heat-loss
approach, plus the UK EPC rating bands.

Pure functions only: no knowledge of room structure, catalogs or services.
Resistances in m²·K/W, U-values in W/(m²·K), heat-loss coefficients in W/K.
"""
from __future__ import annotations

import dataclasses
import math
from typing import Any, Iterable, List, Tuple, Union

import numpy as np

from config import EPC_BANDS

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
CURTAIN_RESISTANCE: float = 0.04   # Added resistance of drawn curtains [m²·K/W]

# (upper kWh/m²/year bound, score at band start, score drop over band, band width,
#  min score, max score)
_SCORE_BANDS: List[Tuple[float, float, float, float, float, float]] = [
    (90.0,  92.0, 11.0, 40.0,  81.0, 91.0),   # B
    (150.0, 81.0, 12.0, 60.0,  69.0, 80.0),   # C
    (230.0, 69.0, 14.0, 80.0,  55.0, 68.0),   # D
    (330.0, 55.0, 16.0, 100.0, 39.0, 54.0),   # E
    (450.0, 39.0, 18.0, 120.0, 21.0, 38.0),   # F
]
_BAND_A_LIMIT: float = 50.0


# ---------------------------------------------------------------------------
# Insulation layer variants
# ---------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class Insulated:
    """Insulation layer present: thickness [m], conductivity λ [W/(m·K)]."""

    thickness: float
    conductivity: float

    def __post_init__(self) -> None:
        if not self.conductivity > 0:
            raise ValueError(
                f"Insulation conductivity must be positive, got {self.conductivity}."
            )

    @property
    def resistance(self) -> float:
        return self.thickness / self.conductivity


@dataclasses.dataclass(frozen=True)
class Uninsulated:
    """No insulation layer; contributes no resistance."""

    @property
    def resistance(self) -> float:
        return 0.0


UNINSULATED = Uninsulated()
InsulationLayer = Union[Insulated, Uninsulated]


# ---------------------------------------------------------------------------
# Element formulas
# ---------------------------------------------------------------------------

def thermal_resistance(
    base_thickness: float,
    base_conductivity: float,
    rsi_internal: float,
    rso_external: float,
    insulation: InsulationLayer = UNINSULATED,
) -> float:
    """
    Total thermal resistance R = Rsi + d₁/λ₁ + d₂/λ₂ + Rso  [m²·K/W].

    The insulation term is only present for an ``Insulated`` layer.
    """
    if not base_conductivity > 0:
        raise ValueError(
            f"Base material conductivity must be positive, got {base_conductivity}."
        )
    base = base_thickness / base_conductivity
    return rsi_internal + base + insulation.resistance + rso_external


def u_value(resistance: float) -> float:
    """U = 1/R. The caller guarantees R > 0."""
    return 1.0 / resistance


def adjust_window_u_value_for_curtains(u: float) -> float:
    """Window U-value with the curtain resistance added in series."""
    return 1.0 / (1.0 / u + CURTAIN_RESISTANCE)


def _area_and_u(element: Any) -> Tuple[float, float]:
    if isinstance(element, dict):
        return float(element["area"]), float(element["u_value"])
    return float(element.area), float(element.u_value)


def fabric_heat_loss_elements(elements: Iterable[Any]) -> float:
    """ΣAᵢ·Uᵢ over elements exposing ``area`` and ``u_value`` (objects or dicts)  [W/K]."""
    total = 0.0
    for element in elements:
        area, u = _area_and_u(element)
        total += area * u
    return total


def thermal_bridging_loss(total_external_area: float, thermal_bridge_factor: float) -> float:
    """H_TB = y · A_ext  [W/K]."""
    return thermal_bridge_factor * total_external_area


def total_fabric_heat_loss(elements_loss: float, bridging_loss: float) -> float:
    """H_F = ΣAᵢ·Uᵢ + H_TB  [W/K]."""
    return elements_loss + bridging_loss


# ---------------------------------------------------------------------------
# Energy rating
# ---------------------------------------------------------------------------

def energy_score_from_consumption(energy_per_m2: float) -> float:
    """
    Score on the 1–100 EPC scale for a consumption in kWh/m²/year.

    Linear within each band and clamped to the band's score range, so the
    score never increases with consumption. Not rounded.
    """
    if energy_per_m2 < _BAND_A_LIMIT:
        return float(np.clip(100.0 - energy_per_m2, 92.0, 100.0))
    lower = _BAND_A_LIMIT
    for upper, start, drop, width, low, high in _SCORE_BANDS:
        if energy_per_m2 <= upper:
            return float(np.clip(start - (energy_per_m2 - lower) / width * drop, low, high))
        lower = upper
    return float(np.clip(21.0 - (energy_per_m2 - 450.0) / 100.0 * 20.0, 1.0, 20.0))


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded upward."""
    return int(math.floor(value + 0.5))


def energy_band(score: float) -> str:
    """EPC letter A–G for a 1–100 score."""
    for letter, low, _high, _colour in EPC_BANDS:
        if score >= low:
            return letter
    return EPC_BANDS[-1][0]
