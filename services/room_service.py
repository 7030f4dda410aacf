"""
services/room_service.py
========================
Orchestrates room-level thermal performance calculations.

Takes raw room inputs (nested dicts as sent by a UI or read from JSON) →
delegates to domain objects → returns results and DataFrames ready for
display. Display layers must not re-derive physics quantities themselves.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from config import CO2_FACTOR, NO_INSULATION
from domain.materials import MaterialCatalog
from domain.performance import (
    DEFAULT_CONDITIONS,
    DesignConditions,
    PerformanceBreakdown,
    PerformanceResult,
    ThermalPerformanceCalculator,
    compute_performance,
)
from domain.room import (
    AdjacencyFlags,
    BuildingElementConfig,
    DoorConfig,
    RoomConfiguration,
    RoomGeometry,
    WindowConfig,
)

logger = logging.getLogger(__name__)

ELEMENT_LABELS = {
    "walls":   "Walls",
    "windows": "Windows",
    "door":    "Door",
    "roof":    "Roof",
    "floor":   "Floor",
}

_DEFAULT_ROOM: Dict[str, Any] = {
    "dimensions": {"length": 4.0, "width": 4.0, "height": 2.5},
    "walls": {"material": "brick", "thickness": 0.2,
              "insulation": "rockwool", "insulationThickness": 0.05},
    "windows": {"count": 2, "width": 1.2, "height": 1.5, "type": "double"},
    "door": {"width": 0.9, "height": 2.1, "type": "wood_basic"},
    "roof": {"material": "concrete", "thickness": 0.15,
             "insulation": "eps", "insulationThickness": 0.08},
    "floor": {"material": "concrete", "thickness": 0.15,
              "insulation": "eps", "insulationThickness": 0.08},
    "adjacentAreas": {"front": False, "back": False, "left": False,
                      "right": False, "ceiling": False, "floor": False},
}


def default_room_inputs() -> Dict[str, Any]:
    """Initial room shown by the tool: 4 × 4 × 2.5 m, fully exposed."""
    return copy.deepcopy(_DEFAULT_ROOM)


def room_from_inputs(inputs: Mapping[str, Any]) -> RoomConfiguration:
    """
    Build a RoomConfiguration from raw nested inputs.

    Sections missing from ``inputs`` (or fields within them) take the default
    room's values, except that a wall, roof or floor section given without
    an ``insulation`` key is uninsulated. Adjacency flags default to not
    adjacent. A fractional window count raises ValueError.
    """
    defaults = _DEFAULT_ROOM
    dims = _section(inputs, defaults, "dimensions")
    windows = _section(inputs, defaults, "windows")
    door = _section(inputs, defaults, "door")

    return RoomConfiguration(
        geometry=RoomGeometry(
            length=_safe_float(dims.get("length"), 0.0),
            width=_safe_float(dims.get("width"), 0.0),
            height=_safe_float(dims.get("height"), 0.0),
        ),
        walls=_element(_element_section(inputs, defaults, "walls")),
        roof=_element(_element_section(inputs, defaults, "roof")),
        floor=_element(_element_section(inputs, defaults, "floor")),
        windows=WindowConfig(
            count=_window_count(windows.get("count")),
            width=_safe_float(windows.get("width"), 0.0),
            height=_safe_float(windows.get("height"), 0.0),
            type=str(windows.get("type")),
        ),
        door=DoorConfig(
            width=_safe_float(door.get("width"), 0.0),
            height=_safe_float(door.get("height"), 0.0),
            type=str(door.get("type")),
        ),
        adjacency=AdjacencyFlags.from_mapping(
            inputs.get("adjacentAreas", inputs.get("adjacency"))
        ),
    )


def compute_room_results(
    rooms: Mapping[str, Mapping[str, Any]],
    catalog: MaterialCatalog,
    conditions: Optional[DesignConditions] = None,
) -> pd.DataFrame:
    """
    Compute every named room and return a results DataFrame.

    Returns columns:
        ['Room', 'U-value (W/m²K)', 'Heat Loss (W)', 'Energy Score',
         'EPC Band', 'Energy (kWh/year)']
    """
    results = []
    for name, inputs in rooms.items():
        result = compute_performance(room_from_inputs(inputs), catalog, conditions)
        results.append({
            "Room": name,
            "U-value (W/m²K)":   result.u_value,
            "Heat Loss (W)":     result.heat_loss,
            "Energy Score":      result.energy_score,
            "EPC Band":          result.energy_band,
            "Energy (kWh/year)": result.energy_consumption_per_year,
        })
    logger.debug("Computed %d room(s).", len(results))
    return pd.DataFrame(results, columns=[
        "Room", "U-value (W/m²K)", "Heat Loss (W)", "Energy Score",
        "EPC Band", "Energy (kWh/year)",
    ])


def compute_room_breakdown(
    inputs: Mapping[str, Any],
    catalog: MaterialCatalog,
    conditions: Optional[DesignConditions] = None,
) -> PerformanceBreakdown:
    """Per-element breakdown for one room."""
    room = room_from_inputs(inputs)
    return ThermalPerformanceCalculator(room, catalog, conditions or DEFAULT_CONDITIONS).compute_detail()


def element_breakdown_table(
    breakdown: PerformanceBreakdown,
    conditions: Optional[DesignConditions] = None,
) -> pd.DataFrame:
    """
    Per-element heat-loss table, thermal bridging as the last row.

    Returns columns:
        ['Element', 'Exposed Area (m²)', 'U-value (W/m²K)',
         'Heat Loss Coefficient (W/K)', 'Heat Loss (W)']
    """
    delta_t = (conditions or DEFAULT_CONDITIONS).temperature_difference
    rows = []
    for key, element in breakdown.elements.items():
        coefficient = element.coefficient
        rows.append({
            "Element":                     ELEMENT_LABELS.get(key, key),
            "Exposed Area (m²)":           element.area,
            "U-value (W/m²K)":             element.u_value,
            "Heat Loss Coefficient (W/K)": coefficient,
            "Heat Loss (W)":               coefficient * delta_t,
        })
    rows.append({
        "Element":                     "Thermal bridging",
        "Exposed Area (m²)":           breakdown.elements["windows"].area + breakdown.elements["door"].area,
        "U-value (W/m²K)":             None,
        "Heat Loss Coefficient (W/K)": breakdown.bridging_loss,
        "Heat Loss (W)":               breakdown.bridging_loss * delta_t,
    })
    return pd.DataFrame(rows)


def compare_configurations(
    current: Mapping[str, Any],
    improved: Mapping[str, Any],
    catalog: MaterialCatalog,
    conditions: Optional[DesignConditions] = None,
) -> Dict[str, Any]:
    """
    Current vs improved room.

    Returns a dict with both PerformanceResults and the savings:
    energy (kWh/year), heat-loss reduction (%), score gain, CO₂ (kg/year).
    """
    before: PerformanceResult = compute_performance(room_from_inputs(current), catalog, conditions)
    after: PerformanceResult = compute_performance(room_from_inputs(improved), catalog, conditions)

    energy_saving = before.energy_consumption_per_year - after.energy_consumption_per_year
    if before.heat_loss > 0:
        reduction = (before.heat_loss - after.heat_loss) / before.heat_loss * 100.0
    else:
        reduction = 0.0

    return {
        "current":                  before,
        "improved":                 after,
        "energySaving":             energy_saving,
        "heatLossReductionPercent": reduction,
        "scoreGain":                after.energy_score - before.energy_score,
        "co2Saving":                energy_saving * CO2_FACTOR,
    }


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _safe_float(x, default=None):
    try:
        if x is None or x == "":
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def _section(inputs: Mapping[str, Any], defaults: Mapping[str, Any], key: str) -> Dict[str, Any]:
    merged = dict(defaults[key])
    merged.update(inputs.get(key) or {})
    return merged


def _element_section(inputs: Mapping[str, Any], defaults: Mapping[str, Any], key: str) -> Dict[str, Any]:
    supplied = inputs.get(key)
    if not supplied:
        return dict(defaults[key])
    merged = {"material": defaults[key]["material"], "thickness": defaults[key]["thickness"],
              "insulation": NO_INSULATION}
    merged.update(supplied)
    return merged


def _window_count(value: Any) -> int:
    count = _safe_float(value, 0.0)
    if not float(count).is_integer():
        raise ValueError(f"Window count must be a whole number, got {value!r}.")
    return int(count)


def _element(section: Mapping[str, Any]) -> BuildingElementConfig:
    insulation = section.get("insulation") or NO_INSULATION
    thickness = section.get("insulation_thickness", section.get("insulationThickness"))
    return BuildingElementConfig(
        material=str(section.get("material")),
        thickness=_safe_float(section.get("thickness"), 0.0),
        insulation=str(insulation),
        insulation_thickness=_safe_float(thickness, 0.0) if insulation != NO_INSULATION else 0.0,
    )
