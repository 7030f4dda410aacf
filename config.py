"""
config.py
=========
Application-wide constants: design conditions, material catalog presets,
EPC band display data and recommendation thresholds. No business logic lives here.
"""
from __future__ import annotations
from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Design conditions (UK heating assumptions)
# ---------------------------------------------------------------------------
TEMPERATURE_DIFFERENCE: float = 20.0   # Inside – outside design ΔT       [K]
HEATING_HOURS: float = 2000.0          # Annual heating operation          [h/year]
SYSTEM_EFFICIENCY: float = 0.85        # Condensing boiler efficiency      [–]

# Surface resistances per BS EN ISO 6946  [m²·K/W]
RSI_INTERNAL: float = 0.13
RSO_EXTERNAL: float = 0.04

# Linear thermal bridging factor y by construction era  [W/(m²·K)]
THERMAL_BRIDGE_FACTORS: Dict[str, float] = {
    "pre2002":  0.15,   # Poor thermal bridging control
    "year2002": 0.11,   # 2002 building regulations
    "post2006": 0.08,   # Improved detailing
}
CONSTRUCTION_ERA = "post2006"

CO2_FACTOR: float = 0.4                # Approximate emission factor       [kg CO₂/kWh]

# ---------------------------------------------------------------------------
# Material catalog presets  (id → properties)
# ---------------------------------------------------------------------------
NO_INSULATION = "none"

WALL_MATERIALS: Dict[str, Dict[str, object]] = {
    "brick":        {"name": "Solid Brick",  "thermal_conductivity": 0.87, "density": 1800},
    "concrete":     {"name": "Concrete",     "thermal_conductivity": 1.4,  "density": 2300},
    "wood":         {"name": "Wood",         "thermal_conductivity": 0.15, "density": 500},
    "hollow_brick": {"name": "Hollow Brick", "thermal_conductivity": 0.45, "density": 1200},
}

ROOF_MATERIALS: Dict[str, Dict[str, object]] = {
    "concrete": {"name": "Concrete Slab",  "thermal_conductivity": 1.4,  "density": 2300},
    "wood":     {"name": "Wood Structure", "thermal_conductivity": 0.15, "density": 500},
    "metal":    {"name": "Metal Sheet",    "thermal_conductivity": 50.0, "density": 7800},
}

FLOOR_MATERIALS: Dict[str, Dict[str, object]] = {
    "concrete": {"name": "Concrete Slab",         "thermal_conductivity": 1.4,  "density": 2300},
    "timber":   {"name": "Suspended Timber",      "thermal_conductivity": 0.13, "density": 500},
    "screed":   {"name": "Sand/Cement Screed",    "thermal_conductivity": 1.15, "density": 2100},
}

INSULATION_MATERIALS: Dict[str, Dict[str, object]] = {
    NO_INSULATION:  {"name": "No Insulation",              "thermal_conductivity": 0.0,   "cost": 0},
    "rockwool":     {"name": "Rock Wool",                  "thermal_conductivity": 0.04,  "cost": 15},
    "eps":          {"name": "Expanded Polystyrene (EPS)", "thermal_conductivity": 0.035, "cost": 12},
    "polyurethane": {"name": "Polyurethane",               "thermal_conductivity": 0.025, "cost": 25},
    "fiberglass":   {"name": "Fiberglass",                 "thermal_conductivity": 0.045, "cost": 10},
    "cellulose":    {"name": "Cellulose",                  "thermal_conductivity": 0.042, "cost": 8},
}

GLAZING_U_VALUES: Dict[str, Dict[str, object]] = {
    "single": {"name": "Single Glass",      "u_value": 5.8},
    "double": {"name": "Double Glazing",    "u_value": 2.8},
    "triple": {"name": "Triple Glazing",    "u_value": 1.6},
    "low_e":  {"name": "Double with Low-E", "u_value": 2.2},
}

DOOR_U_VALUES: Dict[str, Dict[str, object]] = {
    "wood_basic":      {"name": "Basic Wood Door",          "u_value": 3.0},
    "wood_insulated":  {"name": "Insulated Wood Door",      "u_value": 2.0},
    "steel_basic":     {"name": "Basic Steel Door",         "u_value": 2.5},
    "steel_insulated": {"name": "Insulated Steel Door",     "u_value": 1.5},
    "fiberglass":      {"name": "Fiberglass Door",          "u_value": 1.8},
    "composite":       {"name": "Composite Insulated Door", "u_value": 1.2},
}

# ---------------------------------------------------------------------------
# EPC bands  (letter, min score, max score, colour)
# ---------------------------------------------------------------------------
EpcBand = Tuple[str, int, int, str]
EPC_BANDS: List[EpcBand] = [
    ("A", 92, 100, "#22c55e"),
    ("B", 81, 91,  "#16a34a"),
    ("C", 69, 80,  "#84cc16"),
    ("D", 55, 68,  "#eab308"),
    ("E", 39, 54,  "#f97316"),
    ("F", 21, 38,  "#ef4444"),
    ("G", 1,  20,  "#dc2626"),
]

# ---------------------------------------------------------------------------
# Recommendation thresholds
# ---------------------------------------------------------------------------
U_VALUE_POOR: float = 2.0            # Above → insufficient insulation  [W/(m²·K)]
U_VALUE_MODERATE: float = 1.0        # Above → moderate insulation      [W/(m²·K)]
WINDOW_WALL_RATIO_MAX: float = 0.4   # Glazed share of gross wall area  [–]
INSULATION_COST_HIGH: float = 20.0   # Above → suggest cheaper material [£/m²]
