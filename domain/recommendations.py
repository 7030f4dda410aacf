"""
domain/recommendations.py
=========================
Rule-based improvement advice for a computed room.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from config import (
    INSULATION_COST_HIGH,
    U_VALUE_MODERATE,
    U_VALUE_POOR,
    WINDOW_WALL_RATIO_MAX,
)
from domain.materials import MaterialCatalog
from domain.performance import PerformanceResult
from domain.room import RoomConfiguration


@dataclass(frozen=True)
class Recommendation:
    kind: str          # 'warning' | 'info' | 'success'
    title: str
    description: str
    priority: str      # 'High' | 'Medium' | 'Low'


def recommend(
    room: RoomConfiguration,
    result: PerformanceResult,
    catalog: MaterialCatalog,
) -> List[Recommendation]:
    """Advice ordered as: insulation level, glazing share, insulation cost."""
    advice = [_insulation_level(result.u_value)]

    if room.windows.count > 0:
        wall_area = room.geometry.gross_wall_area
        if wall_area > 0 and room.windows.area / wall_area > WINDOW_WALL_RATIO_MAX:
            advice.append(Recommendation(
                "warning", "Many Windows",
                "Window area is high. Consider better quality glass.",
                "Medium",
            ))

    insulation = catalog.insulation_material(room.walls.insulation, "wall")
    if insulation.cost is not None and insulation.cost > INSULATION_COST_HIGH:
        advice.append(Recommendation(
            "info", "Economic Alternatives",
            "Consider more economical insulation materials like EPS or fiberglass.",
            "Low",
        ))
    return advice


def _insulation_level(overall_u: float) -> Recommendation:
    if overall_u > U_VALUE_POOR:
        return Recommendation(
            "warning", "Insufficient Insulation",
            "The U-coefficient is high. Improving thermal insulation is recommended.",
            "High",
        )
    if overall_u > U_VALUE_MODERATE:
        return Recommendation(
            "info", "Moderate Insulation",
            "Insulation is acceptable but can be improved for better efficiency.",
            "Medium",
        )
    return Recommendation(
        "success", "Excellent Insulation",
        "Thermal insulation meets high efficiency standards.",
        "Low",
    )
