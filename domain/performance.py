"""
domain/performance.py
=====================
Steady-state thermal performance of a single room following the SAP fabric
heat-loss approach: H_F = ΣAᵢ·Uᵢ + H_TB.

Only surfaces facing the exterior count as heat-loss paths; a surface flagged
as adjacent to another heated space contributes nothing. This module has zero
dependencies on pandas or any service layer.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Dict, Optional, Tuple

import config
from domain.formulas import (
    UNINSULATED,
    Insulated,
    InsulationLayer,
    adjust_window_u_value_for_curtains,
    energy_band,
    energy_score_from_consumption,
    fabric_heat_loss_elements,
    round_half_up,
    thermal_bridging_loss,
    thermal_resistance,
    total_fabric_heat_loss,
    u_value,
)
from domain.materials import Material, MaterialCatalog, OpeningType
from domain.room import BuildingElementConfig, RoomConfiguration

logger = logging.getLogger(__name__)

ELEMENTS = ("walls", "windows", "door", "roof", "floor")


@dataclasses.dataclass(frozen=True)
class DesignConditions:
    """
    Fixed assumptions of the calculation.

    temperature_difference : Design inside/outside ΔT          [K]
    heating_hours          : Annual heating operation           [h/year]
    system_efficiency      : Heat generator efficiency          [–]
    rsi_internal           : Internal surface resistance        [m²·K/W]
    rso_external           : External surface resistance        [m²·K/W]
    thermal_bridge_factor  : Linear thermal bridging factor y   [W/(m²·K)]
    """

    temperature_difference: float = config.TEMPERATURE_DIFFERENCE
    heating_hours: float = config.HEATING_HOURS
    system_efficiency: float = config.SYSTEM_EFFICIENCY
    rsi_internal: float = config.RSI_INTERNAL
    rso_external: float = config.RSO_EXTERNAL
    thermal_bridge_factor: float = config.THERMAL_BRIDGE_FACTORS[config.CONSTRUCTION_ERA]


DEFAULT_CONDITIONS = DesignConditions()


@dataclasses.dataclass(frozen=True)
class PerformanceResult:
    """
    u_value                     : Total H_F over the nominal envelope  [W/(m²·K)]
    heat_loss                   : Design heat loss                     [W]
    energy_score                : EPC-style score                      [1–100]
    energy_consumption_per_year : Delivered heating energy             [kWh/year]
    """

    u_value: float
    heat_loss: float
    energy_score: int
    energy_consumption_per_year: float

    @property
    def energy_band(self) -> str:
        return energy_band(self.energy_score)


ENCLOSED_RESULT = PerformanceResult(
    u_value=0.0, heat_loss=0.0, energy_score=100, energy_consumption_per_year=0.0,
)


@dataclasses.dataclass(frozen=True)
class ElementLoss:
    """One heat-loss path: exposed area [m²], U-value [W/(m²·K)], A·U [W/K]."""

    area: float
    u_value: float

    @property
    def coefficient(self) -> float:
        return self.area * self.u_value


@dataclasses.dataclass(frozen=True)
class PerformanceBreakdown:
    """Result plus the intermediate quantities it was derived from."""

    result: PerformanceResult
    elements: Dict[str, ElementLoss]
    elements_loss: float
    bridging_loss: float
    total_coefficient: float
    envelope_area: float
    energy_per_m2: float

    @property
    def exposed_area(self) -> float:
        return sum(e.area for e in self.elements.values())


@dataclasses.dataclass(frozen=True)
class _Resolved:
    wall: Material
    wall_insulation: Material
    roof: Material
    roof_insulation: Material
    floor: Material
    floor_insulation: Material
    window: OpeningType
    door: OpeningType


@dataclasses.dataclass
class ThermalPerformanceCalculator:
    """
    Fabric heat loss, energy use and EPC-style score for one room.

    Required
    --------
    room    : RoomConfiguration snapshot
    catalog : MaterialCatalog resolving every identifier in ``room``

    Defaults
    --------
    conditions : ΔT=20 K, 2000 h/year, η=0.85, Rsi=0.13, Rso=0.04, y=0.08
    """

    room: RoomConfiguration
    catalog: MaterialCatalog
    conditions: DesignConditions = DEFAULT_CONDITIONS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compute(self) -> PerformanceResult:
        """Return the performance summary for the room."""
        return self.compute_detail().result

    def compute_detail(self) -> PerformanceBreakdown:
        """Return the summary together with per-element figures."""
        resolved = self._resolve_materials()
        areas = self._compute_exposed_areas()
        envelope = self.room.geometry.envelope_area

        if sum(areas.values()) == 0:
            logger.debug("Room fully enclosed by heated spaces; no fabric heat loss.")
            return PerformanceBreakdown(
                result=ENCLOSED_RESULT,
                elements={name: ElementLoss(0.0, 0.0) for name in ELEMENTS},
                elements_loss=0.0, bridging_loss=0.0, total_coefficient=0.0,
                envelope_area=envelope, energy_per_m2=0.0,
            )

        u_values = self._compute_u_values(resolved)
        elements = {name: ElementLoss(areas[name], u_values[name]) for name in ELEMENTS}

        elements_loss = fabric_heat_loss_elements(elements.values())
        bridging = thermal_bridging_loss(
            areas["windows"] + areas["door"], self.conditions.thermal_bridge_factor,
        )
        total = total_fabric_heat_loss(elements_loss, bridging)
        result, energy_per_m2 = self._format_result(total, envelope)
        return PerformanceBreakdown(
            result=result, elements=elements, elements_loss=elements_loss,
            bridging_loss=bridging, total_coefficient=total,
            envelope_area=envelope, energy_per_m2=energy_per_m2,
        )

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    def _resolve_materials(self) -> _Resolved:
        room, cat = self.room, self.catalog
        return _Resolved(
            wall=cat.wall_material(room.walls.material),
            wall_insulation=cat.insulation_material(room.walls.insulation, "wall"),
            roof=cat.roof_material(room.roof.material),
            roof_insulation=cat.insulation_material(room.roof.insulation, "roof"),
            floor=cat.floor_material(room.floor.material),
            floor_insulation=cat.insulation_material(room.floor.insulation, "floor"),
            window=cat.window_type(room.windows.type),
            door=cat.door_type(room.door.type),
        )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def _compute_exposed_areas(self) -> Dict[str, float]:
        geo, adj = self.room.geometry, self.room.adjacency

        window_area = self.room.windows.area if adj.has_exposed_wall else 0.0
        door_area = 0.0 if adj.front else self.room.door.area

        walls = 0.0
        if not adj.front:
            walls += geo.front_wall_area
        if not adj.back:
            walls += geo.front_wall_area
        if not adj.left:
            walls += geo.side_wall_area
        if not adj.right:
            walls += geo.side_wall_area

        areas = {
            "walls":   max(0.0, walls - window_area - door_area),
            "windows": window_area,
            "door":    door_area,
            "roof":    0.0 if adj.ceiling else geo.roof_area,
            "floor":   0.0 if adj.floor else geo.floor_area,
        }
        logger.debug("Exposed areas [m²]: %s", areas)
        return areas

    # ------------------------------------------------------------------
    # U-values
    # ------------------------------------------------------------------

    def _compute_u_values(self, resolved: _Resolved) -> Dict[str, float]:
        return {
            "walls":   self._element_u_value(self.room.walls, resolved.wall, resolved.wall_insulation),
            "windows": adjust_window_u_value_for_curtains(resolved.window.u_value),
            "door":    resolved.door.u_value,
            "roof":    self._element_u_value(self.room.roof, resolved.roof, resolved.roof_insulation),
            "floor":   self._element_u_value(self.room.floor, resolved.floor, resolved.floor_insulation),
        }

    def _element_u_value(
        self,
        element: BuildingElementConfig,
        base: Material,
        insulation: Material,
    ) -> float:
        layer: InsulationLayer = UNINSULATED
        if element.is_insulated:
            layer = Insulated(element.insulation_thickness, insulation.thermal_conductivity)
        r = thermal_resistance(
            element.thickness, base.thermal_conductivity,
            self.conditions.rsi_internal, self.conditions.rso_external,
            layer,
        )
        return u_value(r)

    # ------------------------------------------------------------------
    # Output formatting
    # ------------------------------------------------------------------

    def _format_result(self, total: float, envelope: float) -> Tuple[PerformanceResult, float]:
        c = self.conditions
        overall_u = total / envelope if envelope > 0 else 0.0
        heat_loss = total * c.temperature_difference
        consumption = heat_loss * c.heating_hours / (1000.0 * c.system_efficiency)

        floor_area = self.room.geometry.floor_area
        if floor_area > 0:
            energy_per_m2 = consumption / floor_area
        else:
            energy_per_m2 = math.inf if consumption > 0 else 0.0

        score = round_half_up(energy_score_from_consumption(energy_per_m2))
        score = min(100, max(1, score))
        result = PerformanceResult(
            u_value=overall_u,
            heat_loss=heat_loss,
            energy_score=score,
            energy_consumption_per_year=consumption,
        )
        return result, energy_per_m2


def compute_performance(
    room: RoomConfiguration,
    catalog: MaterialCatalog,
    conditions: Optional[DesignConditions] = None,
) -> PerformanceResult:
    """Performance summary for ``room``; raises UnresolvedMaterialError on unknown ids."""
    return ThermalPerformanceCalculator(room, catalog, conditions or DEFAULT_CONDITIONS).compute()
