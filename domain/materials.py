"""
domain/materials.py
===================
Material and opening-type records and the read-only catalog they live in.

Lookups fail closed: an identifier missing from the catalog raises
UnresolvedMaterialError, never a default value.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


class UnresolvedMaterialError(LookupError):
    """A material, insulation, glazing or door identifier is not in the catalog."""

    def __init__(self, category: str, identifier: str) -> None:
        self.category = category
        self.identifier = identifier
        super().__init__(f"Material not found: {category} '{identifier}'")


@dataclass(frozen=True)
class Material:
    """
    Opaque layer material.

    Parameters
    ----------
    id                   : Catalog identifier
    name                 : Display name
    thermal_conductivity : λ  [W/(m·K)]
    density              : Optional  [kg/m³]
    cost                 : Optional installed cost  [£/m²]
    """

    id: str
    name: str
    thermal_conductivity: float
    density: Optional[float] = None
    cost: Optional[float] = None


@dataclass(frozen=True)
class OpeningType:
    """Glazing or door product with a nominal U-value [W/(m²·K)]."""

    id: str
    name: str
    u_value: float


def _freeze(table: Optional[Mapping[str, object]]) -> Mapping[str, object]:
    return MappingProxyType(dict(table or {}))


@dataclass(frozen=True)
class MaterialCatalog:
    """Six keyed lookup tables. Never mutated by the calculator."""

    walls: Mapping[str, Material] = field(default_factory=dict)
    roofs: Mapping[str, Material] = field(default_factory=dict)
    floors: Mapping[str, Material] = field(default_factory=dict)
    insulation: Mapping[str, Material] = field(default_factory=dict)
    windows: Mapping[str, OpeningType] = field(default_factory=dict)
    doors: Mapping[str, OpeningType] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("walls", "roofs", "floors", "insulation", "windows", "doors"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def wall_material(self, identifier: str) -> Material:
        return _lookup(self.walls, "wall material", identifier)

    def roof_material(self, identifier: str) -> Material:
        return _lookup(self.roofs, "roof material", identifier)

    def floor_material(self, identifier: str) -> Material:
        return _lookup(self.floors, "floor material", identifier)

    def insulation_material(self, identifier: str, element: str = "wall") -> Material:
        return _lookup(self.insulation, f"{element} insulation", identifier)

    def window_type(self, identifier: str) -> OpeningType:
        return _lookup(self.windows, "window type", identifier)

    def door_type(self, identifier: str) -> OpeningType:
        return _lookup(self.doors, "door type", identifier)


def _lookup(table: Mapping[str, object], category: str, identifier: str):
    try:
        return table[identifier]
    except (KeyError, TypeError):
        raise UnresolvedMaterialError(category, identifier) from None
