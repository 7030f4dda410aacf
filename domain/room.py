"""
domain/room.py
==============
Room configuration: geometry, opaque building elements, openings and the
adjacency flags that decide which surfaces lose heat.

All lengths in m, areas in m². Instances are frozen snapshots.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from config import NO_INSULATION


@dataclass(frozen=True)
class RoomGeometry:
    """Rectangular room: length (front/back walls), width (left/right walls), height."""

    length: float
    width: float
    height: float

    @property
    def floor_area(self) -> float:
        return self.length * self.width

    @property
    def roof_area(self) -> float:
        return self.length * self.width

    @property
    def gross_wall_area(self) -> float:
        return 2.0 * (self.length + self.width) * self.height

    @property
    def front_wall_area(self) -> float:
        """Front and back walls each span the room length."""
        return self.length * self.height

    @property
    def side_wall_area(self) -> float:
        """Left and right walls each span the room width."""
        return self.width * self.height

    @property
    def envelope_area(self) -> float:
        """Nominal envelope: all walls, roof and floor, adjacency ignored."""
        return self.gross_wall_area + self.roof_area + self.floor_area


@dataclass(frozen=True)
class BuildingElementConfig:
    """
    Wall, roof or floor build-up.

    Parameters
    ----------
    material             : Base material identifier
    thickness            : Base layer thickness            [m]
    insulation           : Insulation identifier or "none"
    insulation_thickness : Insulation thickness (ignored when "none")  [m]
    """

    material: str
    thickness: float
    insulation: str = NO_INSULATION
    insulation_thickness: float = 0.0

    @property
    def is_insulated(self) -> bool:
        return self.insulation != NO_INSULATION


@dataclass(frozen=True)
class WindowConfig:
    count: int
    width: float
    height: float
    type: str

    @property
    def area(self) -> float:
        return self.count * self.width * self.height


@dataclass(frozen=True)
class DoorConfig:
    """The room's single door; always on the front wall."""

    width: float
    height: float
    type: str

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class AdjacencyFlags:
    """True marks a surface that abuts another heated space (no heat loss)."""

    front: bool = False
    back: bool = False
    left: bool = False
    right: bool = False
    ceiling: bool = False
    floor: bool = False

    @classmethod
    def from_mapping(cls, flags: Optional[Mapping[str, object]]) -> "AdjacencyFlags":
        """
        Build from a partial mapping; missing or None entries mean exposed.

        Strings are parsed ("true", "yes", "1" are adjacent), so a form value
        of "false" stays exposed.
        """
        flags = flags or {}
        return cls(**{
            name: _as_flag(flags.get(name))
            for name in ("front", "back", "left", "right", "ceiling", "floor")
        })

    @property
    def has_exposed_wall(self) -> bool:
        return not (self.front and self.back and self.left and self.right)


@dataclass(frozen=True)
class RoomConfiguration:
    geometry: RoomGeometry
    walls: BuildingElementConfig
    roof: BuildingElementConfig
    floor: BuildingElementConfig
    windows: WindowConfig
    door: DoorConfig
    adjacency: AdjacencyFlags = field(default_factory=AdjacencyFlags)


def _as_flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)
