"""
tests/test_performance.py
Tests for domain/performance.py (ThermalPerformanceCalculator),
domain/materials.py (MaterialCatalog) and domain/recommendations.py.
"""
import dataclasses

import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.materials import Material, MaterialCatalog, OpeningType, UnresolvedMaterialError
from domain.performance import (
    DesignConditions,
    PerformanceResult,
    ThermalPerformanceCalculator,
    compute_performance,
)
from domain.recommendations import recommend
from domain.room import (
    AdjacencyFlags,
    BuildingElementConfig,
    DoorConfig,
    RoomConfiguration,
    RoomGeometry,
    WindowConfig,
)
from services.catalog_service import default_catalog

ALL_ADJACENT = AdjacencyFlags(front=True, back=True, left=True, right=True, ceiling=True, floor=True)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def base_room():
    return RoomConfiguration(
        geometry=RoomGeometry(length=5.0, width=4.0, height=2.5),
        walls=BuildingElementConfig("brick", 0.2, "rockwool", 0.1),
        roof=BuildingElementConfig("concrete", 0.15, "polyurethane", 0.1),
        floor=BuildingElementConfig("concrete", 0.15, "polyurethane", 0.1),
        windows=WindowConfig(count=2, width=1.2, height=1.5, type="double"),
        door=DoorConfig(width=0.8, height=2.0, type="wood_insulated"),
    )


def with_adjacency(room, **flags):
    return dataclasses.replace(room, adjacency=AdjacencyFlags(**flags))


# ---------------------------------------------------------------------------
# ThermalPerformanceCalculator
# ---------------------------------------------------------------------------
class TestComputePerformance:

    def test_fully_exposed_room(self, base_room, catalog):
        r = compute_performance(base_room, catalog)
        assert r.heat_loss > 0
        assert r.u_value > 0
        assert r.energy_consumption_per_year > 0
        assert r.energy_score < 92

    def test_fully_exposed_reference_values(self, base_room, catalog):
        # H_F ≈ 35.76 W/K over an 85 m² nominal envelope
        r = compute_performance(base_room, catalog)
        assert r.heat_loss == pytest.approx(715.15, abs=0.1)
        assert r.u_value == pytest.approx(0.4207, abs=1e-3)
        assert r.energy_consumption_per_year == pytest.approx(715.15 * 2000 / 850, abs=0.2)
        assert r.energy_score == 83
        assert r.energy_band == "B"

    def test_fully_enclosed_room(self, base_room, catalog):
        r = compute_performance(dataclasses.replace(base_room, adjacency=ALL_ADJACENT), catalog)
        assert r == PerformanceResult(u_value=0, heat_loss=0, energy_score=100, energy_consumption_per_year=0)

    def test_fully_enclosed_ignores_other_fields(self, base_room, catalog):
        room = dataclasses.replace(
            base_room,
            adjacency=ALL_ADJACENT,
            walls=BuildingElementConfig("concrete", 0.1),
            windows=WindowConfig(count=8, width=2.0, height=2.0, type="single"),
        )
        r = compute_performance(room, catalog)
        assert (r.heat_loss, r.u_value, r.energy_score, r.energy_consumption_per_year) == (0, 0, 100, 0)

    def test_partial_adjacency_reduces_loss(self, base_room, catalog):
        full = compute_performance(base_room, catalog)
        partial = compute_performance(with_adjacency(base_room, front=True, ceiling=True), catalog)
        assert partial.heat_loss < full.heat_loss
        assert partial.u_value < full.u_value
        assert partial.energy_score > full.energy_score
        assert partial.energy_consumption_per_year < full.energy_consumption_per_year

    def test_lower_conductivity_insulation_better(self, base_room, catalog):
        poly = dataclasses.replace(base_room, walls=BuildingElementConfig("brick", 0.2, "polyurethane", 0.1))
        rock = dataclasses.replace(base_room, walls=BuildingElementConfig("brick", 0.2, "rockwool", 0.1))
        p, r = compute_performance(poly, catalog), compute_performance(rock, catalog)
        assert p.heat_loss < r.heat_loss
        assert p.u_value < r.u_value
        assert p.energy_score > r.energy_score
        assert p.energy_consumption_per_year < r.energy_consumption_per_year

    def test_insulation_beats_none(self, base_room, catalog):
        bare = dataclasses.replace(base_room, walls=BuildingElementConfig("brick", 0.2, "none", 0.1))
        insulated = compute_performance(base_room, catalog)
        uninsulated = compute_performance(bare, catalog)
        assert insulated.heat_loss < uninsulated.heat_loss
        assert insulated.energy_score > uninsulated.energy_score

    def test_none_insulation_thickness_ignored(self, base_room, catalog):
        a = dataclasses.replace(base_room, walls=BuildingElementConfig("brick", 0.2, "none", 0.0))
        b = dataclasses.replace(base_room, walls=BuildingElementConfig("brick", 0.2, "none", 0.3))
        assert compute_performance(a, catalog) == compute_performance(b, catalog)

    def test_triple_glazing_beats_single(self, base_room, catalog):
        single = dataclasses.replace(base_room, windows=WindowConfig(2, 1.2, 1.5, "single"))
        triple = dataclasses.replace(base_room, windows=WindowConfig(2, 1.2, 1.5, "triple"))
        s, t = compute_performance(single, catalog), compute_performance(triple, catalog)
        assert t.heat_loss < s.heat_loss
        assert t.energy_score > s.energy_score

    def test_larger_room_loses_more(self, base_room, catalog):
        small = dataclasses.replace(base_room, geometry=RoomGeometry(3, 3, 2.5))
        large = dataclasses.replace(base_room, geometry=RoomGeometry(8, 6, 2.5))
        s, l = compute_performance(small, catalog), compute_performance(large, catalog)
        assert l.heat_loss > s.heat_loss
        assert abs(l.u_value - s.u_value) < 0.5

    def test_custom_conditions(self, base_room, catalog):
        default = compute_performance(base_room, catalog)
        colder = compute_performance(base_room, catalog, DesignConditions(temperature_difference=40.0))
        assert colder.heat_loss == pytest.approx(2 * default.heat_loss)
        assert colder.u_value == pytest.approx(default.u_value)

    def test_zero_floor_area_scores_one(self, base_room, catalog):
        room = dataclasses.replace(
            base_room,
            geometry=RoomGeometry(0.0, 4.0, 2.5),
            windows=WindowConfig(0, 1.2, 1.5, "double"),
        )
        r = compute_performance(room, catalog)
        assert r.heat_loss > 0
        assert r.energy_score == 1

    def test_score_is_int_in_range(self, base_room, catalog):
        r = compute_performance(base_room, catalog)
        assert isinstance(r.energy_score, int)
        assert 1 <= r.energy_score <= 100


class TestExposedAreas:

    def test_detail_elements(self, base_room, catalog):
        d = ThermalPerformanceCalculator(base_room, catalog).compute_detail()
        assert set(d.elements) == {"walls", "windows", "door", "roof", "floor"}
        assert d.elements["windows"].area == pytest.approx(3.6)
        assert d.elements["door"].area == pytest.approx(1.6)
        assert d.elements["walls"].area == pytest.approx(45.0 - 3.6 - 1.6)
        assert d.elements["roof"].area == pytest.approx(20.0)
        assert d.envelope_area == pytest.approx(85.0)

    def test_bridging_uses_openings_only(self, base_room, catalog):
        d = ThermalPerformanceCalculator(base_room, catalog).compute_detail()
        assert d.bridging_loss == pytest.approx(0.08 * (3.6 + 1.6))
        assert d.total_coefficient == pytest.approx(d.elements_loss + d.bridging_loss)

    def test_front_adjacent_removes_door(self, base_room, catalog):
        d = ThermalPerformanceCalculator(with_adjacency(base_room, front=True), catalog).compute_detail()
        assert d.elements["door"].area == 0
        assert d.elements["walls"].area == pytest.approx(12.5 + 10 + 10 - 3.6)

    def test_windows_dropped_when_all_walls_adjacent(self, base_room, catalog):
        room = with_adjacency(base_room, front=True, back=True, left=True, right=True)
        d = ThermalPerformanceCalculator(room, catalog).compute_detail()
        assert d.elements["windows"].area == 0
        assert d.elements["walls"].area == 0
        assert d.result.heat_loss > 0  # roof and floor still exposed

    def test_wall_area_clamped_at_zero(self, base_room, catalog):
        room = dataclasses.replace(base_room, windows=WindowConfig(20, 2.0, 2.0, "double"))
        d = ThermalPerformanceCalculator(room, catalog).compute_detail()
        assert d.elements["walls"].area == 0

    def test_window_u_value_curtain_adjusted(self, base_room, catalog):
        d = ThermalPerformanceCalculator(base_room, catalog).compute_detail()
        assert d.elements["windows"].u_value == pytest.approx(1 / (1 / 2.8 + 0.04))
        assert d.elements["door"].u_value == 2.0


# ---------------------------------------------------------------------------
# MaterialCatalog
# ---------------------------------------------------------------------------
class TestMaterialCatalog:

    def test_unknown_wall_material(self, base_room, catalog):
        room = dataclasses.replace(base_room, walls=BuildingElementConfig("nonexistent_material", 0.2))
        with pytest.raises(UnresolvedMaterialError) as exc:
            compute_performance(room, catalog)
        assert exc.value.category == "wall material"
        assert exc.value.identifier == "nonexistent_material"
        assert "Material not found" in str(exc.value)

    @pytest.mark.parametrize("field, value, category", [
        ("walls", BuildingElementConfig("brick", 0.2, "straw", 0.1), "wall insulation"),
        ("roof", BuildingElementConfig("thatch", 0.15), "roof material"),
        ("roof", BuildingElementConfig("concrete", 0.15, "straw", 0.1), "roof insulation"),
        ("floor", BuildingElementConfig("marble", 0.15), "floor material"),
        ("floor", BuildingElementConfig("concrete", 0.15, "straw", 0.1), "floor insulation"),
        ("windows", WindowConfig(2, 1.2, 1.5, "quadruple"), "window type"),
        ("door", DoorConfig(0.8, 2.0, "vault"), "door type"),
    ])
    def test_every_lookup_fails_closed(self, base_room, catalog, field, value, category):
        with pytest.raises(UnresolvedMaterialError) as exc:
            compute_performance(dataclasses.replace(base_room, **{field: value}), catalog)
        assert exc.value.category == category

    def test_lookup_precedes_computation(self, base_room):
        # Zero conductivity would fail in the formulas; the missing door type must win.
        broken = MaterialCatalog(
            walls={"brick": Material("brick", "Brick", 0.0)},
            roofs={"concrete": Material("concrete", "Concrete", 1.4)},
            floors={"concrete": Material("concrete", "Concrete", 1.4)},
            insulation={
                "none": Material("none", "None", 0.0),
                "rockwool": Material("rockwool", "Rock Wool", 0.04),
                "polyurethane": Material("polyurethane", "PU", 0.025),
            },
            windows={"double": OpeningType("double", "Double", 2.8)},
            doors={},
        )
        with pytest.raises(UnresolvedMaterialError):
            compute_performance(base_room, broken)

    def test_fully_enclosed_skips_formulas(self, base_room):
        # Zero conductivity cannot be evaluated, but no surface is exposed.
        zero = MaterialCatalog(
            walls={"brick": Material("brick", "Brick", 0.0)},
            roofs={"concrete": Material("concrete", "Concrete", 0.0)},
            floors={"concrete": Material("concrete", "Concrete", 0.0)},
            insulation={
                "none": Material("none", "None", 0.0),
                "rockwool": Material("rockwool", "Rock Wool", 0.04),
                "polyurethane": Material("polyurethane", "PU", 0.025),
            },
            windows={"double": OpeningType("double", "Double", 2.8)},
            doors={"wood_insulated": OpeningType("wood_insulated", "Wood", 2.0)},
        )
        room = dataclasses.replace(base_room, adjacency=ALL_ADJACENT)
        assert compute_performance(room, zero) == PerformanceResult(
            u_value=0, heat_loss=0, energy_score=100, energy_consumption_per_year=0,
        )
        with pytest.raises(ValueError):
            compute_performance(base_room, zero)

    def test_fully_enclosed_still_requires_materials(self, base_room, catalog):
        room = dataclasses.replace(
            base_room, adjacency=ALL_ADJACENT, door=DoorConfig(0.8, 2.0, "vault"),
        )
        with pytest.raises(UnresolvedMaterialError):
            compute_performance(room, catalog)

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.walls["straw"] = Material("straw", "Straw", 0.06)

    def test_none_insulation_present(self, catalog):
        assert catalog.insulation_material("none").thermal_conductivity == 0


# ---------------------------------------------------------------------------
# AdjacencyFlags
# ---------------------------------------------------------------------------
class TestAdjacencyFlags:

    def test_missing_flags_default_to_exposed(self):
        flags = AdjacencyFlags.from_mapping({"front": True, "ceiling": None})
        assert flags.front is True
        assert not any([flags.back, flags.left, flags.right, flags.ceiling, flags.floor])

    def test_none_mapping(self):
        assert AdjacencyFlags.from_mapping(None) == AdjacencyFlags()

    @pytest.mark.parametrize("value, expected", [
        ("false", False), ("False", False), ("0", False), ("", False),
        ("true", True), (" TRUE ", True), ("1", True), (1, True), (0, False),
    ])
    def test_string_flags_parsed(self, value, expected):
        assert AdjacencyFlags.from_mapping({"front": value}).front is expected


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
class TestRecommendations:

    @pytest.mark.parametrize("u, title", [
        (2.5, "Insufficient Insulation"),
        (1.5, "Moderate Insulation"),
        (0.4, "Excellent Insulation"),
    ])
    def test_insulation_level(self, base_room, catalog, u, title):
        result = PerformanceResult(u_value=u, heat_loss=100.0, energy_score=50, energy_consumption_per_year=10.0)
        assert recommend(base_room, result, catalog)[0].title == title

    def test_many_windows(self, base_room, catalog):
        room = dataclasses.replace(base_room, windows=WindowConfig(12, 1.2, 1.5, "double"))
        titles = [r.title for r in recommend(room, compute_performance(room, catalog), catalog)]
        assert "Many Windows" in titles

    def test_expensive_insulation(self, base_room, catalog):
        room = dataclasses.replace(base_room, walls=BuildingElementConfig("brick", 0.2, "polyurethane", 0.1))
        advice = recommend(room, compute_performance(room, catalog), catalog)
        assert any(r.title == "Economic Alternatives" and r.priority == "Low" for r in advice)

    def test_base_room_single_recommendation(self, base_room, catalog):
        advice = recommend(base_room, compute_performance(base_room, catalog), catalog)
        assert [r.kind for r in advice] == ["success"]
