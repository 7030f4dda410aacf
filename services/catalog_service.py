"""
services/catalog_service.py
===========================
Builds MaterialCatalog instances from the presets in config.py or from a YAML
file, and exposes catalog contents as dropdown options and DataFrames.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import pandas as pd
import yaml

from config import (
    DOOR_U_VALUES,
    FLOOR_MATERIALS,
    GLAZING_U_VALUES,
    INSULATION_MATERIALS,
    ROOF_MATERIALS,
    WALL_MATERIALS,
)
from domain.materials import Material, MaterialCatalog, OpeningType

logger = logging.getLogger(__name__)

# table key in config/YAML → MaterialCatalog attribute
MATERIAL_TABLES = {"wall": "walls", "roof": "roofs", "floor": "floors", "insulation": "insulation"}
OPENING_TABLES = {"window": "windows", "door": "doors"}


def default_catalog() -> MaterialCatalog:
    """Catalog built from the presets in config.py."""
    return catalog_from_tables({
        "wall":       WALL_MATERIALS,
        "roof":       ROOF_MATERIALS,
        "floor":      FLOOR_MATERIALS,
        "insulation": INSULATION_MATERIALS,
        "window":     GLAZING_U_VALUES,
        "door":       DOOR_U_VALUES,
    })


def catalog_from_tables(tables: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> MaterialCatalog:
    """
    Build a catalog from nested ``{table: {id: properties}}`` mappings.

    Material entries need ``thermal_conductivity``; window and door entries
    need ``u_value``. Missing tables are left empty.
    """
    kwargs: Dict[str, Dict[str, Any]] = {}
    for key, attr in MATERIAL_TABLES.items():
        kwargs[attr] = {
            ident: _material(key, ident, props)
            for ident, props in (tables.get(key) or {}).items()
        }
    for key, attr in OPENING_TABLES.items():
        kwargs[attr] = {
            ident: _opening(key, ident, props)
            for ident, props in (tables.get(key) or {}).items()
        }
    return MaterialCatalog(**kwargs)


def load_catalog(path: Optional[Union[str, Path]] = None) -> MaterialCatalog:
    """
    Load a catalog from a YAML file shaped like ``catalog_from_tables`` input.

    Falls back to the default catalog when no path is given or the file does
    not exist.
    """
    if path is None:
        return default_catalog()
    catalog_file = Path(path)
    if not catalog_file.exists():
        logger.warning("Catalog file %s not found; using built-in catalog.", catalog_file)
        return default_catalog()

    with open(catalog_file, "r", encoding="utf-8") as f:
        tables = yaml.safe_load(f) or {}
    if not isinstance(tables, dict):
        raise ValueError(f"Catalog file {catalog_file} must contain a mapping of tables.")
    catalog = catalog_from_tables(tables)
    logger.info(
        "Loaded catalog from %s (%d wall, %d insulation, %d window, %d door entries).",
        catalog_file, len(catalog.walls), len(catalog.insulation),
        len(catalog.windows), len(catalog.doors),
    )
    return catalog


def catalog_options(catalog: MaterialCatalog, category: str) -> List[Dict[str, str]]:
    """``[{"label": name, "value": id}, ...]`` for one table, in catalog order."""
    attr = MATERIAL_TABLES.get(category) or OPENING_TABLES.get(category)
    if attr is None:
        raise ValueError(f"Unknown catalog category '{category}'.")
    table = getattr(catalog, attr)
    return [{"label": entry.name, "value": ident} for ident, entry in table.items()]


def catalog_table(catalog: MaterialCatalog) -> pd.DataFrame:
    """
    One row per catalog entry.

    Columns: ['Category', 'Id', 'Name', 'Conductivity (W/mK)', 'U-value (W/m²K)', 'Cost (£/m²)']
    """
    rows = []
    for key, attr in MATERIAL_TABLES.items():
        for ident, m in getattr(catalog, attr).items():
            rows.append({
                "Category": key, "Id": ident, "Name": m.name,
                "Conductivity (W/mK)": m.thermal_conductivity,
                "U-value (W/m²K)": None,
                "Cost (£/m²)": m.cost,
            })
    for key, attr in OPENING_TABLES.items():
        for ident, o in getattr(catalog, attr).items():
            rows.append({
                "Category": key, "Id": ident, "Name": o.name,
                "Conductivity (W/mK)": None,
                "U-value (W/m²K)": o.u_value,
                "Cost (£/m²)": None,
            })
    return pd.DataFrame(rows, columns=[
        "Category", "Id", "Name", "Conductivity (W/mK)", "U-value (W/m²K)", "Cost (£/m²)",
    ])


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _material(table: str, ident: str, props: Mapping[str, Any]) -> Material:
    try:
        conductivity = float(props["thermal_conductivity"])
    except (KeyError, TypeError, ValueError):
        raise ValueError(
            f"{table} entry '{ident}' needs a numeric 'thermal_conductivity'."
        ) from None
    return Material(
        id=str(ident),
        name=str(props.get("name", ident)),
        thermal_conductivity=conductivity,
        density=_optional_float(props.get("density")),
        cost=_optional_float(props.get("cost")),
    )


def _opening(table: str, ident: str, props: Mapping[str, Any]) -> OpeningType:
    try:
        u = float(props["u_value"])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"{table} entry '{ident}' needs a numeric 'u_value'.") from None
    return OpeningType(id=str(ident), name=str(props.get("name", ident)), u_value=u)


def _optional_float(x: Any) -> Optional[float]:
    return None if x is None else float(x)
