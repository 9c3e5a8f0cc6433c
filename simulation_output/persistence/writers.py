"""
Model Metadata Writers

One function per metadata table. Each iterates its source collection once,
in 1-based index order, validates a record model per element and steps the
table's prepared insert. Failed rows are logged by the statement and
skipped; the returned count only includes rows the store accepted.

The daylight-map grid is the one bulk write: it can hold thousands of
points per hour, so it goes through a Polars DataFrame in a single insert.
"""

import logging
from collections.abc import Iterable

import duckdb
import polars as pl

from ..building import (
    BaseboardHeater,
    BuildingModel,
    Construction,
    Material,
    NominalAirflow,
    NominalEquipment,
    NominalLighting,
    NominalPeople,
    RoomAirModel,
    Schedule,
    Surface,
    Zone,
    ZoneGroup,
    ZoneList,
)
from .models import (
    ConstructionLayerRecord,
    ConstructionRecord,
    DaylightMapHourlyDataRecord,
    MaterialRecord,
    NominalBaseboardHeaterRecord,
    NominalElectricEquipmentRecord,
    NominalGasEquipmentRecord,
    NominalHotWaterEquipmentRecord,
    NominalInfiltrationRecord,
    NominalLightingRecord,
    NominalOtherEquipmentRecord,
    NominalPeopleRecord,
    NominalSteamEquipmentRecord,
    NominalVentilationRecord,
    RoomAirModelRecord,
    ScheduleRecord,
    SurfaceRecord,
    TableRecord,
    ZoneGroupRecord,
    ZoneListRecord,
    ZoneRecord,
)
from .schema_generator import quote_identifier
from .statements import StatementCache, TransactionLog

logger = logging.getLogger(__name__)

# Name the grid is registered under for the duration of one insert
DAYLIGHT_GRID_VIEW = "daylight_grid"


def _write(statements: StatementCache, records: Iterable[TableRecord]) -> int:
    written = 0
    for record in records:
        stmt = statements[record.table_name()]
        if stmt.bind_record(record) and stmt.step():
            written += 1
        stmt.reset()
        stmt.clear_bindings()
    return written


# ============================================================================
# Zones and Internal Gains
# ============================================================================


def write_zones(statements: StatementCache, zones: list[Zone]) -> int:
    """Write one Zones row per zone.

    Args:
        statements: Prepared statements of the open output database
        zones: Zones in index order

    Returns:
        Number of rows written
    """
    return _write(
        statements,
        (
            ZoneRecord(zone_index=n, zone_name=zone.name, **zone.model_dump(exclude={"name"}))
            for n, zone in enumerate(zones, start=1)
        ),
    )


def write_nominal_lighting(statements: StatementCache, lights: list[NominalLighting]) -> int:
    return _write(
        statements,
        (
            NominalLightingRecord(
                nominal_lighting_index=n,
                object_name=light.name,
                **light.model_dump(exclude={"name"}),
            )
            for n, light in enumerate(lights, start=1)
        ),
    )


def write_nominal_people(statements: StatementCache, people: list[NominalPeople]) -> int:
    return _write(
        statements,
        (
            NominalPeopleRecord(
                nominal_people_index=n,
                object_name=p.name,
                **p.model_dump(exclude={"name"}),
            )
            for n, p in enumerate(people, start=1)
        ),
    )


# Record model and index field for each equipment category
EQUIPMENT_TABLES: dict[str, tuple[type[TableRecord], str]] = {
    "electric": (NominalElectricEquipmentRecord, "nominal_electric_equipment_index"),
    "gas": (NominalGasEquipmentRecord, "nominal_gas_equipment_index"),
    "steam": (NominalSteamEquipmentRecord, "nominal_steam_equipment_index"),
    "hot_water": (NominalHotWaterEquipmentRecord, "nominal_hot_water_equipment_index"),
    "other": (NominalOtherEquipmentRecord, "nominal_other_equipment_index"),
}


def write_nominal_equipment(
    statements: StatementCache,
    category: str,
    equipment: list[NominalEquipment],
) -> int:
    """Write one row per equipment object of one category.

    Args:
        statements: Prepared statements of the open output database
        category: One of EQUIPMENT_TABLES ("electric", "gas", ...)
        equipment: Equipment objects in index order

    Returns:
        Number of rows written

    Raises:
        KeyError: If the category is unknown
    """
    model, index_field = EQUIPMENT_TABLES[category]
    return _write(
        statements,
        (
            model(
                **{index_field: n, "object_name": item.name},
                **item.model_dump(exclude={"name"}),
            )
            for n, item in enumerate(equipment, start=1)
        ),
    )


def write_baseboard_heaters(statements: StatementCache, heaters: list[BaseboardHeater]) -> int:
    return _write(
        statements,
        (
            NominalBaseboardHeaterRecord(
                nominal_baseboard_heater_index=n,
                object_name=heater.name,
                **heater.model_dump(exclude={"name"}),
            )
            for n, heater in enumerate(heaters, start=1)
        ),
    )


def write_nominal_infiltration(statements: StatementCache, items: list[NominalAirflow]) -> int:
    return _write(
        statements,
        (
            NominalInfiltrationRecord(
                nominal_infiltration_index=n,
                object_name=item.name,
                **item.model_dump(exclude={"name"}),
            )
            for n, item in enumerate(items, start=1)
        ),
    )


def write_nominal_ventilation(statements: StatementCache, items: list[NominalAirflow]) -> int:
    return _write(
        statements,
        (
            NominalVentilationRecord(
                nominal_ventilation_index=n,
                object_name=item.name,
                **item.model_dump(exclude={"name"}),
            )
            for n, item in enumerate(items, start=1)
        ),
    )


# ============================================================================
# Envelope
# ============================================================================


def write_surfaces(statements: StatementCache, surfaces: list[Surface]) -> int:
    return _write(
        statements,
        (
            SurfaceRecord(
                surface_index=n,
                surface_name=surface.name,
                **surface.model_dump(exclude={"name"}),
            )
            for n, surface in enumerate(surfaces, start=1)
        ),
    )


def write_constructions(
    statements: StatementCache,
    constructions: list[Construction],
    nominal_u_values: list[float],
) -> int:
    """Write one Constructions row plus one ConstructionLayers row per layer.

    Glazed constructions take their U-value from ``nominal_u_values``
    (indexed like ``constructions``); others use their stored value.

    Returns:
        Number of Constructions rows written (layers not counted)
    """
    written = 0
    for n, construction in enumerate(constructions, start=1):
        if construction.has_glazing:
            u_value = nominal_u_values[n - 1]
        else:
            u_value = construction.u_value

        fields = construction.model_dump(exclude={"name", "layers", "u_value"})
        record = ConstructionRecord(
            construction_index=n,
            name=construction.name,
            total_layers=construction.total_layers,
            u_value=u_value,
            **fields,
        )
        written += _write(statements, [record])
        _write(
            statements,
            (
                ConstructionLayerRecord(
                    construction_index=n, layer_index=layer, material_index=material
                )
                for layer, material in enumerate(construction.layers, start=1)
            ),
        )
    return written


def write_materials(statements: StatementCache, materials: list[Material]) -> int:
    return _write(
        statements,
        (
            MaterialRecord(material_index=n, name=m.name, **m.model_dump(exclude={"name"}))
            for n, m in enumerate(materials, start=1)
        ),
    )


# ============================================================================
# Grouping, Air Models and Schedules
# ============================================================================


def write_zone_lists(statements: StatementCache, zone_lists: list[ZoneList]) -> int:
    """Write one ZoneLists row per (list, member zone) pair."""
    return _write(
        statements,
        (
            ZoneListRecord(zone_list_index=n, name=zone_list.name, zone_index=zone)
            for n, zone_list in enumerate(zone_lists, start=1)
            for zone in zone_list.zones
        ),
    )


def write_zone_groups(statements: StatementCache, zone_groups: list[ZoneGroup]) -> int:
    return _write(
        statements,
        (
            ZoneGroupRecord(
                zone_group_index=n,
                zone_list_name=group.name,
                zone_list_multiplier=group.zone_list_multiplier,
            )
            for n, group in enumerate(zone_groups, start=1)
        ),
    )


def write_room_air_models(statements: StatementCache, models: list[RoomAirModel]) -> int:
    return _write(
        statements,
        (
            RoomAirModelRecord(zone_index=n, **model.model_dump())
            for n, model in enumerate(models, start=1)
        ),
    )


def write_schedules(statements: StatementCache, schedules: list[Schedule]) -> int:
    return _write(
        statements,
        (
            ScheduleRecord(
                schedule_index=n,
                schedule_name=schedule.name,
                schedule_type=schedule.schedule_type,
                schedule_minimum=schedule.minimum,
                schedule_maximum=schedule.maximum,
            )
            for n, schedule in enumerate(schedules, start=1)
        ),
    )


def write_building_model(statements: StatementCache, building: BuildingModel) -> dict[str, int]:
    """Write the complete model-metadata snapshot.

    Returns:
        Rows written per table
    """
    counts = {
        "Zones": write_zones(statements, building.zones),
        "NominalLighting": write_nominal_lighting(statements, building.lighting),
        "NominalPeople": write_nominal_people(statements, building.people),
        "NominalElectricEquipment": write_nominal_equipment(
            statements, "electric", building.electric_equipment
        ),
        "NominalGasEquipment": write_nominal_equipment(
            statements, "gas", building.gas_equipment
        ),
        "NominalSteamEquipment": write_nominal_equipment(
            statements, "steam", building.steam_equipment
        ),
        "NominalHotWaterEquipment": write_nominal_equipment(
            statements, "hot_water", building.hot_water_equipment
        ),
        "NominalOtherEquipment": write_nominal_equipment(
            statements, "other", building.other_equipment
        ),
        "NominalBaseboardHeaters": write_baseboard_heaters(statements, building.baseboard_heaters),
        "NominalInfiltration": write_nominal_infiltration(statements, building.infiltration),
        "NominalVentilation": write_nominal_ventilation(statements, building.ventilation),
        "Surfaces": write_surfaces(statements, building.surfaces),
        "Constructions": write_constructions(
            statements, building.constructions, building.nominal_u_values
        ),
        "Materials": write_materials(statements, building.materials),
        "ZoneLists": write_zone_lists(statements, building.zone_lists),
        "ZoneGroups": write_zone_groups(statements, building.zone_groups),
        "RoomAirModels": write_room_air_models(statements, building.room_air_models),
        "Schedules": write_schedules(statements, building.schedules),
    }
    logger.info("Model metadata written: %d rows", sum(counts.values()))
    return counts


# ============================================================================
# Daylighting Map Grid
# ============================================================================


def write_daylight_map_data(
    transaction: TransactionLog,
    hourly_report_index: int,
    x: list[float],
    y: list[float],
    illuminance: list[list[float]],
) -> int:
    """Write one illuminance map as a single batch insert.

    Uses Polars DataFrame for the batch, inserted via Apache Arrow.
    Rows are ordered y outer, x inner; ``illuminance[i][j]`` is the value
    at ``(x[i], y[j])``.

    Args:
        transaction: Transaction log of the output connection
        hourly_report_index: DaylightMapHourlyReports row the grid belongs to
        x: Grid x coordinates
        y: Grid y coordinates
        illuminance: Values indexed [x][y]

    Returns:
        Number of grid rows written (0 if the insert failed)
    """
    if not x or not y:
        return 0
    if len(illuminance) != len(x) or any(len(column) != len(y) for column in illuminance):
        logger.error(
            "Daylight map grid for report %d is not %d x %d; skipped",
            hourly_report_index,
            len(x),
            len(y),
        )
        return 0

    rows = [
        (hourly_report_index, float(xv), float(yv), float(illuminance[i][j]))
        for j, yv in enumerate(y)
        for i, xv in enumerate(x)
    ]

    df = pl.DataFrame(
        rows,
        schema=dict(
            zip(
                DaylightMapHourlyDataRecord.column_names(),
                [pl.Int64, pl.Float64, pl.Float64, pl.Float64],
            )
        ),
        orient="row",
    )

    conn = transaction.conn
    grid = df.to_arrow()
    table = quote_identifier(DaylightMapHourlyDataRecord.table_name())

    def insert() -> None:
        conn.register(DAYLIGHT_GRID_VIEW, grid)
        try:
            conn.execute(f"INSERT INTO {table} SELECT * FROM {DAYLIGHT_GRID_VIEW}")
        finally:
            conn.unregister(DAYLIGHT_GRID_VIEW)

    try:
        transaction.execute(insert)
    except duckdb.Error as e:
        logger.error("Daylight map grid for report %d failed: %s", hourly_report_index, e)
        return 0

    return len(rows)
