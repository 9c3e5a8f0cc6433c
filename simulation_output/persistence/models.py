"""
Pydantic Models for the Output Database

These models are the single source of truth for the output database schema.
All DDL and every prepared insert statement are derived from them.

Field names are snake_case; the on-disk column name of each field is its
alias, so the written file keeps the column layout downstream tools expect
(``ReportDataDictionaryIndex``, ``TimeIndex``, ...).
"""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Enums
# ============================================================================


class ReportingFrequency(IntEnum):
    """Granularity at which a value series is reported."""

    EACH_CALL = -1  # every HVAC system timestep
    TIMESTEP = 0  # every zone timestep
    HOURLY = 1
    DAILY = 2
    MONTHLY = 3
    RUN_PERIOD = 4

    @property
    def label(self) -> str:
        return REPORTING_FREQUENCY_NAMES[self]


REPORTING_FREQUENCY_NAMES = {
    ReportingFrequency.EACH_CALL: "HVAC System Timestep",
    ReportingFrequency.TIMESTEP: "Zone Timestep",
    ReportingFrequency.HOURLY: "Hourly",
    ReportingFrequency.DAILY: "Daily",
    ReportingFrequency.MONTHLY: "Monthly",
    ReportingFrequency.RUN_PERIOD: "Run Period",
}


class StorageType(IntEnum):
    """How a reported value is aggregated over its interval."""

    AVERAGE = 1
    SUM = 2


STORAGE_TYPE_NAMES = {
    StorageType.AVERAGE: "Avg",
    StorageType.SUM: "Sum",
}


class TimestepType(IntEnum):
    """Which simulation clock a variable is sampled on."""

    HVAC_SYSTEM = 1
    ZONE = 2


TIMESTEP_TYPE_NAMES = {
    TimestepType.HVAC_SYSTEM: "HVAC System",
    TimestepType.ZONE: "Zone",
}

UNKNOWN_LABEL = "Unknown!!!"


class StringType(IntEnum):
    """Role a string plays in a tabular report."""

    REPORT_NAME = 1
    REPORT_FOR_STRING = 2
    TABLE_NAME = 3
    ROW_NAME = 4
    COLUMN_NAME = 5
    UNITS = 6


STRING_TYPE_NAMES = {
    StringType.REPORT_NAME: "ReportName",
    StringType.REPORT_FOR_STRING: "ReportForString",
    StringType.TABLE_NAME: "TableName",
    StringType.ROW_NAME: "RowName",
    StringType.COLUMN_NAME: "ColumnName",
    StringType.UNITS: "Units",
}


# ============================================================================
# Base Record
# ============================================================================


class TableRecord(BaseModel):
    """Base class for one row of one output table.

    Subclasses set ``table_name`` (and optionally ``primary_key``,
    ``unique`` and ``indexes``, all expressed in column names) in their
    ``model_config``. Column order is field declaration order.
    """

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def table_name(cls) -> str:
        return cls.model_config["table_name"]  # type: ignore[typeddict-item]

    @classmethod
    def column_names(cls) -> list[str]:
        """On-disk column names in declaration order."""
        return [info.alias or name for name, info in cls.model_fields.items()]

    @classmethod
    def field_names(cls) -> list[str]:
        return list(cls.model_fields)

    def to_row(self) -> list[Any]:
        """Values in column order, with logical flags stored as 0/1."""
        row = []
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, bool):
                value = int(value)
            row.append(value)
        return row


# ============================================================================
# Time-Series Records
# ============================================================================


class ReportDataDictionaryRecord(TableRecord):
    """One reportable series: a (name, key, frequency, units) combination."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ReportDataDictionary",
        primary_key=["ReportDataDictionaryIndex"],
    )

    report_data_dictionary_index: int = Field(
        ..., alias="ReportDataDictionaryIndex", description="Caller-assigned series id"
    )
    is_meter: bool = Field(..., alias="IsMeter", description="Meter (True) or variable")
    type: str = Field(..., alias="Type", description="Storage type label (Avg/Sum)")
    index_group: str = Field(..., alias="IndexGroup")
    timestep_type: str = Field(..., alias="TimestepType")
    key_value: str = Field(..., alias="KeyValue")
    name: str = Field(..., alias="Name")
    reporting_frequency: str = Field(..., alias="ReportingFrequency")
    schedule_name: str | None = Field(None, alias="ScheduleName")
    units: str = Field(..., alias="Units")


class ReportDataRecord(TableRecord):
    """One value of one series at one time index."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ReportData",
        primary_key=["ReportDataIndex"],
        indexes=[
            ("idx_report_data_time", ["TimeIndex"]),
            ("idx_report_data_dictionary", ["ReportDataDictionaryIndex"]),
        ],
    )

    report_data_index: int = Field(..., alias="ReportDataIndex")
    time_index: int = Field(..., alias="TimeIndex")
    report_data_dictionary_index: int = Field(..., alias="ReportDataDictionaryIndex")
    value: float = Field(..., alias="Value")


class ReportExtendedDataRecord(TableRecord):
    """Min/max statistics attached to an aggregated ReportData row."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ReportExtendedData",
        primary_key=["ReportExtendedDataIndex"],
        indexes=[("idx_extended_data_report_data", ["ReportDataIndex"])],
    )

    report_extended_data_index: int = Field(..., alias="ReportExtendedDataIndex")
    report_data_index: int = Field(..., alias="ReportDataIndex")

    max_value: float | None = Field(None, alias="MaxValue")
    max_month: int | None = Field(None, alias="MaxMonth")
    max_day: int | None = Field(None, alias="MaxDay")
    max_hour: int | None = Field(None, alias="MaxHour")
    max_start_minute: int | None = Field(
        None, alias="MaxStartMinute", description="Only populated for meters"
    )
    max_minute: int | None = Field(None, alias="MaxMinute")

    min_value: float | None = Field(None, alias="MinValue")
    min_month: int | None = Field(None, alias="MinMonth")
    min_day: int | None = Field(None, alias="MinDay")
    min_hour: int | None = Field(None, alias="MinHour")
    min_start_minute: int | None = Field(
        None, alias="MinStartMinute", description="Only populated for meters"
    )
    min_minute: int | None = Field(None, alias="MinMinute")


class TimeRecord(TableRecord):
    """One simulation clock tick at which some reporting frequency fired.

    Coarser frequencies leave the finer calendar columns NULL.
    """

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Time",
        primary_key=["TimeIndex"],
    )

    time_index: int = Field(..., alias="TimeIndex")
    month: int | None = Field(None, alias="Month")
    day: int | None = Field(None, alias="Day")
    hour: int | None = Field(None, alias="Hour")
    minute: int | None = Field(None, alias="Minute")
    dst: int | None = Field(None, alias="Dst")
    interval: int | None = Field(None, alias="Interval", description="Minutes")
    interval_type: int | None = Field(None, alias="IntervalType")
    simulation_days: int | None = Field(None, alias="SimulationDays")
    day_type: str | None = Field(None, alias="DayType")
    environment_period_index: int | None = Field(None, alias="EnvironmentPeriodIndex")
    warmup_flag: bool | None = Field(None, alias="WarmupFlag")


# ============================================================================
# Model Metadata Records
# ============================================================================


class ZoneRecord(TableRecord):
    """Zone geometry and configuration snapshot."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Zones",
        primary_key=["ZoneIndex"],
    )

    zone_index: int = Field(..., alias="ZoneIndex")
    zone_name: str = Field(..., alias="ZoneName")
    rel_north: float = Field(..., alias="RelNorth")
    origin_x: float = Field(..., alias="OriginX")
    origin_y: float = Field(..., alias="OriginY")
    origin_z: float = Field(..., alias="OriginZ")
    centroid_x: float = Field(..., alias="CentroidX")
    centroid_y: float = Field(..., alias="CentroidY")
    centroid_z: float = Field(..., alias="CentroidZ")
    of_type: int = Field(..., alias="OfType")
    multiplier: int = Field(..., alias="Multiplier")
    list_multiplier: int = Field(..., alias="ListMultiplier")
    minimum_x: float = Field(..., alias="MinimumX")
    maximum_x: float = Field(..., alias="MaximumX")
    minimum_y: float = Field(..., alias="MinimumY")
    maximum_y: float = Field(..., alias="MaximumY")
    minimum_z: float = Field(..., alias="MinimumZ")
    maximum_z: float = Field(..., alias="MaximumZ")
    ceiling_height: float = Field(..., alias="CeilingHeight")
    volume: float = Field(..., alias="Volume")
    inside_convection_algo: int = Field(..., alias="InsideConvectionAlgo")
    outside_convection_algo: int = Field(..., alias="OutsideConvectionAlgo")
    floor_area: float = Field(..., alias="FloorArea")
    ext_gross_wall_area: float = Field(..., alias="ExtGrossWallArea")
    ext_net_wall_area: float = Field(..., alias="ExtNetWallArea")
    ext_window_area: float = Field(..., alias="ExtWindowArea")
    is_part_of_total_area: bool = Field(..., alias="IsPartOfTotalArea")


class NominalPeopleRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalPeople",
        primary_key=["NominalPeopleIndex"],
    )

    nominal_people_index: int = Field(..., alias="NominalPeopleIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    number_of_people: float = Field(..., alias="NumberOfPeople")
    number_of_people_schedule_index: int = Field(..., alias="NumberOfPeopleScheduleIndex")
    activity_schedule_index: int = Field(..., alias="ActivityScheduleIndex")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_convected: float = Field(..., alias="FractionConvected")
    work_efficiency_schedule_index: int = Field(..., alias="WorkEfficiencyScheduleIndex")
    clothing_efficiency_schedule_index: int = Field(
        ..., alias="ClothingEfficiencyScheduleIndex"
    )
    air_velocity_schedule_index: int = Field(..., alias="AirVelocityScheduleIndex")
    fanger: bool = Field(..., alias="Fanger")
    pierce: bool = Field(..., alias="Pierce")
    ksu: bool = Field(..., alias="KSU")
    mrt_calc_type: int = Field(..., alias="MRTCalcType")
    surface_index: int = Field(..., alias="SurfaceIndex")
    angle_factor_list_name: str = Field(..., alias="AngleFactorListName")
    angle_factor_list: int = Field(..., alias="AngleFactorList")
    # column name spelling is part of the published layout
    user_specified_sensible_fraction: float = Field(
        ..., alias="UserSpecifeidSensibleFraction"
    )
    show_55_warning: bool = Field(..., alias="Show55Warning")


class NominalLightingRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalLighting",
        primary_key=["NominalLightingIndex"],
    )

    nominal_lighting_index: int = Field(..., alias="NominalLightingIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")
    fraction_return_air: float = Field(..., alias="FractionReturnAir")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_short_wave: float = Field(..., alias="FractionShortWave")
    fraction_replaceable: float = Field(..., alias="FractionReplaceable")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalElectricEquipmentRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalElectricEquipment",
        primary_key=["NominalElectricEquipmentIndex"],
    )

    nominal_electric_equipment_index: int = Field(..., alias="NominalElectricEquipmentIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")
    fraction_latent: float = Field(..., alias="FractionLatent")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_lost: float = Field(..., alias="FractionLost")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalGasEquipmentRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalGasEquipment",
        primary_key=["NominalGasEquipmentIndex"],
    )

    nominal_gas_equipment_index: int = Field(..., alias="NominalGasEquipmentIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")
    fraction_latent: float = Field(..., alias="FractionLatent")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_lost: float = Field(..., alias="FractionLost")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalSteamEquipmentRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalSteamEquipment",
        primary_key=["NominalSteamEquipmentIndex"],
    )

    nominal_steam_equipment_index: int = Field(..., alias="NominalSteamEquipmentIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")
    fraction_latent: float = Field(..., alias="FractionLatent")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_lost: float = Field(..., alias="FractionLost")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalHotWaterEquipmentRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalHotWaterEquipment",
        primary_key=["NominalHotWaterEquipmentIndex"],
    )

    nominal_hot_water_equipment_index: int = Field(..., alias="NominalHotWaterEquipmentIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="SchedNo")
    design_level: float = Field(..., alias="DesignLevel")
    fraction_latent: float = Field(..., alias="FractionLatent")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_lost: float = Field(..., alias="FractionLost")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalOtherEquipmentRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalOtherEquipment",
        primary_key=["NominalOtherEquipmentIndex"],
    )

    nominal_other_equipment_index: int = Field(..., alias="NominalOtherEquipmentIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")
    fraction_latent: float = Field(..., alias="FractionLatent")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_lost: float = Field(..., alias="FractionLost")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalBaseboardHeaterRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalBaseboardHeaters",
        primary_key=["NominalBaseboardHeaterIndex"],
    )

    nominal_baseboard_heater_index: int = Field(..., alias="NominalBaseboardHeaterIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    capacity_at_low_temperature: float = Field(..., alias="CapatLowTemperature")
    low_temperature: float = Field(..., alias="LowTemperature")
    capacity_at_high_temperature: float = Field(..., alias="CapatHighTemperature")
    high_temperature: float = Field(..., alias="HighTemperature")
    fraction_radiant: float = Field(..., alias="FractionRadiant")
    fraction_convected: float = Field(..., alias="FractionConvected")
    end_use_subcategory: str = Field(..., alias="EndUseSubcategory")


class NominalInfiltrationRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalInfiltration",
        primary_key=["NominalInfiltrationIndex"],
    )

    nominal_infiltration_index: int = Field(..., alias="NominalInfiltrationIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")


class NominalVentilationRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="NominalVentilation",
        primary_key=["NominalVentilationIndex"],
    )

    nominal_ventilation_index: int = Field(..., alias="NominalVentilationIndex")
    object_name: str = Field(..., alias="ObjectName")
    zone_index: int = Field(..., alias="ZoneIndex")
    schedule_index: int = Field(..., alias="ScheduleIndex")
    design_level: float = Field(..., alias="DesignLevel")


class SurfaceRecord(TableRecord):
    """Heat-transfer or shading surface snapshot."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Surfaces",
        primary_key=["SurfaceIndex"],
    )

    surface_index: int = Field(..., alias="SurfaceIndex")
    surface_name: str = Field(..., alias="SurfaceName")
    construction_index: int = Field(..., alias="ConstructionIndex")
    class_name: str = Field(..., alias="ClassName")
    area: float = Field(..., alias="Area")
    gross_area: float = Field(..., alias="GrossArea")
    perimeter: float = Field(..., alias="Perimeter")
    azimuth: float = Field(..., alias="Azimuth")
    height: float = Field(..., alias="Height")
    reveal: float = Field(..., alias="Reveal")
    shape: int = Field(..., alias="Shape")
    sides: int = Field(..., alias="Sides")
    tilt: float = Field(..., alias="Tilt")
    width: float = Field(..., alias="Width")
    heat_transfer_surf: bool = Field(..., alias="HeatTransferSurf")
    base_surface_index: int = Field(..., alias="BaseSurfaceIndex")
    zone_index: int = Field(..., alias="ZoneIndex")
    ext_bound_cond: int = Field(..., alias="ExtBoundCond")
    ext_solar: bool = Field(..., alias="ExtSolar")
    ext_wind: bool = Field(..., alias="ExtWind")


class ConstructionRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Constructions",
        primary_key=["ConstructionIndex"],
    )

    construction_index: int = Field(..., alias="ConstructionIndex")
    name: str = Field(..., alias="Name")
    total_layers: int = Field(..., alias="TotalLayers")
    total_solid_layers: int = Field(..., alias="TotalSolidLayers")
    total_glass_layers: int = Field(..., alias="TotalGlassLayers")
    inside_absorp_vis: float = Field(..., alias="InsideAbsorpVis")
    outside_absorp_vis: float = Field(..., alias="OutsideAbsorpVis")
    inside_absorp_solar: float = Field(..., alias="InsideAbsorpSolar")
    outside_absorp_solar: float = Field(..., alias="OutsideAbsorpSolar")
    inside_absorp_thermal: float = Field(..., alias="InsideAbsorpThermal")
    outside_absorp_thermal: float = Field(..., alias="OutsideAbsorpThermal")
    outside_roughness: int = Field(..., alias="OutsideRoughness")
    type_is_window: bool = Field(..., alias="TypeIsWindow")
    u_value: float = Field(..., alias="Uvalue", description="Nominal U-value [W/m2-K]")


class ConstructionLayerRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ConstructionLayers",
        indexes=[("idx_construction_layers_construction", ["ConstructionIndex"])],
    )

    construction_index: int = Field(..., alias="ConstructionIndex")
    layer_index: int = Field(..., alias="LayerIndex")
    material_index: int = Field(..., alias="MaterialIndex")


class MaterialRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Materials",
        primary_key=["MaterialIndex"],
    )

    material_index: int = Field(..., alias="MaterialIndex")
    name: str = Field(..., alias="Name")
    material_type: int = Field(..., alias="MaterialType")
    roughness: int = Field(..., alias="Roughness")
    conductivity: float = Field(..., alias="Conductivity")
    density: float = Field(..., alias="Density")
    iso_moist_cap: float = Field(..., alias="IsoMoistCap")
    porosity: float = Field(..., alias="Porosity")
    resistance: float = Field(..., alias="Resistance")
    r_only: bool = Field(..., alias="ROnly")
    spec_heat: float = Field(..., alias="SpecHeat")
    therm_grad_coef: float = Field(..., alias="ThermGradCoef")
    thickness: float = Field(..., alias="Thickness")
    vapor_diffus: float = Field(..., alias="VaporDiffus")


class ZoneListRecord(TableRecord):
    """One (zone list, member zone) pair."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ZoneLists",
        indexes=[("idx_zone_lists_index", ["ZoneListIndex"])],
    )

    zone_list_index: int = Field(..., alias="ZoneListIndex")
    name: str = Field(..., alias="Name")
    zone_index: int = Field(..., alias="ZoneIndex")


class ZoneGroupRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ZoneGroups",
        primary_key=["ZoneGroupIndex"],
    )

    zone_group_index: int = Field(..., alias="ZoneGroupIndex")
    zone_list_name: str = Field(..., alias="ZoneListName")
    zone_list_multiplier: int = Field(..., alias="ZoneListMultiplier")


class RoomAirModelRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="RoomAirModels",
        primary_key=["ZoneIndex"],
    )

    zone_index: int = Field(..., alias="ZoneIndex")
    air_model_name: str = Field(..., alias="AirModelName")
    air_model_type: int = Field(..., alias="AirModelType")
    temp_couple_scheme: int = Field(..., alias="TempCoupleScheme")
    sim_air_model: bool = Field(..., alias="SimAirModel")


class ScheduleRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Schedules",
        primary_key=["ScheduleIndex"],
    )

    schedule_index: int = Field(..., alias="ScheduleIndex")
    schedule_name: str = Field(..., alias="ScheduleName")
    schedule_type: str = Field(..., alias="ScheduleType")
    schedule_minimum: float = Field(..., alias="ScheduleMinimum")
    schedule_maximum: float = Field(..., alias="ScheduleMaximum")


# ============================================================================
# Sizing Records
# ============================================================================


class ZoneSizingRecord(TableRecord):
    """Zone design load and airflow from the sizing calculation."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ZoneSizes",
    )

    zone_name: str = Field(..., alias="ZoneName")
    load_type: str = Field(..., alias="LoadType")
    calc_des_load: float = Field(..., alias="CalcDesLoad", description="[W]")
    user_des_load: float = Field(..., alias="UserDesLoad", description="[W]")
    calc_des_flow: float = Field(..., alias="CalcDesFlow", description="[m3/s]")
    user_des_flow: float = Field(..., alias="UserDesFlow", description="[m3/s]")
    des_day_name: str = Field(..., alias="DesDayName")
    peak_hr_min: str = Field(..., alias="PeakHrMin")
    peak_temp: float = Field(..., alias="PeakTemp", description="[C]")
    peak_hum_rat: float = Field(..., alias="PeakHumRat", description="[kgWater/kgDryAir]")
    calc_outside_air_flow: float = Field(..., alias="CalcOutsideAirFlow", description="[m3/s]")


class SystemSizingRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="SystemSizes",
    )

    system_name: str = Field(..., alias="SystemName")
    description: str = Field(..., alias="Description")
    value: float = Field(..., alias="Value")
    units: str = Field(..., alias="Units")


class ComponentSizingRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="ComponentSizes",
    )

    comp_type: str = Field(..., alias="CompType")
    comp_name: str = Field(..., alias="CompName")
    description: str = Field(..., alias="Description")
    value: float = Field(..., alias="Value")
    units: str = Field(..., alias="Units")


# ============================================================================
# Daylighting Map Records
# ============================================================================


class DaylightMapRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="DaylightMaps",
        primary_key=["MapNumber"],
    )

    map_number: int = Field(..., alias="MapNumber")
    map_name: str = Field(..., alias="MapName")
    environment: str = Field(..., alias="Environment")
    zone: int = Field(..., alias="Zone")
    reference_pt1: str = Field(..., alias="ReferencePt1")
    reference_pt2: str = Field(..., alias="ReferencePt2")
    z: float = Field(..., alias="Z")


class DaylightMapHourlyReportRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="DaylightMapHourlyReports",
        primary_key=["HourlyReportIndex"],
    )

    hourly_report_index: int = Field(..., alias="HourlyReportIndex")
    map_number: int = Field(..., alias="MapNumber")
    month: int = Field(..., alias="Month")
    day_of_month: int = Field(..., alias="DayOfMonth")
    hour: int = Field(..., alias="Hour")


class DaylightMapHourlyDataRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="DaylightMapHourlyData",
        indexes=[("idx_daylight_data_report", ["HourlyReportIndex"])],
    )

    hourly_report_index: int = Field(..., alias="HourlyReportIndex")
    x: float = Field(..., alias="X")
    y: float = Field(..., alias="Y")
    illuminance: float = Field(..., alias="Illuminance", description="[lux]")


# ============================================================================
# Run Bookkeeping Records
# ============================================================================


class SimulationRecord(TableRecord):
    """One simulation run. Completion flags are amended at the end of the run."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Simulations",
        primary_key=["SimulationIndex"],
    )

    simulation_index: int = Field(..., alias="SimulationIndex")
    energy_plus_version: str = Field(..., alias="EnergyPlusVersion")
    time_stamp: str = Field(..., alias="TimeStamp")
    num_timesteps_per_hour: int = Field(..., alias="NumTimestepsPerHour")
    completed: bool = Field(False, alias="Completed")
    completed_successfully: bool = Field(False, alias="CompletedSuccessfully")


class EnvironmentPeriodRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="EnvironmentPeriods",
        primary_key=["EnvironmentPeriodIndex"],
    )

    environment_period_index: int = Field(..., alias="EnvironmentPeriodIndex")
    simulation_index: int = Field(..., alias="SimulationIndex")
    environment_name: str = Field(..., alias="EnvironmentName")
    environment_type: int = Field(..., alias="EnvironmentType")


class ErrorRecord(TableRecord):
    """One distinct error message. The latest row may be amended."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Errors",
        primary_key=["ErrorIndex"],
    )

    error_index: int = Field(..., alias="ErrorIndex")
    simulation_index: int = Field(..., alias="SimulationIndex")
    error_type: int = Field(..., alias="ErrorType", description="Severity code")
    error_message: str = Field(..., alias="ErrorMessage")
    count: int = Field(..., alias="Count", description="Repeat count")


# ============================================================================
# Tabular Report Records (SimpleAndTabular mode only)
# ============================================================================


class TabularDataRecord(TableRecord):
    """One cell of one tabular report table, with interned labels."""

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="TabularData",
    )

    report_name_index: int = Field(..., alias="ReportNameIndex")
    report_for_string_index: int = Field(..., alias="ReportForStringIndex")
    table_name_index: int = Field(..., alias="TableNameIndex")
    simulation_index: int = Field(..., alias="SimulationIndex")
    row_name_index: int = Field(..., alias="RowNameIndex")
    column_name_index: int = Field(..., alias="ColumnNameIndex")
    row_id: int = Field(..., alias="RowId")
    column_id: int = Field(..., alias="ColumnId")
    value: str = Field(..., alias="Value")
    units_index: int = Field(..., alias="UnitsIndex")


class StringRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="Strings",
        primary_key=["StringIndex"],
        unique=[["StringTypeIndex", "Value"]],
    )

    string_index: int = Field(..., alias="StringIndex")
    string_type_index: int = Field(..., alias="StringTypeIndex")
    value: str = Field(..., alias="Value")


class StringTypeRecord(TableRecord):
    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        table_name="StringTypes",
        primary_key=["StringTypeIndex"],
    )

    string_type_index: int = Field(..., alias="StringTypeIndex")
    value: str = Field(..., alias="Value")


# ============================================================================
# Table Groups
# ============================================================================

# Creation order: referenced tables come before the tables and views that use them.
CORE_RECORDS: list[type[TableRecord]] = [
    ReportDataDictionaryRecord,
    ReportDataRecord,
    ReportExtendedDataRecord,
    TimeRecord,
    ZoneRecord,
    NominalPeopleRecord,
    NominalLightingRecord,
    NominalElectricEquipmentRecord,
    NominalGasEquipmentRecord,
    NominalSteamEquipmentRecord,
    NominalHotWaterEquipmentRecord,
    NominalOtherEquipmentRecord,
    NominalBaseboardHeaterRecord,
    SurfaceRecord,
    ConstructionRecord,
    ConstructionLayerRecord,
    MaterialRecord,
    ZoneListRecord,
    ZoneGroupRecord,
    NominalInfiltrationRecord,
    NominalVentilationRecord,
    ZoneSizingRecord,
    SystemSizingRecord,
    ComponentSizingRecord,
    RoomAirModelRecord,
    ScheduleRecord,
    DaylightMapRecord,
    DaylightMapHourlyReportRecord,
    DaylightMapHourlyDataRecord,
    SimulationRecord,
    EnvironmentPeriodRecord,
    ErrorRecord,
]

TABULAR_RECORDS: list[type[TableRecord]] = [
    TabularDataRecord,
    StringRecord,
    StringTypeRecord,
]
