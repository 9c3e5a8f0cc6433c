"""Pydantic schemas for the resolved building model snapshot.

The snapshot is handed to the recorder once, after the model is fully
resolved and before any time-series data is written. Collections are
ordered: the element at position ``n - 1`` is written with index ``n``.
"""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

# ============================================================================
# Geometry
# ============================================================================

class Zone(BaseModel):
    """Thermal zone geometry and configuration."""
    name: str
    rel_north: float = Field(0.0, description="Relative north [deg]")
    origin_x: float = 0.0
    origin_y: float = 0.0
    origin_z: float = 0.0
    centroid_x: float = 0.0
    centroid_y: float = 0.0
    centroid_z: float = 0.0
    of_type: int = Field(1, description="Zone type code")
    multiplier: int = Field(1, ge=1)
    list_multiplier: int = Field(1, ge=1)
    minimum_x: float = 0.0
    maximum_x: float = 0.0
    minimum_y: float = 0.0
    maximum_y: float = 0.0
    minimum_z: float = 0.0
    maximum_z: float = 0.0
    ceiling_height: float = Field(0.0, description="[m]", ge=0)
    volume: float = Field(0.0, description="[m3]", ge=0)
    inside_convection_algo: int = 0
    outside_convection_algo: int = 0
    floor_area: float = Field(0.0, description="[m2]", ge=0)
    ext_gross_wall_area: float = 0.0
    ext_net_wall_area: float = 0.0
    ext_window_area: float = 0.0
    is_part_of_total_area: bool = True


class Surface(BaseModel):
    """Heat-transfer or shading surface."""
    name: str
    construction_index: int = Field(..., description="1-based construction, 0 for none", ge=0)
    class_name: str
    area: float = 0.0
    gross_area: float = 0.0
    perimeter: float = 0.0
    azimuth: float = 0.0
    height: float = 0.0
    reveal: float = 0.0
    shape: int = 0
    sides: int = Field(4, ge=0)
    tilt: float = 0.0
    width: float = 0.0
    heat_transfer_surf: bool = True
    base_surface_index: int = 0
    zone_index: int = Field(0, ge=0)
    ext_bound_cond: int = 0
    ext_solar: bool = False
    ext_wind: bool = False


# ============================================================================
# Constructions and Materials
# ============================================================================

class Construction(BaseModel):
    """Layered construction, outside layer first."""
    name: str
    layers: list[int] = Field(default_factory=list, description="1-based material index per layer")
    total_solid_layers: int = Field(0, ge=0)
    total_glass_layers: int = Field(0, ge=0)
    inside_absorp_vis: float = 0.0
    outside_absorp_vis: float = 0.0
    inside_absorp_solar: float = 0.0
    outside_absorp_solar: float = 0.0
    inside_absorp_thermal: float = 0.0
    outside_absorp_thermal: float = 0.0
    outside_roughness: int = 0
    type_is_window: bool = False
    u_value: float = Field(0.0, description="Stored U-value, used when there is no glazing")

    @property
    def total_layers(self) -> int:
        return len(self.layers)

    @property
    def has_glazing(self) -> bool:
        return self.total_glass_layers > 0


class Material(BaseModel):
    name: str
    material_type: int = 0
    roughness: int = 0
    conductivity: float = 0.0
    density: float = 0.0
    iso_moist_cap: float = 0.0
    porosity: float = 0.0
    resistance: float = 0.0
    r_only: bool = False
    spec_heat: float = 0.0
    therm_grad_coef: float = 0.0
    thickness: float = 0.0
    vapor_diffus: float = 0.0


# ============================================================================
# Internal Gains
# ============================================================================

class NominalPeople(BaseModel):
    name: str
    zone_index: int = Field(..., ge=1)
    number_of_people: float = Field(..., ge=0)
    number_of_people_schedule_index: int = 0
    activity_schedule_index: int = 0
    fraction_radiant: float = 0.0
    fraction_convected: float = 0.0
    work_efficiency_schedule_index: int = 0
    clothing_efficiency_schedule_index: int = 0
    air_velocity_schedule_index: int = 0
    fanger: bool = False
    pierce: bool = False
    ksu: bool = False
    mrt_calc_type: int = 0
    surface_index: int = 0
    angle_factor_list_name: str = ""
    angle_factor_list: int = 0
    user_specified_sensible_fraction: float = 0.0
    show_55_warning: bool = False


class NominalLighting(BaseModel):
    name: str
    zone_index: int = Field(..., ge=1)
    schedule_index: int = 0
    design_level: float = Field(..., description="[W]", ge=0)
    fraction_return_air: float = 0.0
    fraction_radiant: float = 0.0
    fraction_short_wave: float = 0.0
    fraction_replaceable: float = 0.0
    fraction_convected: float = 0.0
    end_use_subcategory: str = "General"


class NominalEquipment(BaseModel):
    """Electric, gas, steam, hot-water or other equipment gain."""
    name: str
    zone_index: int = Field(..., ge=1)
    schedule_index: int = 0
    design_level: float = Field(..., description="[W]", ge=0)
    fraction_latent: float = 0.0
    fraction_radiant: float = 0.0
    fraction_lost: float = 0.0
    fraction_convected: float = 0.0
    end_use_subcategory: str = "General"


class BaseboardHeater(BaseModel):
    name: str
    zone_index: int = Field(..., ge=1)
    schedule_index: int = 0
    capacity_at_low_temperature: float = 0.0
    low_temperature: float = 0.0
    capacity_at_high_temperature: float = 0.0
    high_temperature: float = 0.0
    fraction_radiant: float = 0.0
    fraction_convected: float = 0.0
    end_use_subcategory: str = "General"


class NominalAirflow(BaseModel):
    """Infiltration or ventilation object."""
    name: str
    zone_index: int = Field(..., ge=1)
    schedule_index: int = 0
    design_level: float = Field(..., description="[m3/s]", ge=0)


# ============================================================================
# Grouping, Schedules and Air Models
# ============================================================================

class ZoneList(BaseModel):
    name: str
    zones: list[int] = Field(default_factory=list, description="1-based member zone indices")


class ZoneGroup(BaseModel):
    name: str = Field(..., description="Name of the zone list the group multiplies")
    zone_list_multiplier: int = Field(1, ge=1)


class RoomAirModel(BaseModel):
    """Room air model of the zone at the same position."""
    air_model_name: str
    air_model_type: int = 0
    temp_couple_scheme: int = 0
    sim_air_model: bool = False


class Schedule(BaseModel):
    name: str
    schedule_type: str = ""
    minimum: float = 0.0
    maximum: float = 0.0

    @model_validator(mode="after")
    def validate_min_max(self) -> Schedule:
        """Validate minimum <= maximum."""
        if self.minimum > self.maximum:
            raise ValueError(
                f"Schedule {self.name}: minimum {self.minimum} exceeds maximum {self.maximum}"
            )
        return self


# ============================================================================
# Snapshot
# ============================================================================

class BuildingModel(BaseModel):
    """Everything written by the model-metadata pass."""
    zones: list[Zone] = Field(default_factory=list)
    lighting: list[NominalLighting] = Field(default_factory=list)
    people: list[NominalPeople] = Field(default_factory=list)
    electric_equipment: list[NominalEquipment] = Field(default_factory=list)
    gas_equipment: list[NominalEquipment] = Field(default_factory=list)
    steam_equipment: list[NominalEquipment] = Field(default_factory=list)
    hot_water_equipment: list[NominalEquipment] = Field(default_factory=list)
    other_equipment: list[NominalEquipment] = Field(default_factory=list)
    baseboard_heaters: list[BaseboardHeater] = Field(default_factory=list)
    infiltration: list[NominalAirflow] = Field(default_factory=list)
    ventilation: list[NominalAirflow] = Field(default_factory=list)
    surfaces: list[Surface] = Field(default_factory=list)
    constructions: list[Construction] = Field(default_factory=list)
    materials: list[Material] = Field(default_factory=list)
    zone_lists: list[ZoneList] = Field(default_factory=list)
    zone_groups: list[ZoneGroup] = Field(default_factory=list)
    room_air_models: list[RoomAirModel] = Field(
        default_factory=list, description="One per zone, in zone order"
    )
    schedules: list[Schedule] = Field(default_factory=list)
    nominal_u_values: list[float] = Field(
        default_factory=list,
        description="Precomputed U-value per construction, used for glazed constructions",
    )

    @field_validator("zone_lists")
    @classmethod
    def validate_zone_list_members(cls, v: list[ZoneList]) -> list[ZoneList]:
        """Validate member zone indices are 1-based."""
        for zone_list in v:
            for zone in zone_list.zones:
                if zone < 1:
                    raise ValueError(f"Zone list {zone_list.name}: invalid zone index {zone}")
        return v

    @model_validator(mode="after")
    def validate_glazed_u_values(self) -> BuildingModel:
        """Validate every glazed construction has a precomputed U-value."""
        for n, construction in enumerate(self.constructions, start=1):
            if construction.has_glazing and n > len(self.nominal_u_values):
                raise ValueError(
                    f"Construction {construction.name} has glazing but no nominal U-value "
                    f"(nominal_u_values has {len(self.nominal_u_values)} entries)"
                )
        return self

    @model_validator(mode="after")
    def validate_room_air_models(self) -> BuildingModel:
        """Validate there is at most one room air model per zone."""
        if len(self.room_air_models) > len(self.zones):
            raise ValueError(
                f"{len(self.room_air_models)} room air models for {len(self.zones)} zones"
            )
        return self

