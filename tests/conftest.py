"""
Pytest configuration and shared fixtures.

Provides database fixtures that:
- Use the repo directory for easy debugging
- Keep databases on test failure
- Clean up on test success
- Support both local dev and CI environments
"""

import os
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture
def db_path(request, tmp_path) -> Generator[Path, None, None]:
    """Provide an output database path with intelligent cleanup.

    Behavior:
    - Local dev (default): Uses test_databases/ for easy inspection
    - CI environment: Uses tmp_path for isolation
    - Keeps database on test failure for debugging
    - Cleans up on test success

    To inspect after a failed test:
        $ duckdb test_databases/test_something.db
        D SELECT * FROM "ReportVariableWithTime";
    """
    is_ci = os.getenv("CI") == "true" or os.getenv("GITHUB_ACTIONS") == "true"

    if is_ci:
        db_file = tmp_path / "test.db"
    else:
        test_db_dir = Path(__file__).parent.parent / "test_databases"
        test_db_dir.mkdir(exist_ok=True)

        test_name = request.node.name.replace("[", "_").replace("]", "")
        db_file = test_db_dir / f"{test_name}.db"

    yield db_file

    rep_call = getattr(request.node, "rep_call", None)
    if not is_ci and rep_call is not None and rep_call.passed:
        for path in (db_file, Path(str(db_file) + ".wal"), db_file.with_suffix(".err")):
            if path.exists():
                path.unlink()


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Hook to make test results available to fixtures.

    This allows the db_path fixture to know if the test passed or failed.
    """
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


@pytest.fixture
def output_config(db_path):
    """Simple-mode output configuration writing to db_path."""
    from simulation_output.config import OutputConfig

    return OutputConfig(
        mode="Simple",
        database_path=db_path,
        diagnostic_log_path=db_path.with_suffix(".err"),
    )


@pytest.fixture
def tabular_config(output_config):
    """SimpleAndTabular-mode variant of output_config."""
    return output_config.model_copy(update={"mode": "SimpleAndTabular"})


@pytest.fixture
def recorder(output_config):
    """Open recorder in Simple mode; closed after the test."""
    from simulation_output.persistence import OutputRecorder

    rec = OutputRecorder(output_config)
    yield rec
    rec.close()


@pytest.fixture
def tabular_recorder(tabular_config):
    """Open recorder in SimpleAndTabular mode; closed after the test."""
    from simulation_output.persistence import OutputRecorder

    rec = OutputRecorder(tabular_config)
    yield rec
    rec.close()


@pytest.fixture
def memory_manager():
    """In-memory DatabaseManager with the full schema and statements."""
    from simulation_output.persistence import DatabaseManager

    manager = DatabaseManager(":memory:")
    manager.initialize_schema(tabular=True)
    manager.prepare_statements(tabular=True)
    yield manager
    manager.close()


@pytest.fixture
def sample_building():
    """Two-zone building with one of everything."""
    from simulation_output.building import (
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

    return BuildingModel(
        zones=[
            Zone(name="ZONE ONE", floor_area=100.0, volume=300.0, ceiling_height=3.0),
            Zone(name="ZONE TWO", floor_area=50.0, volume=150.0, multiplier=2),
        ],
        lighting=[
            NominalLighting(name="LIGHTS 1", zone_index=1, schedule_index=1, design_level=1000.0)
        ],
        people=[
            NominalPeople(name="PEOPLE 1", zone_index=1, number_of_people=10.0, fanger=True)
        ],
        electric_equipment=[
            NominalEquipment(name="ELEC 1", zone_index=1, design_level=500.0),
            NominalEquipment(name="ELEC 2", zone_index=2, design_level=250.0),
        ],
        gas_equipment=[NominalEquipment(name="GAS 1", zone_index=2, design_level=100.0)],
        hot_water_equipment=[
            NominalEquipment(name="HW 1", zone_index=2, schedule_index=3, design_level=80.0)
        ],
        baseboard_heaters=[BaseboardHeater(name="BB 1", zone_index=1)],
        infiltration=[NominalAirflow(name="INFIL 1", zone_index=1, design_level=0.05)],
        ventilation=[NominalAirflow(name="VENT 1", zone_index=2, design_level=0.1)],
        surfaces=[
            Surface(name="WALL 1", construction_index=1, class_name="Wall", zone_index=1),
            Surface(name="WINDOW 1", construction_index=2, class_name="Window", zone_index=1,
                    base_surface_index=1),
        ],
        constructions=[
            Construction(name="EXT WALL", layers=[1, 2], total_solid_layers=2, u_value=0.35),
            Construction(name="DOUBLE PANE", layers=[3, 4, 3], total_glass_layers=2,
                         type_is_window=True, u_value=9.99),
        ],
        materials=[
            Material(name="BRICK", conductivity=0.9, thickness=0.1),
            Material(name="INSULATION", conductivity=0.04, thickness=0.05),
            Material(name="GLASS", conductivity=0.9, thickness=0.003),
            Material(name="AIR GAP", resistance=0.17, r_only=True),
        ],
        zone_lists=[ZoneList(name="ALL ZONES", zones=[1, 2])],
        zone_groups=[ZoneGroup(name="ALL ZONES", zone_list_multiplier=3)],
        room_air_models=[
            RoomAirModel(air_model_name="MIXING 1"),
            RoomAirModel(air_model_name="MIXING 2"),
        ],
        schedules=[
            Schedule(name="ALWAYS ON", schedule_type="Fraction", minimum=1.0, maximum=1.0),
            Schedule(name="OFFICE", schedule_type="Fraction", minimum=0.0, maximum=1.0),
        ],
        nominal_u_values=[0.35, 2.8],
    )
