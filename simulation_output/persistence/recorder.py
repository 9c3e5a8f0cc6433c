"""Output Recorder Protocol and Implementation.

The recorder is the only object the simulation driver talks to. It turns
simulation events (a reporting tick, a reported value, a model object, an
error message, a summary table) into rows of the output database.

Lifecycle:
    recorder = OutputRecorder(config)        # probe, open, schema, statements
    recorder.create_simulations_record(...)
    recorder.create_environment_period_record(...)
    recorder.create_zone_extended_output(building)
    for each reporting tick:
        recorder.create_time_index_record(...)
        recorder.create_report_data_record(...)
    recorder.update_simulation_record(completed=True, completed_successfully=True)
    recorder.close()

Every writer is a no-op when output is disabled, and the tabular writers
are also no-ops unless tabular output is enabled. No writer raises: store
failures and rejected inputs are logged to the diagnostic log.
"""

import logging
from typing import Any, Protocol, runtime_checkable

from ..building import BuildingModel
from ..config.schemas import OutputConfig
from .allocator import IdentityAllocator, StringInterner
from .connection import (
    INSERT_STRING,
    LOOKUP_STRING,
    UPDATE_ERROR,
    UPDATE_SIMULATION,
    DatabaseManager,
    OutputDatabaseError,
)
from .diagnostics import attach_diagnostic_log, detach_diagnostic_log
from .models import (
    REPORTING_FREQUENCY_NAMES,
    STORAGE_TYPE_NAMES,
    TIMESTEP_TYPE_NAMES,
    UNKNOWN_LABEL,
    ComponentSizingRecord,
    DaylightMapHourlyReportRecord,
    DaylightMapRecord,
    EnvironmentPeriodRecord,
    ErrorRecord,
    ReportDataDictionaryRecord,
    ReportDataRecord,
    ReportExtendedDataRecord,
    ReportingFrequency,
    SimulationRecord,
    StringType,
    SystemSizingRecord,
    TableRecord,
    TabularDataRecord,
    ZoneSizingRecord,
)
from .statements import StatementCache
from .tabular import parse_units_and_description, write_tabular_data
from .timekeeping import adjust_reporting_hour_and_minutes, build_time_row, decode_mon_day_hr_min
from .writers import write_building_model, write_daylight_map_data

logger = logging.getLogger(__name__)

# Frequencies that get min/max rows, by kind of series
METER_EXTENDED_FREQUENCIES = frozenset(
    {
        ReportingFrequency.HOURLY,
        ReportingFrequency.DAILY,
        ReportingFrequency.MONTHLY,
        ReportingFrequency.RUN_PERIOD,
    }
)
VARIABLE_EXTENDED_FREQUENCIES = frozenset(
    {
        ReportingFrequency.DAILY,
        ReportingFrequency.MONTHLY,
        ReportingFrequency.RUN_PERIOD,
    }
)


@runtime_checkable
class OutputWriter(Protocol):
    """Protocol for recording simulation output.

    The simulation driver depends on this interface only, so a run can be
    pointed at any implementation (the DuckDB recorder, a test double).

    Methods:
        create_time_index_record: Register a reporting tick
        create_report_dictionary_record: Register a reportable series
        create_report_data_record: Record one value of a series
        create_error_record: Record an error message
        close: Flush and release the output
    """

    def create_time_index_record(
        self,
        reporting_interval: int,
        cumulative_simulation_days: int,
        **calendar: Any,
    ) -> int | None: ...

    def create_report_dictionary_record(
        self,
        report_id: int,
        storage_type: int,
        index_group: str,
        key_value: str,
        variable_name: str,
        timestep_type: int,
        units: str,
        reporting_frequency: int,
        is_meter: bool,
        schedule_name: str | None = None,
    ) -> None: ...

    def create_report_data_record(
        self, record_index: int, value: float, **extended: Any
    ) -> None: ...

    def create_error_record(
        self, simulation_index: int, error_type: int, message: str, count: int
    ) -> None: ...

    def close(self) -> None: ...


class OutputRecorder:
    """DuckDB implementation of OutputWriter.

    Owns one DatabaseManager, its statement cache, an IdentityAllocator and
    (in tabular mode) a StringInterner. Also tracks the most recent
    simulation, environment period and error so amendments and Time rows
    can refer to them.

    Raises:
        OutputDatabaseError: From the constructor, if the output database
            cannot be created or opened. This is the only error a recorder
            raises.

    Example:
        >>> config = OutputConfig(mode="Simple", database_path=tmp / "out.db",
        ...                       diagnostic_log_path=tmp / "out.err")
        >>> with OutputRecorder(config) as recorder:
        ...     recorder.create_simulations_record(1, "9.4.0", "2026-10-18 12:00", 4)
        ...     t = recorder.create_time_index_record(ReportingFrequency.HOURLY, 1,
        ...                                           month=1, day_of_month=1, hour=1)
    """

    def __init__(self, config: OutputConfig | None = None):
        self.config = config if config is not None else OutputConfig()
        self.write_output = self.config.writes_output
        self.write_tabular = self.config.writes_tabular

        self.allocator = IdentityAllocator()
        self.manager: DatabaseManager | None = None
        self.statements: StatementCache | None = None
        self.interner: StringInterner | None = None

        self.current_simulation_index: int | None = None
        self.current_environment_index: int | None = None
        self.last_error_index: int | None = None

        self._log_handler: logging.Handler | None = None

        if not self.write_output:
            return

        try:
            self._log_handler = attach_diagnostic_log(self.config.diagnostic_log_path)
        except OSError as e:
            raise OutputDatabaseError(
                f"Cannot open diagnostic log {self.config.diagnostic_log_path}: {e}"
            ) from e

        try:
            self.manager = DatabaseManager(
                self.config.database_path,
                diagnostic_log_path=self.config.diagnostic_log_path,
                store_settings=self.config.store_settings,
            )
        except OutputDatabaseError:
            logger.error("Output database %s could not be opened", self.config.database_path)
            self._detach_log()
            raise

        self.manager.initialize_schema(tabular=self.write_tabular)
        self.statements = self.manager.prepare_statements(tabular=self.write_tabular)
        if self.write_tabular:
            self.interner = StringInterner(
                self.allocator,
                self.statements[INSERT_STRING],
                self.statements[LOOKUP_STRING],
            )

    # ========================================================================
    # Statement helpers
    # ========================================================================

    def _execute(self, statement_name: str, /, **fields: Any) -> bool:
        stmt = self.statements[statement_name]
        ok = stmt.bind_fields(**fields) and stmt.step()
        stmt.reset()
        stmt.clear_bindings()
        return ok

    def _insert(self, record: TableRecord) -> bool:
        stmt = self.statements[record.table_name()]
        ok = stmt.bind_record(record) and stmt.step()
        stmt.reset()
        stmt.clear_bindings()
        return ok

    @property
    def is_open(self) -> bool:
        return self.manager is not None and not self.manager.closed

    def _writable(self) -> bool:
        if not self.write_output:
            return False
        if not self.is_open:
            logger.error("Write attempted after the output database was closed")
            return False
        return True

    # ========================================================================
    # Time series
    # ========================================================================

    def create_report_dictionary_record(
        self,
        report_id: int,
        storage_type: int,
        index_group: str,
        key_value: str,
        variable_name: str,
        timestep_type: int,
        units: str,
        reporting_frequency: int,
        is_meter: bool,
        schedule_name: str | None = None,
    ) -> None:
        """Register one reportable series under the caller's id.

        Args:
            report_id: Caller-assigned id, referenced by every value row
            storage_type: 1 averaged, 2 summed
            index_group: Grouping label (e.g. "Facility:Electricity")
            key_value: Object the series belongs to ("Environment", a zone...)
            variable_name: Series name
            timestep_type: 1 HVAC system clock, 2 zone clock
            units: Units label
            reporting_frequency: ReportingFrequency code
            is_meter: Meter (True) or variable (False)
            schedule_name: Optional schedule the series is gated by
        """
        if not self._writable():
            return

        try:
            frequency = ReportingFrequency(reporting_frequency)
        except ValueError:
            logger.warning(
                "Unknown reporting frequency %r for %s (%s); dictionary entry %d skipped",
                reporting_frequency,
                variable_name,
                key_value,
                report_id,
            )
            return

        self._execute(
            ReportDataDictionaryRecord.table_name(),
            report_data_dictionary_index=report_id,
            is_meter=is_meter,
            type=STORAGE_TYPE_NAMES.get(storage_type, UNKNOWN_LABEL),
            index_group=index_group,
            timestep_type=TIMESTEP_TYPE_NAMES.get(timestep_type, UNKNOWN_LABEL),
            key_value=key_value,
            name=variable_name,
            reporting_frequency=REPORTING_FREQUENCY_NAMES[frequency],
            schedule_name=schedule_name,
            units=units,
        )

    def create_report_data_record(
        self,
        record_index: int,
        value: float,
        reporting_interval: int | None = None,
        min_value: float | None = None,
        min_value_date: int | None = None,
        max_value: float | None = None,
        max_value_date: int | None = None,
        minutes_per_timestep: int | None = None,
    ) -> None:
        """Record one value of a series at the current time index.

        When a reporting interval and both packed min/max dates (MMDDHHmm,
        non-zero) are given, a ReportExtendedData row is written after the
        value row. Meters (``minutes_per_timestep`` given) get min/max rows
        at hourly and coarser frequencies, with start minutes derived from
        the timestep length. Variables get them at daily and coarser
        frequencies, without start minutes.

        Args:
            record_index: Dictionary id of the series
            value: Reported value
            reporting_interval: ReportingFrequency code of the series
            min_value, max_value: Extremes within the interval
            min_value_date, max_value_date: Packed time of each extreme
            minutes_per_timestep: Zone timestep length, meters only
        """
        if not self._writable():
            return

        data_index = self.allocator.next_data_index()
        self._execute(
            ReportDataRecord.table_name(),
            report_data_index=data_index,
            time_index=self.allocator.time_index,
            report_data_dictionary_index=record_index,
            value=value,
        )

        if reporting_interval is None or not min_value_date or not max_value_date:
            return

        min_month, min_day, min_hour, min_minute = decode_mon_day_hr_min(min_value_date)
        max_month, max_day, max_hour, max_minute = decode_mon_day_hr_min(max_value_date)
        min_hour, min_minute = adjust_reporting_hour_and_minutes(min_hour, min_minute)
        max_hour, max_minute = adjust_reporting_hour_and_minutes(max_hour, max_minute)

        extended_index = self.allocator.next_extended_data_index()

        is_meter = minutes_per_timestep is not None
        allowed = METER_EXTENDED_FREQUENCIES if is_meter else VARIABLE_EXTENDED_FREQUENCIES
        if reporting_interval not in allowed:
            self.allocator.rollback_extended_data_index()
            if is_meter and reporting_interval == ReportingFrequency.TIMESTEP:
                # timestep meters carry no meaningful min/max
                logger.debug("Zone timestep meter %d: min/max not recorded", record_index)
            else:
                logger.warning(
                    "Illegal reporting interval %r for %s %d; min/max not recorded",
                    reporting_interval,
                    "meter" if is_meter else "variable",
                    record_index,
                )
            return

        if is_meter:
            max_start_minute = max_minute - minutes_per_timestep + 1
            min_start_minute = min_minute - minutes_per_timestep + 1
        else:
            max_start_minute = min_start_minute = None

        self._execute(
            ReportExtendedDataRecord.table_name(),
            report_extended_data_index=extended_index,
            report_data_index=data_index,
            max_value=max_value,
            max_month=max_month,
            max_day=max_day,
            max_hour=max_hour,
            max_start_minute=max_start_minute,
            max_minute=max_minute,
            min_value=min_value,
            min_month=min_month,
            min_day=min_day,
            min_hour=min_hour,
            min_start_minute=min_start_minute,
            min_minute=min_minute,
        )

    def create_time_index_record(
        self,
        reporting_interval: int,
        cumulative_simulation_days: int,
        month: int | None = None,
        day_of_month: int | None = None,
        hour: int | None = None,
        end_minute: float | None = None,
        start_minute: float | None = None,
        dst: int | None = None,
        day_type: str | None = None,
        warmup: bool = False,
        environment_period_index: int | None = None,
    ) -> int | None:
        """Register one reporting tick and make it the current time index.

        See :func:`build_time_row` for the columns each frequency fills.
        ``environment_period_index`` defaults to the most recently recorded
        environment period.

        Returns:
            The new TimeIndex, or None if the frequency is unknown or a
            required field is missing, or the store rejected the row
            (nothing is written and the counter does not move)
        """
        if not self._writable():
            return None

        if environment_period_index is None:
            environment_period_index = self.current_environment_index

        try:
            record = build_time_row(
                self.allocator.time_index + 1,
                reporting_interval,
                cumulative_simulation_days,
                month=month,
                day_of_month=day_of_month,
                hour=hour,
                end_minute=end_minute,
                start_minute=start_minute,
                dst=dst,
                day_type=day_type,
                warmup=warmup,
                environment_period_index=environment_period_index,
            )
        except ValueError as e:
            logger.warning("Time record for interval %r not written: %s", reporting_interval, e)
            return None

        if not self._insert(record):
            return None
        return self.allocator.next_time_index()

    # ========================================================================
    # Model metadata and sizing
    # ========================================================================

    def create_zone_extended_output(self, building: BuildingModel) -> dict[str, int]:
        """Write the model-metadata snapshot (zones, gains, envelope, ...).

        Returns:
            Rows written per table (empty when output is disabled)
        """
        if not self._writable():
            return {}
        return write_building_model(self.statements, building)

    def add_zone_sizing_record(
        self,
        zone_name: str,
        load_type: str,
        calc_des_load: float,
        user_des_load: float,
        calc_des_flow: float,
        user_des_flow: float,
        des_day_name: str,
        peak_hr_min: str,
        peak_temp: float,
        peak_hum_rat: float,
        calc_outside_air_flow: float,
    ) -> None:
        if not self._writable():
            return
        self._execute(
            ZoneSizingRecord.table_name(),
            zone_name=zone_name,
            load_type=load_type,
            calc_des_load=calc_des_load,
            user_des_load=user_des_load,
            calc_des_flow=calc_des_flow,
            user_des_flow=user_des_flow,
            des_day_name=des_day_name,
            peak_hr_min=peak_hr_min,
            peak_temp=peak_temp,
            peak_hum_rat=peak_hum_rat,
            calc_outside_air_flow=calc_outside_air_flow,
        )

    def add_system_sizing_record(self, system_name: str, description: str, value: float) -> None:
        """Record one system sizing result; units are split off the description."""
        if not self._writable():
            return
        units, description = parse_units_and_description(description)
        self._execute(
            SystemSizingRecord.table_name(),
            system_name=system_name,
            description=description,
            value=value,
            units=units,
        )

    def add_component_sizing_record(
        self,
        component_type: str,
        component_name: str,
        description: str,
        value: float,
    ) -> None:
        """Record one component sizing result; units are split off the description."""
        if not self._writable():
            return
        units, description = parse_units_and_description(description)
        self._execute(
            ComponentSizingRecord.table_name(),
            comp_type=component_type,
            comp_name=component_name,
            description=description,
            value=value,
            units=units,
        )

    # ========================================================================
    # Daylighting maps
    # ========================================================================

    def create_daylight_map_title(
        self,
        map_number: int,
        map_name: str,
        environment_name: str,
        zone: int,
        reference_point_1: str,
        reference_point_2: str,
        z: float,
    ) -> None:
        if not self._writable():
            return
        self._execute(
            DaylightMapRecord.table_name(),
            map_number=map_number,
            map_name=map_name,
            environment=environment_name,
            zone=zone,
            reference_pt1=reference_point_1,
            reference_pt2=reference_point_2,
            z=z,
        )

    def create_daylight_map(
        self,
        map_number: int,
        month: int,
        day_of_month: int,
        hour: int,
        x: list[float],
        y: list[float],
        illuminance: list[list[float]],
    ) -> int | None:
        """Record one hourly illuminance map.

        Args:
            map_number: Map registered with create_daylight_map_title
            month, day_of_month, hour: When the map was computed
            x, y: Grid coordinates
            illuminance: Values indexed [x][y]

        Returns:
            The HourlyReportIndex assigned to the map
        """
        if not self._writable():
            return None
        hourly_report_index = self.allocator.next_hourly_report_index()
        self._execute(
            DaylightMapHourlyReportRecord.table_name(),
            hourly_report_index=hourly_report_index,
            map_number=map_number,
            month=month,
            day_of_month=day_of_month,
            hour=hour,
        )
        write_daylight_map_data(self.manager.transaction, hourly_report_index, x, y, illuminance)
        return hourly_report_index

    # ========================================================================
    # Tabular reports
    # ========================================================================

    def intern_string(self, value: str, string_type: StringType | int) -> int | None:
        """Return the StringIndex of ``value`` in role ``string_type``.

        Returns:
            The index, or None when tabular output is off or the store
            rejected the row
        """
        if not self._writable() or not self.write_tabular:
            return None
        return self.interner.intern(value, string_type)

    def create_tabular_data_records(
        self,
        body: list[list[str]],
        row_labels: list[str],
        column_labels: list[str],
        report_name: str,
        report_for_string: str,
        table_name: str,
    ) -> int:
        """Write one summary table, one row per cell.

        Returns:
            Number of cells written (0 when tabular output is off)
        """
        if not self._writable() or not self.write_tabular:
            return 0
        return write_tabular_data(
            self.statements[TabularDataRecord.table_name()],
            self.interner,
            body,
            row_labels,
            column_labels,
            report_name,
            report_for_string,
            table_name,
            simulation_index=(
                self.current_simulation_index if self.current_simulation_index is not None else 1
            ),
        )

    # ========================================================================
    # Run bookkeeping
    # ========================================================================

    def create_simulations_record(
        self,
        simulation_index: int,
        version: str,
        timestamp: str,
        timesteps_per_hour: int,
    ) -> None:
        """Record the start of a simulation; completion flags start false."""
        if not self._writable():
            return
        if self._execute(
            SimulationRecord.table_name(),
            simulation_index=simulation_index,
            energy_plus_version=version,
            time_stamp=timestamp,
            num_timesteps_per_hour=timesteps_per_hour,
            completed=False,
            completed_successfully=False,
        ):
            self.current_simulation_index = simulation_index

    def update_simulation_record(self, completed: bool, completed_successfully: bool) -> None:
        """Set the completion flags of the most recently created simulation."""
        if not self._writable():
            return
        if self.current_simulation_index is None:
            logger.warning("update_simulation_record called before any simulation was recorded")
            return
        self._execute(
            UPDATE_SIMULATION,
            completed=completed,
            completed_successfully=completed_successfully,
            simulation_index=self.current_simulation_index,
        )

    def create_environment_period_record(
        self,
        environment_period_index: int,
        environment_name: str,
        environment_type: int,
        simulation_index: int | None = None,
    ) -> None:
        """Record an environment period and make it current for Time rows.

        ``simulation_index`` defaults to the current simulation (or 1).
        """
        if not self._writable():
            return
        if simulation_index is None:
            simulation_index = (
                self.current_simulation_index if self.current_simulation_index is not None else 1
            )
        self._execute(
            EnvironmentPeriodRecord.table_name(),
            environment_period_index=environment_period_index,
            simulation_index=simulation_index,
            environment_name=environment_name,
            environment_type=environment_type,
        )
        self.current_environment_index = environment_period_index

    def create_error_record(
        self,
        simulation_index: int,
        error_type: int,
        message: str,
        count: int,
    ) -> None:
        """Record one error message under the next error index."""
        if not self._writable():
            return
        error_index = self.allocator.next_error_index()
        self._execute(
            ErrorRecord.table_name(),
            error_index=error_index,
            simulation_index=simulation_index,
            error_type=error_type,
            error_message=message,
            count=count,
        )
        self.last_error_index = error_index

    def update_error_record(self, message: str) -> None:
        """Append a continuation line to the most recent error."""
        if not self._writable():
            return
        if self.last_error_index is None:
            logger.warning("update_error_record called before any error was recorded: %s", message)
            return
        self._execute(UPDATE_ERROR, error_message="  " + message, error_index=self.last_error_index)

    def write_message(self, message: str) -> None:
        """Write a free-form line to the diagnostic log."""
        if self.write_output:
            logger.info(message)

    # ========================================================================
    # Transactions and teardown
    # ========================================================================

    def begin(self) -> None:
        if self._writable():
            self.manager.begin()

    def commit(self) -> None:
        if self._writable():
            self.manager.commit()

    def close(self) -> None:
        """Finalize statements, close the database and the diagnostic log.

        Safe to call more than once.
        """
        if self.manager is not None and not self.manager.closed:
            self.manager.close()
        self._detach_log()

    def _detach_log(self) -> None:
        if self._log_handler is not None:
            detach_diagnostic_log(self._log_handler)
            self._log_handler = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
