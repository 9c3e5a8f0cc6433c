"""
Tests for the output record models and enums.
"""

import pytest
from pydantic import ValidationError


class TestEnums:
    def test_reporting_frequency_codes(self):
        from simulation_output.persistence.models import ReportingFrequency

        assert ReportingFrequency(-1) is ReportingFrequency.EACH_CALL
        assert ReportingFrequency(0) is ReportingFrequency.TIMESTEP
        assert ReportingFrequency(4) is ReportingFrequency.RUN_PERIOD

    def test_reporting_frequency_labels(self):
        from simulation_output.persistence.models import ReportingFrequency

        assert ReportingFrequency.EACH_CALL.label == "HVAC System Timestep"
        assert ReportingFrequency.TIMESTEP.label == "Zone Timestep"
        assert ReportingFrequency.HOURLY.label == "Hourly"
        assert ReportingFrequency.RUN_PERIOD.label == "Run Period"

    def test_unknown_frequency_raises(self):
        from simulation_output.persistence.models import ReportingFrequency

        with pytest.raises(ValueError):
            ReportingFrequency(7)

    def test_storage_and_timestep_labels(self):
        from simulation_output.persistence.models import (
            STORAGE_TYPE_NAMES,
            TIMESTEP_TYPE_NAMES,
            UNKNOWN_LABEL,
        )

        assert STORAGE_TYPE_NAMES[1] == "Avg"
        assert STORAGE_TYPE_NAMES[2] == "Sum"
        assert TIMESTEP_TYPE_NAMES[1] == "HVAC System"
        assert TIMESTEP_TYPE_NAMES[2] == "Zone"
        assert STORAGE_TYPE_NAMES.get(9, UNKNOWN_LABEL) == "Unknown!!!"


class TestTableRecord:
    """Test the shared record behaviour."""

    def test_table_name_and_columns(self):
        from simulation_output.persistence.models import ErrorRecord

        assert ErrorRecord.table_name() == "Errors"
        assert ErrorRecord.column_names() == [
            "ErrorIndex",
            "SimulationIndex",
            "ErrorType",
            "ErrorMessage",
            "Count",
        ]
        assert ErrorRecord.field_names()[0] == "error_index"

    def test_populate_by_field_name_or_alias(self):
        from simulation_output.persistence.models import ReportDataRecord

        by_name = ReportDataRecord(
            report_data_index=1, time_index=2, report_data_dictionary_index=3, value=4.5
        )
        by_alias = ReportDataRecord(
            ReportDataIndex=1, TimeIndex=2, ReportDataDictionaryIndex=3, Value=4.5
        )

        assert by_name == by_alias

    def test_to_row_converts_flags(self):
        from simulation_output.persistence.models import SimulationRecord

        record = SimulationRecord(
            simulation_index=1,
            energy_plus_version="9.4.0",
            time_stamp="YMD=2026.10.18 12:00",
            num_timesteps_per_hour=4,
            completed=True,
        )

        assert record.to_row() == [1, "9.4.0", "YMD=2026.10.18 12:00", 4, 1, 0]

    def test_required_field_missing(self):
        from simulation_output.persistence.models import ReportDataRecord

        with pytest.raises(ValidationError):
            ReportDataRecord(report_data_index=1, time_index=1, value=1.0)

    def test_optional_time_columns_default_to_none(self):
        from simulation_output.persistence.models import TimeRecord

        record = TimeRecord(time_index=1)

        assert record.month is None
        assert record.warmup_flag is None


class TestTableGroups:
    def test_every_record_has_a_unique_table(self):
        from simulation_output.persistence.models import CORE_RECORDS, TABULAR_RECORDS

        names = [model.table_name() for model in CORE_RECORDS + TABULAR_RECORDS]

        assert len(names) == len(set(names))
        assert "ReportData" in names
        assert "DaylightMapHourlyData" in names

    def test_tabular_tables_kept_apart(self):
        from simulation_output.persistence.models import CORE_RECORDS, TABULAR_RECORDS

        core = {model.table_name() for model in CORE_RECORDS}

        assert {model.table_name() for model in TABULAR_RECORDS} == {
            "TabularData",
            "Strings",
            "StringTypes",
        }
        assert not core & {"TabularData", "Strings", "StringTypes"}
