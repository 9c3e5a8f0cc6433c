"""
Tests for DDL generation from the record models.

Covers type mapping, identifier quoting, table/index DDL, the two views
and the ordered full-schema statement list.
"""

import duckdb
import pytest


class TestTypeMapping:
    """Test Python type -> SQL type conversion."""

    def test_basic_types(self):
        from simulation_output.persistence.schema_generator import python_type_to_sql_type

        assert python_type_to_sql_type(str) == "VARCHAR"
        assert python_type_to_sql_type(int) == "BIGINT"
        assert python_type_to_sql_type(float) == "DOUBLE"

    def test_bool_stored_as_integer(self):
        """Logical flags are stored as 0/1 integers."""
        from simulation_output.persistence.schema_generator import python_type_to_sql_type

        assert python_type_to_sql_type(bool) == "INTEGER"

    def test_optional_uses_inner_type(self):
        from simulation_output.persistence.schema_generator import python_type_to_sql_type

        assert python_type_to_sql_type(int | None) == "BIGINT"
        assert python_type_to_sql_type(str | None) == "VARCHAR"
        assert python_type_to_sql_type(bool | None) == "INTEGER"

    def test_int_enum_is_bigint(self):
        from simulation_output.persistence.models import ReportingFrequency
        from simulation_output.persistence.schema_generator import python_type_to_sql_type

        assert python_type_to_sql_type(ReportingFrequency) == "BIGINT"


class TestQuoteIdentifier:
    """Reserved words must survive as column names."""

    def test_quotes_name(self):
        from simulation_output.persistence.schema_generator import quote_identifier

        assert quote_identifier("Time") == '"Time"'
        assert quote_identifier("Interval") == '"Interval"'

    def test_escapes_embedded_quote(self):
        from simulation_output.persistence.schema_generator import quote_identifier

        assert quote_identifier('a"b') == '"a""b"'


class TestCreateTableDDL:
    """Test CREATE TABLE generation."""

    def test_uses_aliases_as_column_names(self):
        from simulation_output.persistence.models import ReportDataRecord
        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        ddl = generate_create_table_ddl(ReportDataRecord)

        assert 'CREATE TABLE IF NOT EXISTS "ReportData"' in ddl
        assert '"ReportDataIndex" BIGINT NOT NULL' in ddl
        assert '"TimeIndex" BIGINT NOT NULL' in ddl
        assert '"Value" DOUBLE NOT NULL' in ddl
        assert 'PRIMARY KEY ("ReportDataIndex")' in ddl
        assert "report_data_index" not in ddl

    def test_optional_columns_are_nullable(self):
        from simulation_output.persistence.models import TimeRecord
        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        ddl = generate_create_table_ddl(TimeRecord)

        assert '"Month" BIGINT,' in ddl
        assert '"WarmupFlag" INTEGER,' in ddl
        assert '"TimeIndex" BIGINT NOT NULL' in ddl

    def test_unique_constraint(self):
        from simulation_output.persistence.models import StringRecord
        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        ddl = generate_create_table_ddl(StringRecord)

        assert 'UNIQUE ("StringTypeIndex", "Value")' in ddl

    def test_table_without_primary_key(self):
        from simulation_output.persistence.models import ConstructionLayerRecord
        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        ddl = generate_create_table_ddl(ConstructionLayerRecord)

        assert "PRIMARY KEY" not in ddl

    def test_published_column_spellings(self):
        """Downstream readers depend on these exact column names."""
        from simulation_output.persistence.models import (
            ConstructionRecord,
            NominalHotWaterEquipmentRecord,
            NominalPeopleRecord,
        )
        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        assert '"UserSpecifeidSensibleFraction"' in generate_create_table_ddl(NominalPeopleRecord)
        assert '"SchedNo"' in generate_create_table_ddl(NominalHotWaterEquipmentRecord)
        assert '"Uvalue"' in generate_create_table_ddl(ConstructionRecord)

    def test_missing_table_name_raises(self):
        from pydantic import BaseModel

        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        class NoTable(BaseModel):
            x: int

        with pytest.raises(ValueError, match="table_name"):
            generate_create_table_ddl(NoTable)

    def test_every_core_table_executes(self):
        """Every generated CREATE TABLE is valid DuckDB SQL."""
        from simulation_output.persistence.models import CORE_RECORDS, TABULAR_RECORDS
        from simulation_output.persistence.schema_generator import generate_create_table_ddl

        conn = duckdb.connect(":memory:")
        for model in CORE_RECORDS + TABULAR_RECORDS:
            conn.execute(generate_create_table_ddl(model))

        tables = {
            row[0]
            for row in conn.execute(
                "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
            ).fetchall()
        }
        assert len(tables) == len(CORE_RECORDS) + len(TABULAR_RECORDS)
        conn.close()


class TestIndexDDL:
    def test_indexes_generated(self):
        from simulation_output.persistence.models import ReportDataRecord
        from simulation_output.persistence.schema_generator import generate_create_indexes_ddl

        statements = generate_create_indexes_ddl(ReportDataRecord)

        assert len(statements) == 2
        assert all(s.startswith("CREATE INDEX IF NOT EXISTS") for s in statements)
        assert any('("TimeIndex")' in s for s in statements)

    def test_no_indexes(self):
        from simulation_output.persistence.models import TimeRecord
        from simulation_output.persistence.schema_generator import generate_create_indexes_ddl

        assert generate_create_indexes_ddl(TimeRecord) == []


class TestFullSchemaDDL:
    """Test the ordered statement list for a fresh output file."""

    def test_simple_mode_has_no_tabular_objects(self):
        from simulation_output.persistence.schema_generator import generate_full_schema_ddl

        statements = generate_full_schema_ddl()

        assert not any('"Strings"' in s for s in statements)
        assert not any('"TabularDataWithStrings"' in s for s in statements)
        assert any('"ReportVariableWithTime"' in s for s in statements)

    def test_tabular_mode_adds_tables_seeds_and_view(self):
        from simulation_output.persistence.schema_generator import generate_full_schema_ddl

        statements = generate_full_schema_ddl(tabular=True)

        assert any('CREATE TABLE IF NOT EXISTS "Strings"' in s for s in statements)
        assert any('CREATE TABLE IF NOT EXISTS "StringTypes"' in s for s in statements)
        assert sum('INSERT INTO "StringTypes"' in s for s in statements) == 6
        assert statements[-1].startswith('CREATE OR REPLACE VIEW "TabularDataWithStrings"')

    def test_view_ddl(self):
        from simulation_output.persistence.schema_generator import generate_view_ddl

        assert len(generate_view_ddl()) == 1
        assert len(generate_view_ddl(tabular=True)) == 2
        assert "LEFT OUTER JOIN \"ReportExtendedData\"" in generate_view_ddl()[0]

    def test_view_follows_its_tables(self):
        from simulation_output.persistence.schema_generator import generate_full_schema_ddl

        statements = generate_full_schema_ddl()
        view_position = next(
            i for i, s in enumerate(statements) if '"ReportVariableWithTime"' in s
        )
        time_position = next(
            i for i, s in enumerate(statements) if 'CREATE TABLE IF NOT EXISTS "Time"' in s
        )

        assert time_position < view_position

    def test_full_schema_is_idempotent(self):
        """Running the schema twice on one connection succeeds."""
        from simulation_output.persistence.schema_generator import generate_full_schema_ddl

        conn = duckdb.connect(":memory:")
        for _ in range(2):
            for statement in generate_full_schema_ddl(tabular=True):
                conn.execute(statement)

        assert conn.execute('SELECT COUNT(*) FROM "StringTypes"').fetchone()[0] == 6
        conn.close()


class TestValidateTableSchema:
    """Test live table validation against a record model."""

    def test_valid_table(self):
        from simulation_output.persistence.models import ErrorRecord
        from simulation_output.persistence.schema_generator import (
            generate_create_table_ddl,
            validate_table_schema,
        )

        conn = duckdb.connect(":memory:")
        conn.execute(generate_create_table_ddl(ErrorRecord))

        assert validate_table_schema(conn, ErrorRecord) == (True, [])

    def test_missing_table(self):
        from simulation_output.persistence.models import ErrorRecord
        from simulation_output.persistence.schema_generator import validate_table_schema

        conn = duckdb.connect(":memory:")
        is_valid, errors = validate_table_schema(conn, ErrorRecord)

        assert not is_valid
        assert "does not exist" in errors[0]

    def test_column_mismatches_reported(self):
        from simulation_output.persistence.models import ErrorRecord
        from simulation_output.persistence.schema_generator import validate_table_schema

        conn = duckdb.connect(":memory:")
        conn.execute(
            'CREATE TABLE "Errors" ("ErrorIndex" VARCHAR, "SimulationIndex" BIGINT, '
            '"ErrorType" BIGINT, "ErrorMessage" VARCHAR, "Extra" BIGINT)'
        )
        is_valid, errors = validate_table_schema(conn, ErrorRecord)

        assert not is_valid
        joined = "\n".join(errors)
        assert "Column 'Count' missing" in joined
        assert "Extra" in joined
        assert "Column 'ErrorIndex' in Errors has type VARCHAR" in joined
