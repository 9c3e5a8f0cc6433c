"""
Integration tests for DatabaseManager against real DuckDB files.

Covers the exclusivity probe, settings, schema creation and validation,
statement preparation, transactions and teardown.
"""

import duckdb
import pytest


def _table_names(conn) -> set[str]:
    result = conn.execute(
        "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
    ).fetchall()
    return {row[0] for row in result}


class TestProbe:
    """Test target-file checks before the connection is opened."""

    def test_opens_fresh_file(self, db_path):
        from simulation_output.persistence import DatabaseManager

        manager = DatabaseManager(db_path)

        assert isinstance(manager.conn, duckdb.DuckDBPyConnection)
        assert manager.db_path == db_path
        assert db_path.exists()
        manager.close()

    def test_previous_output_is_replaced(self, db_path):
        """A stale output file is truncated, not appended to."""
        from simulation_output.persistence import DatabaseManager

        stale = duckdb.connect(str(db_path))
        stale.execute('CREATE TABLE "Leftover" ("x" INTEGER)')
        stale.close()

        with DatabaseManager(db_path) as manager:
            assert "Leftover" not in _table_names(manager.conn)

    def test_probe_table_not_left_behind(self, db_path):
        from simulation_output.persistence import DatabaseManager

        with DatabaseManager(db_path) as manager:
            assert "Test" not in _table_names(manager.conn)

    def test_writes_diagnostic_log(self, db_path):
        from simulation_output.persistence import DatabaseManager

        log_path = db_path.with_suffix(".err")
        with DatabaseManager(db_path, diagnostic_log_path=log_path):
            pass

        assert "open for processing" in log_path.read_text()

    def test_unwritable_directory(self, tmp_path):
        from simulation_output.persistence import DatabaseManager, OutputDatabaseError

        with pytest.raises(OutputDatabaseError, match="Cannot create output database"):
            DatabaseManager(tmp_path / "missing_dir" / "out.db")

    def test_unwritable_diagnostic_log(self, db_path, tmp_path):
        from simulation_output.persistence import DatabaseManager, OutputDatabaseError

        with pytest.raises(OutputDatabaseError, match="Cannot open diagnostic log"):
            DatabaseManager(db_path, diagnostic_log_path=tmp_path / "missing_dir" / "out.err")

    def test_memory_database_skips_file_checks(self):
        from simulation_output.persistence import DatabaseManager

        with DatabaseManager(":memory:") as manager:
            assert manager.is_memory
            assert manager.db_path == ":memory:"


class TestSettings:
    def test_default_settings_applied(self):
        from simulation_output.persistence import DatabaseManager

        with DatabaseManager(":memory:") as manager:
            threads = manager.conn.execute("SELECT current_setting('threads')").fetchone()[0]

        assert int(threads) == 1

    def test_every_default_setting_exists(self):
        """Only settings DuckDB accepts; locking and the WAL have no switch."""
        from simulation_output.config import DEFAULT_STORE_SETTINGS
        from simulation_output.persistence import DatabaseManager

        assert set(DEFAULT_STORE_SETTINGS) == {"threads", "checkpoint_threshold"}
        with DatabaseManager(":memory:") as manager:
            assert manager.apply_settings()

    def test_bad_setting_is_logged_not_raised(self, caplog):
        from simulation_output.persistence import DatabaseManager

        manager = DatabaseManager(":memory:", store_settings={"no_such_setting": 1})

        assert not manager.apply_settings()
        assert "no_such_setting" in caplog.text
        manager.close()


class TestSchema:
    """Test schema creation from the record models."""

    def test_simple_mode_tables(self, db_path):
        from simulation_output.persistence import DatabaseManager
        from simulation_output.persistence.models import CORE_RECORDS

        with DatabaseManager(db_path) as manager:
            assert manager.initialize_schema()
            tables = _table_names(manager.conn)

        for model in CORE_RECORDS:
            assert model.table_name() in tables
        assert "Strings" not in tables
        assert "ReportVariableWithTime" in tables

    def test_tabular_mode_tables(self, memory_manager):
        tables = _table_names(memory_manager.conn)

        assert {"TabularData", "Strings", "StringTypes", "TabularDataWithStrings"} <= tables
        seeded = memory_manager.conn.execute(
            'SELECT "StringTypeIndex", "Value" FROM "StringTypes" ORDER BY 1'
        ).fetchall()
        assert seeded[0] == (1, "ReportName")
        assert seeded[-1] == (6, "Units")

    def test_validate_schema(self, memory_manager):
        assert memory_manager.validate_schema(tabular=True)

    def test_validate_schema_reports_drift(self, caplog):
        from simulation_output.persistence import DatabaseManager

        with DatabaseManager(":memory:") as manager:
            manager.conn.execute(
                'CREATE TABLE "Errors" ("ErrorIndex" BIGINT, "SimulationIndex" BIGINT, '
                '"ErrorType" BIGINT, "ErrorMessage" VARCHAR)'
            )
            manager.initialize_schema()

            assert not manager.validate_schema()

        assert "Column 'Count' missing from table Errors" in caplog.text


class TestStatements:
    def test_one_insert_per_table(self, memory_manager):
        from simulation_output.persistence.models import CORE_RECORDS, TABULAR_RECORDS

        names = set(memory_manager.statements.names())

        for model in CORE_RECORDS:
            assert model.table_name() in names
        assert "TabularData" in names
        assert {"UpdateSimulation", "UpdateError", "InsertString", "LookupString"} <= names
        assert "Strings" not in names
        assert len(TABULAR_RECORDS) == 3

    def test_simple_mode_has_no_string_statements(self):
        from simulation_output.persistence import DatabaseManager

        with DatabaseManager(":memory:") as manager:
            manager.initialize_schema()
            statements = manager.prepare_statements()

            assert "InsertString" not in statements
            assert "TabularData" not in statements
            assert "UpdateError" in statements

    def test_insert_through_cache(self, memory_manager):
        stmt = memory_manager.statements["Errors"]

        assert stmt.execute(1, 1, 0, "message", 1)
        assert memory_manager.conn.execute('SELECT COUNT(*) FROM "Errors"').fetchone()[0] == 1


class TestTransactions:
    def test_begin_commit(self, memory_manager):
        memory_manager.begin()
        assert memory_manager.in_transaction
        memory_manager.statements["Errors"].execute(1, 1, 0, "in txn", 1)
        memory_manager.commit()

        assert not memory_manager.in_transaction
        assert memory_manager.conn.execute('SELECT COUNT(*) FROM "Errors"').fetchone()[0] == 1

    def test_nested_begin_ignored(self, memory_manager, caplog):
        memory_manager.begin()
        memory_manager.begin()

        assert "inside an open transaction" in caplog.text
        memory_manager.commit()

    def test_commit_without_begin(self, memory_manager, caplog):
        memory_manager.commit()

        assert "without an open transaction" in caplog.text


class TestTeardown:
    def test_close_finalizes_statements(self, db_path):
        from simulation_output.persistence import DatabaseManager

        manager = DatabaseManager(db_path)
        manager.initialize_schema()
        statements = manager.prepare_statements()
        insert = statements["Errors"]
        manager.close()

        assert manager.closed
        assert insert.finalized
        assert len(statements) == 0

    def test_close_is_idempotent(self, db_path):
        from simulation_output.persistence import DatabaseManager

        manager = DatabaseManager(db_path)
        manager.close()
        manager.close()

        assert manager.closed

    def test_close_commits_open_transaction(self, db_path):
        from simulation_output.persistence import DatabaseManager

        manager = DatabaseManager(db_path)
        manager.initialize_schema()
        manager.prepare_statements()
        manager.begin()
        manager.statements["Errors"].execute(1, 1, 0, "kept", 1)
        manager.close()

        conn = duckdb.connect(str(db_path))
        assert conn.execute('SELECT "ErrorMessage" FROM "Errors"').fetchall() == [("kept",)]
        conn.close()

    def test_file_readable_after_close(self, db_path):
        from simulation_output.persistence import DatabaseManager

        with DatabaseManager(db_path) as manager:
            manager.initialize_schema()

        conn = duckdb.connect(str(db_path), read_only=True)
        assert "ReportData" in _table_names(conn)
        conn.close()
